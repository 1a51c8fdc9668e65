################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

import logging
from datetime import timedelta
from typing import List, Optional

from pyringsplit.api.api_request import DescribeSplitsRequest, LoginRequest
from pyringsplit.api.api_response import (CfSplitEntry, DescribeRingResponse,
                                          DescribeSplitsExResponse,
                                          DescribeSplitsResponse,
                                          GetKeyspaceResponse, LoginResponse,
                                          TokenRangeEntry)
from pyringsplit.api.auth import (BearTokenAuthProvider, NoneAuthProvider,
                                  RESTAuthFunction)
from pyringsplit.api.client import (ConnectionFailedException, HttpClient,
                                    NotImplementedException, RESTException)
from pyringsplit.api.resource_paths import ResourcePaths
from pyringsplit.common.exceptions import (NodeUnavailableException,
                                           ProtocolException,
                                           ProtocolUnsupportedException)


class NodeApi:
    """
    The calls a planning pass issues against one node.

    Transport failures surface as NodeUnavailableException, calls the node does
    not implement as ProtocolUnsupportedException and every other rejection as
    ProtocolException.
    """

    def __init__(self, host: str, port: int,
                 connect_timeout: Optional[timedelta] = None,
                 request_timeout: Optional[timedelta] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.address = f"{host}:{port}"
        self.client = HttpClient(self.address, connect_timeout, request_timeout)
        self.resource_paths = ResourcePaths()
        self.rest_auth_function = RESTAuthFunction({}, NoneAuthProvider())
        self.keyspace: Optional[str] = None

    def set_keyspace(self, keyspace: str) -> None:
        self._call(lambda: self.client.get(
            self.resource_paths.keyspace(keyspace),
            GetKeyspaceResponse,
            self.rest_auth_function,
        ))
        self.keyspace = keyspace

    def login(self, username: str, password: str) -> None:
        response = self._call(lambda: self.client.post(
            self.resource_paths.login(),
            LoginRequest(username, password),
            LoginResponse,
            self.rest_auth_function,
        ))
        self.rest_auth_function = RESTAuthFunction({}, BearTokenAuthProvider(response.token))

    def describe_ring(self, keyspace: str) -> List[TokenRangeEntry]:
        response = self._call(lambda: self.client.get(
            self.resource_paths.ring(keyspace),
            DescribeRingResponse,
            self.rest_auth_function,
        ))
        return response.ranges

    def describe_splits_ex(self, table: str, start_token: str, end_token: str,
                           keys_per_split: int) -> List[CfSplitEntry]:
        """Sized sub-splits of a range. Older nodes answer with ProtocolUnsupportedException."""
        response = self._call(lambda: self.client.post(
            self.resource_paths.splits(self._require_keyspace(), table),
            DescribeSplitsRequest(start_token, end_token, keys_per_split),
            DescribeSplitsExResponse,
            self.rest_auth_function,
        ))
        return response.splits

    def describe_splits(self, table: str, start_token: str, end_token: str,
                        keys_per_split: int) -> List[str]:
        """Ordered boundary tokens of a range, including both range bounds."""
        response = self._call(lambda: self.client.post(
            self.resource_paths.split_tokens(self._require_keyspace(), table),
            DescribeSplitsRequest(start_token, end_token, keys_per_split),
            DescribeSplitsResponse,
            self.rest_auth_function,
        ))
        return response.tokens

    def close(self) -> None:
        self.client.close()

    def _require_keyspace(self) -> str:
        if self.keyspace is None:
            raise ProtocolException(f"No keyspace selected on {self.address}")
        return self.keyspace

    def _call(self, request):
        try:
            return request()
        except ConnectionFailedException as e:
            raise NodeUnavailableException(self.address, str(e)) from e
        except NotImplementedException as e:
            raise ProtocolUnsupportedException(f"{self.address}: {e}") from e
        except RESTException as e:
            raise ProtocolException(f"{self.address}: {e}") from e

    def __enter__(self) -> 'NodeApi':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
