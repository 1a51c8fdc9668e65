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

from abc import ABC
from dataclasses import dataclass
from typing import List, Optional

from pyringsplit.common.json_util import json_field


class RESTResponse(ABC):
    pass


@dataclass
class ErrorResponse(RESTResponse):

    resource_type: Optional[str] = json_field("resourceType", default=None)
    resource_name: Optional[str] = json_field("resourceName", default=None)
    message: Optional[str] = json_field("message", default=None)
    code: Optional[int] = json_field("code", default=None)


@dataclass
class GetKeyspaceResponse(RESTResponse):
    FIELD_NAME = "name"

    name: str = json_field(FIELD_NAME, default=None)


@dataclass
class LoginResponse(RESTResponse):
    FIELD_TOKEN = "token"

    token: str = json_field(FIELD_TOKEN, default=None)


@dataclass
class TokenRangeEntry:
    """One range of the ring as reported by a node, with its replicas."""
    FIELD_START_TOKEN = "startToken"
    FIELD_END_TOKEN = "endToken"
    FIELD_ENDPOINTS = "endpoints"
    FIELD_RPC_ENDPOINTS = "rpcEndpoints"

    start_token: str = json_field(FIELD_START_TOKEN, default=None)
    end_token: str = json_field(FIELD_END_TOKEN, default=None)
    endpoints: List[str] = json_field(FIELD_ENDPOINTS, default_factory=list)
    # routable addresses, index aligned with endpoints; may be None or a wildcard
    rpc_endpoints: List[Optional[str]] = json_field(FIELD_RPC_ENDPOINTS, default_factory=list)


@dataclass
class DescribeRingResponse(RESTResponse):
    FIELD_RANGES = "ranges"

    ranges: List[TokenRangeEntry] = json_field(FIELD_RANGES, default_factory=list)


@dataclass
class CfSplitEntry:
    FIELD_START_TOKEN = "startToken"
    FIELD_END_TOKEN = "endToken"
    FIELD_ROW_COUNT = "rowCount"

    start_token: str = json_field(FIELD_START_TOKEN, default=None)
    end_token: str = json_field(FIELD_END_TOKEN, default=None)
    row_count: int = json_field(FIELD_ROW_COUNT, default=0)


@dataclass
class DescribeSplitsExResponse(RESTResponse):
    FIELD_SPLITS = "splits"

    splits: List[CfSplitEntry] = json_field(FIELD_SPLITS, default_factory=list)


@dataclass
class DescribeSplitsResponse(RESTResponse):
    FIELD_TOKENS = "tokens"

    tokens: List[str] = json_field(FIELD_TOKENS, default_factory=list)
