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
import threading
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse

from pyringsplit.api.api_request import DescribeSplitsRequest, LoginRequest
from pyringsplit.api.api_response import (CfSplitEntry, DescribeRingResponse,
                                          DescribeSplitsExResponse,
                                          DescribeSplitsResponse,
                                          ErrorResponse, GetKeyspaceResponse,
                                          LoginResponse, TokenRangeEntry)
from pyringsplit.api.resource_paths import ResourcePaths
from pyringsplit.common.json_util import JSON

AUTHORIZATION_HEADER_KEY = "Authorization"

SplitsFunction = Callable[[str, DescribeSplitsRequest], List[CfSplitEntry]]
TokensFunction = Callable[[str, DescribeSplitsRequest], List[str]]


class MockNodeServer:
    """Mock node API for testing. Every address served by it shares one ring."""

    def __init__(self, keyspace: str, ring: List[TokenRangeEntry],
                 splits_function: Optional[SplitsFunction] = None,
                 tokens_function: Optional[TokensFunction] = None,
                 credentials: Optional[Tuple[str, str]] = None):
        self.logger = logging.getLogger(__name__)
        self.keyspace = keyspace
        self.ring = ring
        # None means the node predates the sized split call
        self.splits_function = splits_function
        self.tokens_function = tokens_function
        self.credentials = credentials
        self.session_tokens: List[str] = []
        self.requests: List[Tuple[str, str]] = []
        self.resource_paths = ResourcePaths()

        self.server = None
        self.server_thread = None
        self.port = 0

    def start(self) -> None:
        self.server = ThreadingHTTPServer(('127.0.0.1', 0), self._create_request_handler())
        self.server.daemon_threads = True
        self.port = self.server.server_port

        self.server_thread = threading.Thread(target=self.server.serve_forever)
        self.server_thread.daemon = True
        self.server_thread.start()
        self.logger.info(f"Mock node server started on port {self.port}")

    def shutdown(self) -> None:
        if self.server:
            self.server.shutdown()
            self.server.server_close()
        if self.server_thread:
            self.server_thread.join()

    def _create_request_handler(self):
        server_instance = self

        class RequestHandler(BaseHTTPRequestHandler):
            def do_GET(self):
                self._handle_request('GET')

            def do_POST(self):
                self._handle_request('POST')

            def _handle_request(self, method: str):
                try:
                    resource_path = unquote(urlparse(self.path).path)
                    content_length = int(self.headers.get('Content-Length', 0))
                    data = self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""
                    server_instance.requests.append((method, resource_path))

                    response, status_code = server_instance._route_request(
                        method, resource_path, data, self.headers.get(AUTHORIZATION_HEADER_KEY))
                    self._send_response(status_code, response)
                except Exception as e:
                    server_instance.logger.error(f"Request handling error: {e}")
                    self._send_response(500, JSON.to_json(ErrorResponse(message=str(e), code=500)))

            def _send_response(self, status_code: int, body: str):
                encoded = body.encode('utf-8')
                self.send_response(status_code)
                self.send_header('Content-Type', 'application/json')
                self.send_header('Content-Length', str(len(encoded)))
                self.end_headers()
                self.wfile.write(encoded)

            def log_message(self, format, *args):
                server_instance.logger.debug(format % args)

        return RequestHandler

    def _route_request(self, method: str, resource_path: str, data: str,
                       authorization: Optional[str]) -> Tuple[str, int]:
        paths = self.resource_paths
        if resource_path == paths.login() and method == 'POST':
            return self._login(JSON.from_json(data, LoginRequest))

        if self.credentials is not None and not self._authenticated(authorization):
            return self._error(401, "login required")

        if resource_path == paths.keyspace(self.keyspace) and method == 'GET':
            return JSON.to_json(GetKeyspaceResponse(self.keyspace)), 200
        if resource_path == paths.ring(self.keyspace) and method == 'GET':
            return JSON.to_json(DescribeRingResponse(self.ring)), 200
        if resource_path.startswith(paths.keyspace(self.keyspace) + "/") and method == 'POST':
            table = resource_path.split("/")[5]
            request = JSON.from_json(data, DescribeSplitsRequest)
            if resource_path == paths.splits(self.keyspace, table):
                if self.splits_function is None:
                    return self._error(501, "describe_splits_ex is not supported")
                return JSON.to_json(DescribeSplitsExResponse(self.splits_function(table, request))), 200
            if resource_path == paths.split_tokens(self.keyspace, table):
                return JSON.to_json(DescribeSplitsResponse(self.tokens_function(table, request))), 200
        return self._error(404, f"No resource {method} {resource_path}")

    def _login(self, request: LoginRequest) -> Tuple[str, int]:
        if self.credentials != (request.username, request.password):
            return self._error(401, "invalid credentials")
        token = str(uuid.uuid4())
        self.session_tokens.append(token)
        return JSON.to_json(LoginResponse(token)), 200

    def _authenticated(self, authorization: Optional[str]) -> bool:
        if not authorization or not authorization.startswith("Bearer "):
            return False
        return authorization[len("Bearer "):] in self.session_tokens

    @staticmethod
    def _error(code: int, message: str) -> Tuple[str, int]:
        return JSON.to_json(ErrorResponse(message=message, code=code)), code


def ring_entry(start: str, end: str, endpoints: List[str],
               rpc_endpoints: Optional[List[Optional[str]]] = None) -> TokenRangeEntry:
    return TokenRangeEntry(start, end, list(endpoints),
                           list(rpc_endpoints) if rpc_endpoints is not None else list(endpoints))


def options_for(server: MockNodeServer, seeds: str, **overrides) -> Dict[str, str]:
    options = {
        'input.keyspace': server.keyspace,
        'input.table': 'users',
        'input.initial-address': seeds,
        'input.rpc-port': str(server.port),
        'input.partitioner': 'murmur3',
        'input.connect-timeout': '1 s',
        'input.request-timeout': '10 s',
    }
    options.update(overrides)
    return options
