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

import socket
import time
import unittest
from datetime import timedelta

from pyringsplit.api.api_response import ErrorResponse, GetKeyspaceResponse
from pyringsplit.api.auth import NoneAuthProvider, RESTAuthFunction
from pyringsplit.api.client import (BadRequestException,
                                    ConnectionFailedException,
                                    DefaultErrorHandler, ExponentialRetry,
                                    HttpClient, NoSuchResourceException,
                                    NotAuthorizedException,
                                    NotImplementedException, RESTException,
                                    ServiceFailureException, _normalize_uri,
                                    _parse_error_response)


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class HttpClientTest(unittest.TestCase):

    def test_parse_error_response_with_valid_json(self):
        response_body = (
            '{"message": "Keyspace not found", "code": 404, '
            '"resourceType": "keyspace", "resourceName": "ks"}'
        )
        error = _parse_error_response(response_body, 404)

        self.assertEqual(error.message, "Keyspace not found")
        self.assertEqual(error.code, 404)
        self.assertEqual(error.resource_type, "keyspace")
        self.assertEqual(error.resource_name, "ks")

    def test_parse_error_response_with_unparsable_body(self):
        response_body = "Internal Server Error: compaction in progress"
        error = _parse_error_response(response_body, 500)
        self.assertEqual(error.message, response_body)
        self.assertEqual(error.code, 500)
        self.assertIsNone(error.resource_type)

        error = _parse_error_response(None, 500)
        self.assertEqual(error.message, "response body is null")
        self.assertEqual(error.code, 500)

    def test_parse_error_response_without_code(self):
        error = _parse_error_response('{"message": "describe_splits_ex is not supported"}', 501)
        self.assertEqual(error.message, "describe_splits_ex is not supported")
        self.assertEqual(error.code, 501)
        with self.assertRaises(NotImplementedException):
            DefaultErrorHandler.get_instance().accept(error, "unknown")

    def test_error_handler_maps_status_codes(self):
        handler = DefaultErrorHandler.get_instance()
        cases = [
            (400, BadRequestException),
            (401, NotAuthorizedException),
            (404, NoSuchResourceException),
            (500, ServiceFailureException),
            (501, NotImplementedException),
            (418, RESTException),
        ]
        for code, expected in cases:
            with self.subTest(code=code):
                with self.assertRaises(expected) as ctx:
                    handler.accept(ErrorResponse(message="boom", code=code), "req-1")
                self.assertIn("boom requestId:req-1", str(ctx.exception))

    def test_normalize_uri(self):
        self.assertEqual("http://10.0.0.1:9160", _normalize_uri("10.0.0.1:9160/"))
        self.assertEqual("https://node:9160", _normalize_uri(" https://node:9160 "))
        with self.assertRaises(ValueError):
            _normalize_uri(" ")

    def test_refused_connection(self):
        client = HttpClient(f"127.0.0.1:{_unused_port()}", connect_timeout=timedelta(seconds=1))
        try:
            with self.assertRaises(ConnectionFailedException):
                client.get("/v1/keyspaces/ks", GetKeyspaceResponse, RESTAuthFunction({}, NoneAuthProvider()))
        finally:
            client.close()


class ExponentialRetryTest(unittest.TestCase):

    def test_retry_strategy(self):
        retry = ExponentialRetry._ExponentialRetry__create_retry_strategy(5)

        self.assertEqual(retry.total, 5)
        self.assertEqual(retry.read, 5)
        self.assertEqual(retry.connect, 0)
        self.assertIn(429, retry.status_forcelist)
        self.assertIn(503, retry.status_forcelist)
        self.assertNotIn(501, retry.status_forcelist)
        self.assertNotIn("POST", retry.allowed_methods)

    def test_no_retry_on_refused_connection(self):
        client = HttpClient(f"127.0.0.1:{_unused_port()}", connect_timeout=timedelta(seconds=1), max_retries=5)
        start_time = time.time()
        try:
            with self.assertRaises(ConnectionFailedException):
                client.get("/v1/keyspaces/ks", GetKeyspaceResponse, RESTAuthFunction({}, NoneAuthProvider()))
        finally:
            client.close()
        self.assertLess(time.time() - start_time, 5.0)


if __name__ == '__main__':
    unittest.main()
