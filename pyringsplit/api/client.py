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
import urllib.parse
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple, Type

import requests
from requests.adapters import HTTPAdapter
from urllib3 import Retry

from pyringsplit.api.api_request import RESTRequest
from pyringsplit.api.api_response import ErrorResponse
from pyringsplit.api.typedef import RESTAuthParameter, T
from pyringsplit.common.json_util import JSON


class RESTException(Exception):
    def __init__(self, message: str = None, *args: Any, cause: Optional[Exception] = None):
        if message and args:
            try:
                formatted_message = message % args
            except (TypeError, ValueError):
                formatted_message = f"{message} {' '.join(str(arg) for arg in args)}"
        else:
            formatted_message = message or "REST API error occurred"

        super().__init__(formatted_message)
        self.__cause__ = cause

    def __repr__(self) -> str:
        if self.__cause__:
            return f"{self.__class__.__name__}('{self}', caused by {type(self.__cause__).__name__}: {self.__cause__})"
        return f"{self.__class__.__name__}('{self}')"


class ConnectionFailedException(RESTException):
    """The node could not be reached at all."""


class RequestTimeoutException(RESTException):
    """The node accepted the connection but did not answer in time."""


class BadRequestException(RESTException):
    """Exception for bad request (400)"""


class NotAuthorizedException(RESTException):
    """Exception for not authorized (401)"""


class ForbiddenException(RESTException):
    """Exception for forbidden access (403)"""


class NoSuchResourceException(RESTException):
    """Exception for resource not found (404)"""

    def __init__(self, resource_type: Optional[str], resource_name: Optional[str],
                 message: str, *args: Any):
        self.resource_type = resource_type
        self.resource_name = resource_name
        super().__init__(message, *args)


class ServiceFailureException(RESTException):
    """Exception for service failure (500)"""


class NotImplementedException(RESTException):
    """Exception for an operation the node does not implement (501)"""


class ServiceUnavailableException(RESTException):
    """Exception for service unavailable (503)"""


class ErrorHandler(ABC):

    @abstractmethod
    def accept(self, error: ErrorResponse, request_id: str) -> None:
        pass


class DefaultErrorHandler(ErrorHandler):
    """Converts error responses to the matching RESTException subclass."""

    _instance: Optional['DefaultErrorHandler'] = None

    @classmethod
    def get_instance(cls) -> 'DefaultErrorHandler':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def accept(self, error: ErrorResponse, request_id: str) -> None:
        code = error.code

        if LoggingInterceptor.DEFAULT_REQUEST_ID == request_id:
            message = error.message
        else:
            message = f"{error.message} requestId:{request_id}"

        if code == 400:
            raise BadRequestException("%s", message)
        elif code == 401:
            raise NotAuthorizedException("Not authorized: %s", message)
        elif code == 403:
            raise ForbiddenException("Forbidden: %s", message)
        elif code == 404:
            raise NoSuchResourceException(error.resource_type, error.resource_name, "%s", message)
        elif code == 500:
            raise ServiceFailureException("Server error: %s", message)
        elif code == 501:
            raise NotImplementedException("Not implemented: %s", message)
        elif code == 503:
            raise ServiceUnavailableException("Service unavailable: %s", message)

        raise RESTException("Unable to process: %s", message)


class ExponentialRetry:
    """
    Retries idempotent requests the node rejected as overloaded. Connects are
    never retried: an unreachable replica must fail fast so the caller can move
    on to the next one.
    """

    adapter: HTTPAdapter

    def __init__(self, max_retries: int = 3):
        self.adapter = HTTPAdapter(max_retries=self.__create_retry_strategy(max_retries))

    @staticmethod
    def __create_retry_strategy(max_retries: int) -> Retry:
        return Retry(
            total=max_retries,
            read=max_retries,
            connect=0,
            backoff_factor=1,
            status_forcelist=[429, 502, 503, 504],
            allowed_methods=["GET", "HEAD", "PUT", "DELETE", "TRACE", "OPTIONS"],
            raise_on_status=False,
            raise_on_redirect=False,
        )


class LoggingInterceptor:
    REQUEST_ID_KEY = "x-request-id"
    DEFAULT_REQUEST_ID = "unknown"

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def log_request(self, method: str, url: str, headers: Dict[str, str]) -> None:
        request_id = headers.get(self.REQUEST_ID_KEY, self.DEFAULT_REQUEST_ID)
        self.logger.debug(f"Request [{request_id}]: {method} {url}")

    def log_response(self, status_code: int, headers: Dict[str, str]) -> None:
        request_id = headers.get(self.REQUEST_ID_KEY, self.DEFAULT_REQUEST_ID)
        self.logger.debug(f"Response [{request_id}]: {status_code}")


def _normalize_uri(uri: str) -> str:
    if not uri or uri.strip() == "":
        raise ValueError("uri is empty which must be defined.")

    server_uri = uri.strip()
    if server_uri.endswith("/"):
        server_uri = server_uri[:-1]
    if not server_uri.startswith("http://") and not server_uri.startswith("https://"):
        server_uri = f"http://{server_uri}"
    return server_uri


def _parse_error_response(response_body: Optional[str], status_code: int) -> ErrorResponse:
    if response_body:
        try:
            error = JSON.from_json(response_body, ErrorResponse)
        except Exception:
            return ErrorResponse(message=response_body, code=status_code)
        if error.code is None:
            error.code = status_code
        return error
    return ErrorResponse(message="response body is null", code=status_code)


def _get_headers(path: str, method: str, query_params: Optional[Dict[str, str]], data: Optional[str],
                 header_function: Callable[[RESTAuthParameter], Dict[str, str]]) -> Dict[str, str]:
    return header_function(RESTAuthParameter(
        method=method,
        path=path,
        data=data,
        parameters=query_params or {},
    ))


class HttpClient:
    """HTTP/JSON client of a single node."""

    def __init__(self, uri: str,
                 connect_timeout: Optional[timedelta] = None,
                 request_timeout: Optional[timedelta] = None,
                 max_retries: int = 3):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.uri = _normalize_uri(uri)
        self.error_handler: ErrorHandler = DefaultErrorHandler.get_instance()
        self.logging_interceptor = LoggingInterceptor()
        self.timeout: Tuple[Optional[float], Optional[float]] = (
            connect_timeout.total_seconds() if connect_timeout else None,
            request_timeout.total_seconds() if request_timeout else None,
        )

        self.session = requests.Session()
        adapter = ExponentialRetry(max_retries=max_retries).adapter
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        })

    def get(self, path: str, response_type: Type[T],
            rest_auth_function: Callable[[RESTAuthParameter], Dict[str, str]]) -> T:
        auth_headers = _get_headers(path, "GET", None, None, rest_auth_function)
        url = self._get_request_url(path, None)
        return self._execute_request("GET", url, headers=auth_headers, response_type=response_type)

    def post(self, path: str, body: RESTRequest, response_type: Optional[Type[T]],
             rest_auth_function: Callable[[RESTAuthParameter], Dict[str, str]]) -> T:
        body_str = JSON.to_json(body)
        auth_headers = _get_headers(path, "POST", None, body_str, rest_auth_function)
        url = self._get_request_url(path, None)
        return self._execute_request("POST", url, data=body_str, headers=auth_headers,
                                     response_type=response_type)

    def close(self) -> None:
        self.session.close()

    def _get_request_url(self, path: str, query_params: Optional[Dict[str, str]]) -> str:
        full_path = self.uri if not path or path.strip() == "" else self.uri + path
        if query_params:
            full_path = f"{full_path}?{urllib.parse.urlencode(query_params)}"
        return full_path

    def _execute_request(self, method: str, url: str,
                         data: Optional[str] = None,
                         headers: Optional[Dict[str, str]] = None,
                         response_type: Optional[Type[T]] = None) -> T:
        try:
            if headers:
                self.logging_interceptor.log_request(method, url, headers)

            response = self.session.request(
                method=method,
                url=url,
                data=data.encode('utf-8') if data else None,
                headers=headers,
                timeout=self.timeout,
            )

            self.logging_interceptor.log_response(response.status_code, dict(response.headers))
            response_body_str = response.text if response.text else None

            if not response.ok:
                error = _parse_error_response(response_body_str, response.status_code)
                request_id = response.headers.get(
                    LoggingInterceptor.REQUEST_ID_KEY,
                    LoggingInterceptor.DEFAULT_REQUEST_ID
                )
                self.error_handler.accept(error, request_id)

            if response_type is None:
                return None
            if response_body_str is None:
                raise RESTException("response body is null.")
            return JSON.from_json(response_body_str, response_type)

        except RESTException:
            raise
        except requests.exceptions.ConnectTimeout as e:
            raise ConnectionFailedException("connect to %s timed out", url, cause=e)
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutException("request to %s timed out", url, cause=e)
        except requests.exceptions.ConnectionError as e:
            raise ConnectionFailedException("failed to connect to %s", url, cause=e)
        except Exception as e:
            raise RESTException("rest exception", cause=e)
