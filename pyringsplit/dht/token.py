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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, order=True)
class Token:
    """A position on the ring. Tokens of one partitioner are totally ordered."""
    value: Any

    def __repr__(self):
        return f"Token({self.value!r})"


class TokenFactory(ABC):
    """Converts tokens to and from the string form used on the wire and in splits."""

    @abstractmethod
    def from_string(self, text: str) -> Token:
        pass

    @abstractmethod
    def to_string(self, token: Token) -> str:
        pass


class IntegerTokenFactory(TokenFactory):

    def from_string(self, text: str) -> Token:
        try:
            return Token(int(text))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid integer token: {text!r}")

    def to_string(self, token: Token) -> str:
        return str(token.value)


class BytesTokenFactory(TokenFactory):

    def from_string(self, text: str) -> Token:
        try:
            return Token(bytes.fromhex(text))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid hex token: {text!r}")

    def to_string(self, token: Token) -> str:
        return token.value.hex()


class StringTokenFactory(TokenFactory):

    def from_string(self, text: str) -> Token:
        if text is None:
            raise ValueError("Token string must not be None")
        return Token(text)

    def to_string(self, token: Token) -> str:
        return token.value
