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
"""
Partitioners map keys onto the token ring and know the ring's bounds.
"""

from abc import ABC, abstractmethod
from hashlib import md5
from typing import Dict, Optional, Type, Union

import mmh3

from pyringsplit.dht.token import (BytesTokenFactory, IntegerTokenFactory,
                                   StringTokenFactory, Token, TokenFactory)


def _to_bytes(key: Union[str, bytes]) -> bytes:
    return key.encode('utf-8') if isinstance(key, str) else bytes(key)


class Partitioner(ABC):
    """
    Base class of all partitioners.

    minimum_token is never owned by a key. As the end of a range it stands
    for "up to the end of the ring". maximum_token is None for partitioners
    whose token space is unbounded.
    """

    name: str = None
    class_name: str = None

    @property
    @abstractmethod
    def minimum_token(self) -> Token:
        pass

    @property
    def maximum_token(self) -> Optional[Token]:
        return None

    @property
    def ring_end_token(self) -> Token:
        """Token used as the right bound of the last range on the ring."""
        return self.maximum_token if self.maximum_token is not None else self.minimum_token

    @property
    @abstractmethod
    def token_factory(self) -> TokenFactory:
        pass

    @abstractmethod
    def get_token(self, key: Union[str, bytes]) -> Token:
        pass

    def preserves_order(self) -> bool:
        return False

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(self.__class__)

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class Murmur3Partitioner(Partitioner):
    name = "murmur3"
    class_name = "org.apache.cassandra.dht.Murmur3Partitioner"

    MINIMUM = Token(-2 ** 63)
    MAXIMUM = Token(2 ** 63 - 1)

    _factory = IntegerTokenFactory()

    @property
    def minimum_token(self) -> Token:
        return self.MINIMUM

    @property
    def maximum_token(self) -> Token:
        return self.MAXIMUM

    @property
    def token_factory(self) -> TokenFactory:
        return self._factory

    def get_token(self, key: Union[str, bytes]) -> Token:
        value = mmh3.hash64(_to_bytes(key), signed=True)[0]
        # the minimum is reserved for the ring end
        if value == self.MINIMUM.value:
            return self.MAXIMUM
        return Token(value)


class RandomPartitioner(Partitioner):
    name = "random"
    class_name = "org.apache.cassandra.dht.RandomPartitioner"

    MINIMUM = Token(-1)
    MAXIMUM = Token(2 ** 127)

    _factory = IntegerTokenFactory()

    @property
    def minimum_token(self) -> Token:
        return self.MINIMUM

    @property
    def maximum_token(self) -> Token:
        return self.MAXIMUM

    @property
    def token_factory(self) -> TokenFactory:
        return self._factory

    def get_token(self, key: Union[str, bytes]) -> Token:
        digest = md5(_to_bytes(key)).digest()
        return Token(abs(int.from_bytes(digest, 'big', signed=True)))


class ByteOrderedPartitioner(Partitioner):
    name = "byte-ordered"
    class_name = "org.apache.cassandra.dht.ByteOrderedPartitioner"

    MINIMUM = Token(b'')

    _factory = BytesTokenFactory()

    @property
    def minimum_token(self) -> Token:
        return self.MINIMUM

    @property
    def token_factory(self) -> TokenFactory:
        return self._factory

    def get_token(self, key: Union[str, bytes]) -> Token:
        return Token(_to_bytes(key))

    def preserves_order(self) -> bool:
        return True


class OrderPreservingPartitioner(Partitioner):
    name = "order-preserving"
    class_name = "org.apache.cassandra.dht.OrderPreservingPartitioner"

    MINIMUM = Token('')

    _factory = StringTokenFactory()

    @property
    def minimum_token(self) -> Token:
        return self.MINIMUM

    @property
    def token_factory(self) -> TokenFactory:
        return self._factory

    def get_token(self, key: Union[str, bytes]) -> Token:
        return Token(key.decode('utf-8') if isinstance(key, bytes) else key)

    def preserves_order(self) -> bool:
        return True


_PARTITIONERS: Dict[str, Type[Partitioner]] = {}
for _cls in (Murmur3Partitioner, RandomPartitioner, ByteOrderedPartitioner, OrderPreservingPartitioner):
    _PARTITIONERS[_cls.name] = _cls
    _PARTITIONERS[_cls.class_name.lower()] = _cls
    _PARTITIONERS[_cls.__name__.lower()] = _cls


def get_partitioner(name: str) -> Partitioner:
    """
    Resolve a partitioner from its short name ('murmur3'), its class name
    ('Murmur3Partitioner') or the store's fully qualified class name.

    Raises:
        ValueError: If the name does not denote a known partitioner
    """
    if not name or not name.strip():
        raise ValueError("Partitioner name must not be empty")
    partitioner_class = _PARTITIONERS.get(name.strip().lower())
    if partitioner_class is None:
        raise ValueError(
            f"Unknown partitioner '{name}'. Supported: "
            f"{', '.join(sorted(cls.name for cls in set(_PARTITIONERS.values())))}"
        )
    return partitioner_class()
