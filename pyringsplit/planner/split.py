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

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from pyringsplit.api.api_response import TokenRangeEntry
from pyringsplit.common.json_util import JSON, json_field

# rpc addresses a node reports when it listens on every interface
WILDCARD_ADDRESSES = frozenset(["", "0.0.0.0", "::"])


@dataclass(frozen=True)
class TokenRange:
    """
    A range of the ring together with its replicas. endpoints holds the
    internal addresses and rpc_endpoints the routable ones; the same index
    in both denotes the same replica.
    """
    start_token: str
    end_token: str
    endpoints: Tuple[str, ...] = ()
    rpc_endpoints: Tuple[Optional[str], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'endpoints', tuple(self.endpoints))
        object.__setattr__(self, 'rpc_endpoints', tuple(self.rpc_endpoints))

    @classmethod
    def from_entry(cls, entry: TokenRangeEntry) -> 'TokenRange':
        return cls(entry.start_token, entry.end_token, entry.endpoints, entry.rpc_endpoints)

    def effective_endpoint(self, index: int) -> str:
        """The routable address of a replica, or its internal address when unset."""
        address = self.rpc_endpoints[index]
        if address is None or address in WILDCARD_ADDRESSES:
            return self.endpoints[index]
        return address

    def effective_endpoints(self) -> List[str]:
        return [self.effective_endpoint(i) for i in range(len(self.rpc_endpoints))]

    def with_bounds(self, start_token: str, end_token: str) -> 'TokenRange':
        return replace(self, start_token=start_token, end_token=end_token)


@dataclass(frozen=True)
class KeyRestriction:
    start_key: Optional[str] = None
    end_key: Optional[str] = None
    start_token: Optional[str] = None
    end_token: Optional[str] = None


@dataclass(frozen=True)
class PlanningTask:
    token_range: TokenRange
    split_size: int

    def __str__(self):
        return (f"PlanningTask(range=({self.token_range.start_token}, {self.token_range.end_token}], "
                f"endpoints={list(self.token_range.endpoints)}, split_size={self.split_size})")


@dataclass(frozen=True)
class SubSplit:
    start_token: str
    end_token: str
    row_count: int


def token_list_to_sub_splits(split_tokens: List[str], split_size: int) -> List[SubSplit]:
    """Pair adjacent boundary tokens; every pair gets the requested size as its estimate."""
    return [
        SubSplit(split_tokens[j], split_tokens[j + 1], split_size)
        for j in range(len(split_tokens) - 1)
    ]


@dataclass(frozen=True)
class Split:
    """A unit of work handed to the batch framework: one non-wrapping range and the hosts holding it."""
    FIELD_START_TOKEN = "startToken"
    FIELD_END_TOKEN = "endToken"
    FIELD_LENGTH = "length"
    FIELD_LOCATIONS = "locations"

    start_token: str = json_field(FIELD_START_TOKEN)
    end_token: str = json_field(FIELD_END_TOKEN)
    length: int = json_field(FIELD_LENGTH)
    locations: Tuple[str, ...] = json_field(FIELD_LOCATIONS, default=())

    def __post_init__(self):
        object.__setattr__(self, 'locations', tuple(self.locations))

    def get_length(self) -> int:
        return self.length

    def get_locations(self) -> List[str]:
        return list(self.locations)

    def to_json(self) -> str:
        return JSON.to_json(self)

    @classmethod
    def from_json(cls, json_str: str) -> 'Split':
        return JSON.from_json(json_str, cls)

    def __str__(self):
        return (f"Split(({self.start_token}, {self.end_token}], length={self.length}, "
                f"locations={list(self.locations)})")
