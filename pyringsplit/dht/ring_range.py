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

from typing import List

import portion

from pyringsplit.dht.partitioner import Partitioner
from pyringsplit.dht.token import Token


class RingRange:
    """
    A range of the token ring, exclusive of left and inclusive of right.

    The range wraps when left >= right unless right is the minimum token,
    which as a right bound means "up to the end of the ring". A range whose
    bounds are equal (and not the minimum) covers the whole ring.

    Interval operations linearise the ring into at most two portion intervals
    and work on those, so wrapping operands need no special casing.
    """

    def __init__(self, left: Token, right: Token, partitioner: Partitioner):
        self.left = left
        self.right = right
        self.partitioner = partitioner

    def is_wrap_around(self) -> bool:
        return self.left >= self.right and self.right != self.partitioner.minimum_token

    def unwrap(self) -> List['RingRange']:
        """Split a wrapping range at the ring boundary; a non-wrapping range is returned as is."""
        if not self.is_wrap_around():
            return [self]
        minimum = self.partitioner.minimum_token
        ring_end = self.partitioner.ring_end_token
        # nothing lies after the ring end
        if self.left == ring_end:
            return [RingRange(minimum, self.right, self.partitioner)]
        return [
            RingRange(self.left, ring_end, self.partitioner),
            RingRange(minimum, self.right, self.partitioner),
        ]

    def to_interval(self) -> portion.Interval:
        """Linear form of this range: a union of left-open, right-closed intervals."""
        minimum = self.partitioner.minimum_token
        if self.right == minimum:
            return self._to_ring_end(self.left)
        if not self.is_wrap_around():
            return portion.openclosed(self.left, self.right)
        return self._to_ring_end(self.left) | portion.openclosed(minimum, self.right)

    def intersects(self, other: 'RingRange') -> bool:
        return not (self.to_interval() & other.to_interval()).empty

    def intersection_with(self, other: 'RingRange') -> List['RingRange']:
        """
        Ring-aware intersection. Returns zero, one or two disjoint non-wrapping
        ranges, ordered by position on the ring.
        """
        intersection = self.to_interval() & other.to_interval()
        result = []
        for atomic in intersection:
            if atomic.empty:
                continue
            right = self.partitioner.minimum_token if atomic.upper == portion.inf else atomic.upper
            result.append(RingRange(atomic.lower, right, self.partitioner))
        return result

    def _to_ring_end(self, left: Token) -> portion.Interval:
        maximum = self.partitioner.maximum_token
        if maximum is None:
            return portion.open(left, portion.inf)
        return portion.openclosed(left, maximum)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RingRange):
            return False
        return self.left == other.left and self.right == other.right

    def __hash__(self) -> int:
        return hash((self.left, self.right))

    def __repr__(self) -> str:
        factory = self.partitioner.token_factory
        return f"({factory.to_string(self.left)}, {factory.to_string(self.right)}]"
