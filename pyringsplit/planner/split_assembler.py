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
import socket
from typing import Callable, List, Optional

from pyringsplit.common.exceptions import InvariantViolationException
from pyringsplit.dht.partitioner import Partitioner
from pyringsplit.dht.ring_range import RingRange
from pyringsplit.planner.split import Split, SubSplit, TokenRange

logger = logging.getLogger(__name__)


class SplitAssembler:
    """Turns the sub-splits of one range into splits, unwrapping those that cross the ring boundary."""

    def __init__(self, partitioner: Partitioner,
                 resolve_hostname: Callable[[str], str] = socket.getfqdn):
        self.partitioner = partitioner
        self.resolve_hostname = resolve_hostname

    def assemble(self, token_range: TokenRange, sub_splits: List[SubSplit],
                 output: Optional[List[Split]] = None) -> List[Split]:
        if len(token_range.rpc_endpoints) != len(token_range.endpoints):
            raise InvariantViolationException(
                f"rpc_endpoints size {len(token_range.rpc_endpoints)} must match "
                f"endpoints size {len(token_range.endpoints)} for range "
                f"({token_range.start_token}, {token_range.end_token}]")

        # the batch framework schedules by hostname, not address
        hostnames = tuple(self.resolve_hostname(address) for address in token_range.effective_endpoints())

        splits = output if output is not None else []
        factory = self.partitioner.token_factory
        for sub_split in sub_splits:
            ring_range = RingRange(factory.from_string(sub_split.start_token),
                                   factory.from_string(sub_split.end_token),
                                   self.partitioner)
            for sub_range in ring_range.unwrap():
                split = Split(factory.to_string(sub_range.left),
                              factory.to_string(sub_range.right),
                              sub_split.row_count,
                              hostnames)
                logger.debug(f"adding {split}")
                splits.append(split)
        return splits
