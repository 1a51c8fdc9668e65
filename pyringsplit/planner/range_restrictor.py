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
from typing import List, Optional

from pyringsplit.common.exceptions import ConfigurationException
from pyringsplit.dht.ring_range import RingRange
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split import PlanningTask, TokenRange

logger = logging.getLogger(__name__)


class RangeRestrictor:
    """
    Turns ring ranges into planning tasks, narrowing them to the configured key
    restriction. The restriction is checked when the restrictor is created, so a
    bad restriction fails before any node is contacted.
    """

    def __init__(self, context: PlanningContext):
        self.context = context
        self.partitioner = context.partitioner
        self.job_range = self._job_range()

    def restrict(self, ranges: List[TokenRange]) -> List[PlanningTask]:
        split_size = self.context.split_size
        if self.job_range is None:
            return [PlanningTask(token_range, split_size) for token_range in ranges]

        factory = self.partitioner.token_factory
        tasks = []
        for token_range in ranges:
            ring_range = RingRange(factory.from_string(token_range.start_token),
                                   factory.from_string(token_range.end_token),
                                   self.partitioner)
            for intersection in ring_range.intersection_with(self.job_range):
                narrowed = token_range.with_bounds(factory.to_string(intersection.left),
                                                   factory.to_string(intersection.right))
                tasks.append(PlanningTask(narrowed, split_size))
        logger.info(f"Restricted {len(ranges)} ranges to {len(tasks)} planning tasks within {self.job_range}")
        return tasks

    def _job_range(self) -> Optional[RingRange]:
        restriction = self.context.key_restriction
        if restriction is None:
            return None
        if restriction.start_key is None:
            logger.warning("Ignoring key range specified without a start key")
            return None
        if not self.partitioner.preserves_order():
            raise ConfigurationException(
                "A key range can only be used with an order preserving partitioner, "
                f"not {self.partitioner.__class__.__name__}")
        if restriction.start_token is not None or restriction.end_token is not None:
            raise ConfigurationException("Only start and end keys are supported in a key range, not tokens")

        start = self.partitioner.get_token(restriction.start_key)
        if restriction.end_key is None:
            end = self.partitioner.minimum_token
        else:
            end = self.partitioner.get_token(restriction.end_key)
        return RingRange(start, end, self.partitioner)
