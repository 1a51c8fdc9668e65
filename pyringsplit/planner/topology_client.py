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

from pyringsplit.api.node_api import NodeApi
from pyringsplit.common.exceptions import NodeUnavailableException
from pyringsplit.planner.node_connector import NodeConnector
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split import TokenRange


class TopologyClient:
    """Fetches the ring of the planned keyspace from the first reachable seed."""

    def __init__(self, context: PlanningContext, connector: Optional[NodeConnector] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.context = context
        self.connector = connector or NodeConnector(context)

    def describe_ring(self) -> List[TokenRange]:
        with self._connect_to_seed() as api:
            entries = api.describe_ring(self.context.keyspace)
        ranges = [TokenRange.from_entry(entry) for entry in entries]
        self.logger.info(f"Got {len(ranges)} ranges of keyspace {self.context.keyspace}")
        return ranges

    def _connect_to_seed(self) -> NodeApi:
        for seed in self.context.seeds:
            try:
                return self.connector.connect(seed)
            except NodeUnavailableException as e:
                self.logger.warning(f"Seed {seed} is unavailable: {e}")
        addresses = ",".join(self.context.seeds)
        raise NodeUnavailableException(addresses, f"Failed to connect to any seed of {addresses}")
