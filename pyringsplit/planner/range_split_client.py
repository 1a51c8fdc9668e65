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
from pyringsplit.common.exceptions import (EndpointsExhaustedException,
                                           NodeUnavailableException,
                                           ProtocolUnsupportedException)
from pyringsplit.planner.node_connector import NodeConnector
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split import (PlanningTask, SubSplit,
                                       token_list_to_sub_splits)


class RangeSplitClient:
    """
    Asks the replicas of one range, in order, for the sub-split boundaries of
    that range. The first replica that can be reached answers; an unreachable
    replica is skipped. Rejections other than an unsupported call are not
    retried here.
    """

    def __init__(self, context: PlanningContext, connector: Optional[NodeConnector] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.context = context
        self.connector = connector or NodeConnector(context)

    def get_sub_splits(self, task: PlanningTask) -> List[SubSplit]:
        attempted = []
        for host in task.token_range.effective_endpoints():
            attempted.append(host)
            try:
                with self.connector.connect(host) as api:
                    return self._describe_splits(api, task)
            except NodeUnavailableException as e:
                self.logger.debug(f"Failed to connect to endpoint {host}: {e}")
        raise EndpointsExhaustedException(attempted)

    def _describe_splits(self, api: NodeApi, task: PlanningTask) -> List[SubSplit]:
        token_range = task.token_range
        try:
            entries = api.describe_splits_ex(self.context.table, token_range.start_token,
                                             token_range.end_token, task.split_size)
            return [SubSplit(e.start_token, e.end_token, e.row_count) for e in entries]
        except ProtocolUnsupportedException:
            # older nodes only return boundary tokens; the split size becomes the estimate
            self.logger.debug(f"{api.address} has no sized split call, falling back to boundary tokens")
            split_tokens = api.describe_splits(self.context.table, token_range.start_token,
                                               token_range.end_token, task.split_size)
            return token_list_to_sub_splits(split_tokens, task.split_size)
