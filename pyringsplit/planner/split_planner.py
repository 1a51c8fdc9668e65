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
import random
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional

from pyringsplit.common.exceptions import (InvariantViolationException,
                                           PlanningExhaustedException)
from pyringsplit.planner.node_connector import NodeConnector
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.range_restrictor import RangeRestrictor
from pyringsplit.planner.range_split_client import RangeSplitClient
from pyringsplit.planner.split import PlanningTask, Split
from pyringsplit.planner.split_assembler import SplitAssembler
from pyringsplit.planner.topology_client import TopologyClient


class SplitPlanner:
    """
    Plans the splits of one table.

    Every planning task runs on a thread pool. Results are collected in
    completion order; a failed task is resubmitted as long as the retry budget,
    shared by all tasks of the pass, allows. The pool is shut down on every exit
    path and the returned splits are in no particular order.
    """

    def __init__(self, context: PlanningContext,
                 connector: Optional[NodeConnector] = None,
                 assembler: Optional[SplitAssembler] = None,
                 rng: Optional[random.Random] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.context = context
        self.connector = connector or NodeConnector(context)
        self.assembler = assembler or SplitAssembler(context.partitioner)
        self.rng = rng or random.Random()

    def plan(self) -> List[Split]:
        self.logger.info(f"Getting input splits for {self.context.identifier}")
        restrictor = RangeRestrictor(self.context)
        ranges = TopologyClient(self.context, self.connector).describe_ring()
        tasks = restrictor.restrict(ranges)
        self.logger.info(f"There are a total of {len(tasks)} planning tasks to turn into splits")

        splits = self._collect(tasks)
        if not splits:
            raise InvariantViolationException(
                f"Planning {self.context.identifier} over {len(ranges)} ranges produced no splits")
        self.rng.shuffle(splits)
        self.logger.info(f"Planned {len(splits)} splits for {self.context.identifier}")
        return splits

    def plan_task(self, task: PlanningTask) -> List[Split]:
        sub_splits = RangeSplitClient(self.context, self.connector).get_sub_splits(task)
        return self.assembler.assemble(task.token_range, sub_splits)

    def _collect(self, tasks: List[PlanningTask]) -> List[Split]:
        max_workers = self.context.max_threads or max(len(tasks), 1)
        self.logger.debug(f"Max threads: {max_workers}, max retries: {self.context.max_retries}")
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="split-planner")
        pending: Dict[Future, PlanningTask] = {}
        splits: List[Split] = []
        retries = 0
        try:
            for task in tasks:
                pending[executor.submit(self.plan_task, task)] = task

            while pending:
                done, _ = wait(list(pending), return_when=FIRST_COMPLETED)
                for future in done:
                    task = pending.pop(future)
                    try:
                        splits.extend(future.result())
                    except InvariantViolationException:
                        raise
                    except Exception as e:
                        if retries >= self.context.max_retries:
                            raise PlanningExhaustedException(
                                f"Could not get input splits after {retries} retries, last failure "
                                f"in {task}: {e}") from e
                        self.logger.error(f"Failed to fetch splits for {task} - retrying.", exc_info=e)
                        pending[executor.submit(self.plan_task, task)] = task
                        retries += 1
        finally:
            for future in pending:
                future.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
        return splits
