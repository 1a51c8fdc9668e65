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
Entry points for batch frameworks. Both input formats hand the same planning
context to the same SplitSource; they differ only in how the configuration
comes in and how the splits go out.
"""

import random
import socket
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from pyringsplit.common.options import Options
from pyringsplit.planner.node_connector import NodeConnector
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split import Split
from pyringsplit.planner.split_assembler import SplitAssembler
from pyringsplit.planner.split_planner import SplitPlanner


class SplitSource(ABC):

    @abstractmethod
    def plan(self, context: PlanningContext) -> List[Split]:
        """Plan the splits described by the context."""


class RingSplitSource(SplitSource):
    """Plans splits by querying the nodes of the ring."""

    def __init__(self,
                 connector_factory: Callable[[PlanningContext], NodeConnector] = NodeConnector,
                 rng: Optional[random.Random] = None,
                 resolve_hostname: Callable[[str], str] = socket.getfqdn):
        self.connector_factory = connector_factory
        self.rng = rng
        self.resolve_hostname = resolve_hostname

    def plan(self, context: PlanningContext) -> List[Split]:
        assembler = SplitAssembler(context.partitioner, resolve_hostname=self.resolve_hostname)
        return SplitPlanner(context, connector=self.connector_factory(context),
                            assembler=assembler, rng=self.rng).plan()


class _BaseInputFormat:

    def __init__(self, split_source: Optional[SplitSource] = None):
        self.split_source = split_source or RingSplitSource()

    def _plan(self, conf: Union[Options, Mapping[str, str]]) -> List[Split]:
        if not isinstance(conf, Options):
            conf = Options(dict(conf))
        return self.split_source.plan(PlanningContext.from_options(conf))


class InputFormat(_BaseInputFormat):
    """Current calling convention: a configuration map in, a list of splits out."""

    def get_splits(self, conf: Union[Options, Dict[str, str]]) -> List[Split]:
        return self._plan(conf)


class LegacyInputFormat(_BaseInputFormat):
    """
    Older calling convention: a job configuration and a split count hint in, an
    array of splits out. The hint is ignored; the ring decides the split count.
    """

    def get_splits(self, job_conf: Mapping[str, str], num_splits: int = 0) -> Tuple[Split, ...]:
        return tuple(self._plan(job_conf))
