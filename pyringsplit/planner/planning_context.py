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
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional, Tuple, Union

from pyringsplit.common.exceptions import ConfigurationException
from pyringsplit.common.identifier import Identifier
from pyringsplit.common.options import Options
from pyringsplit.common.options.split_options import SplitOptions
from pyringsplit.dht.partitioner import Partitioner, get_partitioner
from pyringsplit.planner.split import KeyRestriction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanningContext:
    """Everything a planning pass needs, fixed before the first network call."""
    identifier: Identifier
    seeds: Tuple[str, ...]
    partitioner: Partitioner
    rpc_port: int = SplitOptions.RPC_PORT.default_value()
    split_size: int = SplitOptions.SPLIT_SIZE.default_value()
    max_threads: int = SplitOptions.MAX_THREADS.default_value()
    max_retries: int = SplitOptions.MAX_RETRIES.default_value()
    key_restriction: Optional[KeyRestriction] = None
    username: Optional[str] = None
    password: Optional[str] = None
    connect_timeout: Optional[timedelta] = SplitOptions.CONNECT_TIMEOUT.default_value()
    request_timeout: Optional[timedelta] = SplitOptions.REQUEST_TIMEOUT.default_value()

    def __post_init__(self):
        object.__setattr__(self, 'seeds', tuple(self.seeds))
        if not self.identifier or not self.identifier.keyspace or not self.identifier.table:
            raise ConfigurationException(
                f"You must set the keyspace and table with {SplitOptions.KEYSPACE.key()} "
                f"and {SplitOptions.TABLE.key()}")
        if not self.seeds:
            raise ConfigurationException(
                f"You must set the initial address to a node with {SplitOptions.INITIAL_ADDRESS.key()}")
        if self.partitioner is None:
            raise ConfigurationException(
                f"You must set the partitioner with {SplitOptions.PARTITIONER.key()}")
        if self.split_size <= 0:
            raise ConfigurationException(f"Split size must be positive, got {self.split_size}")
        if self.max_threads < 0:
            raise ConfigurationException(f"Max threads must not be negative, got {self.max_threads}")
        if self.max_retries < 0:
            raise ConfigurationException(f"Max retries must not be negative, got {self.max_retries}")

    @property
    def keyspace(self) -> str:
        return self.identifier.keyspace

    @property
    def table(self) -> str:
        return self.identifier.table

    @classmethod
    def from_options(cls, options: Union[Options, Dict[str, str]]) -> 'PlanningContext':
        if not isinstance(options, Options):
            options = Options(options)

        try:
            return cls._from_options(options)
        except ValueError as e:
            raise ConfigurationException(f"Invalid planning configuration: {e}") from e

    @classmethod
    def _from_options(cls, options: Options) -> 'PlanningContext':
        seeds = options.get(SplitOptions.INITIAL_ADDRESS) or ""
        partitioner_name = options.get(SplitOptions.PARTITIONER)
        if not partitioner_name:
            raise ConfigurationException(
                f"You must set the partitioner with {SplitOptions.PARTITIONER.key()}")

        return cls(
            identifier=Identifier.create(options.get(SplitOptions.KEYSPACE), options.get(SplitOptions.TABLE)),
            seeds=tuple(s.strip() for s in seeds.split(",") if s.strip()),
            partitioner=get_partitioner(partitioner_name),
            rpc_port=options.get(SplitOptions.RPC_PORT),
            split_size=options.get(SplitOptions.SPLIT_SIZE),
            max_threads=options.get(SplitOptions.MAX_THREADS),
            max_retries=options.get(SplitOptions.MAX_RETRIES),
            key_restriction=cls._key_restriction(options),
            username=options.get(SplitOptions.USERNAME),
            password=options.get(SplitOptions.PASSWORD),
            connect_timeout=options.get(SplitOptions.CONNECT_TIMEOUT),
            request_timeout=options.get(SplitOptions.REQUEST_TIMEOUT),
        )

    @staticmethod
    def _key_restriction(options: Options) -> Optional[KeyRestriction]:
        restriction = KeyRestriction(
            start_key=options.get(SplitOptions.KEY_RANGE_START_KEY),
            end_key=options.get(SplitOptions.KEY_RANGE_END_KEY),
            start_token=options.get(SplitOptions.KEY_RANGE_START_TOKEN),
            end_token=options.get(SplitOptions.KEY_RANGE_END_TOKEN),
        )
        if restriction == KeyRestriction():
            return None
        return restriction
