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

from datetime import timedelta

from pyringsplit.common.options.config_option import ConfigOption
from pyringsplit.common.options.config_options import ConfigOptions


class SplitOptions:
    """Options read once before a planning pass."""

    KEYSPACE: ConfigOption[str] = (
        ConfigOptions.key("input.keyspace")
        .string_type()
        .no_default_value()
        .with_description("The keyspace whose token ring is planned.")
    )

    TABLE: ConfigOption[str] = (
        ConfigOptions.key("input.table")
        .string_type()
        .no_default_value()
        .with_description("The table (column family) the splits are computed for.")
    )

    INITIAL_ADDRESS: ConfigOption[str] = (
        ConfigOptions.key("input.initial-address")
        .string_type()
        .no_default_value()
        .with_description("Comma separated seed addresses used to fetch the ring topology.")
    )

    RPC_PORT: ConfigOption[int] = (
        ConfigOptions.key("input.rpc-port")
        .int_type()
        .default_value(9160)
        .with_description("Port of the node query API.")
    )

    PARTITIONER: ConfigOption[str] = (
        ConfigOptions.key("input.partitioner")
        .string_type()
        .no_default_value()
        .with_description(
            "Partitioner of the cluster, either a short name such as 'murmur3' or the "
            "store's partitioner class name."
        )
    )

    SPLIT_SIZE: ConfigOption[int] = (
        ConfigOptions.key("input.split-size")
        .int_type()
        .default_value(64 * 1024)
        .with_description("Requested number of rows per split.")
    )

    MAX_THREADS: ConfigOption[int] = (
        ConfigOptions.key("input.max-threads")
        .int_type()
        .default_value(0)
        .with_description(
            "Number of threads used to query replicas for split boundaries. "
            "0 starts one thread per planning task."
        )
    )

    MAX_RETRIES: ConfigOption[int] = (
        ConfigOptions.key("input.max-retries")
        .int_type()
        .default_value(3)
        .with_description("Number of failed planning tasks resubmitted before planning gives up.")
    )

    KEY_RANGE_START_KEY: ConfigOption[str] = (
        ConfigOptions.key("input.key-range.start-key")
        .string_type()
        .no_default_value()
        .with_description("Restricts planning to keys from this key on. Needs an order preserving partitioner.")
    )

    KEY_RANGE_END_KEY: ConfigOption[str] = (
        ConfigOptions.key("input.key-range.end-key")
        .string_type()
        .no_default_value()
        .with_description("Upper key bound of the restriction; the restriction runs to the end of the ring if unset.")
    )

    KEY_RANGE_START_TOKEN: ConfigOption[str] = (
        ConfigOptions.key("input.key-range.start-token")
        .string_type()
        .no_default_value()
        .with_description("Raw token bound. Not supported together with a key restriction.")
    )

    KEY_RANGE_END_TOKEN: ConfigOption[str] = (
        ConfigOptions.key("input.key-range.end-token")
        .string_type()
        .no_default_value()
        .with_description("Raw token bound. Not supported together with a key restriction.")
    )

    USERNAME: ConfigOption[str] = (
        ConfigOptions.key("input.keyspace.username")
        .string_type()
        .no_default_value()
        .with_description("User to log in with on every opened connection.")
    )

    PASSWORD: ConfigOption[str] = (
        ConfigOptions.key("input.keyspace.password")
        .string_type()
        .no_default_value()
        .with_description("Password of the login user.")
    )

    REQUEST_TIMEOUT: ConfigOption[timedelta] = (
        ConfigOptions.key("input.request-timeout")
        .duration_type()
        .default_value(timedelta(seconds=180))
        .with_description("Read timeout of a single node request.")
    )

    CONNECT_TIMEOUT: ConfigOption[timedelta] = (
        ConfigOptions.key("input.connect-timeout")
        .duration_type()
        .default_value(timedelta(seconds=10))
        .with_description("Timeout for opening a connection to a node.")
    )
