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

from pyringsplit.api.node_api import NodeApi


class NodeConnector:
    """Opens a connection to a node and performs the login and keyspace handshake."""

    def __init__(self, context):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.context = context

    def connect(self, host: str) -> NodeApi:
        self.logger.debug(f"Connecting to host {host} and port {self.context.rpc_port}")
        api = NodeApi(host, self.context.rpc_port,
                      connect_timeout=self.context.connect_timeout,
                      request_timeout=self.context.request_timeout)
        try:
            if self.context.username is not None:
                api.login(self.context.username, self.context.password or "")
            api.set_keyspace(self.context.keyspace)
        except Exception:
            api.close()
            raise
        return api
