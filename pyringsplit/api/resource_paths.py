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

import urllib.parse


class ResourcePaths:
    V1 = "v1"
    KEYSPACES = "keyspaces"
    TABLES = "tables"

    def __init__(self, prefix: str = ""):
        self.base_path = "/{}/{}".format(self.V1, prefix).rstrip("/")

    @staticmethod
    def _encode(value: str) -> str:
        return urllib.parse.quote(value, safe="")

    def login(self) -> str:
        return "{}/login".format(self.base_path)

    def keyspace(self, keyspace: str) -> str:
        return "{}/{}/{}".format(self.base_path, self.KEYSPACES, self._encode(keyspace))

    def ring(self, keyspace: str) -> str:
        return "{}/ring".format(self.keyspace(keyspace))

    def table(self, keyspace: str, table: str) -> str:
        return "{}/{}/{}".format(self.keyspace(keyspace), self.TABLES, self._encode(table))

    def splits(self, keyspace: str, table: str) -> str:
        return "{}/splits".format(self.table(keyspace, table))

    def split_tokens(self, keyspace: str, table: str) -> str:
        return "{}/split-tokens".format(self.table(keyspace, table))
