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

from abc import ABC
from dataclasses import dataclass

from pyringsplit.common.json_util import json_field


class RESTRequest(ABC):
    """RESTRequest"""


@dataclass
class LoginRequest(RESTRequest):
    FIELD_USERNAME = "username"
    FIELD_PASSWORD = "password"

    username: str = json_field(FIELD_USERNAME)
    password: str = json_field(FIELD_PASSWORD)

    def __repr__(self):
        return f"LoginRequest(username={self.username!r}, password='***')"


@dataclass
class DescribeSplitsRequest(RESTRequest):
    """Body of both split computation calls: sized splits and boundary tokens."""
    FIELD_START_TOKEN = "startToken"
    FIELD_END_TOKEN = "endToken"
    FIELD_KEYS_PER_SPLIT = "keysPerSplit"

    start_token: str = json_field(FIELD_START_TOKEN)
    end_token: str = json_field(FIELD_END_TOKEN)
    keys_per_split: int = json_field(FIELD_KEYS_PER_SPLIT)
