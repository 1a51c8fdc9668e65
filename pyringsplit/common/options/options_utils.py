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
from typing import Any, Type

from pyringsplit.common.time_utils import parse_duration


class OptionsUtils:
    """Utility methods for converting raw option values."""

    @staticmethod
    def convert_value(value: Any, target_type: Type) -> Any:
        """
        Convert a raw value to the target type.

        Raises:
            ValueError: If the conversion is not possible
        """
        if value is None:
            return None

        # bool is an int subclass, so check it before the isinstance short-cut
        if target_type == int and isinstance(value, bool):
            raise ValueError(f"Cannot convert {value!r} to int")
        if isinstance(value, target_type):
            return value

        if target_type == str:
            return OptionsUtils.convert_to_string(value)
        elif target_type == int:
            return OptionsUtils.convert_to_int(value)
        elif target_type == timedelta:
            return OptionsUtils.convert_to_duration(value)
        else:
            raise ValueError(f"Unsupported type: {target_type}")

    @staticmethod
    def convert_to_string(value: Any) -> str:
        if isinstance(value, timedelta):
            return f"{int(value.total_seconds() * 1000)} ms"
        return str(value)

    @staticmethod
    def convert_to_int(value: Any) -> int:
        if isinstance(value, str):
            return int(value.strip())
        if isinstance(value, float):
            return int(value)
        raise ValueError(f"Cannot convert {type(value)} to int")

    @staticmethod
    def convert_to_duration(value: Any) -> timedelta:
        if isinstance(value, str):
            return timedelta(milliseconds=parse_duration(value))
        if isinstance(value, (int, float)):
            return timedelta(milliseconds=value)
        raise ValueError(f"Cannot convert {type(value)} to timedelta")
