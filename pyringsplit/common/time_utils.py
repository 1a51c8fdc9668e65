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

_UNITS_MS = {
    'ms': 1, 'milli': 1, 'millisecond': 1, 'milliseconds': 1,
    's': 1000, 'sec': 1000, 'second': 1000, 'seconds': 1000,
    'm': 60 * 1000, 'min': 60 * 1000, 'minute': 60 * 1000, 'minutes': 60 * 1000,
    'h': 60 * 60 * 1000, 'hour': 60 * 60 * 1000, 'hours': 60 * 60 * 1000,
}


def parse_duration(text: str) -> int:
    """Parse a duration such as "30 s" or "1500" into milliseconds."""
    if text is None:
        raise ValueError("text cannot be None")

    trimmed = text.strip().lower()
    if not trimmed:
        raise ValueError("argument is an empty- or whitespace-only string")

    pos = 0
    while pos < len(trimmed) and trimmed[pos].isdigit():
        pos += 1

    number_str = trimmed[:pos]
    unit_str = trimmed[pos:].strip()

    if not number_str:
        raise ValueError("text does not start with a number")

    value = int(number_str)
    if not unit_str:
        return value
    if unit_str not in _UNITS_MS:
        raise ValueError(
            f"Time interval unit label '{unit_str}' does not match any of the recognized units: "
            f"{', '.join(sorted(_UNITS_MS))}"
        )
    return value * _UNITS_MS[unit_str]
