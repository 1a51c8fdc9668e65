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

import json
from dataclasses import field, fields, is_dataclass
from typing import Any, Dict, List, Type, TypeVar, Union

T = TypeVar("T")


def json_field(json_name: str, **kwargs):
    """Create a dataclass field serialized under a custom JSON name."""
    return field(metadata={"json_name": json_name}, **kwargs)


def _nested_type(field_type) -> Any:
    """Return the dataclass (or List[dataclass]) a field holds, unwrapping Optional."""
    origin = getattr(field_type, '__origin__', None)
    args = getattr(field_type, '__args__', None) or ()
    if origin is Union and len(args) == 2 and type(None) in args:
        return _nested_type(args[0] if args[1] is type(None) else args[1])
    if is_dataclass(field_type):
        return field_type
    if origin in (list, List) and args and is_dataclass(args[0]):
        return field_type
    return None


class JSON:

    @staticmethod
    def to_json(obj: Any, **kwargs) -> str:
        return json.dumps(JSON.to_dict(obj), ensure_ascii=False, **kwargs)

    @staticmethod
    def from_json(json_str: str, target_class: Type[T]) -> T:
        return JSON.from_dict(json.loads(json_str), target_class)

    @staticmethod
    def to_dict(obj: Any) -> Dict[str, Any]:
        """Convert a dataclass to a dictionary keyed by JSON names."""
        result = {}
        for field_info in fields(obj):
            value = getattr(obj, field_info.name)
            json_name = field_info.metadata.get("json_name", field_info.name)
            if is_dataclass(value):
                result[json_name] = JSON.to_dict(value)
            elif isinstance(value, (list, tuple)):
                result[json_name] = [
                    JSON.to_dict(item) if is_dataclass(item) else item
                    for item in value
                ]
            else:
                result[json_name] = value
        return result

    @staticmethod
    def from_dict(data: Dict[str, Any], target_class: Type[T]) -> T:
        """Create a dataclass instance from a dictionary keyed by JSON names."""
        field_mapping = {}
        type_mapping = {}
        for field_info in fields(target_class):
            json_name = field_info.metadata.get("json_name", field_info.name)
            field_mapping[json_name] = field_info.name
            nested = _nested_type(field_info.type)
            if nested is not None:
                type_mapping[json_name] = nested

        kwargs = {}
        for json_name, value in data.items():
            if json_name not in field_mapping:
                continue
            field_name = field_mapping[json_name]
            nested = type_mapping.get(json_name)
            if nested is None or value is None:
                kwargs[field_name] = value
            elif getattr(nested, '__origin__', None) in (list, List):
                item_type = nested.__args__[0]
                kwargs[field_name] = [JSON.from_dict(item, item_type) for item in value]
            else:
                kwargs[field_name] = JSON.from_dict(value, nested)

        return target_class(**kwargs)
