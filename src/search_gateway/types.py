"""Common type aliases shared across the application.

These aliases model JSON-compatible payloads so the error handlers and the
provider clients can describe upstream bodies without falling back to
``Any``.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, TypeAlias, Union

JSONPrimitive: TypeAlias = Union[str, int, float, bool, None]
JSONValue: TypeAlias = Union[JSONPrimitive, Dict[str, object], List[object]]
JSONDict: TypeAlias = Dict[str, JSONValue]
# Raw provider entries are only ever read, never mutated.
RawItem: TypeAlias = Mapping[str, object]

__all__ = ["JSONPrimitive", "JSONValue", "JSONDict", "RawItem"]
