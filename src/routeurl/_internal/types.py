"""Shared type aliases used across routeurl modules."""

from collections.abc import Mapping
from typing import TypeAlias

# A single query value; None means "absent"
QueryValue: TypeAlias = str | int | float | bool | None

# Query mapping accepted by the codec and as an overlay
Query: TypeAlias = Mapping[str, QueryValue]

# Parsed query, every value already a string
StringQueryDict: TypeAlias = dict[str, str]
