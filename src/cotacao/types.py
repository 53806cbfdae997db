"""Shared types for the database layer."""

from typing import Any

Row = dict[str, Any]
Params = tuple | list | dict
