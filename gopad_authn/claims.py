# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Typed accessors over untyped claim maps.

Identity providers deliver claims as schema-less JSON. The accessors in
this module look up one attribute, check its JSON type and either return a
typed value or record a Diagnostic and return None. They never raise, so a
drifting provider schema degrades to empty fields instead of failed logins.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional

REASON_MISSING = "missing"
REASON_TYPE_MISMATCH = "type-mismatch"


def json_type(value: Any) -> str:
    """Return the JSON type name of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


@dataclass(frozen=True)
class Diagnostic:
    """A single claim that could not be mapped onto the user.

    Attributes:
        attr: User field that stayed empty (ident, login, name, email, roles)
        mapping: Claim name that was looked up
        reason: "missing" or "type-mismatch"
        type: JSON type of the offending value, for type mismatches
    """
    attr: str
    mapping: str
    reason: str
    type: Optional[str] = None

    @property
    def message(self) -> str:
        if self.reason == REASON_MISSING:
            return "Failed to fetch attr"
        return "Failed to convert attr"

    def to_dict(self) -> dict:
        data = {"attr": self.attr, "mapping": self.mapping, "reason": self.reason}
        if self.type is not None:
            data["type"] = self.type
        return data


class Diagnostics:
    """Collector for diagnostics emitted while normalizing one set of claims."""

    def __init__(self) -> None:
        self._entries: List[Diagnostic] = []

    def missing(self, attr: str, mapping: str) -> None:
        self._entries.append(Diagnostic(attr=attr, mapping=mapping, reason=REASON_MISSING))

    def type_mismatch(self, attr: str, mapping: str, value: Any) -> None:
        self._entries.append(
            Diagnostic(attr=attr, mapping=mapping, reason=REASON_TYPE_MISMATCH, type=json_type(value))
        )

    @property
    def entries(self) -> List[Diagnostic]:
        return list(self._entries)

    def for_attr(self, attr: str) -> List[Diagnostic]:
        return [entry for entry in self._entries if entry.attr == attr]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


def expect_string(
    attrs: Mapping[str, Any],
    key: str,
    attr: str,
    diagnostics: Diagnostics,
    optional: bool = False,
) -> Optional[str]:
    """Look up a string claim.

    Args:
        attrs: Decoded claims
        key: Claim name to look up
        attr: User field the claim feeds, for diagnostics
        diagnostics: Collector receiving missing/type-mismatch entries
        optional: Treat an absent or null claim as silently empty

    Returns:
        The string value, or None if absent or not a string
    """
    if key not in attrs:
        if not optional:
            diagnostics.missing(attr, key)
        return None

    value = attrs[key]

    if value is None and optional:
        return None

    if not isinstance(value, str):
        diagnostics.type_mismatch(attr, key, value)
        return None

    return value


def expect_string_list(
    attrs: Mapping[str, Any],
    key: str,
    attr: str,
    diagnostics: Diagnostics,
) -> Optional[List[str]]:
    """Look up a claim holding an array of strings.

    A single non-string element discards the whole list; partial lists are
    never returned.

    Returns:
        A new list of strings, or None if absent or mistyped
    """
    if key not in attrs:
        diagnostics.missing(attr, key)
        return None

    value = attrs[key]

    if not isinstance(value, (list, tuple)):
        diagnostics.type_mismatch(attr, key, value)
        return None

    for element in value:
        if not isinstance(element, str):
            diagnostics.type_mismatch(attr, key, element)
            return None

    return list(value)


def expect_numeric_id(
    attrs: Mapping[str, Any],
    key: str,
    attr: str,
    diagnostics: Diagnostics,
) -> Optional[str]:
    """Look up a numeric identifier and render it as an integer string.

    JSON has no integer type, so ids may decode as floats such as 12345.0.
    The value is cast through int before formatting so it never renders
    with a fractional part or exponent.

    Returns:
        The identifier as a decimal string, or None if absent or mistyped
    """
    if key not in attrs:
        diagnostics.missing(attr, key)
        return None

    value = attrs[key]

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        diagnostics.type_mismatch(attr, key, value)
        return None

    if isinstance(value, float) and not math.isfinite(value):
        diagnostics.type_mismatch(attr, key, value)
        return None

    return str(int(value))
