# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for typed claim accessors, diagnostics and secret generation."""

import pytest

from gopad_authn import secret
from gopad_authn.claims import (
    Diagnostic,
    Diagnostics,
    expect_numeric_id,
    expect_string,
    expect_string_list,
    json_type,
)


class TestJsonType:
    """Tests for JSON type names used in diagnostics."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "null"),
            (True, "boolean"),
            (3, "number"),
            (3.5, "number"),
            ("x", "string"),
            (["x"], "array"),
            ({"x": 1}, "object"),
        ],
    )
    def test_json_type(self, value, expected):
        """Test the type name of every JSON value kind."""
        assert json_type(value) == expected


class TestExpectString:
    """Tests for expect_string."""

    def test_present_string(self):
        """Test that a string claim is returned without diagnostics."""
        diagnostics = Diagnostics()

        assert expect_string({"name": "Jane"}, "name", "name", diagnostics) == "Jane"
        assert not diagnostics

    def test_missing_claim(self):
        """Test that an absent claim records a missing diagnostic."""
        diagnostics = Diagnostics()

        assert expect_string({}, "preferred_username", "login", diagnostics) is None
        assert diagnostics.entries == [
            Diagnostic(attr="login", mapping="preferred_username", reason="missing")
        ]
        assert diagnostics.entries[0].message == "Failed to fetch attr"

    def test_type_mismatch(self):
        """Test that a non-string claim records its JSON type."""
        diagnostics = Diagnostics()

        assert expect_string({"email": 42}, "email", "email", diagnostics) is None

        entry = diagnostics.entries[0]
        assert entry.reason == "type-mismatch"
        assert entry.type == "number"
        assert entry.message == "Failed to convert attr"
        assert entry.to_dict() == {
            "attr": "email",
            "mapping": "email",
            "reason": "type-mismatch",
            "type": "number",
        }

    def test_optional_claim_accepts_null_and_absence(self):
        """Test that optional claims stay silent when null or absent."""
        diagnostics = Diagnostics()

        assert expect_string({"email": None}, "email", "email", diagnostics, optional=True) is None
        assert expect_string({}, "email", "email", diagnostics, optional=True) is None
        assert len(diagnostics) == 0

    def test_optional_claim_still_reports_wrong_type(self):
        """Test that optional claims still report non-null wrong types."""
        diagnostics = Diagnostics()

        expect_string({"email": ["a@x.com"]}, "email", "email", diagnostics, optional=True)

        assert diagnostics.for_attr("email")[0].type == "array"


class TestExpectStringList:
    """Tests for expect_string_list."""

    def test_list_of_strings(self):
        """Test that a list of strings is returned as a new list."""
        claims = {"groups": ["admin", "user"]}
        diagnostics = Diagnostics()

        roles = expect_string_list(claims, "groups", "roles", diagnostics)

        assert roles == ["admin", "user"]
        assert roles is not claims["groups"]
        assert not diagnostics

    def test_scalar_string_is_rejected(self):
        """Test that a scalar string is a type mismatch."""
        diagnostics = Diagnostics()

        assert expect_string_list({"groups": "admin"}, "groups", "roles", diagnostics) is None
        assert diagnostics.entries[0].type == "string"

    def test_mixed_list_is_rejected_entirely(self):
        """Test that one non-string element discards the whole list."""
        diagnostics = Diagnostics()

        assert expect_string_list({"groups": ["admin", 7]}, "groups", "roles", diagnostics) is None
        assert diagnostics.entries[0].reason == "type-mismatch"
        assert diagnostics.entries[0].type == "number"

    def test_missing_list(self):
        """Test that an absent list records a missing diagnostic."""
        diagnostics = Diagnostics()

        assert expect_string_list({}, "groups", "roles", diagnostics) is None
        assert diagnostics.entries[0].reason == "missing"


class TestExpectNumericId:
    """Tests for expect_numeric_id."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12345, "12345"),
            (12345.0, "12345"),
            (9007199254740991.0, "9007199254740991"),
        ],
    )
    def test_numbers_render_as_integers(self, value, expected):
        """Test that numeric ids never render with a fraction or exponent."""
        diagnostics = Diagnostics()

        assert expect_numeric_id({"id": value}, "id", "ident", diagnostics) == expected
        assert not diagnostics

    @pytest.mark.parametrize(
        "value,type_name",
        [
            ("12345", "string"),
            (True, "boolean"),
            (float("nan"), "number"),
            (float("inf"), "number"),
            (None, "null"),
        ],
    )
    def test_non_numbers_are_type_mismatches(self, value, type_name):
        """Test that strings, booleans and non-finite numbers are rejected."""
        diagnostics = Diagnostics()

        assert expect_numeric_id({"id": value}, "id", "ident", diagnostics) is None
        assert diagnostics.entries[0].type == type_name

    def test_missing_id(self):
        """Test that an absent id records a missing diagnostic."""
        diagnostics = Diagnostics()

        assert expect_numeric_id({}, "id", "ident", diagnostics) is None
        assert diagnostics.entries[0].reason == "missing"


class TestGenerate:
    """Tests for random verifier generation."""

    def test_length_and_alphabet(self):
        """Test that values have the requested length and alphabet."""
        value = secret.generate(32)

        assert len(value) == 32
        assert set(value) <= set(secret.LETTERS)

    def test_no_collisions(self):
        """Test that 10,000 draws of 32 characters never collide."""
        values = {secret.generate(32) for _ in range(10_000)}

        assert len(values) == 10_000
        assert set("".join(values)) <= set(secret.LETTERS)

    def test_alphabet_size(self):
        """Test that the alphabet holds the 62 alphanumeric characters."""
        assert len(secret.LETTERS) == 62
        assert len(set(secret.LETTERS)) == 62

    def test_zero_and_negative_length(self):
        """Test edge lengths."""
        assert secret.generate(0) == ""

        with pytest.raises(ValueError):
            secret.generate(-1)
