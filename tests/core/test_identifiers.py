"""Tests for seqgap.core.identifiers — value coercion and SQL name checks."""

from decimal import Decimal

import pytest

from seqgap.core.errors import InvalidIdentifierError, InvalidSqlIdentifierError
from seqgap.core.identifiers import coerce_identifier, coerce_identifiers, validate_sql_identifier


class TestCoerceIdentifiers:
    def test_ints_pass_through(self):
        assert coerce_identifiers([3, 1, 3]) == [3, 1, 3]

    def test_empty(self):
        assert coerce_identifiers([]) == []

    @pytest.mark.parametrize("bad", ["3", 2.0, 2.5, Decimal("4"), None, True, b"1", [1]])
    def test_rejects_non_integers(self, bad):
        with pytest.raises(InvalidIdentifierError):
            coerce_identifiers([1, bad])

    def test_error_names_position_and_value(self):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            coerce_identifiers([1, 2, "abc"])
        err = exc_info.value
        assert err.position == 2
        assert err.value == "abc"
        assert "'abc'" in err.message
        assert "position 2" in err.message
        assert err.code == "INVALID_IDENTIFIER"

    def test_index_protocol_accepted(self):
        class Ordinal:
            def __index__(self):
                return 9

        assert coerce_identifier(Ordinal()) == 9


class TestParseStrings:
    def test_accepts_integer_strings(self):
        assert coerce_identifiers(["1", " 2 ", "+3", "-4"], parse_strings=True) == [1, 2, 3, -4]

    @pytest.mark.parametrize("bad", ["", "1.0", "abc", "1e3", "0x10"])
    def test_rejects_other_strings(self, bad):
        with pytest.raises(InvalidIdentifierError, match="not a base-10 integer"):
            coerce_identifier(bad, parse_strings=True)

    def test_still_rejects_floats(self):
        with pytest.raises(InvalidIdentifierError):
            coerce_identifier(1.0, parse_strings=True)


class TestValidateSqlIdentifier:
    @pytest.mark.parametrize("name", ["employees", "_t", "T1", "emp_2024"])
    def test_valid(self, name):
        assert validate_sql_identifier(name) == name

    def test_schema_qualified_when_allowed(self):
        assert validate_sql_identifier("hr.employees", allow_schema=True) == "hr.employees"

    @pytest.mark.parametrize(
        "name",
        ["", "1abc", "emp loyees", "employees;", "a.b", "id--", '"id"', None, 3],
    )
    def test_invalid(self, name):
        with pytest.raises(InvalidSqlIdentifierError):
            validate_sql_identifier(name, kind="column")

    def test_too_many_parts(self):
        with pytest.raises(InvalidSqlIdentifierError, match="table"):
            validate_sql_identifier("a.b.c", kind="table", allow_schema=True)
