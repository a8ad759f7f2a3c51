"""
Wallit Users — Field Validator and Error Factory Tests
=======================================================

What we test:
    ✅ make_error defaults and code → class mapping
    ✅ validate_fields guards on entity, rules and field list
    ✅ Missing means absent, None or "" (0/False are present)
    ✅ First violation wins, in field-list order
"""

import pytest

from wallit.exceptions import (
    BadRequestError,
    ConflictError,
    DatabaseError,
    UnauthorizedError,
    WallitError,
    make_error,
)
from wallit.validation import validate_fields

RULES = {"firstname": "Firstname", "email": "Email", "count": "Count", "active": "Active"}


class TestMakeError:
    """Tests for the error factory."""

    def test_defaults(self):
        err = make_error()
        assert isinstance(err, WallitError)
        assert err.code == 500
        assert err.message == "Oops! something went wrong."

    def test_returns_without_raising(self):
        err = make_error(400, "nope")
        assert isinstance(err, Exception)

    @pytest.mark.parametrize(
        "code, error_class",
        [(400, BadRequestError), (401, UnauthorizedError), (409, ConflictError)],
    )
    def test_known_codes_map_to_subclasses(self, code, error_class):
        err = make_error(code, "message")
        assert isinstance(err, error_class)
        assert err.code == code
        assert err.message == "message"

    def test_unknown_code_keeps_code(self):
        err = make_error(418, "I'm a teapot")
        assert type(err) is WallitError
        assert err.code == 418

    def test_message_default_with_code(self):
        assert make_error(409).message == "Oops! something went wrong."

    def test_database_error_message_is_generic(self):
        err = DatabaseError(context={"error_type": "OperationalError"})
        assert err.code == 500
        assert "OperationalError" not in err.message

    def test_field_does_not_touch_caller_context(self):
        context = {"reason": "bad domain"}

        err = BadRequestError("Invalid email", field="email", context=context)

        assert context == {"reason": "bad domain"}
        assert err.context == {"reason": "bad domain", "field": "email"}


class TestValidateFields:
    """Tests for validate_fields."""

    @pytest.mark.parametrize("entity", [None, {}])
    def test_empty_entity_rejected(self, entity):
        with pytest.raises(BadRequestError, match="Entity to validate cannot be undefined or empty"):
            validate_fields(entity, RULES, ["firstname"])

    @pytest.mark.parametrize("rules", [None, {}])
    def test_empty_rules_rejected(self, rules):
        with pytest.raises(BadRequestError, match="Rules cannot be undefined or empty"):
            validate_fields({"firstname": "A"}, rules, ["firstname"])

    @pytest.mark.parametrize("fields", [None, []])
    def test_empty_field_list_rejected(self, fields):
        with pytest.raises(BadRequestError, match="Fields to validate cannot be undefined or empty"):
            validate_fields({"firstname": "A"}, RULES, fields)

    def test_all_present_passes(self):
        validate_fields({"firstname": "A", "email": "a@b.com"}, RULES, ["firstname", "email"])

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_values_rejected(self, value):
        with pytest.raises(BadRequestError) as exc_info:
            validate_fields({"firstname": "A", "email": value}, RULES, ["firstname", "email"])
        assert exc_info.value.message == "Email cannot be undefined"
        assert exc_info.value.code == 400
        assert exc_info.value.field == "email"

    def test_absent_field_rejected(self):
        with pytest.raises(BadRequestError, match="Email cannot be undefined"):
            validate_fields({"firstname": "A"}, RULES, ["email"])

    def test_zero_and_false_count_as_present(self):
        validate_fields({"count": 0, "active": False}, RULES, ["count", "active"])

    def test_field_without_rule_is_skipped(self):
        validate_fields({"firstname": "A"}, RULES, ["firstname", "nickname"])

    def test_first_violation_in_list_order(self):
        with pytest.raises(BadRequestError, match="Email cannot be undefined"):
            validate_fields({"count": 1}, RULES, ["email", "firstname"])
