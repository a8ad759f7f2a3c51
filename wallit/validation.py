"""
Wallit Users — Field Presence Validation
=========================================

What:  Checks that an entity carries a value for each required field.
How:   `rules` maps field names to the label used in error messages; only
       fields that have a rule are checked, in the order given.

Example:
    >>> rules = {"firstname": "Firstname", "password": "Password"}
    >>> validate_fields({"firstname": "John"}, rules, ["firstname", "password"])
    Traceback (most recent call last):
        ...
    wallit.exceptions.BadRequestError: Password cannot be undefined
"""

from typing import Any, Mapping, Optional, Sequence

from wallit.exceptions import BadRequestError


def is_missing(value: Any) -> bool:
    """A value is missing iff it is None or an empty string. 0 and False count as present."""
    return value is None or value == ""


def validate_fields(
    entity: Optional[Mapping[str, Any]],
    rules: Optional[Mapping[str, str]],
    fields_to_validate: Optional[Sequence[str]],
) -> None:
    """
    Raise BadRequestError on the first required field that is missing.

    Raises:
        BadRequestError: entity, rules or fields_to_validate is None/empty,
            or a ruled field is absent, None or "".
    """
    if not entity:
        raise BadRequestError("Entity to validate cannot be undefined or empty")
    if not rules:
        raise BadRequestError("Rules cannot be undefined or empty")
    if not fields_to_validate:
        raise BadRequestError("Fields to validate cannot be undefined or empty")

    for field in fields_to_validate:
        label = rules.get(field)
        if label and is_missing(entity.get(field)):
            raise BadRequestError(f"{label} cannot be undefined", field=field)
