"""User Field Enforcement — presence, parsing and range checks for registration input.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - name is stripped; empty or whitespace-only is rejected
    - age must be ASCII decimal digits (optional sign) within [age_min, age_max]
    - First failing field wins (name, then age)
"""

import re

from app.core.domain_types import UserFields
from app.core.errors import ValidationError

DEFAULT_AGE_MIN = 1
DEFAULT_AGE_MAX = 120
DEFAULT_NAME_MAX_LENGTH = 100

# int() alone would also take "３０" and "3_0"
_AGE_TEXT = re.compile(r"[+-]?[0-9]+")


def check_name(raw: str | None, max_length: int = DEFAULT_NAME_MAX_LENGTH) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError("Name is required", "name")
    if len(name) > max_length:
        raise ValidationError(
            f"Name must be at most {max_length} characters", "name",
        )
    return name


def parse_age(
    raw: str | int | None,
    age_min: int = DEFAULT_AGE_MIN,
    age_max: int = DEFAULT_AGE_MAX,
) -> int:
    """Parse age from form text (or int) and enforce the accepted range."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Age is required", "age")
    if isinstance(raw, int):
        age = raw
    else:
        text = raw.strip()
        if not text:
            raise ValidationError("Age is required", "age")
        try:
            if not _AGE_TEXT.fullmatch(text):
                raise ValueError(text)
            age = int(text)
        except ValueError:
            raise ValidationError(
                f"Age must be a whole number, got '{text}'", "age",
            ) from None
    if not age_min <= age <= age_max:
        raise ValidationError(
            f"Age must be between {age_min} and {age_max}", "age",
        )
    return age


def validate_user_fields(
    name: str | None,
    age: str | int | None,
    age_min: int = DEFAULT_AGE_MIN,
    age_max: int = DEFAULT_AGE_MAX,
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
) -> UserFields:
    return UserFields(
        name=check_name(name, name_max_length),
        age=parse_age(age, age_min, age_max),
    )
