##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Validation constraint descriptors that can be attached to record fields.

The set of constraints is closed: introspection only recognizes the classes
listed in `CONSTRAINT_TYPES`. Each constraint carries its own parameters and an
optional custom message, and can check a single value via `validate`. A null
value satisfies every constraint other than `NotNull`, `NotBlank`, and `NotEmpty`.

Constraints are attached to a field through the `constraints` argument of the
field helpers in [`markers`][metadata.markers]:

```python
@dataclass
class Employee:
    first_name: str = column(None, constraints=[NotBlank(), Size(min=2, max=50)])
```
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from numbers import Number
from typing import Any, ClassVar, Dict, Iterable, List, Optional


__all__ = (
    "Constraint",
    "NotNull",
    "NotBlank",
    "NotEmpty",
    "Size",
    "Min",
    "Max",
    "Email",
    "Pattern",
    "Past",
    "Future",
    "PastOrPresent",
    "FutureOrPresent",
    "Positive",
    "PositiveOrZero",
    "Negative",
    "NegativeOrZero",
    "CONSTRAINT_TYPES",
    "validate_record",
)

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Constraint:
    """
    Base class for all constraint descriptors.

    Subclasses are frozen dataclasses that declare their parameters followed by
    a `message` field holding an optional custom violation message.
    """

    default_message: ClassVar[str] = "is invalid"
    message: Optional[str] = None

    @property
    def name(self) -> str:
        """The name this constraint is keyed by on a field descriptor."""
        return type(self).__name__

    def violation(self) -> str:
        """The message to report when this constraint is violated."""
        return self.message or self.default_message.format(**self.__dict__)

    def is_valid(self, value: Any) -> bool:
        """Check whether a non-null value satisfies this constraint."""
        return True

    def validate(self, value: Any) -> Optional[str]:
        """
        Check a value against this constraint.

        Args:
            value: The field value to check.

        Returns:
            A violation message, or None if the value is valid.
        """
        if value is None or self.is_valid(value):
            return None
        return self.violation()


@dataclass(frozen=True)
class NotNull(Constraint):
    """The value must not be null."""

    default_message: ClassVar[str] = "must not be null"
    message: Optional[str] = None

    def validate(self, value: Any) -> Optional[str]:
        return self.violation() if value is None else None


@dataclass(frozen=True)
class NotBlank(Constraint):
    """The value must not be null and must contain at least one non-whitespace character."""

    default_message: ClassVar[str] = "must not be blank"
    message: Optional[str] = None

    def validate(self, value: Any) -> Optional[str]:
        if value is None or not str(value).strip():
            return self.violation()
        return None


@dataclass(frozen=True)
class NotEmpty(Constraint):
    """The value must not be null or empty."""

    default_message: ClassVar[str] = "must not be empty"
    message: Optional[str] = None

    def validate(self, value: Any) -> Optional[str]:
        if value is None or len(value) == 0:
            return self.violation()
        return None


@dataclass(frozen=True)
class Size(Constraint):
    """The length of the value must lie between `min` and `max` (inclusive)."""

    default_message: ClassVar[str] = "size must be between {min} and {max}"

    min: int = 0
    max: int = 2**31 - 1
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return self.min <= len(value) <= self.max


@dataclass(frozen=True)
class Min(Constraint):
    """The value must be a number greater than or equal to `value`."""

    default_message: ClassVar[str] = "must be greater than or equal to {value}"

    value: int = 0
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value >= self.value


@dataclass(frozen=True)
class Max(Constraint):
    """The value must be a number lower than or equal to `value`."""

    default_message: ClassVar[str] = "must be less than or equal to {value}"

    value: int = 0
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value <= self.value


@dataclass(frozen=True)
class Email(Constraint):
    """The value must be a well-formed email address. Empty strings are accepted."""

    default_message: ClassVar[str] = "must be a well-formed email address"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value == "" or bool(EMAIL_REGEX.match(str(value)))


@dataclass(frozen=True)
class Pattern(Constraint):
    """The whole value must match the regular expression `regexp`."""

    default_message: ClassVar[str] = 'must match "{regexp}"'

    regexp: str = ".*"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return re.fullmatch(self.regexp, str(value)) is not None


def _now_like(value: Any) -> Any:
    """
    Get the current instant in the same shape as `value`.

    Returns:
        An aware or naive datetime for datetime values, today's date for date values.
    """
    if isinstance(value, datetime):
        return datetime.now(value.tzinfo)
    return date.today()


@dataclass(frozen=True)
class Past(Constraint):
    """The value must be a date or datetime in the past."""

    default_message: ClassVar[str] = "must be a past date"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value < _now_like(value)


@dataclass(frozen=True)
class Future(Constraint):
    """The value must be a date or datetime in the future."""

    default_message: ClassVar[str] = "must be a future date"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value > _now_like(value)


@dataclass(frozen=True)
class PastOrPresent(Constraint):
    """The value must be a date or datetime in the past or present."""

    default_message: ClassVar[str] = "must be a date in the past or in the present"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value <= _now_like(value)


@dataclass(frozen=True)
class FutureOrPresent(Constraint):
    """The value must be a date or datetime in the present or future."""

    default_message: ClassVar[str] = "must be a date in the present or in the future"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return value >= _now_like(value)


def _sign(value: Any) -> int:
    if not isinstance(value, (Number, Decimal)):
        raise TypeError(f"Sign constraints only apply to numbers, got {type(value).__name__}")
    return (value > 0) - (value < 0)


@dataclass(frozen=True)
class Positive(Constraint):
    """The value must be strictly positive."""

    default_message: ClassVar[str] = "must be greater than 0"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return _sign(value) > 0


@dataclass(frozen=True)
class PositiveOrZero(Constraint):
    """The value must be positive or zero."""

    default_message: ClassVar[str] = "must be greater than or equal to 0"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return _sign(value) >= 0


@dataclass(frozen=True)
class Negative(Constraint):
    """The value must be strictly negative."""

    default_message: ClassVar[str] = "must be less than 0"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return _sign(value) < 0


@dataclass(frozen=True)
class NegativeOrZero(Constraint):
    """The value must be negative or zero."""

    default_message: ClassVar[str] = "must be less than or equal to 0"
    message: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        return _sign(value) <= 0


# The closed set of constraint kinds recognized during introspection
CONSTRAINT_TYPES = (
    NotNull,
    NotBlank,
    NotEmpty,
    Size,
    Min,
    Max,
    Email,
    Pattern,
    Past,
    Future,
    PastOrPresent,
    FutureOrPresent,
    Positive,
    PositiveOrZero,
    Negative,
    NegativeOrZero,
)


def validate_record(record: Any, descriptors: Iterable) -> Dict[str, List[str]]:
    """
    Check every constrained field of a record.

    Args:
        record: The record instance to check.
        descriptors: The [`FieldDescriptor`][metadata.field_metadata.FieldDescriptor]
            objects of the record's type.

    Returns:
        A dictionary mapping field names to their violation messages. Fields
            without violations are omitted, so an empty dictionary means the record is valid.
    """
    violations: Dict[str, List[str]] = {}
    for descriptor in descriptors:
        if not descriptor.constraints:
            continue
        value = getattr(record, descriptor.name, None)
        messages = [msg for msg in (c.validate(value) for c in descriptor.constraints.values()) if msg]
        if messages:
            violations[descriptor.name] = messages
    return violations
