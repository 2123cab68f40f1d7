##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Conversion between form text and typed field values.

The [`TypeConverter`][conversion.type_converter.TypeConverter] is stateless and
safe to share. Parsing is locale independent: numbers use `.` as the decimal
separator and temporal values use the ISO 8601 calendar formats.
"""

import logging
import math
import re
import struct
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional

from metacrud.exceptions import ConversionError
from metacrud.metadata.types import INT32_RANGE, INT64_RANGE, Float32, Long, unwrap_optional


LOG = logging.getLogger(__name__)

INTEGER_REGEX = re.compile(r"^[+-]?[0-9]+$")
DECIMAL_REGEX = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
DATE_REGEX = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
DATETIME_REGEX = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}(?::[0-9]{2})?)(?:\.([0-9]{1,9}))?$")

TRUE_WORDS = ("true", "on")


class TypeConverter:
    """
    Converts text to typed values and typed values back to text.

    Supported target types are `str`, `int` (32-bit), `Long` (64-bit), `float`,
    `Float32`, `bool`, `Decimal`, `date`, `datetime`, `UUID`, and any `Enum`
    subclass. `Optional[...]` targets are unwrapped first.

    Methods:
        convert: Convert text to a value of the target type.
        can_convert: Check whether a target type is supported.
        to_text: Render a value as text that `convert` accepts back.
    """

    def __init__(self):
        self._parsers: Dict[Any, Callable[[str, Any], Any]] = {
            str: lambda text, _: text,
            int: self._parse_int32,
            Long: self._parse_int64,
            float: self._parse_double,
            Float32: self._parse_float32,
            bool: self._parse_bool,
            Decimal: self._parse_decimal,
            date: self._parse_date,
            datetime: self._parse_datetime,
            uuid.UUID: self._parse_uuid,
        }

    def can_convert(self, target_type: Any) -> bool:
        """
        Check whether text can be converted to a target type.

        Args:
            target_type: The declared type of a field.

        Returns:
            True if `convert` supports the type.
        """
        target = unwrap_optional(target_type)
        if target in self._parsers:
            return True
        return isinstance(target, type) and issubclass(target, Enum)

    def convert(self, text: Optional[str], target_type: Any) -> Any:
        """
        Convert form text to a value of the target type.

        Missing, empty, and whitespace-only text converts to None for every type.
        Otherwise the text is stripped before parsing.

        Args:
            text: The raw text.
            target_type: The declared type of the field being set.

        Returns:
            The converted value, or None for blank text.

        Raises:
            ConversionError: If the text can't be parsed or the type is not supported.
        """
        if text is None:
            return None
        stripped = str(text).strip()
        if not stripped:
            return None

        target = unwrap_optional(target_type)
        parser = self._parsers.get(target)
        if parser is not None:
            return parser(stripped, target)
        if isinstance(target, type) and issubclass(target, Enum):
            return self._parse_enum(stripped, target)

        raise ConversionError(stripped, target, "unsupported target type")

    def to_text(self, value: Any) -> str:
        """
        Render a value as text.

        The output of this method converts back to the same value through `convert`.

        Args:
            value: The value to render.

        Returns:
            The text form of `value`, an empty string for None.
        """
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)

    @staticmethod
    def _parse_integer(text: str, target: Any, bounds) -> int:
        if not INTEGER_REGEX.match(text):
            raise ConversionError(text, target, "not an integer")
        value = int(text)
        low, high = bounds
        if not low <= value <= high:
            raise ConversionError(text, target, f"out of range [{low}, {high}]")
        return value

    def _parse_int32(self, text: str, target: Any) -> int:
        return self._parse_integer(text, target, INT32_RANGE)

    def _parse_int64(self, text: str, target: Any) -> int:
        return self._parse_integer(text, target, INT64_RANGE)

    @staticmethod
    def _parse_double(text: str, target: Any) -> float:
        if not DECIMAL_REGEX.match(text):
            raise ConversionError(text, target, "not a number")
        return float(text)

    def _parse_float32(self, text: str, target: Any) -> float:
        value = self._parse_double(text, target)
        try:
            result = struct.unpack("f", struct.pack("f", value))[0]
        except (OverflowError, struct.error) as exc:
            raise ConversionError(text, target, "out of range for a single-precision float") from exc
        # Newer interpreters round finite overflows to infinity instead of raising
        if math.isinf(result) and not math.isinf(value):
            raise ConversionError(text, target, "out of range for a single-precision float")
        return result

    @staticmethod
    def _parse_bool(text: str, _target: Any) -> bool:
        # Anything that isn't a recognized true word is False, never an error
        return text.lower() in TRUE_WORDS or text == "1"

    @staticmethod
    def _parse_decimal(text: str, target: Any) -> Decimal:
        if not DECIMAL_REGEX.match(text):
            raise ConversionError(text, target, "not a number")
        try:
            return Decimal(text)
        except InvalidOperation as exc:
            raise ConversionError(text, target, "not a number") from exc

    @staticmethod
    def _parse_date(text: str, target: Any) -> date:
        if DATETIME_REGEX.match(text):
            raise ConversionError(text, target, "date-time values can't be converted to a date")
        if not DATE_REGEX.match(text):
            raise ConversionError(text, target, "expected an ISO date (YYYY-MM-DD)")
        try:
            return date.fromisoformat(text)
        except ValueError as exc:
            raise ConversionError(text, target, str(exc)) from exc

    @staticmethod
    def _parse_datetime(text: str, target: Any) -> datetime:
        try:
            if DATE_REGEX.match(text):
                return datetime.combine(date.fromisoformat(text), datetime.min.time())

            match = DATETIME_REGEX.match(text)
            if not match:
                raise ConversionError(text, target, "expected an ISO date-time (YYYY-MM-DDTHH:MM[:SS[.fff]])")

            base, fraction = match.groups()
            if fraction:
                # Microseconds are the finest resolution a datetime can hold
                base = f"{base}.{fraction[:6].ljust(6, '0')}"
            return datetime.fromisoformat(base)
        except ValueError as exc:
            if isinstance(exc, ConversionError):
                raise
            raise ConversionError(text, target, str(exc)) from exc

    @staticmethod
    def _parse_uuid(text: str, target: Any) -> uuid.UUID:
        try:
            return uuid.UUID(text)
        except ValueError as exc:
            raise ConversionError(text, target, "not a UUID") from exc

    @staticmethod
    def _parse_enum(text: str, target: Any) -> Enum:
        try:
            return target[text]
        except KeyError as exc:
            valid = ", ".join(member.name for member in target)
            raise ConversionError(text, target, f"no constant named '{text}' (valid names: {valid})") from exc
