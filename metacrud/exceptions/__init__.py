##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Module of all Metacrud-specific exception types.

Every exception carries an [`ErrorKind`][common.enums.ErrorKind] so that a
presentation layer can decide how to render it without inspecting the type.
"""

from typing import Any, Dict, List

from metacrud.common.enums import ErrorKind


__all__ = (
    "MetacrudError",
    "ModelNotFoundError",
    "RecordNotFoundError",
    "FieldNotFoundError",
    "ConversionError",
    "BindingError",
    "UnsupportedIdentifierTypeError",
    "ValidationError",
    "InternalError",
    "DuplicateModelError",
    "RepositoryNotSupportedError",
)


class MetacrudError(Exception):
    """
    Base class for all Metacrud errors.

    Attributes:
        kind (ErrorKind): How this error should be surfaced to a caller.
    """

    kind: ErrorKind = ErrorKind.INTERNAL


class ModelNotFoundError(MetacrudError):
    """
    Exception to signal that a model name is not in the registry.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"Model '{model_name}' is not registered.")


class RecordNotFoundError(MetacrudError):
    """
    Exception to signal that a record with a given identifier does not exist.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, model_name: str, identifier: Any):
        self.model_name = model_name
        self.identifier = identifier
        super().__init__(f"{model_name} with id '{identifier}' does not exist.")


class FieldNotFoundError(MetacrudError):
    """
    Exception to signal that a field name can't be used on a model.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, model_name: str, field_name: str, reason: str = None):
        self.model_name = model_name
        self.field_name = field_name
        msg = f"Field '{field_name}' does not exist on model '{model_name}'."
        if reason:
            msg = f"Field '{field_name}' on model '{model_name}' {reason}."
        super().__init__(msg)


class ConversionError(MetacrudError, ValueError):
    """
    Exception to signal that text could not be converted to a target type.

    Attributes:
        value (str): The offending text.
        target_type (Any): The type the text was being converted to.
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, value: str, target_type: Any, detail: str = None):
        self.value = value
        self.target_type = target_type
        type_name = getattr(target_type, "__name__", str(target_type))
        msg = f"Cannot convert value '{value}' to type {type_name}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class BindingError(MetacrudError):
    """
    Exception to signal that a single field could not be bound from form input.
    The lower-level cause is chained as `__cause__`.
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, field_name: str, detail: str = None):
        self.field_name = field_name
        msg = f"Failed to bind field '{field_name}'"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class UnsupportedIdentifierTypeError(MetacrudError):
    """
    Exception to signal that a model's identifier type can't be converted from text.
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, id_type: Any):
        self.id_type = id_type
        super().__init__(f"Unsupported ID type: {getattr(id_type, '__name__', id_type)}")


class ValidationError(MetacrudError):
    """
    Exception to signal that a bound record violates one or more field constraints.

    Attributes:
        violations (Dict[str, List[str]]): Violation messages keyed by field name.
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, model_name: str, violations: Dict[str, List[str]]):
        self.model_name = model_name
        self.violations = violations
        details = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in violations.items())
        super().__init__(f"Validation failed for {model_name}: {details}")


class InternalError(MetacrudError):
    """
    Exception for unanticipated failures. Its message is never shown to end users.
    """

    kind = ErrorKind.INTERNAL


class DuplicateModelError(MetacrudError):
    """
    Exception to signal that a model name was registered twice under strict registration.
    """

    kind = ErrorKind.INTERNAL

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"A model named '{model_name}' is already registered.")


class RepositoryNotSupportedError(MetacrudError):
    """
    Exception to signal that the provided repository backend is not supported by Metacrud.
    """

    kind = ErrorKind.INTERNAL
