##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Type aliases and typing helpers used when declaring and inspecting record types.

Python has a single integer and a single float type, so the wider/narrower
numeric kinds a record may declare are expressed as `NewType` aliases:

- `int` is a 32-bit integer, `Long` a 64-bit integer.
- `float` is a double, `Float32` a single-precision float.
"""

from types import UnionType
from typing import Annotated, Any, NewType, Optional, Tuple, Union, get_args, get_origin


# `X | None` annotations have their own origin type
_UNION_TYPES = (Union, UnionType)


Long = NewType("Long", int)
Float32 = NewType("Float32", float)

INT32_RANGE: Tuple[int, int] = (-(2**31), 2**31 - 1)
INT64_RANGE: Tuple[int, int] = (-(2**63), 2**63 - 1)


def unwrap_optional(annotation: Any) -> Any:
    """
    Strip `Optional[...]` and `Annotated[...]` wrappers from an annotation.

    `Optional[X]` becomes `X`; unions of more than one non-None type are
    returned unchanged.

    Args:
        annotation: A type annotation.

    Returns:
        The underlying type.
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        return unwrap_optional(get_args(annotation)[0])
    if origin in _UNION_TYPES:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return unwrap_optional(members[0])
    return annotation


def collection_element_type(annotation: Any) -> Optional[Any]:
    """
    Get the element type of a parameterized collection annotation such as `List[X]`.

    Args:
        annotation: A type annotation.

    Returns:
        The element type, or None if the annotation is not a parameterized collection.
    """
    annotation = unwrap_optional(annotation)
    origin = get_origin(annotation)
    if origin in (list, set, frozenset, tuple) or (isinstance(origin, type) and origin.__module__ == "collections.abc"):
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        if args:
            return args[0]
    return None


def type_name(annotation: Any) -> str:
    """
    Get a readable simple name for a type or annotation.

    Args:
        annotation: A class, a NewType, a forward reference string, or another annotation.

    Returns:
        The simple name of the type.
    """
    if isinstance(annotation, str):
        return annotation.strip("'\"").split(".")[-1]
    forward_arg = getattr(annotation, "__forward_arg__", None)
    if forward_arg:
        return type_name(forward_arg)
    return getattr(annotation, "__name__", None) or str(annotation)
