##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `types.py` module.
"""
from typing import Annotated, Any, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Union

import pytest

from metacrud.metadata.types import Long, collection_element_type, type_name, unwrap_optional


@pytest.mark.parametrize(
    "annotation, expected",
    [
        (Optional[int], int),
        (int, int),
        (Optional[Long], Long),
        (Annotated[Optional[str], "extra"], str),
        (Union[int, str], Union[int, str]),
        (Optional[Union[int, str]], Union[int, str, None]),
        (str | None, str),
    ],
)
def test_unwrap_optional(annotation: Any, expected: Any):
    """
    Test that `Optional` and `Annotated` wrappers are stripped.

    Args:
        annotation: The annotation to unwrap.
        expected: The expected result.
    """
    assert unwrap_optional(annotation) == expected


@pytest.mark.parametrize(
    "annotation, expected",
    [
        (List[int], int),
        (Optional[List[str]], str),
        (Set[str], str),
        (FrozenSet[int], int),
        (Tuple[int, ...], int),
        (Sequence[float], float),
        (list[str], str),
        (List, None),
        (Dict[str, int], None),
        (int, None),
    ],
)
def test_collection_element_type(annotation: Any, expected: Any):
    """
    Test that the element type of a parameterized collection is found.

    Args:
        annotation: The collection annotation.
        expected: The expected element type.
    """
    assert collection_element_type(annotation) == expected


def test_type_name():
    """
    Test the simple name of classes, NewTypes, strings, and forward references.
    """
    assert type_name(int) == "int"
    assert type_name(Long) == "Long"
    assert type_name("models.Department") == "Department"
    assert type_name("'Department'") == "Department"
    assert type_name(List["Department"].__args__[0]) == "Department"
