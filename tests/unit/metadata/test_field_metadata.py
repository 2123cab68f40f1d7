##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `field_metadata.py` module.
"""
import pytest

from metacrud.metadata import NotNull, Size
from metacrud.metadata.field_metadata import (
    FieldDescriptor,
    FieldKind,
    RelationshipDescriptor,
    RelationshipType,
)


def _relationship(rel_type: RelationshipType, mapped_by: str = None) -> RelationshipDescriptor:
    return RelationshipDescriptor(relationship_type=rel_type, target_type=None, target_model="Other", mapped_by=mapped_by)


class TestFieldKind:
    """Tests for the `FieldKind` and `RelationshipType` enums."""

    def test_relationship_kinds(self):
        """
        Test that only the four association kinds are relationship kinds.
        """
        relationship_kinds = {kind for kind in FieldKind if kind.is_relationship}
        assert relationship_kinds == {
            FieldKind.MANY_TO_ONE,
            FieldKind.ONE_TO_ONE,
            FieldKind.ONE_TO_MANY,
            FieldKind.MANY_TO_MANY,
        }

    @pytest.mark.parametrize("rel_type", list(RelationshipType))
    def test_relationship_type_field_kind(self, rel_type: RelationshipType):
        """
        Test that each relationship type maps to the field kind of the same name.

        Args:
            rel_type: The relationship type.
        """
        assert rel_type.field_kind.name == rel_type.name

    def test_to_many(self):
        """
        Test which relationship types hold collections.
        """
        assert RelationshipType.ONE_TO_MANY.is_to_many
        assert RelationshipType.MANY_TO_MANY.is_to_many
        assert not RelationshipType.MANY_TO_ONE.is_to_many
        assert not RelationshipType.ONE_TO_ONE.is_to_many


class TestRelationshipDescriptor:
    """Tests for the `RelationshipDescriptor` class."""

    def test_to_one_owning_side(self):
        """
        Test the properties of the owning side of a many-to-one association.
        """
        rel = _relationship(RelationshipType.MANY_TO_ONE)
        assert rel.is_to_one
        assert not rel.is_to_many
        assert rel.is_owning_side

    def test_inverse_side(self):
        """
        Test that a `mapped_by` value marks the non-owning side.
        """
        rel = _relationship(RelationshipType.ONE_TO_MANY, mapped_by="department")
        assert rel.is_to_many
        assert not rel.is_owning_side


class TestFieldDescriptor:
    """Tests for the `FieldDescriptor` class."""

    def test_display_label(self):
        """
        Test that the display label is the explicit label or the humanized name.
        """
        assert FieldDescriptor("first_name", str, FieldKind.STRING).display_label == "First Name"
        assert FieldDescriptor("sku", str, FieldKind.STRING, label="SKU").display_label == "SKU"

    def test_relationship_consistency(self):
        """
        Test that relationship kinds require a relationship descriptor and other kinds forbid one.
        """
        with pytest.raises(ValueError, match="inconsistent relationship descriptor"):
            FieldDescriptor("department", object, FieldKind.MANY_TO_ONE)
        with pytest.raises(ValueError, match="inconsistent relationship descriptor"):
            FieldDescriptor("name", str, FieldKind.STRING, relationship=_relationship(RelationshipType.MANY_TO_ONE))

    def test_association_properties(self):
        """
        Test the association helpers of a to-one field.
        """
        desc = FieldDescriptor(
            "department", object, FieldKind.MANY_TO_ONE, relationship=_relationship(RelationshipType.MANY_TO_ONE)
        )
        assert desc.is_relationship
        assert desc.is_to_one
        assert not desc.is_to_many

    @pytest.mark.parametrize(
        "flags, visible, editable",
        [
            ({}, True, True),
            ({"is_identifier": True}, True, False),
            ({"is_transient": True}, False, False),
            ({"is_hidden": True}, False, False),
            ({"is_read_only": True}, True, False),
        ],
    )
    def test_visibility_and_editability(self, flags: dict, visible: bool, editable: bool):
        """
        Test which flags hide a field and which stop it from being edited.

        Args:
            flags: Keyword arguments for the descriptor.
            visible: The expected `is_visible` value.
            editable: The expected `is_editable` value.
        """
        desc = FieldDescriptor("field", str, FieldKind.STRING, **flags)
        assert desc.is_visible is visible
        assert desc.is_editable is editable

    def test_constraints_are_read_only(self):
        """
        Test that constraints can be looked up by name but not modified.
        """
        constraints = {"NotNull": NotNull(), "Size": Size(max=5)}
        desc = FieldDescriptor("name", str, FieldKind.STRING, constraints=constraints)

        assert desc.has_constraint("NotNull")
        assert desc.get_constraint("Size") == Size(max=5)
        assert desc.get_constraint("Email") is None
        with pytest.raises(TypeError):
            desc.constraints["Email"] = None

        # Changing the source dictionary doesn't change the descriptor
        constraints.clear()
        assert desc.has_constraint("NotNull")
