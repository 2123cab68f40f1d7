##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Provides a mixin that lets repositories storing to-one associations as plain
identifiers turn them back into records.

This module defines the `RelationSupportMixin`, used by the SQLite and Redis
repositories. It assumes the repository keeps its field descriptors in
`self.descriptors`.
"""

import logging
from typing import Any, Dict

from metacrud.backends.repository import Repository
from metacrud.backends.utils import UnloadedReference, coerce_identifier
from metacrud.metadata.field_metadata import FieldDescriptor


LOG = logging.getLogger(__name__)


class RelationSupportMixin:
    """
    Mixin for repositories that resolve stored foreign identifiers.

    Eager to-one associations are loaded from the repository linked under the
    target model's name. Lazy associations, and associations whose target
    repository isn't linked, become [`UnloadedReference`][backends.utils.UnloadedReference]
    placeholders that the CRUD controller loads on demand.

    Attributes:
        related (Dict[str, Repository]): Repositories of associated models, keyed by model name.

    Methods:
        link: Make the repository of an associated model available.
    """

    related: Dict[str, Repository]

    def link(self, model_name: str, repository: Repository):
        """
        Make the repository of an associated model available for loading eager associations.

        Args:
            model_name: The name of the associated model.
            repository: That model's repository.
        """
        self.related[model_name] = repository

    def _resolve_reference(self, descriptor: FieldDescriptor, raw_id: Any) -> Any:
        """
        Turn the stored identifier of a to-one association into a record or placeholder.

        Args:
            descriptor: The association field's descriptor.
            raw_id: The stored identifier of the associated record.

        Returns:
            The associated record, an `UnloadedReference`, or None if nothing is stored.
        """
        if raw_id is None:
            return None

        model_name = descriptor.relationship.target_model
        repository = self.related.get(model_name)
        if repository is None:
            return UnloadedReference(model_name, raw_id)

        identifier = coerce_identifier(raw_id, repository.id_type)
        if descriptor.relationship.is_lazy:
            return UnloadedReference(model_name, identifier)

        record = repository.find_by_id(identifier)
        if record is None:
            LOG.warning(f"{model_name} with id '{identifier}' referenced by field '{descriptor.name}' no longer exists.")
        return record
