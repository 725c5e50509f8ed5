"""
Accessor based type inference.

Looks for a zero-parameter public accessor (e.g. getAddress, get_address) on the
field's declaring class and reports the accessor's declared return type. No
canonicalization happens here; the detector folds the raw result into its
token list.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.metadata.descriptors import FieldDescriptor, MethodDescriptor
from fieldtypes.metadata.provider import MetadataProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessorType:
    """Raw return type of an accessor; return_type is None when the accessor declares none."""

    method_name: str
    return_type: Optional[str]
    nullable: bool


class AccessorInference:
    """Finds the accessor method of a field."""

    def __init__(self, provider: MetadataProvider, config: Optional[ResolverConfig] = None):
        self._provider = provider
        self._config = config

    @property
    def config(self) -> ResolverConfig:
        return self._config or get_resolver_config()

    def find_accessor(self, field: FieldDescriptor) -> Optional[MethodDescriptor]:
        """
        Find the first accessor of a field in provider order.

        A method qualifies when it takes no parameters, its name contains the
        getter marker, and its name contains the field name case-insensitively.

        Args:
            field: The field to find an accessor for

        Returns:
            The accessor, or None if the class declares no matching method
        """
        class_descriptor = self._provider.get_class(field.declaring_class)
        marker = self.config.getter_marker
        field_name = field.name.lower()

        for method in class_descriptor.methods:
            if (method.parameter_count == 0
                    and marker in method.name
                    and field_name in method.name.lower()):
                return method
        return None

    def infer(self, field: FieldDescriptor) -> Optional[AccessorType]:
        """
        Infer a field's type from its accessor.

        Returns:
            AccessorType if an accessor exists (its return_type may be None), else None
        """
        method = self.find_accessor(field)
        if method is None:
            return None

        logger.debug(f"Accessor {field.declaring_class}::{method.name}() matches field '{field.name}'")
        return AccessorType(
            method_name=method.name,
            return_type=method.return_type,
            nullable=method.return_type_nullable,
        )
