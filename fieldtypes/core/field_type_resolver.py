"""
Field type resolution facade.

Combines detection and resolution into the list the denormalization engine
consumes. An empty list means the field is untyped (accept any value); an
UnresolvableTypeError means the field is typed but its type cannot be found,
which callers must treat as fatal.
"""

import logging
from typing import List, Optional

from fieldtypes.config import ResolverConfig
from fieldtypes.core.accessor_inference import AccessorInference
from fieldtypes.core.import_table import ImportTableCache
from fieldtypes.core.type_detector import TypeDetector
from fieldtypes.core.type_name_resolver import TypeNameResolver
from fieldtypes.metadata.descriptors import FieldDescriptor
from fieldtypes.metadata.provider import MetadataProvider

logger = logging.getLogger(__name__)


class FieldTypeResolver:
    """Detects and resolves the types of class fields."""

    def __init__(self, provider: MetadataProvider, config: Optional[ResolverConfig] = None):
        self.provider = provider
        self.import_tables = ImportTableCache(config)
        self.name_resolver = TypeNameResolver(provider, config, self.import_tables)
        self.detector = TypeDetector(self.name_resolver, AccessorInference(provider, config), config)

    def detect_field_types(self, field: FieldDescriptor) -> List[str]:
        return self.detector.detect(field)

    def resolve_types(self, types: List[str], field: FieldDescriptor) -> List[str]:
        return self.name_resolver.resolve_all(types, field)

    def resolve_field_types(self, field: FieldDescriptor) -> List[str]:
        """
        Detect the types of a field and resolve each to its fully-qualified name.

        Args:
            field: The field to type

        Returns:
            Ordered, resolved type tokens; empty if the field has no detectable type

        Raises:
            UnresolvableTypeError: If a detected type cannot be resolved
        """
        source, types = self.detector.detect_with_source(field)
        if source == 'documentation':
            # Already resolved during detection
            return types
        return self.resolve_types(types, field)

    def resolve_property_types(self, class_name: str, field_name: str) -> List[str]:
        """Look a field up through the provider and resolve its types."""
        return self.resolve_field_types(self.provider.get_field(class_name, field_name))

    def clear_cache(self) -> None:
        self.name_resolver.clear_cache()
