"""
fieldtypes: field type detection and resolution for denormalization.

Determines, for a field whose declared type is not reliably known, the ordered
list of candidate types and resolves every class reference in it to a
fully-qualified name.

Typical use with live Python classes:

    >>> from fieldtypes import FieldTypeResolver, ReflectionMetadataProvider, qualified_name
    >>> resolver = FieldTypeResolver(ReflectionMetadataProvider())
    >>> resolver.resolve_property_types(qualified_name(Order), 'items')
    ['app.values.LineItem[]']
"""

import logging

__version__ = "0.3.0"

from fieldtypes.config import ResolverConfig, get_resolver_config, set_resolver_config
from fieldtypes.core.accessor_inference import AccessorInference
from fieldtypes.core.denormalization_context import (
    ClassPropertyDenormalizationContext,
    DenormalizationContext,
)
from fieldtypes.core.field_type_resolver import FieldTypeResolver
from fieldtypes.core.type_detector import TypeDetector
from fieldtypes.core.type_name_resolver import TypeNameResolver
from fieldtypes.exceptions import TypeResolutionError, UnresolvableTypeError, UnsupportedValueError
from fieldtypes.introspection import ReflectionMetadataProvider, qualified_name
from fieldtypes.metadata import (
    ClassDescriptor,
    FieldDescriptor,
    MetadataProvider,
    MethodDescriptor,
    ParameterDescriptor,
    SchemaMetadataProvider,
)


def _ensure_basic_logging():
    """Ensure basic logging is configured if no configuration exists."""
    root_logger = logging.getLogger()

    # Only configure if no handlers exist and level is too high
    if not root_logger.handlers and root_logger.level > logging.INFO:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


_ensure_basic_logging()


__all__ = [
    # Entry points
    "FieldTypeResolver",
    "TypeDetector",
    "TypeNameResolver",
    "AccessorInference",

    # Metadata
    "MetadataProvider",
    "SchemaMetadataProvider",
    "ReflectionMetadataProvider",
    "ClassDescriptor",
    "FieldDescriptor",
    "MethodDescriptor",
    "ParameterDescriptor",
    "qualified_name",

    # Configuration
    "ResolverConfig",
    "get_resolver_config",
    "set_resolver_config",

    # Errors
    "TypeResolutionError",
    "UnresolvableTypeError",
    "UnsupportedValueError",
    "DenormalizationContext",
    "ClassPropertyDenormalizationContext",
]
