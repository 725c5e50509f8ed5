"""Class metadata descriptors and providers."""

from fieldtypes.metadata.descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
)
from fieldtypes.metadata.provider import MetadataProvider, SchemaMetadataProvider

__all__ = [
    'ClassDescriptor',
    'FieldDescriptor',
    'MethodDescriptor',
    'ParameterDescriptor',
    'MetadataProvider',
    'SchemaMetadataProvider',
]
