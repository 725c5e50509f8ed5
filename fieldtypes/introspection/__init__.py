"""
Python introspection backend.

Maps live Python classes onto the class metadata read by the type detector and
the type name resolver:

- annotation_to_token: evaluated annotations -> type tokens
- ImportStatementParser: module import statements -> import pairs
- ReflectionMetadataProvider: classes -> descriptors
"""

from fieldtypes.introspection.annotations import annotation_to_token, qualified_name, unwrap_optional
from fieldtypes.introspection.import_statements import ImportStatementParser
from fieldtypes.introspection.reflection_provider import ReflectionMetadataProvider, import_class

__all__ = [
    'annotation_to_token',
    'qualified_name',
    'unwrap_optional',
    'ImportStatementParser',
    'ReflectionMetadataProvider',
    'import_class',
]
