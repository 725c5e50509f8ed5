"""
Constants shared by the detection and resolution layers.

The primitive type names are a closed set. They are compared exactly
(case-sensitive) and never qualified.
"""

from typing import FrozenSet

PRIMITIVE_TYPE_NAMES: FrozenSet[str] = frozenset({
    'bool',
    'null',
    'boolean',
    'string',
    'int',
    'integer',
    'float',
    'double',
    'array',
    'object',
    'callable',
    'resource',
    'mixed',
    'iterable',
})

NULL_TYPE = 'null'
ARRAY_TYPE = 'array'

# Token syntax
COLLECTION_MARKER = '[]'
UNION_SEPARATOR = '|'
DEFAULT_NAMESPACE_SEPARATOR = '.'
ALTERNATE_NAMESPACE_SEPARATOR = '\\'
DEFAULT_ABSOLUTE_PREFIX = '\\'

# Import table key holding the default namespace alias
NAMESPACE_KEY = '__NAMESPACE__'

# Detection defaults
DEFAULT_DOCUMENTATION_TAG = '@var'
DEFAULT_GETTER_MARKER = 'get'

# Key looked up in dataclasses.field(metadata=...) for field documentation
FIELD_DOC_METADATA_KEY = 'doc'
FIELD_DOCS_ATTRIBUTE = '__field_docs__'
