"""
Resolver configuration.

Controls the token syntax and detection markers used by the type detector and
the type name resolver. Values can be overridden through environment variables,
which is mostly useful when running against metadata produced for another
naming convention (e.g. backslash separated namespaces).

Call set_resolver_config() once at application startup to replace the global
instance; components created without an explicit config read the global one.
"""

import os
from dataclasses import dataclass

from fieldtypes.constants.constants import (
    COLLECTION_MARKER,
    DEFAULT_ABSOLUTE_PREFIX,
    DEFAULT_DOCUMENTATION_TAG,
    DEFAULT_GETTER_MARKER,
    DEFAULT_NAMESPACE_SEPARATOR,
)

_TRUTHY = ('1', 'true', 'yes')


@dataclass
class ResolverConfig:
    """
    Global configuration for field type detection and resolution.

    Attributes:
        documentation_tag: Tag keyword introducing a type expression in field documentation
        getter_marker: Substring an accessor method name must contain
        namespace_separator: Separator between namespace segments in resolved names
        absolute_prefix: Leading marker of an already fully-qualified token
        collection_marker: Trailing marker of a collection token (e.g. Foo[])
        disable_caches: Bypass the per-class import table and mixin caches
    """

    documentation_tag: str = DEFAULT_DOCUMENTATION_TAG
    getter_marker: str = DEFAULT_GETTER_MARKER
    namespace_separator: str = DEFAULT_NAMESPACE_SEPARATOR
    absolute_prefix: str = DEFAULT_ABSOLUTE_PREFIX
    collection_marker: str = COLLECTION_MARKER

    # DEBUGGING: force fresh import tables and mixin closures on every lookup
    disable_caches: bool = False

    def __post_init__(self):
        """Initialize from environment variables if set."""
        self.documentation_tag = os.getenv('FIELDTYPES_DOC_TAG', self.documentation_tag)
        self.getter_marker = os.getenv('FIELDTYPES_GETTER_MARKER', self.getter_marker)
        self.namespace_separator = os.getenv('FIELDTYPES_NAMESPACE_SEPARATOR', self.namespace_separator)
        self.absolute_prefix = os.getenv('FIELDTYPES_ABSOLUTE_PREFIX', self.absolute_prefix)

        if os.getenv('FIELDTYPES_DISABLE_CACHES', '').lower() in _TRUTHY:
            self.disable_caches = True

        if not self.namespace_separator:
            raise ValueError("namespace_separator must not be empty")
        if not self.collection_marker:
            raise ValueError("collection_marker must not be empty")


# Global resolver configuration instance
_resolver_config: ResolverConfig = ResolverConfig()


def get_resolver_config() -> ResolverConfig:
    """
    Get the global resolver configuration.

    Returns:
        The resolver configuration instance

    Example:
        >>> from fieldtypes.config import get_resolver_config
        >>> config = get_resolver_config()
        >>> config.disable_caches = True  # Rebuild import tables on every lookup
    """
    return _resolver_config


def set_resolver_config(config: ResolverConfig) -> None:
    """
    Replace the global resolver configuration.

    Args:
        config: The configuration used by components created without an explicit one
    """
    global _resolver_config
    _resolver_config = config
