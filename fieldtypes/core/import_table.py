"""
Per-class import tables.

An import table maps a lower-cased alias to the fully-qualified name it was
imported as, plus a special __NAMESPACE__ entry holding the class's default
namespace alias. Tables are derived from ClassDescriptor.imports once per class
and cached by fully-qualified class name; class metadata is immutable for the
process lifetime, so a cached table never goes stale.
"""

import logging
import threading
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.constants.constants import NAMESPACE_KEY
from fieldtypes.core.type_token import normalize_separators, strip_absolute_prefix
from fieldtypes.metadata.descriptors import ClassDescriptor

logger = logging.getLogger(__name__)


class ImportTableCache:
    """Builds and caches import tables with basic thread safety."""

    def __init__(self, config: Optional[ResolverConfig] = None):
        self._config = config
        self._cache: Dict[str, Mapping[str, str]] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> ResolverConfig:
        return self._config or get_resolver_config()

    def get_import_table(self, class_descriptor: ClassDescriptor) -> Mapping[str, str]:
        """
        Get the import table of a class.

        Args:
            class_descriptor: The class whose declared imports are read

        Returns:
            Read-only mapping of lower-cased alias -> fully-qualified name
        """
        if self.config.disable_caches:
            return self.build_import_table(class_descriptor)

        with self._lock:
            table = self._cache.get(class_descriptor.name)
        if table is not None:
            return table

        # Built outside the lock, a concurrent duplicate build yields an identical table
        table = self.build_import_table(class_descriptor)
        with self._lock:
            return self._cache.setdefault(class_descriptor.name, table)

    def build_import_table(self, class_descriptor: ClassDescriptor) -> Mapping[str, str]:
        config = self.config
        table: Dict[str, str] = {}
        for alias, name in class_descriptor.imports:
            qualified = normalize_separators(strip_absolute_prefix(name, config), config)
            # Later imports rebind an alias
            table[alias.lower()] = qualified

        if class_descriptor.root_namespace:
            table[NAMESPACE_KEY] = normalize_separators(
                strip_absolute_prefix(class_descriptor.root_namespace, config), config
            )

        logger.debug(f"Built import table for {class_descriptor.name}: {table}")
        return MappingProxyType(table)

    def clear_cache(self) -> None:
        """Clear cached import tables."""
        with self._lock:
            self._cache.clear()
