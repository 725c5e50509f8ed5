"""
Type name resolution.

Turns a raw type token found on a field into a fully-qualified, unambiguous
name. Primitive tokens pass through unchanged; class references are looked up
in this order, most specific scope first:

1. The declaring class's import table (explicit imports, by alias)
2. The declaring class's namespace
3. The root namespace (__NAMESPACE__ import table entry)
4. The global namespace (the token itself)
5. Mixin modules included by the class and its ancestors, restricted to
   mixins that declare the member being resolved

A trailing collection marker (Foo[]) is stripped before resolution and
reattached to the resolved name.
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple, Union

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.constants.constants import NAMESPACE_KEY
from fieldtypes.core.import_table import ImportTableCache
from fieldtypes.core.type_token import (
    attach_collection_marker,
    is_absolute,
    is_primitive,
    join_name,
    normalize_separators,
    split_collection_marker,
    strip_absolute_prefix,
)
from fieldtypes.exceptions import UnresolvableTypeError
from fieldtypes.metadata.descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
)
from fieldtypes.metadata.provider import MetadataProvider

logger = logging.getLogger(__name__)

Member = Union[FieldDescriptor, MethodDescriptor, ParameterDescriptor]


class TypeNameResolver:
    """Resolves raw type tokens to fully-qualified names."""

    def __init__(self, provider: MetadataProvider, config: Optional[ResolverConfig] = None,
                 import_tables: Optional[ImportTableCache] = None):
        """
        Initialize the resolver.

        Args:
            provider: Metadata provider used for class lookups and existence checks
            config: Resolver configuration, defaults to the global configuration
            import_tables: Shared import table cache, a private one is created if omitted
        """
        self._provider = provider
        self._config = config
        self._import_tables = import_tables or ImportTableCache(config)
        self._mixin_cache: Dict[str, Tuple[str, ...]] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> ResolverConfig:
        return self._config or get_resolver_config()

    @property
    def provider(self) -> MetadataProvider:
        return self._provider

    def resolve_all(self, tokens: Sequence[str], field: FieldDescriptor) -> List[str]:
        """Resolve a list of tokens, preserving order."""
        return [self.resolve(token, field) for token in tokens]

    def resolve(self, token: str, field: FieldDescriptor) -> str:
        """
        Resolve a type token to its fully-qualified name.

        Args:
            token: Raw type token (e.g. "int", "Address", "Models.Address[]", "\\App.Models.Address")
            field: The field the token was found on; its declaring class is the resolution context

        Returns:
            The resolved token, with any collection marker reattached

        Raises:
            UnresolvableTypeError: If a class reference does not name an existing class or interface
        """
        config = self.config
        name, depth = split_collection_marker(token.strip(), config)

        if is_primitive(name):
            return attach_collection_marker(name, depth, config)

        if is_absolute(name, config):
            resolved = normalize_separators(strip_absolute_prefix(name, config), config)
        else:
            class_descriptor = self._provider.get_class(field.declaring_class)
            resolved = self.try_resolve_fqn(normalize_separators(name, config), class_descriptor, field)
            if resolved is None:
                raise UnresolvableTypeError(field.declaring_class, field.name, name)

        if not self._provider.class_exists(resolved):
            raise UnresolvableTypeError(field.declaring_class, field.name, name, resolved_name=resolved)

        return attach_collection_marker(strip_absolute_prefix(resolved, config), depth, config)

    def try_resolve_fqn(self, raw_name: str, class_descriptor: ClassDescriptor,
                        member: Member) -> Optional[str]:
        """
        Attempt to resolve the fully-qualified name of a type in the context of a class.

        Args:
            raw_name: Type name without collection marker, possibly partially qualified
            class_descriptor: The class providing imports and namespace
            member: The field, method or parameter the type belongs to (filters mixins)

        Returns:
            Fully-qualified name of the type, or None if it could not be resolved
        """
        return self._try_resolve_fqn(raw_name, class_descriptor, member, set())

    def _try_resolve_fqn(self, raw_name: str, class_descriptor: ClassDescriptor,
                         member: Member, visited: set) -> Optional[str]:
        config = self.config
        visited.add(class_descriptor.name)

        alias, separator, remainder = raw_name.partition(config.namespace_separator)
        imports = self._import_tables.get_import_table(class_descriptor)

        imported = imports.get(alias.lower())
        if imported is not None:
            # Imported class or namespace
            return imported + separator + remainder

        candidate = join_name(class_descriptor.namespace, raw_name, config)
        if self._provider.class_exists(candidate):
            return candidate

        root_namespace = imports.get(NAMESPACE_KEY)
        if root_namespace:
            candidate = join_name(root_namespace, raw_name, config)
            if self._provider.class_exists(candidate):
                return candidate

        if self._provider.class_exists(raw_name):
            # No namespace
            return raw_name

        return self._try_resolve_fqn_in_mixins(raw_name, class_descriptor, member, visited)

    def _try_resolve_fqn_in_mixins(self, raw_name: str, class_descriptor: ClassDescriptor,
                                   member: Member, visited: set) -> Optional[str]:
        for mixin_name in self.collect_mixins(class_descriptor):
            if mixin_name in visited:
                continue
            try:
                mixin = self._provider.get_class(mixin_name)
            except KeyError:
                logger.debug(f"Skipping unknown mixin {mixin_name} of {class_descriptor.name}")
                continue

            if not self._is_eligible(mixin, member):
                continue

            logger.debug(f"Resolving '{raw_name}' through mixin {mixin_name}")
            resolved = self._try_resolve_fqn(raw_name, mixin, member, visited)
            if resolved:
                return resolved

        return None

    @staticmethod
    def _is_eligible(mixin: ClassDescriptor, member: Member) -> bool:
        """Only mixins declaring the member being resolved are searched."""
        if isinstance(member, FieldDescriptor):
            return mixin.has_field(member.name)
        if isinstance(member, MethodDescriptor):
            return mixin.has_method(member.name)
        if isinstance(member, ParameterDescriptor):
            return mixin.has_method(member.method.name)
        return True

    def collect_mixins(self, class_descriptor: ClassDescriptor) -> Tuple[str, ...]:
        """
        Collect the mixins included by a class and all of its ancestors.

        Returns:
            Ordered, de-duplicated mixin names: the class's own mixins first, then each parent's
        """
        if self.config.disable_caches:
            return self._build_mixin_closure(class_descriptor)

        with self._lock:
            closure = self._mixin_cache.get(class_descriptor.name)
        if closure is not None:
            return closure

        closure = self._build_mixin_closure(class_descriptor)
        with self._lock:
            return self._mixin_cache.setdefault(class_descriptor.name, closure)

    def _build_mixin_closure(self, class_descriptor: ClassDescriptor) -> Tuple[str, ...]:
        mixins: Dict[str, None] = {}
        seen_classes = set()
        current: Optional[ClassDescriptor] = class_descriptor

        while current is not None:
            seen_classes.add(current.name)
            for mixin_name in current.mixins:
                mixins.setdefault(mixin_name)

            if current.parent is None:
                break
            if current.parent in seen_classes:
                logger.warning(f"Cyclic ancestor chain {current.name} -> {current.parent}, stopping ancestor walk")
                break
            try:
                current = self._provider.get_class(current.parent)
            except KeyError:
                logger.debug(f"Parent {current.parent} of {current.name} is unknown, stopping ancestor walk")
                break

        return tuple(mixins)

    def clear_cache(self) -> None:
        """Clear cached mixin closures and import tables."""
        with self._lock:
            self._mixin_cache.clear()
        self._import_tables.clear_cache()
