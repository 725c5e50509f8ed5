"""Helpers for the textual syntax of type tokens."""

from typing import Tuple

from fieldtypes.config import ResolverConfig
from fieldtypes.constants.constants import ALTERNATE_NAMESPACE_SEPARATOR, PRIMITIVE_TYPE_NAMES


def split_collection_marker(token: str, config: ResolverConfig) -> Tuple[str, int]:
    """
    Strip trailing collection markers from a token.

    Args:
        token: Raw type token (e.g. "Foo[]", "int[][]", "Bar")
        config: Resolver configuration providing the marker

    Returns:
        (base name, number of markers stripped)
    """
    marker = config.collection_marker
    depth = 0
    while token.endswith(marker):
        token = token[:-len(marker)]
        depth += 1
    return token, depth


def attach_collection_marker(name: str, depth: int, config: ResolverConfig) -> str:
    return name + config.collection_marker * depth


def is_primitive(name: str) -> bool:
    return name in PRIMITIVE_TYPE_NAMES


def is_absolute(name: str, config: ResolverConfig) -> bool:
    return bool(config.absolute_prefix) and name.startswith(config.absolute_prefix)


def strip_absolute_prefix(name: str, config: ResolverConfig) -> str:
    if not config.absolute_prefix:
        return name
    while name.startswith(config.absolute_prefix):
        name = name[len(config.absolute_prefix):]
    return name


def normalize_separators(name: str, config: ResolverConfig) -> str:
    """Rewrite backslash separated names (App\\Models\\Foo) to the configured separator."""
    if config.namespace_separator == ALTERNATE_NAMESPACE_SEPARATOR:
        return name
    return name.replace(ALTERNATE_NAMESPACE_SEPARATOR, config.namespace_separator)


def join_name(namespace: str, name: str, config: ResolverConfig) -> str:
    """Qualify name with namespace; an empty namespace leaves name unchanged."""
    if not namespace:
        return name
    return f"{namespace}{config.namespace_separator}{name}"
