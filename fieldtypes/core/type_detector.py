"""
Field type detection.

Detects the candidate types of a field from three sources, in priority order:

1. The native (strong) type annotation exposed by the metadata provider
2. A type tag in the field documentation (e.g. "@var Address[]|null")
3. The return type of an accessor method (e.g. getAddress())

A native type of exactly "array" cannot say what the array holds, so it is only
kept as a fallback while the documentation and accessor strategies get a chance
to be more specific.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.constants.constants import ARRAY_TYPE, NULL_TYPE, UNION_SEPARATOR
from fieldtypes.core.accessor_inference import AccessorInference
from fieldtypes.core.type_name_resolver import TypeNameResolver
from fieldtypes.metadata.descriptors import FieldDescriptor

logger = logging.getLogger(__name__)


class StrategyOutcome(Enum):
    """How a detection strategy's result is merged."""
    CONFIDENT = "confident"  # final answer, possibly empty
    MISS = "miss"            # nothing found, try the next strategy
    WEAK = "weak"            # usable only if no later strategy is confident


@dataclass(frozen=True)
class StrategyResult:
    outcome: StrategyOutcome
    types: Tuple[str, ...] = ()

    @classmethod
    def miss(cls) -> 'StrategyResult':
        return cls(StrategyOutcome.MISS)


class TypeDetector:
    """Detects the unresolved type tokens of a field."""

    def __init__(self, resolver: TypeNameResolver, accessor_inference: Optional[AccessorInference] = None,
                 config: Optional[ResolverConfig] = None):
        self._resolver = resolver
        self._accessors = accessor_inference or AccessorInference(resolver.provider, config)
        self._config = config

    @property
    def config(self) -> ResolverConfig:
        return self._config or get_resolver_config()

    def detect(self, field: FieldDescriptor) -> List[str]:
        """
        Detect the types of a field.

        Args:
            field: The field to inspect

        Returns:
            Ordered type tokens, empty if nothing could be determined

        Raises:
            UnresolvableTypeError: If the documentation tag names a class that cannot be resolved
        """
        return self.detect_with_source(field)[1]

    def detect_with_source(self, field: FieldDescriptor) -> Tuple[Optional[str], List[str]]:
        """
        Detect the types of a field and report which strategy produced them.

        Returns:
            (strategy name or None, type tokens); documentation tokens are already resolved
        """
        strategies = (
            ('native', self.detect_from_native_type),
            ('documentation', self.detect_from_documentation),
            ('accessor', self.detect_from_accessor),
        )

        fallback: Optional[Tuple[str, StrategyResult]] = None
        for strategy_name, strategy in strategies:
            result = strategy(field)

            if result.outcome is StrategyOutcome.CONFIDENT:
                logger.debug(f"{field.declaring_class}::{field.name} typed by {strategy_name}: {list(result.types)}")
                return strategy_name, list(result.types)
            if result.outcome is StrategyOutcome.WEAK and fallback is None:
                fallback = (strategy_name, result)

        if fallback is not None:
            strategy_name, result = fallback
            logger.debug(f"{field.declaring_class}::{field.name} falls back to {list(result.types)}")
            return strategy_name, list(result.types)
        return None, []

    def detect_from_native_type(self, field: FieldDescriptor) -> StrategyResult:
        """Types from the native annotation; a bare array is a weak result."""
        if not field.native_type:
            return StrategyResult.miss()

        types = [field.native_type]
        if field.nullable:
            types.append(NULL_TYPE)

        if types == [ARRAY_TYPE]:
            return StrategyResult(StrategyOutcome.WEAK, tuple(types))
        return StrategyResult(StrategyOutcome.CONFIDENT, tuple(types))

    def detect_from_documentation(self, field: FieldDescriptor) -> StrategyResult:
        """Types from the documentation tag, resolved to fully-qualified names."""
        type_expression = extract_type_tag(field.documentation, self.config.documentation_tag)
        if type_expression is None:
            return StrategyResult.miss()

        tokens = type_expression.split(UNION_SEPARATOR)
        return StrategyResult(StrategyOutcome.CONFIDENT, tuple(self._resolver.resolve_all(tokens, field)))

    def detect_from_accessor(self, field: FieldDescriptor) -> StrategyResult:
        """
        Types from the return type of the field's accessor.

        An accessor without a declared return type is a confident empty answer: it
        overrides the array fallback instead of falling through to it.
        """
        accessor = self._accessors.infer(field)
        if accessor is None:
            return StrategyResult.miss()
        if not accessor.return_type:
            return StrategyResult(StrategyOutcome.CONFIDENT)

        types = [accessor.return_type]
        if accessor.nullable:
            types.append(NULL_TYPE)
        return StrategyResult(StrategyOutcome.CONFIDENT, tuple(types))


def extract_type_tag(documentation: Optional[str], tag: str) -> Optional[str]:
    """
    Extract the type expression following the first occurrence of a tag.

    Args:
        documentation: Free documentation text
        tag: Tag keyword (e.g. "@var")

    Returns:
        The first whitespace-delimited expression after the tag, or None
    """
    if not documentation:
        return None
    match = re.search(re.escape(tag) + r'\s+(\S+)', documentation)
    if match is None:
        return None
    return match.group(1)
