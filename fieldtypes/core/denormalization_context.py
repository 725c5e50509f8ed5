"""
Denormalization contexts.

A context describes one value the external denormalization engine is trying to
build, and is what UnsupportedValueError reports on. Class property contexts
additionally name the owning class and property so that diagnostics can point
at the field whose resolved types were rejected.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class DenormalizationContext:
    """
    Context of a single value being denormalized.

    Attributes:
        value: The raw (untyped) value
        type_name: The resolved type token the value should become
        parent: The enclosing context, if this value is nested
    """

    value: Any
    type_name: str
    parent: Optional['DenormalizationContext'] = None


@dataclass(frozen=True)
class ClassPropertyDenormalizationContext(DenormalizationContext):
    """Context of a value being denormalized into a property of a class."""

    class_name: str = ''
    property_name: str = ''
