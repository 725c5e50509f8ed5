"""
Read-only class metadata consumed by the detection and resolution layers.

Descriptors are plain frozen dataclasses. Classes reference each other (parent,
mixins) and fields reference their declaring class by fully-qualified name, so
a provider can materialize the graph lazily and the core never holds live
references into it.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MethodDescriptor:
    """
    A public method of a class.

    Attributes:
        name: Method name
        parameter_count: Number of declared parameters (excluding the receiver)
        return_type: Declared return type token, None when undeclared
        return_type_nullable: Whether the declared return type admits null
    """

    name: str
    parameter_count: int = 0
    return_type: Optional[str] = None
    return_type_nullable: bool = False


@dataclass(frozen=True)
class ParameterDescriptor:
    """A parameter of a method, used as a member context during mixin search."""

    name: str
    method: MethodDescriptor


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One field of one class.

    Attributes:
        name: Field name
        declaring_class: Fully-qualified name of the class declaring the field
        native_type: Strong type annotation exposed by the host metadata, if any
        nullable: Whether the native type admits null (only meaningful with native_type)
        documentation: Free documentation text that may embed a type tag
    """

    name: str
    declaring_class: str
    native_type: Optional[str] = None
    nullable: bool = False
    documentation: Optional[str] = None


@dataclass(frozen=True)
class ClassDescriptor:
    """
    A class-like structure (class, interface or mixin module).

    Attributes:
        name: Fully-qualified class name
        namespace: Namespace the class is declared in
        imports: Declared imports as ordered (alias, fully-qualified name) pairs
        root_namespace: Default namespace alias, exposed as the __NAMESPACE__ import table entry
        mixins: Fully-qualified names of the mixin modules the class includes, in order
        parent: Fully-qualified name of the parent class
        methods: Public methods in declaration order
        fields: Names of the fields the class declares
    """

    name: str
    namespace: str = ''
    imports: Tuple[Tuple[str, str], ...] = ()
    root_namespace: Optional[str] = None
    mixins: Tuple[str, ...] = ()
    parent: Optional[str] = None
    methods: Tuple[MethodDescriptor, ...] = ()
    fields: Tuple[str, ...] = ()

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def has_method(self, name: str) -> bool:
        return any(method.name == name for method in self.methods)

    def get_method(self, name: str) -> Optional[MethodDescriptor]:
        return next((method for method in self.methods if method.name == name), None)
