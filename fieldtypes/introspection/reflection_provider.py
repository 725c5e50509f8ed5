"""
Metadata provider backed by live Python classes.

Builds descriptors through introspection:

- the first base class (other than object) is the parent, the remaining bases
  are mixins, so classes list their primary base first:
  class Order(Model, TimestampsMixin). A mixin's own bases count as mixins too
- fields are annotated class attributes (dataclass fields included); a field
  contributed by a mixin is owned by the class that includes the mixin, so the
  mixin search of the name resolver gets to see the mixin's imports
- field documentation comes from dataclasses.field(metadata={"doc": ...}), a
  class level __field_docs__ mapping or an Args: entry of the class docstring
- methods are the public functions along the MRO, first definition wins
- imports are parsed from the defining module's source

Descriptors are cached by fully-qualified class name.
"""

import builtins
import dataclasses
import importlib
import inspect
import logging
import threading
import typing
from typing import Any, Dict, List, Mapping, Optional, Tuple

from python_introspect import DocstringExtractor, SignatureAnalyzer
from python_introspect.annotation_types import resolved_class_annotations

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.constants.constants import FIELD_DOC_METADATA_KEY, FIELD_DOCS_ATTRIBUTE
from fieldtypes.introspection.annotations import annotation_to_token, qualified_name
from fieldtypes.introspection.import_statements import ImportStatementParser
from fieldtypes.metadata.descriptors import ClassDescriptor, FieldDescriptor, MethodDescriptor
from fieldtypes.metadata.provider import MetadataProvider

logger = logging.getLogger(__name__)


class ReflectionMetadataProvider(MetadataProvider):
    """Describes importable Python classes on demand."""

    def __init__(self, config: Optional[ResolverConfig] = None,
                 import_parser: Optional[ImportStatementParser] = None):
        self._config = config
        self._import_parser = import_parser or ImportStatementParser()
        self._classes: Dict[str, ClassDescriptor] = {}
        self._imports: Dict[str, Tuple[Tuple[str, str], ...]] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> ResolverConfig:
        return self._config or get_resolver_config()

    # MetadataProvider //

    def get_class(self, name: str) -> ClassDescriptor:
        with self._lock:
            descriptor = self._classes.get(name)
        if descriptor is not None:
            return descriptor

        cls = import_class(name)
        if cls is None:
            raise KeyError(f"Unknown class: {name}")
        return self.describe(cls)

    def class_exists(self, name: str) -> bool:
        with self._lock:
            if name in self._classes:
                return True
        return import_class(name) is not None

    def get_field(self, class_name: str, field_name: str) -> FieldDescriptor:
        cls = import_class(class_name)
        if cls is None:
            raise KeyError(f"Unknown class: {class_name}")
        return self.describe_field(cls, field_name)

    # Introspection //

    def describe(self, cls: type) -> ClassDescriptor:
        """
        Describe a class, caching the result.

        Args:
            cls: The class to describe

        Returns:
            The class descriptor, keyed by the class's fully-qualified name
        """
        name = qualified_name(cls)
        with self._lock:
            cached = self._classes.get(name)
        if cached is not None:
            return cached

        parent, mixins = split_bases(cls)
        package = cls.__module__.rpartition('.')[0]
        descriptor = ClassDescriptor(
            name=name,
            namespace=cls.__module__,
            imports=self._module_imports(cls.__module__),
            root_namespace=package or None,
            mixins=tuple(qualified_name(mixin) for mixin in _expand_mixins(mixins)),
            parent=qualified_name(parent) if parent is not None else None,
            methods=tuple(self._describe_methods(cls)),
            fields=tuple(_annotated_names(cls)),
        )
        logger.debug(f"Described {name}: parent={descriptor.parent}, mixins={descriptor.mixins}")

        with self._lock:
            return self._classes.setdefault(name, descriptor)

    def describe_field(self, cls: type, field_name: str) -> FieldDescriptor:
        """
        Describe a field of a class.

        Raises:
            KeyError: If no class in the hierarchy annotates the field
        """
        owner, declared_in = _find_field_owner(cls, field_name)
        if owner is None:
            raise KeyError(f"Unknown field: {qualified_name(cls)}::{field_name}")

        native = None
        annotation = _evaluated_annotations(declared_in).get(field_name)
        if annotation is not None:
            native = annotation_to_token(annotation, self.config)
            if native is None:
                logger.debug(f"Annotation {annotation!r} of {qualified_name(declared_in)}::{field_name} "
                             f"has no single-token equivalent")

        return FieldDescriptor(
            name=field_name,
            declaring_class=qualified_name(owner),
            native_type=native[0] if native else None,
            nullable=native[1] if native else False,
            documentation=_field_documentation(cls, field_name),
        )

    def clear_cache(self) -> None:
        with self._lock:
            self._classes.clear()
            self._imports.clear()

    def _module_imports(self, module_name: str) -> Tuple[Tuple[str, str], ...]:
        with self._lock:
            imports = self._imports.get(module_name)
        if imports is not None:
            return imports

        try:
            imports = self._import_parser.parse_module(module_name)
        except SyntaxError as e:
            logger.warning(f"Cannot parse imports of {module_name}: {e}")
            imports = ()

        with self._lock:
            return self._imports.setdefault(module_name, imports)

    def _describe_methods(self, cls: type) -> List[MethodDescriptor]:
        methods: List[MethodDescriptor] = []
        seen = set()

        for klass in inspect.getmro(cls):
            if klass is object:
                continue
            for name, member in vars(klass).items():
                if name.startswith('_') or name in seen:
                    continue
                function = _unwrap_function(member)
                if function is None:
                    continue
                seen.add(name)
                methods.append(self._describe_method(name, function))

        return methods

    def _describe_method(self, name: str, function: Any) -> MethodDescriptor:
        # self and cls receivers are skipped by name, **kwargs is not a parameter
        parameter_count = len(SignatureAnalyzer.analyze(function, skip_first_param=False))

        return_type = None
        if 'return' in getattr(function, '__annotations__', {}):
            annotation = _evaluated_function_annotations(function).get('return')
            return_type = annotation_to_token(annotation, self.config)

        return MethodDescriptor(
            name=name,
            parameter_count=parameter_count,
            return_type=return_type[0] if return_type else None,
            return_type_nullable=return_type[1] if return_type else False,
        )


def import_class(name: str) -> Optional[type]:
    """
    Import a class by fully-qualified name.

    Tries the longest importable module prefix first, then walks the remaining
    segments as attributes (nested classes). Single segment names are looked up
    in builtins.

    Returns:
        The class, or None if the name does not denote an importable class
    """
    parts = name.split('.')
    if not all(parts):
        return None
    if len(parts) == 1:
        candidate = getattr(builtins, name, None)
        return candidate if inspect.isclass(candidate) else None

    for split in range(len(parts) - 1, 0, -1):
        module_name = '.'.join(parts[:split])
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        except Exception as e:
            logger.warning(f"Importing {module_name} failed: {e}")
            continue

        for attribute in parts[split:]:
            obj = getattr(obj, attribute, None)
            if obj is None:
                break
        return obj if inspect.isclass(obj) else None

    return None


def split_bases(cls: type) -> Tuple[Optional[type], Tuple[type, ...]]:
    """
    Split the direct bases of a class into (parent, mixins).

    The first base other than object is the parent: class View(Base, LoginMixin)
    has parent Base and mixin LoginMixin. Listing a mixin first makes it the parent.
    """
    bases = tuple(base for base in cls.__bases__ if base is not object)
    if not bases:
        return None, ()
    return bases[0], bases[1:]


def _expand_mixins(mixins: Tuple[type, ...]) -> List[type]:
    """Direct mixins followed by the classes they inherit from, object excluded."""
    expanded: Dict[type, None] = {}
    for mixin in mixins:
        for klass in inspect.getmro(mixin):
            if klass is not object:
                expanded.setdefault(klass)
    return list(expanded)


def _annotated_names(cls: type) -> List[str]:
    """Names of all annotated attributes along the MRO, most derived first."""
    names: Dict[str, None] = {}
    for klass in inspect.getmro(cls):
        for name in _own_annotations(klass):
            names.setdefault(name)
    return list(names)


def _own_annotations(cls: type) -> Mapping[str, Any]:
    return inspect.get_annotations(cls)


def _find_field_owner(cls: type, field_name: str) -> Tuple[Optional[type], Optional[type]]:
    """
    Find the class owning a field and the class whose annotation declares it.

    Walks the parent chain; a field annotated on one of a class's mixins is
    owned by that class.
    """
    current: Optional[type] = cls
    while current is not None:
        if field_name in _own_annotations(current):
            return current, current
        _, mixins = split_bases(current)
        for mixin in mixins:
            for klass in inspect.getmro(mixin):
                if field_name in _own_annotations(klass):
                    return current, klass
        current, _ = split_bases(current)
    return None, None


def _evaluated_annotations(cls: type) -> Dict[str, Any]:
    """Evaluate a class's own annotations, falling back per name when some cannot be evaluated."""
    raw = dict(_own_annotations(cls))
    try:
        hints = resolved_class_annotations(cls)
    except (NameError, TypeError, AttributeError, SyntaxError):
        logger.debug(f"Evaluating annotations of {qualified_name(cls)} one by one")
    else:
        return {name: hints.get(name, annotation) for name, annotation in raw.items()}

    module = importlib.import_module(cls.__module__)
    return {
        name: _evaluate(annotation, vars(module), dict(vars(cls)))
        for name, annotation in raw.items()
    }


def _evaluated_function_annotations(function: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(function)
    except (NameError, TypeError, AttributeError):
        globalns = getattr(function, '__globals__', {})
        return {
            name: _evaluate(annotation, globalns, None)
            for name, annotation in function.__annotations__.items()
        }


def _evaluate(annotation: Any, globalns: Dict[str, Any], localns: Optional[Dict[str, Any]]) -> Any:
    """Evaluate a string annotation; unresolvable ones are returned unevaluated."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)
    except (NameError, SyntaxError, AttributeError, TypeError):
        logger.debug(f"Leaving forward reference '{annotation}' unevaluated")
        return annotation


def _unwrap_function(member: Any) -> Optional[Any]:
    """Return the function behind a method, class method or static method."""
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    if inspect.isfunction(member):
        return member
    return None


def _field_documentation(cls: type, field_name: str) -> Optional[str]:
    for klass in inspect.getmro(cls):
        if dataclasses.is_dataclass(klass):
            dataclass_field = klass.__dataclass_fields__.get(field_name)
            if dataclass_field is not None and FIELD_DOC_METADATA_KEY in dataclass_field.metadata:
                return dataclass_field.metadata[FIELD_DOC_METADATA_KEY]

        field_docs = klass.__dict__.get(FIELD_DOCS_ATTRIBUTE, {})
        if field_name in field_docs:
            return field_docs[field_name]

        if klass.__dict__.get('__doc__'):
            documented = DocstringExtractor.extract(klass).parameters_dict
            if field_name in documented:
                return documented[field_name]
    return None
