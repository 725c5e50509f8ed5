"""
Python annotation to type token conversion.

Maps evaluated Python annotations onto the closed primitive set and
fully-qualified class tokens:

    int                 -> ("int", False)
    Optional[str]       -> ("string", True)
    list                -> ("array", False)
    List[Address]       -> ("\\app.models.Address[]", False)
    Any                 -> ("mixed", False)

Annotations with no single-token equivalent (unions of several classes,
Literal, TypeVar, ...) map to None so that the detector falls through to the
documentation and accessor strategies.
"""

import collections.abc
import inspect
import re
import typing
from typing import Any, Optional, Tuple, Union, get_args, get_origin

from python_introspect import is_union_type, optional_member_type, resolve_annotated

from fieldtypes.config import ResolverConfig, get_resolver_config
from fieldtypes.constants.constants import ARRAY_TYPE, NULL_TYPE

_PRIMITIVE_BY_TYPE = {
    int: 'int',
    float: 'float',
    str: 'string',
    bytes: 'string',
    bool: 'bool',
    object: 'object',
    type(None): NULL_TYPE,
    list: ARRAY_TYPE,
    tuple: ARRAY_TYPE,
    set: ARRAY_TYPE,
    frozenset: ARRAY_TYPE,
    dict: ARRAY_TYPE,
}

_PRIMITIVE_BY_ORIGIN = {
    collections.abc.Callable: 'callable',
    collections.abc.Iterable: 'iterable',
    collections.abc.Iterator: 'iterable',
    collections.abc.Mapping: ARRAY_TYPE,
    collections.abc.MutableMapping: ARRAY_TYPE,
    dict: ARRAY_TYPE,
}

# Origins whose single type argument is the element type of a collection token
_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)

_SIMPLE_NAME = re.compile(r'^[A-Za-z_][\w.]*$')


def qualified_name(cls: type) -> str:
    """Fully-qualified name of a class (module + qualified name)."""
    return f"{cls.__module__}.{cls.__qualname__}"


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Unwrap Optional[T] (or T | None) to T.

    Returns:
        (annotation without None, whether None was allowed)
    """
    member = optional_member_type(annotation)
    if member is not None:
        return member, True

    if is_union_type(annotation) and type(None) in get_args(annotation):
        return Union[tuple(arg for arg in get_args(annotation) if arg is not type(None))], True
    return annotation, False


def annotation_to_token(annotation: Any, config: Optional[ResolverConfig] = None) -> Optional[Tuple[str, bool]]:
    """
    Convert an evaluated annotation to a type token.

    Args:
        annotation: Evaluated annotation (or an unevaluated string)
        config: Resolver configuration providing the collection marker and absolute prefix

    Returns:
        (token, nullable), or None if the annotation has no single-token equivalent
    """
    config = config or get_resolver_config()

    if annotation is None:
        return NULL_TYPE, False

    if isinstance(annotation, str):
        # Unevaluated forward reference, left for the name resolver
        name = annotation.strip().strip('\'"')
        return (name, False) if _SIMPLE_NAME.match(name) else None

    if isinstance(annotation, typing.ForwardRef):
        return annotation_to_token(annotation.__forward_arg__, config)

    annotation, nullable = unwrap_optional(resolve_annotated(annotation))
    token = _to_token(annotation, config)
    if token is None:
        return None
    return token, nullable


def _to_token(annotation: Any, config: ResolverConfig) -> Optional[str]:
    annotation = resolve_annotated(annotation)
    if annotation is Any:
        return 'mixed'

    if is_union_type(annotation):
        return None

    origin = get_origin(annotation)
    if origin is not None:
        return _generic_to_token(annotation, origin, config)

    if not inspect.isclass(annotation):
        return None

    if annotation in _PRIMITIVE_BY_TYPE:
        return _PRIMITIVE_BY_TYPE[annotation]

    if annotation in _PRIMITIVE_BY_ORIGIN:
        return _PRIMITIVE_BY_ORIGIN[annotation]

    return config.absolute_prefix + qualified_name(annotation)


def _generic_to_token(annotation: Any, origin: Any, config: ResolverConfig) -> Optional[str]:
    args = get_args(annotation)

    if origin in _SEQUENCE_ORIGINS:
        if len(args) != 1:
            return ARRAY_TYPE
        return _element_token(args[0], config)

    if origin is tuple:
        # Homogeneous tuple: Tuple[X, ...]
        if len(args) == 2 and args[1] is Ellipsis:
            return _element_token(args[0], config)
        return ARRAY_TYPE

    if origin is type:
        return 'object'

    if origin in _PRIMITIVE_BY_ORIGIN:
        return _PRIMITIVE_BY_ORIGIN[origin]

    return None


def _element_token(element: Any, config: ResolverConfig) -> str:
    element, _ = unwrap_optional(resolve_annotated(element))
    token = _to_token(element, config)
    if token is None or token == 'mixed':
        return ARRAY_TYPE
    return token + config.collection_marker

