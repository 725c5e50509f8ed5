"""Field type resolution exceptions."""

from typing import Any, Optional

from fieldtypes.core.denormalization_context import ClassPropertyDenormalizationContext


class TypeResolutionError(Exception):
    """Base exception for field type detection and resolution."""

    pass


class UnresolvableTypeError(TypeResolutionError):
    """
    Raised when a non-primitive type token cannot be mapped to an existing class or interface.

    Resolution is deterministic, so this is never retried: the metadata has to
    change (usually a missing import) before the same token can resolve.

    Attributes:
        class_name: Fully-qualified name of the class declaring the field
        field_name: Name of the field whose type was being resolved
        token: The offending raw type token
        resolved_name: The fully-qualified candidate, if one was found but does not exist
    """

    def __init__(self, class_name: str, field_name: str, token: str, resolved_name: Optional[str] = None):
        self.class_name = class_name
        self.field_name = field_name
        self.token = token
        self.resolved_name = resolved_name
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.resolved_name is None:
            return (
                f'The type annotation on {self.class_name}::{self.field_name} contains a non existent '
                f'class "{self.token}". Did you maybe forget to add an import for it?'
            )
        return (
            f'The type annotation on {self.class_name}::{self.field_name} contains a non existent '
            f'class "{self.resolved_name}"'
        )


class UnsupportedValueError(ValueError):
    """
    Raised by a denormalizer when a value (or the types resolved for it) cannot be handled.

    The message names the target type: the owning class name for a class property
    context, otherwise the context's type name.

    Attributes:
        context: The denormalization context that failed
        denormalizer: The denormalizer that rejected the value
    """

    def __init__(self, context, denormalizer: Any, previous: Optional[BaseException] = None):
        if isinstance(context, ClassPropertyDenormalizationContext):
            type_name = context.class_name
        else:
            type_name = context.type_name

        denormalizer_type = type(denormalizer)
        super().__init__(
            f"Values of type '{type_name}' are not supported by denormalizer "
            f"'{denormalizer_type.__module__}.{denormalizer_type.__qualname__}'"
        )
        self.context = context
        self.denormalizer = denormalizer
        self.__cause__ = previous

    @property
    def previous(self) -> Optional[BaseException]:
        """The error that triggered this one, if any."""
        return self.__cause__

    @property
    def value(self) -> Any:
        """The value that could not be denormalized."""
        return self.context.value
