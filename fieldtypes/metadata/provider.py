"""
Metadata provider interface and the precomputed schema backend.

The resolver only ever reads from a provider. SchemaMetadataProvider serves
descriptors registered up front (typically generated ahead of time and loaded
from JSON); ReflectionMetadataProvider in fieldtypes.introspection builds them
from live Python classes.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Set, Tuple, Union

from fieldtypes.metadata.descriptors import ClassDescriptor, FieldDescriptor, MethodDescriptor

logger = logging.getLogger(__name__)


class MetadataProvider(ABC):
    """Read-only access to class, field and method metadata."""

    @abstractmethod
    def get_class(self, name: str) -> ClassDescriptor:
        """
        Get the descriptor of a class.

        Args:
            name: Fully-qualified class name

        Returns:
            The class descriptor

        Raises:
            KeyError: If the class is unknown
        """

    @abstractmethod
    def class_exists(self, name: str) -> bool:
        """Return True if name is an existing class or interface."""

    @abstractmethod
    def get_field(self, class_name: str, field_name: str) -> FieldDescriptor:
        """
        Get the descriptor of a field.

        Raises:
            KeyError: If the class or the field is unknown
        """


class SchemaMetadataProvider(MetadataProvider):
    """Provider backed by descriptors registered in memory."""

    def __init__(self):
        self._classes: Dict[str, ClassDescriptor] = {}
        self._fields: Dict[Tuple[str, str], FieldDescriptor] = {}
        self._interfaces: Set[str] = set()
        self._lock = threading.Lock()

    def register_class(self, descriptor: ClassDescriptor) -> None:
        with self._lock:
            self._classes[descriptor.name] = descriptor

    def register_interface(self, name: str) -> None:
        with self._lock:
            self._interfaces.add(name)

    def register_field(self, descriptor: FieldDescriptor) -> None:
        with self._lock:
            self._fields[(descriptor.declaring_class, descriptor.name)] = descriptor

    def get_class(self, name: str) -> ClassDescriptor:
        try:
            return self._classes[name]
        except KeyError:
            raise KeyError(f"Unknown class: {name}") from None

    def class_exists(self, name: str) -> bool:
        return name in self._classes or name in self._interfaces

    def get_field(self, class_name: str, field_name: str) -> FieldDescriptor:
        try:
            return self._fields[(class_name, field_name)]
        except KeyError:
            raise KeyError(f"Unknown field: {class_name}::{field_name}") from None

    # SCHEMA LOADING //

    @classmethod
    def from_dict(cls, schema: Mapping[str, Any]) -> 'SchemaMetadataProvider':
        """
        Build a provider from a plain mapping.

        Layout::

            {
                "interfaces": ["App.Contracts.HasId"],
                "classes": [
                    {
                        "name": "App.Models.User",
                        "namespace": "App.Models",
                        "imports": {"Address": "App.Values.Address"},
                        "root_namespace": "App",
                        "mixins": ["App.Concerns.HasTimestamps"],
                        "parent": "App.Models.Model",
                        "methods": [{"name": "getAddress", "parameter_count": 0,
                                     "return_type": "App.Values.Address", "nullable": true}],
                        "fields": [{"name": "address", "type": "App.Values.Address",
                                    "nullable": false, "doc": "@var Address"}]
                    }
                ]
            }

        Args:
            schema: Mapping with "classes" and optional "interfaces" entries

        Returns:
            A populated provider
        """
        provider = cls()
        for interface_name in schema.get('interfaces', ()):
            provider.register_interface(interface_name)

        for class_entry in schema.get('classes', ()):
            class_name = class_entry['name']
            field_entries = class_entry.get('fields', ())
            provider.register_class(ClassDescriptor(
                name=class_name,
                namespace=class_entry.get('namespace', ''),
                imports=_parse_imports(class_entry.get('imports', ())),
                root_namespace=class_entry.get('root_namespace'),
                mixins=tuple(class_entry.get('mixins', ())),
                parent=class_entry.get('parent'),
                methods=tuple(_parse_method(entry) for entry in class_entry.get('methods', ())),
                fields=tuple(entry['name'] for entry in field_entries),
            ))
            for field_entry in field_entries:
                provider.register_field(FieldDescriptor(
                    name=field_entry['name'],
                    declaring_class=class_name,
                    native_type=field_entry.get('type'),
                    nullable=bool(field_entry.get('nullable', False)),
                    documentation=field_entry.get('doc'),
                ))

        logger.debug(f"Loaded schema with {len(provider._classes)} classes and "
                     f"{len(provider._interfaces)} interfaces")
        return provider

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> 'SchemaMetadataProvider':
        """Build a provider from a JSON schema file (see from_dict for the layout)."""
        with open(path, encoding='utf-8') as schema_file:
            return cls.from_dict(json.load(schema_file))


def _parse_imports(imports: Union[Mapping[str, str], Iterable]) -> Tuple[Tuple[str, str], ...]:
    """Accept either an alias -> name mapping or a list of [alias, name] pairs."""
    if isinstance(imports, Mapping):
        return tuple(imports.items())
    return tuple((alias, name) for alias, name in imports)


def _parse_method(entry: Mapping[str, Any]) -> MethodDescriptor:
    return MethodDescriptor(
        name=entry['name'],
        parameter_count=int(entry.get('parameter_count', 0)),
        return_type=entry.get('return_type'),
        return_type_nullable=bool(entry.get('nullable', False)),
    )
