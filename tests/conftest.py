"""Shared fixtures: a small precomputed schema exercising every resolution layer."""

import pytest

from fieldtypes.config import ResolverConfig, set_resolver_config
from fieldtypes.core.field_type_resolver import FieldTypeResolver
from fieldtypes.metadata.provider import SchemaMetadataProvider

ORDER = "App.Current.Order"

SCHEMA = {
    "interfaces": ["App.Contracts.HasId", "Stringable"],
    "classes": [
        {"name": "App.Models.Foo", "namespace": "App.Models"},
        {"name": "App.Current.Bar", "namespace": "App.Current"},
        {"name": "App.Values.Money", "namespace": "App.Values"},
        {"name": "App.Audit.Auditor", "namespace": "App.Audit"},
        {
            "name": ORDER,
            "namespace": "App.Current",
            "imports": {"Foo": "App\\Models\\Foo", "Models": "App.Models", "HasId": "App.Contracts.HasId"},
            "root_namespace": "App",
            "parent": "App.Current.BaseOrder",
            "methods": [
                {"name": "getQuantities", "parameter_count": 0, "return_type": "int"},
                {"name": "getNotes", "parameter_count": 0},
                {"name": "getCustomerLabel", "parameter_count": 1, "return_type": "string"},
                {"name": "getDiscount", "parameter_count": 0, "return_type": "float", "nullable": True},
                {"name": "getTotal", "parameter_count": 0, "return_type": "string"},
            ],
            "fields": [
                {"name": "foo", "doc": "/** @var Foo|null */"},
                {"name": "bars", "doc": "@var Bar[]"},
                {"name": "tags", "type": "array"},
                {"name": "quantities", "type": "array"},
                {"name": "notes", "type": "array"},
                {"name": "total", "type": "int"},
                {"name": "customer", "type": "App.Models.Foo", "nullable": True},
                {"name": "discount"},
                {"name": "price", "type": "array", "doc": "The price.\n@var  Values.Money"},
                {"name": "ghost", "doc": "@var Ghost"},
                {"name": "auditor", "type": "array", "doc": "@var Auditor[]"},
                {"name": "reviewer", "doc": "@var Auditor"},
                {"name": "untyped"},
            ],
        },
        {"name": "App.Current.BaseOrder", "namespace": "App.Current", "parent": "App.Models.Model"},
        {"name": "App.Models.Model", "namespace": "App.Models", "parent": "App.Models.Entity"},
        {
            "name": "App.Models.Entity",
            "namespace": "App.Models",
            "mixins": ["App.Concerns.Timestamps", "App.Concerns.Auditable"],
        },
        {
            "name": "App.Concerns.Timestamps",
            "namespace": "App.Concerns",
            "imports": {"Auditor": "App.Missing.Auditor"},
            "fields": [{"name": "createdAt"}],
        },
        {
            "name": "App.Concerns.Auditable",
            "namespace": "App.Concerns",
            "imports": {"Auditor": "App.Audit.Auditor"},
            "fields": [{"name": "auditor"}],
            "methods": [{"name": "audit", "parameter_count": 1}],
        },
    ],
}


@pytest.fixture(autouse=True)
def reset_resolver_config(monkeypatch):
    """Isolate tests from FIELDTYPES_* environment variables and global config changes."""
    for variable in ('FIELDTYPES_DOC_TAG', 'FIELDTYPES_GETTER_MARKER', 'FIELDTYPES_NAMESPACE_SEPARATOR',
                     'FIELDTYPES_ABSOLUTE_PREFIX', 'FIELDTYPES_DISABLE_CACHES'):
        monkeypatch.delenv(variable, raising=False)
    set_resolver_config(ResolverConfig())
    yield
    set_resolver_config(ResolverConfig())


@pytest.fixture
def provider():
    return SchemaMetadataProvider.from_dict(SCHEMA)


@pytest.fixture
def field_resolver(provider):
    return FieldTypeResolver(provider)


@pytest.fixture
def order_field(provider):
    def get(name):
        return provider.get_field(ORDER, name)
    return get
