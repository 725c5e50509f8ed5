"""
End-to-end tests for detection followed by resolution.

An empty result means "untyped, accept anything"; an error means "typed but
unresolvable". Callers depend on the two staying distinct.
"""

import json

import pytest

from fieldtypes.core.field_type_resolver import FieldTypeResolver
from fieldtypes.exceptions import UnresolvableTypeError
from fieldtypes.metadata.descriptors import FieldDescriptor
from fieldtypes.metadata.provider import SchemaMetadataProvider
from tests.conftest import ORDER, SCHEMA


class TestResolveFieldTypes:

    def test_documented_union_with_import(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("foo")) == ["App.Models.Foo", "null"]

    def test_detect_then_resolve_each_token(self, field_resolver, order_field):
        field = order_field("foo")
        detected = field_resolver.detect_field_types(field)

        assert field_resolver.resolve_types(detected, field) == ["App.Models.Foo", "null"]

    def test_native_class_type_is_resolved(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("customer")) == ["App.Models.Foo", "null"]

    def test_collection_through_namespace(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("bars")) == ["App.Current.Bar[]"]

    def test_mixin_resolution(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("auditor")) == ["App.Audit.Auditor[]"]

    def test_array_fallback(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("tags")) == ["array"]

    def test_accessor_type_is_resolved(self):
        provider = SchemaMetadataProvider.from_dict({
            "classes": [
                {"name": "Shop.Customer", "namespace": "Shop"},
                {
                    "name": "Shop.Cart",
                    "namespace": "Shop",
                    "methods": [{"name": "getOwner", "return_type": "Customer", "nullable": True}],
                    "fields": [{"name": "owner"}],
                },
            ],
        })

        types = FieldTypeResolver(provider).resolve_property_types("Shop.Cart", "owner")

        assert types == ["Shop.Customer", "null"]

    def test_untyped_field_is_empty(self, field_resolver, order_field):
        assert field_resolver.resolve_field_types(order_field("untyped")) == []

    def test_unresolvable_field_raises(self, field_resolver, order_field):
        with pytest.raises(UnresolvableTypeError) as exc_info:
            field_resolver.resolve_field_types(order_field("ghost"))

        assert (exc_info.value.class_name, exc_info.value.field_name, exc_info.value.token) == (
            ORDER, "ghost", "Ghost",
        )

    def test_unresolvable_native_type_raises(self, field_resolver):
        field = FieldDescriptor("mystery", ORDER, native_type="Mystery")

        with pytest.raises(UnresolvableTypeError):
            field_resolver.resolve_field_types(field)

    def test_resolve_property_types(self, field_resolver):
        assert field_resolver.resolve_property_types(ORDER, "price") == ["App.Values.Money"]

    def test_unknown_property(self, field_resolver):
        with pytest.raises(KeyError):
            field_resolver.resolve_property_types(ORDER, "nope")

    def test_clear_cache_keeps_results(self, field_resolver, order_field):
        before = field_resolver.resolve_field_types(order_field("auditor"))
        field_resolver.clear_cache()

        assert field_resolver.resolve_field_types(order_field("auditor")) == before


class TestSchemaProvider:

    def test_from_json_file(self, tmp_path):
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps(SCHEMA), encoding="utf-8")

        provider = SchemaMetadataProvider.from_json_file(schema_path)

        assert FieldTypeResolver(provider).resolve_property_types(ORDER, "foo") == ["App.Models.Foo", "null"]

    def test_imports_as_pairs(self):
        provider = SchemaMetadataProvider.from_dict({
            "classes": [{"name": "A", "imports": [["Foo", "X.Foo"], ["Bar", "X.Bar"]]}],
        })

        assert provider.get_class("A").imports == (("Foo", "X.Foo"), ("Bar", "X.Bar"))

    def test_field_and_method_descriptors(self, provider):
        order = provider.get_class(ORDER)
        field = provider.get_field(ORDER, "customer")

        assert order.has_field("customer")
        assert order.has_method("getDiscount")
        assert order.get_method("getDiscount").return_type_nullable is True
        assert order.get_method("missing") is None
        assert field.native_type == "App.Models.Foo"
        assert field.nullable is True

    def test_class_exists_covers_interfaces(self, provider):
        assert provider.class_exists("App.Contracts.HasId")
        assert provider.class_exists("App.Models.Foo")
        assert not provider.class_exists("App.Models.Nope")

    def test_unknown_class(self, provider):
        with pytest.raises(KeyError, match="Unknown class"):
            provider.get_class("App.Models.Nope")
