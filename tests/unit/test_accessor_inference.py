"""Unit tests for accessor lookup."""

import pytest

from fieldtypes.config import ResolverConfig
from fieldtypes.core.accessor_inference import AccessorInference, AccessorType
from fieldtypes.metadata.descriptors import ClassDescriptor, FieldDescriptor, MethodDescriptor
from fieldtypes.metadata.provider import SchemaMetadataProvider
from tests.conftest import ORDER


@pytest.fixture
def inference(provider):
    return AccessorInference(provider)


def _provider_with_methods(*methods):
    provider = SchemaMetadataProvider()
    provider.register_class(ClassDescriptor(name="Shop.Item", methods=tuple(methods)))
    return provider


class TestFindAccessor:

    def test_field_name_is_matched_case_insensitively(self, inference):
        method = inference.find_accessor(FieldDescriptor("QUANTITIES", ORDER))

        assert method.name == "getQuantities"

    def test_methods_with_parameters_are_skipped(self, inference):
        assert inference.find_accessor(FieldDescriptor("customerLabel", ORDER)) is None

    def test_getter_marker_is_required(self):
        provider = _provider_with_methods(MethodDescriptor("price", 0, "float"))

        assert AccessorInference(provider).find_accessor(FieldDescriptor("price", "Shop.Item")) is None

    def test_getter_marker_is_a_substring(self):
        # No prefix requirement: any method containing the marker and the field name qualifies
        provider = _provider_with_methods(MethodDescriptor("budget_price", 0, "float"))

        method = AccessorInference(provider).find_accessor(FieldDescriptor("price", "Shop.Item"))

        assert method.name == "budget_price"

    def test_first_match_in_provider_order(self):
        provider = _provider_with_methods(
            MethodDescriptor("getPriceLabel", 0, "string"),
            MethodDescriptor("getPrice", 0, "float"),
        )

        method = AccessorInference(provider).find_accessor(FieldDescriptor("price", "Shop.Item"))

        assert method.name == "getPriceLabel"

    def test_custom_getter_marker(self):
        provider = _provider_with_methods(
            MethodDescriptor("getPrice", 0, "string"),
            MethodDescriptor("fetch_price", 0, "float"),
        )
        inference = AccessorInference(provider, ResolverConfig(getter_marker="fetch"))

        assert inference.find_accessor(FieldDescriptor("price", "Shop.Item")).name == "fetch_price"


class TestInfer:

    def test_return_type_and_nullability(self, inference):
        assert inference.infer(FieldDescriptor("discount", ORDER)) == AccessorType(
            method_name="getDiscount", return_type="float", nullable=True,
        )

    def test_accessor_without_return_type(self, inference):
        result = inference.infer(FieldDescriptor("notes", ORDER))

        assert result is not None
        assert result.return_type is None

    def test_no_accessor(self, inference):
        assert inference.infer(FieldDescriptor("untyped", ORDER)) is None
