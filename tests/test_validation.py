# tests/test_validation.py
import pytest
from pydantic import ValidationError
from catalog.core import ProductIn, VariantIn, validate_product, MISSING_FIELDS_MESSAGE

def test_valid_product_is_normalised():
    result = validate_product(ProductIn(name="Shirt", price=19.99, category="Tops",
                                        variants=[VariantIn(color="red", size="M")]))
    assert result.ok
    assert result.product == {
        "name": "Shirt",
        "price": 19.99,
        "category": "Tops",
        "variants": [{"color": "red", "size": "M", "stock": 0}],
    }

def test_missing_variants_become_empty_list():
    result = validate_product(ProductIn(name="Shirt", price=1, category="Tops"))
    assert result.product["variants"] == []

def test_falsy_fields_are_rejected():
    for fields in ({"price": 1, "category": "Tops"},
                   {"name": "Shirt", "price": 0, "category": "Tops"},
                   {"name": "Shirt", "price": 1, "category": ""}):
        result = validate_product(ProductIn(**fields))
        assert not result.ok
        assert result.error == MISSING_FIELDS_MESSAGE
        assert result.product is None

def test_variant_needs_color_and_size():
    result = validate_product(ProductIn(name="Shirt", price=1, category="Tops", variants=[VariantIn(color="red")]))
    assert not result.ok
    assert "color, size" in result.error

def test_same_color_different_size_is_allowed():
    result = validate_product(ProductIn(name="Shirt", price=1, category="Tops",
                                        variants=[VariantIn(color="red", size="M"), VariantIn(color="red", size="L")]))
    assert result.ok

def test_non_finite_price_fails_schema():
    with pytest.raises(ValidationError):
        ProductIn(name="Shirt", price=float("nan"), category="Tops")
    with pytest.raises(ValidationError):
        ProductIn(name="Shirt", price=float("inf"), category="Tops")
