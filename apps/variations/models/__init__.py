"""
Models for products with attribute-driven variants.

Model Hierarchy:
- AttributeType: Attribute definitions (Size, Color)
- AttributeOption: Values of each attribute (S, M, Red, Blue)
- Product: Base product
- ProductAttribute: Attributes a product varies by, with its chosen values
- Variant: Individual SKU with price and stock, one per value combination
"""

from .attribute import AttributeType, AttributeOption
from .product import Product, ProductAttribute
from .variant import Variant, VariantAttribute

__all__ = [
    'AttributeType',
    'AttributeOption',
    'Product',
    'ProductAttribute',
    'Variant',
    'VariantAttribute',
]
