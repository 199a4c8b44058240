from decimal import Decimal, InvalidOperation

from rest_framework import serializers

from apps.variations.services import CombinationKey, STATUS_CHOICES


# =============================================================================
# Shared pieces
# =============================================================================

class VariationAttributeSerializer(serializers.Serializer):
    attribute_id = serializers.IntegerField()
    attribute_value_id = serializers.IntegerField()


class PayloadAttributeSerializer(serializers.Serializer):
    """One attribute entry of a session payload."""
    attribute_id = serializers.IntegerField()
    attribute_value_ids = serializers.ListField(
        child=serializers.IntegerField(), allow_empty=True
    )
    used_for_variations = serializers.BooleanField(required=False, default=True)
    visible_on_product = serializers.BooleanField(required=False, default=True)


def _unique_combinations(variations):
    seen = set()
    for variation in variations:
        key = CombinationKey.from_pairs(
            (a['attribute_id'], a['attribute_value_id'])
            for a in variation.get('attributes', [])
        )
        if key in seen:
            raise serializers.ValidationError(
                "You have duplicate variations with the same attribute combinations"
            )
        seen.add(key)


def _unique_skus(variations):
    seen = set()
    for variation in variations:
        sku = variation['sku'].strip()
        if sku in seen:
            raise serializers.ValidationError(f"SKU {sku} is used by more than one variation")
        seen.add(sku)


# =============================================================================
# Editing (generate) payload
# =============================================================================

class DraftVariationSerializer(serializers.Serializer):
    """A variation as held by an edit session; prices may still be blank."""
    id = serializers.IntegerField(required=False, allow_null=True)
    sku = serializers.CharField(max_length=100, allow_blank=True, required=False, default='')
    price = serializers.CharField(allow_blank=True, required=False, default='')
    sale_price = serializers.CharField(allow_blank=True, required=False, default='')
    quantity = serializers.IntegerField(required=False, default=0)
    low_stock_threshold = serializers.IntegerField(required=False, default=5)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False, default='active')
    image = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    attributes = VariationAttributeSerializer(many=True)


class SessionPayloadSerializer(serializers.Serializer):
    """Request body for regenerating variations of an edit session."""
    attributes = PayloadAttributeSerializer(many=True)
    variations = DraftVariationSerializer(many=True, required=False, default=list)
    delete_variation_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )

    def validate_variations(self, value):
        _unique_combinations(value)
        return value


# =============================================================================
# Save payload
# =============================================================================

class SaveAttributeSerializer(serializers.Serializer):
    attribute_id = serializers.IntegerField()
    attribute_value_ids = serializers.ListField(
        child=serializers.IntegerField(),
        min_length=1,
        error_messages={'min_length': 'At least one attribute value is required'}
    )


class SaveVariationSerializer(serializers.Serializer):
    """A variation as sent on save, with the product form rules applied."""
    id = serializers.IntegerField(required=False)
    sku = serializers.CharField(min_length=2, max_length=100)
    price = serializers.CharField()
    sale_price = serializers.CharField(allow_blank=True, required=False, default='')
    quantity = serializers.IntegerField(min_value=0)
    low_stock_threshold = serializers.IntegerField(min_value=0, max_value=1000)
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    image = serializers.CharField(allow_blank=True, required=False)
    attributes = VariationAttributeSerializer(many=True, allow_empty=False)

    def validate_price(self, value):
        try:
            price = Decimal(value)
        except InvalidOperation:
            raise serializers.ValidationError("Price must be a valid number greater than 0")
        if not price.is_finite() or price <= 0:
            raise serializers.ValidationError("Price must be a valid number greater than 0")
        return value

    def validate_sale_price(self, value):
        if value == '':
            return value
        try:
            sale_price = Decimal(value)
        except InvalidOperation:
            raise serializers.ValidationError("Sale price must be a valid number")
        if not sale_price.is_finite() or sale_price < 0:
            raise serializers.ValidationError("Sale price must be a valid number")
        return value

    def validate(self, attrs):
        sale_price = attrs.get('sale_price')
        if sale_price and Decimal(sale_price) > Decimal(attrs['price']):
            raise serializers.ValidationError({
                'sale_price': "Sale price must be less than or equal to regular price"
            })
        return attrs


class VariationSavePayloadSerializer(serializers.Serializer):
    """The payload produced by VariationEditSession.to_payload()."""
    attributes = SaveAttributeSerializer(many=True)
    variations = SaveVariationSerializer(many=True)
    delete_variation_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )

    def validate_variations(self, value):
        _unique_combinations(value)
        _unique_skus(value)
        return value
