from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from apps.variations.services.variation import STATUS_ACTIVE, STATUS_CHOICES


class Variant(models.Model):
    """
    Individual SKU with its own price and stock.
    Each variant is a unique combination of attribute options.
    """
    product = models.ForeignKey(
        'variations.Product',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Product'
    )
    sku = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='SKU'
    )

    # Pricing
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Price'
    )
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Sale price'
    )

    # Inventory
    quantity = models.IntegerField(
        default=0,
        verbose_name='Stock quantity'
    )
    low_stock_threshold = models.PositiveIntegerField(
        default=5,
        verbose_name='Low stock threshold'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        verbose_name='Status'
    )
    image = models.CharField(
        max_length=500,
        blank=True,
        verbose_name='Image URL'
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # Attribute options for this variant
    attribute_options = models.ManyToManyField(
        'variations.AttributeOption',
        through='VariantAttribute',
        related_name='variants',
        verbose_name='Attribute values'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['product', 'id']
        verbose_name = 'Variant'
        verbose_name_plural = 'Variants'

    def __str__(self):
        return self.sku

    @property
    def is_low_stock(self):
        return 0 < self.quantity <= self.low_stock_threshold

    @property
    def stock_status(self):
        if self.quantity <= 0:
            return 'out_of_stock'
        if self.quantity <= self.low_stock_threshold:
            return 'low_stock'
        return 'in_stock'

    def get_attribute_pairs(self):
        """Return [(attribute_type_id, option_id), ...] in attribute display order."""
        links = self.variantattribute_set.select_related(
            'attribute_option__attribute_type'
        ).order_by('attribute_option__attribute_type__display_order', 'attribute_option__attribute_type_id')
        return [
            (va.attribute_option.attribute_type_id, va.attribute_option_id)
            for va in links
        ]


class VariantAttribute(models.Model):
    """
    Through model linking Variant to AttributeOption.
    Ensures each variant has only one value per attribute type.
    """
    variant = models.ForeignKey(
        Variant,
        on_delete=models.CASCADE,
        verbose_name='Variant'
    )
    attribute_option = models.ForeignKey(
        'variations.AttributeOption',
        on_delete=models.CASCADE,
        verbose_name='Attribute value'
    )

    class Meta:
        unique_together = ['variant', 'attribute_option']
        verbose_name = 'Variant attribute'
        verbose_name_plural = 'Variant attributes'

    def __str__(self):
        return f"{self.variant.sku} - {self.attribute_option}"

    def save(self, *args, **kwargs):
        # Ensure only one option per attribute type per variant
        existing = VariantAttribute.objects.filter(
            variant=self.variant,
            attribute_option__attribute_type=self.attribute_option.attribute_type
        ).exclude(pk=self.pk)

        if existing.exists():
            existing.delete()

        super().save(*args, **kwargs)
