from django.db import models
from django.utils.text import slugify
from simple_history.models import HistoricalRecords

from apps.variations.services.variation import STATUS_ACTIVE, STATUS_CHOICES


class Product(models.Model):
    """
    Base product whose purchasable SKUs are its variants.
    Example: "Classic Tee" varying by Size and Color.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=255,
        unique=True,
        verbose_name='Slug'
    )
    code = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Code'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        verbose_name='Status'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['name']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    @property
    def variant_count(self):
        return self.variants.count()

    @property
    def active_variant_count(self):
        return self.variants.filter(status=STATUS_ACTIVE).count()


class ProductAttribute(models.Model):
    """
    An attribute attached to a product for variations, with the subset of
    its values the product uses.
    """
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='product_attributes',
        verbose_name='Product'
    )
    attribute_type = models.ForeignKey(
        'variations.AttributeType',
        on_delete=models.CASCADE,
        related_name='product_attributes',
        verbose_name='Attribute'
    )
    options = models.ManyToManyField(
        'variations.AttributeOption',
        blank=True,
        related_name='product_attributes',
        verbose_name='Selected values'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['product', 'display_order']
        unique_together = ['product', 'attribute_type']
        verbose_name = 'Product attribute'
        verbose_name_plural = 'Product attributes'

    def __str__(self):
        return f"{self.product.name} - {self.attribute_type.name}"
