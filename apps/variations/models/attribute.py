from django.db import models
from django.utils.text import slugify


class AttributeType(models.Model):
    """
    Attribute definitions that products can vary by.
    Examples: Size, Color, Material.
    """
    name = models.CharField(
        max_length=100,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=100,
        unique=True,
        verbose_name='Slug'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['display_order', 'name']
        verbose_name = 'Attribute'
        verbose_name_plural = 'Attributes'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class AttributeOption(models.Model):
    """
    One value of an attribute.

    The catalog order (display_order, then value) is the order in which
    selected values are combined when variations are generated.

    Examples:
        - AttributeType="Size" -> Options: "S", "M", "L"
        - AttributeType="Color" -> Options: "Red", "Blue"
    """
    attribute_type = models.ForeignKey(
        AttributeType,
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name='Attribute'
    )
    value = models.CharField(
        max_length=100,
        verbose_name='Value'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['display_order', 'value']
        unique_together = ['attribute_type', 'value']
        verbose_name = 'Attribute value'
        verbose_name_plural = 'Attribute values'

    def __str__(self):
        return f"{self.attribute_type.name}: {self.value}"
