from django import forms
from django.contrib import admin
from django.utils.html import format_html
from adminsortable2.admin import SortableAdminMixin, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import (
    AttributeType,
    AttributeOption,
    Product,
    ProductAttribute,
    Variant,
    VariantAttribute,
)


# =============================================================================
# Inlines
# =============================================================================

class AttributeOptionInline(SortableInlineAdminMixin, admin.TabularInline):
    # Option order is the order values are combined in when generating
    model = AttributeOption
    extra = 1
    fields = ['value', 'display_order']


class ProductAttributeForm(forms.ModelForm):
    """Options of a product attribute must belong to its attribute type."""

    class Meta:
        model = ProductAttribute
        fields = ['attribute_type', 'options', 'display_order']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields['options'].queryset = AttributeOption.objects.filter(
                attribute_type_id=self.instance.attribute_type_id
            )

    def clean(self):
        cleaned_data = super().clean()
        attribute_type = cleaned_data.get('attribute_type')
        options = cleaned_data.get('options') or []
        if attribute_type is not None:
            foreign = [str(opt) for opt in options if opt.attribute_type_id != attribute_type.pk]
            if foreign:
                self.add_error('options', f"Not values of {attribute_type.name}: {', '.join(foreign)}")
        return cleaned_data


class ProductAttributeInline(admin.TabularInline):
    model = ProductAttribute
    form = ProductAttributeForm
    extra = 0
    fields = ['attribute_type', 'options', 'display_order']
    autocomplete_fields = ['attribute_type']
    filter_horizontal = ['options']


class VariantAttributeInline(admin.TabularInline):
    model = VariantAttribute
    extra = 0
    autocomplete_fields = ['attribute_option']


class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0
    fields = ['sku', 'price', 'sale_price', 'quantity', 'status']
    readonly_fields = ['sku']
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(AttributeType)
class AttributeTypeAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['name', 'slug', 'option_count', 'display_order']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [AttributeOptionInline]

    def option_count(self, obj):
        return obj.options.count()
    option_count.short_description = 'Values'


@admin.register(AttributeOption)
class AttributeOptionAdmin(admin.ModelAdmin):
    list_display = ['value', 'attribute_type', 'display_order']
    list_filter = ['attribute_type']
    search_fields = ['value', 'attribute_type__name']
    autocomplete_fields = ['attribute_type']


@admin.register(Product)
class ProductAdmin(SimpleHistoryAdmin):
    list_display = ['name', 'code', 'variant_count', 'active_variant_count', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'slug', 'code']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['variant_count', 'active_variant_count', 'created_at', 'updated_at']
    inlines = [ProductAttributeInline, VariantInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'code', 'description', 'status')
        }),
        ('Summary', {
            'fields': ('variant_count', 'active_variant_count', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Variant)
class VariantAdmin(SimpleHistoryAdmin):
    list_display = [
        'sku', 'product', 'price', 'sale_price',
        'quantity', 'stock_status_display', 'status'
    ]
    list_filter = ['product', 'status']
    list_editable = ['price', 'quantity', 'status']
    search_fields = ['sku', 'product__name']
    autocomplete_fields = ['product']
    readonly_fields = ['created_at', 'updated_at', 'is_low_stock']
    inlines = [VariantAttributeInline]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('product', 'sku', 'status', 'image')
        }),
        ('Pricing', {
            'fields': ('price', 'sale_price')
        }),
        ('Inventory', {
            'fields': ('quantity', 'low_stock_threshold', 'is_low_stock')
        }),
        ('Info', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['activate_variants', 'deactivate_variants']

    def stock_status_display(self, obj):
        colors = {'in_stock': 'green', 'low_stock': 'orange', 'out_of_stock': 'red'}
        labels = {'in_stock': 'In stock', 'low_stock': 'Low stock', 'out_of_stock': 'Out of stock'}
        status = obj.stock_status
        return format_html('<span style="color: {};">{}</span>', colors[status], labels[status])
    stock_status_display.short_description = 'Stock'

    @admin.action(description='Activate selected variants')
    def activate_variants(self, request, queryset):
        count = queryset.update(status='active')
        self.message_user(request, f'{count} variants activated.')

    @admin.action(description='Deactivate selected variants')
    def deactivate_variants(self, request, queryset):
        count = queryset.update(status='inactive')
        self.message_user(request, f'{count} variants deactivated.')


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Variation Matrix Admin'
admin.site.site_title = 'Variation Matrix'
admin.site.index_title = 'Catalog administration'
