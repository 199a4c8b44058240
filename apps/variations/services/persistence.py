"""
Backend side of the save contract: applies a validated session payload to the
database, and loads a product's saved state back into an edit session.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import transaction

from apps.variations.exceptions import PersistenceError
from apps.variations.models import (
    AttributeOption,
    Product,
    ProductAttribute,
    Variant,
    VariantAttribute,
)
from .catalog import AttributeCatalog, ModelAttributeCatalog
from .session import VariationEditSession
from .variation import Variation

logger = logging.getLogger(__name__)


def _decimal_or_none(value) -> Optional[Decimal]:
    if value is None or value == '':
        return None
    return Decimal(str(value))


class VariationPersistenceService:
    """
    Applies save payloads produced by VariationEditSession.to_payload().

    The payload is expected to have passed VariationSavePayloadSerializer.
    Every save runs in a single transaction: an id that does not belong to
    the product aborts the whole save.
    """

    @staticmethod
    @transaction.atomic
    def apply(product: Product, payload: Dict[str, Any]) -> Dict[str, int]:
        """
        Write attributes, variants and deletions for one product.

        Args:
            product: The product being edited
            payload: {'attributes': [...], 'variations': [...],
                      'delete_variation_ids': [...]}

        Returns:
            Counts {'created': n, 'updated': n, 'deleted': n}
        """
        attributes = payload.get('attributes') or []
        variations = payload.get('variations') or []
        delete_ids = list(payload.get('delete_variation_ids') or [])

        options_by_attr = VariationPersistenceService._save_attributes(product, attributes)

        # Deletions first so a regenerated combination can reuse its SKU
        deleted = 0
        if delete_ids:
            foreign = Variant.objects.filter(pk__in=delete_ids).exclude(product=product)
            if foreign.exists():
                raise PersistenceError(
                    f"Variations {sorted(foreign.values_list('pk', flat=True))} "
                    f"do not belong to {product.name}"
                )
            _, per_model = Variant.objects.filter(product=product, pk__in=delete_ids).delete()
            deleted = per_model.get(Variant._meta.label, 0)

        existing = {v.pk: v for v in product.variants.all()}
        for var_data in variations:
            variant_id = var_data.get('id')
            if variant_id is not None and variant_id not in existing:
                raise PersistenceError(
                    f"Variation {variant_id} does not belong to {product.name}"
                )

        VariationPersistenceService._check_skus(variations, delete_ids)
        VariationPersistenceService._release_renamed_skus(variations, existing)

        created = 0
        updated = 0

        for var_data in variations:
            variant_id = var_data.get('id')
            fields = {
                'sku': var_data['sku'].strip(),
                'price': _decimal_or_none(var_data.get('price')) or Decimal('0'),
                'sale_price': _decimal_or_none(var_data.get('sale_price')),
                'quantity': var_data.get('quantity', 0),
                'low_stock_threshold': var_data.get('low_stock_threshold', 5),
                'status': var_data.get('status') or 'active',
                'image': var_data.get('image') or '',
            }

            if variant_id is not None:
                variant = existing[variant_id]
                for name, value in fields.items():
                    setattr(variant, name, value)
                variant.save()
                updated += 1
            else:
                variant = Variant.objects.create(product=product, **fields)
                created += 1

            # Rewrite attribute links for this variant
            VariantAttribute.objects.filter(variant=variant).delete()
            for pair in var_data.get('attributes', []):
                option = options_by_attr.get(pair['attribute_id'], {}).get(pair['attribute_value_id'])
                if option is None:
                    option = VariationPersistenceService._lookup_option(
                        pair['attribute_id'], pair['attribute_value_id']
                    )
                VariantAttribute.objects.create(variant=variant, attribute_option=option)

        logger.info(
            "Saved variations for product %s: %d created, %d updated, %d deleted",
            product.pk, created, updated, deleted
        )
        return {'created': created, 'updated': updated, 'deleted': deleted}

    @staticmethod
    def _save_attributes(product: Product, attributes) -> Dict[Any, Dict[Any, AttributeOption]]:
        """Replace the product's attribute rows; return {attr_id: {value_id: option}}."""
        options_by_attr = {}
        keep_ids = []

        for order, attr_data in enumerate(attributes):
            attribute_id = attr_data['attribute_id']
            value_ids = list(attr_data.get('attribute_value_ids') or [])

            options = list(AttributeOption.objects.filter(
                attribute_type_id=attribute_id, pk__in=value_ids
            ))
            if len(options) != len(set(value_ids)):
                found = {opt.pk for opt in options}
                missing = sorted(v for v in set(value_ids) if v not in found)
                raise PersistenceError(
                    f"Values {missing} do not belong to attribute {attribute_id}",
                    attribute_id=attribute_id
                )

            product_attr, _ = ProductAttribute.objects.update_or_create(
                product=product,
                attribute_type_id=attribute_id,
                defaults={'display_order': order}
            )
            product_attr.options.set(options)
            keep_ids.append(product_attr.pk)
            options_by_attr[attribute_id] = {opt.pk: opt for opt in options}

        product.product_attributes.exclude(pk__in=keep_ids).delete()
        return options_by_attr

    @staticmethod
    def _check_skus(variations, delete_ids) -> None:
        """Reject SKUs repeated in the payload or held by a variant the save keeps."""
        seen = set()
        for var_data in variations:
            sku = var_data['sku'].strip()
            if sku in seen:
                raise PersistenceError(f"SKU {sku} is used by more than one variation")
            seen.add(sku)

        # Variants rewritten or deleted by this save give up their SKU
        released = set(delete_ids)
        released.update(v['id'] for v in variations if v.get('id') is not None)
        taken = Variant.objects.filter(sku__in=seen).exclude(
            pk__in=released
        ).select_related('product').order_by('sku').first()
        if taken is not None:
            raise PersistenceError(
                f"SKU {taken.sku} is already used by {taken.product.name}"
            )

    @staticmethod
    def _release_renamed_skus(variations, existing) -> None:
        """Move renamed variants to a temporary SKU so swaps save row by row."""
        for var_data in variations:
            variant_id = var_data.get('id')
            if variant_id is None:
                continue
            if existing[variant_id].sku != var_data['sku'].strip():
                Variant.objects.filter(pk=variant_id).update(sku=f"~renaming-{variant_id}")

    @staticmethod
    def _lookup_option(attribute_id, value_id) -> AttributeOption:
        option = AttributeOption.objects.filter(
            pk=value_id, attribute_type_id=attribute_id
        ).first()
        if option is None:
            raise PersistenceError(
                f"Value {value_id} does not belong to attribute {attribute_id}",
                attribute_id=attribute_id
            )
        return option

    @staticmethod
    def load_session(
        product: Product,
        catalog: Optional[AttributeCatalog] = None,
        sku_token: Optional[str] = None
    ) -> VariationEditSession:
        """Build an edit session from the product's saved rows."""
        session = VariationEditSession(catalog or ModelAttributeCatalog(), sku_token=sku_token)

        attributes = []
        product_attrs = product.product_attributes.select_related(
            'attribute_type'
        ).prefetch_related('options')
        for product_attr in product_attrs:
            attributes.append({
                'attribute_id': product_attr.attribute_type_id,
                'name': product_attr.attribute_type.name,
                'attribute_value_ids': [opt.pk for opt in product_attr.options.all()],
            })

        variations = []
        for variant in product.variants.all():
            variations.append(Variation(
                id=variant.pk,
                attributes=tuple(variant.get_attribute_pairs()),
                sku=variant.sku,
                price=str(variant.price),
                sale_price='' if variant.sale_price is None else str(variant.sale_price),
                quantity=variant.quantity,
                low_stock_threshold=variant.low_stock_threshold,
                status=variant.status,
                image=variant.image or None,
            ))

        session.load(attributes, variations)
        return session
