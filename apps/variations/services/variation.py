from dataclasses import dataclass, field, replace
from typing import Any, Dict, Hashable, Optional, Tuple

from .combinations import CombinationKey, Pair


STATUS_ACTIVE = 'active'
STATUS_INACTIVE = 'inactive'
STATUS_CHOICES = [
    (STATUS_ACTIVE, 'Active'),
    (STATUS_INACTIVE, 'Inactive'),
]
VALID_STATUSES = frozenset(value for value, _ in STATUS_CHOICES)

EDITABLE_FIELDS = frozenset([
    'sku', 'price', 'sale_price', 'quantity',
    'low_stock_threshold', 'status', 'image',
])


@dataclass
class Variation:
    """
    A single purchasable SKU: one combination of attribute values.

    Attributes:
        attributes: (attribute_id, value_id) pairs, one per dimension
        sku: Stock keeping unit, a placeholder until the user edits it
        price: Regular price as entered (the engine does no pricing)
        sale_price: Sale price as entered
        quantity: Units in stock
        low_stock_threshold: Quantity at which stock counts as low
        status: 'active' or 'inactive'
        image: Optional image URL
        id: Backend id, None until the variation is saved
    """
    attributes: Tuple[Pair, ...]
    sku: str = ''
    price: str = ''
    sale_price: str = ''
    quantity: int = 0
    low_stock_threshold: int = 5
    status: str = STATUS_ACTIVE
    image: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        self.attributes = tuple((a, v) for a, v in self.attributes)

    @property
    def key(self) -> CombinationKey:
        return CombinationKey.from_pairs(self.attributes)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def copy(self, **changes) -> 'Variation':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the save payload shape."""
        data = {}
        if self.id is not None:
            data['id'] = self.id
        data.update({
            'sku': self.sku,
            'price': self.price,
            'sale_price': self.sale_price,
            'quantity': self.quantity,
            'low_stock_threshold': self.low_stock_threshold,
            'status': self.status,
            'attributes': [
                {'attribute_id': attr_id, 'attribute_value_id': value_id}
                for attr_id, value_id in self.attributes
            ],
        })
        if self.image:
            data['image'] = self.image
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Variation':
        """Create an instance from the payload/API shape."""
        attributes = tuple(
            (a['attribute_id'], a['attribute_value_id'])
            for a in data.get('attributes', [])
        )
        price = data.get('price')
        sale_price = data.get('sale_price')
        threshold = data.get('low_stock_threshold')
        return cls(
            attributes=attributes,
            sku=data.get('sku') or '',
            price='' if price is None else str(price),
            sale_price='' if sale_price is None else str(sale_price),
            quantity=int(data.get('quantity') or 0),
            low_stock_threshold=5 if threshold is None else int(threshold),
            status=data.get('status') or STATUS_ACTIVE,
            image=data.get('image') or None,
            id=data.get('id'),
        )
