"""
Attribute/value catalog collaborators.

The engine only reads the catalog: it needs an attribute's display name and
its full ordered value list to validate selections and to order them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

from apps.variations.exceptions import NotFoundError


@dataclass(frozen=True)
class CatalogValue:
    id: Hashable
    name: str


@dataclass(frozen=True)
class CatalogAttribute:
    """An attribute definition with its values in display order."""
    id: Hashable
    name: str
    values: Tuple[CatalogValue, ...] = ()

    @property
    def value_ids(self) -> Tuple[Hashable, ...]:
        return tuple(v.id for v in self.values)

    def value_name(self, value_id: Hashable) -> Optional[str]:
        for value in self.values:
            if value.id == value_id:
                return value.name
        return None


class AttributeCatalog(ABC):
    """Read-only lookup of attribute definitions."""

    @abstractmethod
    def get_attribute(self, attribute_id: Hashable) -> CatalogAttribute:
        """
        Return the attribute definition.

        Raises:
            NotFoundError: if the catalog has no such attribute
        """


class InMemoryAttributeCatalog(AttributeCatalog):
    """
    Catalog held in memory, built from the attribute listing shape:

        [{"id": 1, "name": "Size",
          "attribute_values": [{"id": 10, "value": "S"}, ...]}, ...]
    """

    def __init__(self, attributes: Iterable[CatalogAttribute] = ()):
        self._attributes: Dict[Hashable, CatalogAttribute] = {
            attr.id: attr for attr in attributes
        }

    @classmethod
    def from_listing(cls, listing: Iterable[Dict[str, Any]]) -> 'InMemoryAttributeCatalog':
        attributes = []
        for item in listing:
            values = tuple(
                CatalogValue(id=v['id'], name=str(v.get('value', v.get('name', ''))))
                for v in item.get('attribute_values', [])
            )
            attributes.append(CatalogAttribute(id=item['id'], name=item['name'], values=values))
        return cls(attributes)

    def get_attribute(self, attribute_id: Hashable) -> CatalogAttribute:
        try:
            return self._attributes[attribute_id]
        except KeyError:
            raise NotFoundError(attribute_id, kind='attribute') from None

    def __contains__(self, attribute_id: Hashable) -> bool:
        return attribute_id in self._attributes


class ModelAttributeCatalog(AttributeCatalog):
    """Catalog backed by AttributeType/AttributeOption rows."""

    def __init__(self):
        self._cache: Dict[Hashable, CatalogAttribute] = {}

    def get_attribute(self, attribute_id: Hashable) -> CatalogAttribute:
        if attribute_id in self._cache:
            return self._cache[attribute_id]

        from apps.variations.models import AttributeType

        attr_type = AttributeType.objects.prefetch_related('options').filter(
            pk=attribute_id
        ).first()
        if attr_type is None:
            raise NotFoundError(attribute_id, kind='attribute')

        # Options come back in Meta.ordering: display_order, value
        values: List[CatalogValue] = [
            CatalogValue(id=opt.pk, name=opt.value)
            for opt in attr_type.options.all()
        ]
        attribute = CatalogAttribute(id=attr_type.pk, name=attr_type.name, values=tuple(values))
        self._cache[attribute_id] = attribute
        return attribute
