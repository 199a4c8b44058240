"""
Attributes attached to a product and the values chosen for each.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, List, Optional, Tuple

from apps.variations.exceptions import (
    DuplicateAttributeError,
    NotFoundError,
    UnknownValueError,
)
from .catalog import AttributeCatalog, CatalogAttribute

logger = logging.getLogger(__name__)


@dataclass
class AttributeSelection:
    """
    One attribute attached to a product.

    Attributes:
        attribute_id: Id of the attribute definition in the catalog
        name: Display name copied from the catalog
        selected_value_ids: Chosen values, unique, in catalog order
        used_for_variations: Whether the attribute is a variation dimension
        visible_on_product: Display-only flag
    """
    attribute_id: Hashable
    name: str
    selected_value_ids: Tuple[Hashable, ...] = ()
    used_for_variations: bool = True
    visible_on_product: bool = True

    def to_dict(self) -> dict:
        return {
            'attribute_id': self.attribute_id,
            'attribute_value_ids': list(self.selected_value_ids),
        }


class AttributeSelectionSet:
    """
    Ordered set of AttributeSelection objects for one product.

    Attach order is preserved and drives the dimension order of generation.
    Every value id is validated against the catalog before it is stored.
    """

    def __init__(self, catalog: AttributeCatalog):
        self.catalog = catalog
        self._selections: 'OrderedDict[Hashable, AttributeSelection]' = OrderedDict()

    def __iter__(self) -> Iterator[AttributeSelection]:
        return iter(list(self._selections.values()))

    def __len__(self) -> int:
        return len(self._selections)

    def __contains__(self, attribute_id: Hashable) -> bool:
        return attribute_id in self._selections

    def get(self, attribute_id: Hashable) -> AttributeSelection:
        try:
            return self._selections[attribute_id]
        except KeyError:
            raise NotFoundError(attribute_id, kind='attribute') from None

    def participating(self) -> List[AttributeSelection]:
        """Selections that contribute a dimension, in attach order."""
        return [s for s in self._selections.values() if s.used_for_variations]

    def attach(
        self,
        attribute_id: Hashable,
        name: Optional[str] = None,
        initial_value_ids: Iterable[Hashable] = (),
        used_for_variations: bool = True,
        visible_on_product: bool = True
    ) -> AttributeSelection:
        """
        Attach an attribute to the product.

        Raises:
            DuplicateAttributeError: if the attribute is already attached
            NotFoundError: if the catalog does not know the attribute
            UnknownValueError: if an initial value is not one of its values
        """
        if attribute_id in self._selections:
            raise DuplicateAttributeError(attribute_id, self._selections[attribute_id].name)

        definition = self.catalog.get_attribute(attribute_id)
        selection = AttributeSelection(
            attribute_id=attribute_id,
            name=name or definition.name,
            selected_value_ids=self._validated(definition, initial_value_ids),
            used_for_variations=used_for_variations,
            visible_on_product=visible_on_product,
        )
        self._selections[attribute_id] = selection
        logger.debug("Attached attribute %s (%s)", attribute_id, selection.name)
        return selection

    def set_selected_values(
        self,
        attribute_id: Hashable,
        value_ids: Iterable[Hashable]
    ) -> AttributeSelection:
        """Replace the chosen values of one attribute."""
        selection = self.get(attribute_id)
        definition = self.catalog.get_attribute(attribute_id)
        selection.selected_value_ids = self._validated(definition, value_ids, selection.name)
        return selection

    def detach(self, attribute_id: Hashable) -> AttributeSelection:
        """
        Remove an attribute.

        Existing variations are not touched here: they keep referencing the
        detached attribute until the next generation drops them.
        """
        selection = self.get(attribute_id)
        del self._selections[attribute_id]
        logger.debug("Detached attribute %s (%s)", attribute_id, selection.name)
        return selection

    def toggle_used_for_variations(self, attribute_id: Hashable, flag: bool) -> AttributeSelection:
        selection = self.get(attribute_id)
        selection.used_for_variations = bool(flag)
        return selection

    def toggle_visible_on_product(self, attribute_id: Hashable, flag: bool) -> AttributeSelection:
        selection = self.get(attribute_id)
        selection.visible_on_product = bool(flag)
        return selection

    def value_name(self, attribute_id: Hashable, value_id: Hashable) -> Optional[str]:
        return self.catalog.get_attribute(attribute_id).value_name(value_id)

    def clear(self) -> None:
        self._selections.clear()

    @staticmethod
    def _validated(
        definition: CatalogAttribute,
        value_ids: Iterable[Hashable],
        name: str = ''
    ) -> Tuple[Hashable, ...]:
        requested = set(value_ids)
        known = definition.value_ids
        unknown = [v for v in requested if v not in known]
        if unknown:
            raise UnknownValueError(
                definition.id,
                sorted(unknown, key=str),
                name or definition.name
            )
        return tuple(v for v in known if v in requested)
