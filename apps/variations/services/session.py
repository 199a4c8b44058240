"""
The edit session: one product's attribute selections, variations and
deletion ledger, mutated by a single editing form.
"""

import logging
from typing import Any, Dict, Hashable, Iterable, Optional

from apps.variations.conf import get_setting
from apps.variations.exceptions import (
    DuplicateCombinationError,
    IncompleteAttributeError,
    NoVariationAttributesError,
    UnknownValueError,
)
from .catalog import AttributeCatalog
from .combinations import Combination, generate
from .ledger import DeletionLedger
from .reconciler import PlaceholderSkuSequence, ReconcileResult, reconcile
from .selection import AttributeSelectionSet
from .store import Target, VariationStore
from .variation import Variation

logger = logging.getLogger(__name__)


class VariationEditSession:
    """
    Explicit owner of the engine state for one product being edited.

    Generation is atomic: selections are only read, and the store and ledger
    are written after generate and reconcile have both succeeded.

    Usage:
        session = VariationEditSession(catalog)
        session.selections.attach(size_id, initial_value_ids=[s_id, m_id])
        session.generate_variations()
        session.update_variation(0, {'price': '100.00'})
        payload = session.to_payload()
    """

    def __init__(
        self,
        catalog: AttributeCatalog,
        sku_token: Optional[str] = None
    ):
        self.catalog = catalog
        self.selections = AttributeSelectionSet(catalog)
        self.ledger = DeletionLedger()
        self.store = VariationStore(ledger=self.ledger)
        self.placeholder_skus = PlaceholderSkuSequence(
            prefix=get_setting('PLACEHOLDER_SKU_PREFIX'),
            token=sku_token
        )
        self._manual_counter = 0

    # =========================================================================
    # Generation
    # =========================================================================

    def generate_variations(self) -> ReconcileResult:
        """
        Regenerate the variation set from the current selections.

        Raises:
            IncompleteAttributeError: a variation attribute has no values
            NoVariationAttributesError: no attribute is used for variations
        """
        combinations = generate(self.selections)
        result = reconcile(
            combinations,
            self.store,
            placeholder_sku=self.placeholder_skus.next_pass(),
            low_stock_threshold=get_setting('DEFAULT_LOW_STOCK_THRESHOLD'),
            status=get_setting('DEFAULT_STATUS'),
        )

        self.store.replace(result.merged)
        for variation in result.removed:
            if variation.is_persisted:
                self.ledger.record_deleted(variation.id)

        logger.info(
            "Generated %d combinations: %d kept, %d created, %d removed",
            len(combinations),
            len(result.merged) - len(result.created),
            len(result.created),
            len(result.removed)
        )
        return result

    # =========================================================================
    # Variation editing
    # =========================================================================

    def add_manual_variation(self, value_ids: Dict[Hashable, Hashable]) -> Variation:
        """
        Add one variation for a hand-picked combination.

        Args:
            value_ids: {attribute_id: value_id} for every variation attribute

        Returns:
            The new variation, appended to the store
        """
        participating = self.selections.participating()
        if not participating:
            raise NoVariationAttributesError()

        pairs = []
        sku_parts = []
        for selection in participating:
            value_id = value_ids.get(selection.attribute_id)
            if value_id is None:
                raise IncompleteAttributeError(selection.attribute_id, selection.name)
            if value_id not in selection.selected_value_ids:
                raise UnknownValueError(selection.attribute_id, [value_id], selection.name)
            pairs.append((selection.attribute_id, value_id))
            value_name = self.selections.value_name(selection.attribute_id, value_id) or 'UNKNOWN'
            sku_parts.append(value_name[:3].upper())

        combination = Combination(tuple(pairs))
        if self.store.find(combination.key) is not None:
            raise DuplicateCombinationError(combination.key)

        self._manual_counter += 1
        sku = '-'.join(
            [get_setting('MANUAL_SKU_PREFIX')] + sku_parts +
            [self.placeholder_skus.token, str(self._manual_counter)]
        )
        variation = Variation(
            attributes=combination.pairs,
            sku=sku,
            low_stock_threshold=get_setting('DEFAULT_LOW_STOCK_THRESHOLD'),
            status=get_setting('DEFAULT_STATUS'),
        )
        self.store.add(variation)
        logger.debug("Added manual variation %s", sku)
        return variation

    def update_variation(self, target: Target, fields: Dict[str, Any]) -> Variation:
        return self.store.update(target, fields)

    def remove_variation(self, target: Target) -> Variation:
        return self.store.remove(target)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_payload(self) -> Dict[str, Any]:
        """Build the save payload handed to the persistence collaborator."""
        return {
            'attributes': [s.to_dict() for s in self.selections.participating()],
            'variations': [
                v.to_dict() for v in self.store
                if v.id is None or v.id not in self.ledger
            ],
            'delete_variation_ids': self.ledger.snapshot(),
        }

    @classmethod
    def from_payload(
        cls,
        data: Dict[str, Any],
        catalog: AttributeCatalog,
        sku_token: Optional[str] = None
    ) -> 'VariationEditSession':
        """
        Rebuild a session from a saved payload or a product response.

        Attribute entries may carry ``used_for_variations`` and
        ``visible_on_product`` flags; both default to True.
        """
        session = cls(catalog, sku_token=sku_token)
        session.load(
            data.get('attributes') or [],
            [Variation.from_dict(v) for v in data.get('variations') or []],
            data.get('delete_variation_ids') or []
        )
        return session

    def load(
        self,
        attributes: Iterable[Dict[str, Any]],
        variations: Iterable[Variation],
        deleted_ids: Iterable[Hashable] = ()
    ) -> None:
        """Replace the whole session state (loading another product)."""
        self.reset()
        for item in attributes:
            self.selections.attach(
                item['attribute_id'],
                name=item.get('name'),
                initial_value_ids=item.get('attribute_value_ids') or [],
                used_for_variations=item.get('used_for_variations', True),
                visible_on_product=item.get('visible_on_product', True),
            )
        self.store.replace(variations)
        for variation_id in deleted_ids:
            self.ledger.record_deleted(variation_id)

    def reset(self) -> None:
        self.selections.clear()
        self.store.clear()
        self.ledger.reset()
        self._manual_counter = 0
