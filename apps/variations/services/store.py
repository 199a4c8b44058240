import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from apps.variations.exceptions import (
    DuplicateCombinationError,
    InvalidStatusError,
    NotEditableFieldError,
    NotFoundError,
)
from .combinations import Combination, CombinationKey
from .ledger import DeletionLedger
from .variation import EDITABLE_FIELDS, VALID_STATUSES, Variation

logger = logging.getLogger(__name__)

Target = Union[int, CombinationKey, Combination]


class VariationStore:
    """
    The authoritative, ordered list of variations being edited.

    No two variations may share a combination key. Every mutation validates
    first and only then changes the list, so a rejected call leaves the store
    as it was.
    """

    def __init__(
        self,
        variations: Iterable[Variation] = (),
        ledger: Optional[DeletionLedger] = None
    ):
        self.ledger = ledger if ledger is not None else DeletionLedger()
        self._variations: List[Variation] = []
        self.replace(variations)

    def __iter__(self) -> Iterator[Variation]:
        return iter(list(self._variations))

    def __len__(self) -> int:
        return len(self._variations)

    @property
    def variations(self) -> List[Variation]:
        return list(self._variations)

    def keys(self) -> List[CombinationKey]:
        return [v.key for v in self._variations]

    # =========================================================================
    # Lookup
    # =========================================================================

    def index_of(self, target: Target) -> int:
        if isinstance(target, Combination):
            target = target.key

        if isinstance(target, CombinationKey):
            for i, variation in enumerate(self._variations):
                if variation.key == target:
                    return i
            raise NotFoundError(target, kind='combination')

        if isinstance(target, int) and not isinstance(target, bool):
            if 0 <= target < len(self._variations):
                return target
            raise NotFoundError(target, kind='variation')

        raise TypeError(f"Cannot look up a variation by {type(target).__name__}")

    def get(self, target: Target) -> Variation:
        return self._variations[self.index_of(target)]

    def find(self, key: CombinationKey) -> Optional[Variation]:
        for variation in self._variations:
            if variation.key == key:
                return variation
        return None

    # =========================================================================
    # Mutations
    # =========================================================================

    def replace(self, variations: Iterable[Variation]) -> None:
        """
        Set the whole list, e.g. the merged result of a reconcile pass.

        Raises:
            DuplicateCombinationError: if two variations share a key
        """
        variations = list(variations)
        seen = set()
        for variation in variations:
            key = variation.key
            if key in seen:
                raise DuplicateCombinationError(key)
            seen.add(key)
        self._variations = variations

    def add(self, variation: Variation) -> Variation:
        """Append one variation (manual add path)."""
        if self.find(variation.key) is not None:
            raise DuplicateCombinationError(variation.key)
        self._variations.append(variation)
        return variation

    def update(self, target: Target, fields: Dict[str, Any]) -> Variation:
        """
        Apply an edit to one variation.

        Args:
            target: Index, combination key or combination of the variation
            fields: Editable fields to change; ``attributes`` is accepted too

        Returns:
            The updated variation
        """
        position = self.index_of(target)

        invalid = set(fields) - EDITABLE_FIELDS - {'attributes'}
        if invalid:
            raise NotEditableFieldError(invalid)
        if 'status' in fields and fields['status'] not in VALID_STATUSES:
            raise InvalidStatusError(fields['status'])

        current = self._variations[position]
        updated = current.copy(**fields)

        if 'attributes' in fields and updated.key != current.key:
            for i, other in enumerate(self._variations):
                if i != position and other.key == updated.key:
                    raise DuplicateCombinationError(updated.key)

        for name in fields:
            setattr(current, name, getattr(updated, name))
        return current

    def remove(self, target: Target) -> Variation:
        """
        Remove one variation directly.

        A persisted variation has its id ledgered before it leaves the list.
        """
        position = self.index_of(target)
        variation = self._variations[position]
        if variation.is_persisted:
            self.ledger.record_deleted(variation.id)
        del self._variations[position]
        logger.debug("Removed variation %s (%s)", variation.sku, variation.key)
        return variation

    def clear(self) -> None:
        self._variations = []
