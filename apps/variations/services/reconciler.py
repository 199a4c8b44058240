"""
Merging freshly generated combinations into an edited variation list.

Variations whose combination is still generated are carried forward untouched,
so manual edits (price, stock, status, SKU) survive regeneration. New
combinations get blank placeholder variations. Variations left unmatched are
reported as removed so the caller can ledger their ids for deletion.
"""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from apps.variations.exceptions import DuplicateCombinationError
from .combinations import Combination, CombinationKey
from .variation import STATUS_ACTIVE, Variation

logger = logging.getLogger(__name__)

SkuFactory = Callable[[Combination], str]


class PlaceholderSkuSequence:
    """
    Placeholder SKUs of the form ``NEW-<token>-<pass>-<counter>``.

    The token identifies the edit session, the pass number is bumped once per
    generation, and the counter is monotonic within a pass, so no two
    placeholders of a session can collide.
    """

    def __init__(self, prefix: str = 'NEW', token: Optional[str] = None):
        self.prefix = prefix
        self.token = token or uuid.uuid4().hex[:8]
        self.pass_number = 0
        self._counter = 0

    def next_pass(self) -> 'PlaceholderSkuSequence':
        self.pass_number += 1
        self._counter = 0
        return self

    def __call__(self, combination: Optional[Combination] = None) -> str:
        if self.pass_number == 0:
            self.next_pass()
        self._counter += 1
        return f"{self.prefix}-{self.token}-{self.pass_number}-{self._counter:04d}"


class ReconcileResult(NamedTuple):
    merged: List[Variation]
    removed: List[Variation]
    created: List[Variation]


def reconcile(
    new_combinations: Iterable[Combination],
    current_variations: Iterable[Variation],
    placeholder_sku: Optional[SkuFactory] = None,
    low_stock_threshold: int = 5,
    status: str = STATUS_ACTIVE
) -> ReconcileResult:
    """
    Reconcile generated combinations against the current variations.

    The operation is idempotent: reconciling the same combinations against
    its own ``merged`` output returns the same list and removes nothing.

    Args:
        new_combinations: Output of generate(), in the order to keep
        current_variations: Variations currently in the store
        placeholder_sku: Callable giving a unique SKU for each new variation
        low_stock_threshold: Threshold for new variations
        status: Status for new variations

    Returns:
        ReconcileResult(merged, removed, created)
    """
    if placeholder_sku is None:
        placeholder_sku = PlaceholderSkuSequence().next_pass()

    index: Dict[CombinationKey, Variation] = {}
    for variation in current_variations:
        key = variation.key
        if key in index:
            raise DuplicateCombinationError(key)
        index[key] = variation

    merged: List[Variation] = []
    created: List[Variation] = []
    matched = set()

    for combination in new_combinations:
        key = combination.key
        if key in matched:
            raise DuplicateCombinationError(key)
        matched.add(key)

        existing = index.get(key)
        if existing is not None:
            merged.append(existing)
            continue

        variation = Variation(
            attributes=combination.pairs,
            sku=placeholder_sku(combination),
            price='',
            sale_price='',
            quantity=0,
            low_stock_threshold=low_stock_threshold,
            status=status,
        )
        merged.append(variation)
        created.append(variation)

    removed = [variation for key, variation in index.items() if key not in matched]

    logger.debug(
        "Reconciled %d combinations: %d kept, %d created, %d removed",
        len(merged), len(merged) - len(created), len(created), len(removed)
    )
    return ReconcileResult(merged=merged, removed=removed, created=created)
