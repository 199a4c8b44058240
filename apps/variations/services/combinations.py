"""
Cartesian product of selected attribute values.

A Combination is one tuple of (attribute_id, value_id) choices, one per
variation-contributing attribute. Its CombinationKey is the canonical,
order-independent identity used to match generated combinations against
existing variations.
"""

import logging
from dataclasses import dataclass
from itertools import product
from typing import Hashable, Iterable, Iterator, List, Sequence, Tuple

from apps.variations.exceptions import (
    IncompleteAttributeError,
    NoVariationAttributesError,
)

logger = logging.getLogger(__name__)

Pair = Tuple[Hashable, Hashable]


def _attribute_sort_key(pair: Pair):
    # Numeric ids first, string ids after; never compares int with str.
    attribute_id = pair[0]
    return (isinstance(attribute_id, str), attribute_id)


@dataclass(frozen=True)
class CombinationKey:
    """
    Identity of a variation slot.

    Wraps the (attribute_id, value_id) pairs sorted by attribute id, so two
    combinations listing the same choices in a different order share a key.
    """
    pairs: Tuple[Pair, ...]

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[Hashable]]) -> 'CombinationKey':
        normalized = [(attr_id, value_id) for attr_id, value_id in pairs]
        return cls(tuple(sorted(normalized, key=_attribute_sort_key)))

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __str__(self) -> str:
        return ', '.join(f"{attr_id}={value_id}" for attr_id, value_id in self.pairs)


@dataclass(frozen=True)
class Combination:
    """One generated choice per attribute, in attribute attach order."""
    pairs: Tuple[Pair, ...]

    @property
    def key(self) -> CombinationKey:
        return CombinationKey.from_pairs(self.pairs)

    def value_for(self, attribute_id: Hashable) -> Hashable:
        for attr_id, value_id in self.pairs:
            if attr_id == attribute_id:
                return value_id
        raise KeyError(attribute_id)

    def to_list(self) -> List[dict]:
        return [
            {'attribute_id': attr_id, 'attribute_value_id': value_id}
            for attr_id, value_id in self.pairs
        ]


def generate(selections) -> List[Combination]:
    """
    Compute every combination of the selected values.

    Only selections with ``used_for_variations`` contribute a dimension.
    Generation is all-or-nothing: a contributing selection without values
    raises IncompleteAttributeError, and no contributing selection at all
    raises NoVariationAttributesError.

    Args:
        selections: AttributeSelection objects in attach order

    Returns:
        Combinations ordered by attribute order, last attribute varying fastest
    """
    participating = [s for s in selections if s.used_for_variations]
    if not participating:
        raise NoVariationAttributesError()

    for selection in participating:
        if not selection.selected_value_ids:
            raise IncompleteAttributeError(selection.attribute_id, selection.name)

    dimensions = [
        [(selection.attribute_id, value_id) for value_id in selection.selected_value_ids]
        for selection in participating
    ]
    combinations = [Combination(tuple(pairs)) for pairs in product(*dimensions)]

    logger.debug(
        "Generated %d combinations over %d attributes",
        len(combinations), len(participating)
    )
    return combinations
