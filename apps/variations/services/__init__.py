"""
Variation matrix engine.

Leaf first:
- AttributeSelectionSet: attributes attached to a product and their values
- generate(): Cartesian product of the selected values
- reconcile(): merge generated combinations into the edited variations
- VariationStore / DeletionLedger: the edited list and the removed ids
- VariationEditSession: single owner of all of the above for one product
"""

from .catalog import (
    AttributeCatalog,
    CatalogAttribute,
    CatalogValue,
    InMemoryAttributeCatalog,
    ModelAttributeCatalog,
)
from .combinations import Combination, CombinationKey, generate
from .ledger import DeletionLedger
from .reconciler import PlaceholderSkuSequence, ReconcileResult, reconcile
from .selection import AttributeSelection, AttributeSelectionSet
from .session import VariationEditSession
from .store import VariationStore
from .variation import (
    EDITABLE_FIELDS,
    STATUS_ACTIVE,
    STATUS_CHOICES,
    STATUS_INACTIVE,
    Variation,
)

__all__ = [
    'AttributeCatalog',
    'CatalogAttribute',
    'CatalogValue',
    'InMemoryAttributeCatalog',
    'ModelAttributeCatalog',
    'Combination',
    'CombinationKey',
    'generate',
    'DeletionLedger',
    'PlaceholderSkuSequence',
    'ReconcileResult',
    'reconcile',
    'AttributeSelection',
    'AttributeSelectionSet',
    'VariationEditSession',
    'VariationStore',
    'EDITABLE_FIELDS',
    'STATUS_ACTIVE',
    'STATUS_CHOICES',
    'STATUS_INACTIVE',
    'Variation',
]
