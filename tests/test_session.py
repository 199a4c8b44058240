import pytest

from apps.variations.exceptions import (
    DuplicateCombinationError,
    IncompleteAttributeError,
    NoVariationAttributesError,
    UnknownValueError,
)
from apps.variations.services import CombinationKey, VariationEditSession
from .factories import BLUE, COLOR, GREEN, L, M, MATERIAL, RED, S, SIZE, COTTON, variation


def keys_of(session):
    return [tuple(v.attributes) for v in session.store]


def test_generate_four_combinations(session):
    result = session.generate_variations()

    assert keys_of(session) == [
        ((SIZE, S), (COLOR, RED)),
        ((SIZE, S), (COLOR, BLUE)),
        ((SIZE, M), (COLOR, RED)),
        ((SIZE, M), (COLOR, BLUE)),
    ]
    assert len(result.created) == 4
    assert [v.sku for v in session.store] == [
        'NEW-test-1-0001', 'NEW-test-1-0002', 'NEW-test-1-0003', 'NEW-test-1-0004',
    ]


def test_deselecting_blue_preserves_prices_and_ledgers_persisted_ids(session):
    session.store.replace([
        variation(S, RED, id=1, price='10'),
        variation(S, BLUE, id=2, price='20'),
        variation(M, RED, id=3, price='30'),
        variation(M, BLUE, id=42, price='40'),
    ])

    session.selections.set_selected_values(COLOR, [RED])
    result = session.generate_variations()

    assert [(v.id, v.price) for v in session.store] == [(1, '10'), (3, '30')]
    assert sorted(v.id for v in result.removed) == [2, 42]
    assert session.ledger.snapshot() == [2, 42]


def test_removed_placeholders_are_discarded(session):
    session.generate_variations()
    session.selections.set_selected_values(SIZE, [S])

    result = session.generate_variations()

    assert len(result.removed) == 2
    assert session.ledger.snapshot() == []


def test_incomplete_attribute_leaves_session_unchanged(session):
    session.generate_variations()
    session.update_variation(0, {'price': '99.00'})
    before = [v.to_dict() for v in session.store]

    session.selections.set_selected_values(COLOR, [])
    with pytest.raises(IncompleteAttributeError) as exc_info:
        session.generate_variations()

    assert exc_info.value.attribute_id == COLOR
    assert 'Color' in str(exc_info.value)
    assert [v.to_dict() for v in session.store] == before
    assert session.ledger.snapshot() == []


def test_regenerating_unchanged_selections_is_a_no_op(session):
    session.generate_variations()
    session.update_variation(2, {'price': '100', 'quantity': 5, 'sku': 'TEE-M-RED'})
    before = [v.to_dict() for v in session.store]

    result = session.generate_variations()

    assert [v.to_dict() for v in session.store] == before
    assert result.created == []
    assert result.removed == []


def test_adding_a_value_keeps_edits(session):
    session.generate_variations()
    key = CombinationKey.from_pairs([(SIZE, M), (COLOR, RED)])
    session.update_variation(key, {'price': '100', 'quantity': 5})

    session.selections.set_selected_values(SIZE, [S, M, L])
    result = session.generate_variations()

    edited = session.store.get(key)
    assert (edited.price, edited.quantity) == ('100', 5)
    assert len(session.store) == 6
    # second pass numbers its placeholders separately
    assert [v.sku for v in result.created] == ['NEW-test-2-0001', 'NEW-test-2-0002']


def test_regenerated_combination_is_new_not_resurrected(session):
    session.store.replace([variation(S, RED, id=1), variation(S, BLUE, id=2)])
    session.selections.set_selected_values(SIZE, [S])

    session.selections.set_selected_values(COLOR, [RED])
    session.generate_variations()
    session.selections.set_selected_values(COLOR, [RED, BLUE])
    session.generate_variations()

    blue = session.store.get(CombinationKey.from_pairs([(SIZE, S), (COLOR, BLUE)]))
    assert blue.id is None
    assert session.ledger.snapshot() == [2]


def test_detach_only_takes_effect_on_generate(session):
    session.generate_variations()

    session.selections.detach(COLOR)
    assert len(session.store) == 4

    session.generate_variations()
    assert keys_of(session) == [((SIZE, S),), ((SIZE, M),)]


def test_attribute_not_used_for_variations(session):
    session.selections.attach(MATERIAL, initial_value_ids=[COTTON], used_for_variations=False)
    session.generate_variations()
    assert len(session.store) == 4


def test_no_variation_attributes(make_session):
    session = make_session()
    session.selections.attach(SIZE, initial_value_ids=[S], used_for_variations=False)
    with pytest.raises(NoVariationAttributesError):
        session.generate_variations()


def test_manual_variation(session):
    session.generate_variations()
    session.selections.set_selected_values(COLOR, [RED, BLUE, GREEN])

    added = session.add_manual_variation({SIZE: S, COLOR: GREEN})

    assert added.sku == 'SKU-SMA-GRE-test-1'
    assert session.store.get(len(session.store) - 1) is added
    assert added.attributes == ((SIZE, S), (COLOR, GREEN))


def test_manual_variation_validation(session):
    session.generate_variations()

    with pytest.raises(DuplicateCombinationError):
        session.add_manual_variation({SIZE: S, COLOR: RED})
    with pytest.raises(IncompleteAttributeError):
        session.add_manual_variation({SIZE: S})
    with pytest.raises(UnknownValueError):
        session.add_manual_variation({SIZE: L, COLOR: RED})
    assert len(session.store) == 4


def test_remove_variation(session):
    session.store.replace([variation(S, RED, id=42), variation(S, BLUE)])

    session.remove_variation(0)

    assert session.ledger.snapshot() == [42]
    assert len(session.store) == 1


def test_to_payload(session):
    session.selections.attach(MATERIAL, initial_value_ids=[COTTON], used_for_variations=False)
    session.store.replace([variation(S, RED, id=1, sku='TEE', price='10')])
    session.ledger.record_deleted(5)

    payload = session.to_payload()

    assert payload['attributes'] == [
        {'attribute_id': SIZE, 'attribute_value_ids': [S, M]},
        {'attribute_id': COLOR, 'attribute_value_ids': [RED, BLUE]},
    ]
    assert payload['variations'] == [{
        'id': 1,
        'sku': 'TEE',
        'price': '10',
        'sale_price': '',
        'quantity': 0,
        'low_stock_threshold': 5,
        'status': 'active',
        'attributes': [
            {'attribute_id': SIZE, 'attribute_value_id': S},
            {'attribute_id': COLOR, 'attribute_value_id': RED},
        ],
    }]
    assert payload['delete_variation_ids'] == [5]


def test_from_payload_restores_state(catalog):
    data = {
        'attributes': [
            {'attribute_id': COLOR, 'attribute_value_ids': [BLUE]},
            {'attribute_id': MATERIAL, 'attribute_value_ids': [], 'used_for_variations': False},
        ],
        'variations': [{
            'id': 8, 'sku': 'X-BLUE', 'price': 15, 'sale_price': None, 'quantity': 2,
            'attributes': [{'attribute_id': COLOR, 'attribute_value_id': BLUE}],
        }],
        'delete_variation_ids': [3],
    }

    session = VariationEditSession.from_payload(data, catalog, sku_token='t')

    assert [s.attribute_id for s in session.selections] == [COLOR, MATERIAL]
    assert session.selections.get(MATERIAL).used_for_variations is False
    restored = session.store.get(0)
    assert (restored.id, restored.price, restored.sale_price) == (8, '15', '')
    assert session.ledger.snapshot() == [3]


def test_reset(session):
    session.store.replace([variation(S, RED, id=1)])
    session.remove_variation(0)

    session.reset()

    assert len(session.selections) == 0
    assert len(session.store) == 0
    assert session.ledger.snapshot() == []
