import pytest

from apps.variations.exceptions import DuplicateCombinationError
from apps.variations.services import PlaceholderSkuSequence, generate, reconcile
from apps.variations.services.selection import AttributeSelection
from .factories import BLUE, COLOR, M, RED, S, SIZE, variation


def size_by_color(sizes, colors):
    return generate([
        AttributeSelection(SIZE, 'Size', tuple(sizes)),
        AttributeSelection(COLOR, 'Color', tuple(colors)),
    ])


def edited_matrix():
    return [
        variation(S, RED, id=1, sku='TEE-S-RED', price='10.00', quantity=1),
        variation(S, BLUE, id=2, sku='TEE-S-BLUE', price='20.00', quantity=2),
        variation(M, RED, id=3, sku='TEE-M-RED', price='30.00', quantity=3),
        variation(M, BLUE, id=42, sku='TEE-M-BLUE', price='40.00', quantity=4),
    ]


def test_new_combinations_get_placeholders():
    skus = PlaceholderSkuSequence(token='abc').next_pass()
    result = reconcile(size_by_color([S, M], [RED]), [], placeholder_sku=skus)

    assert result.removed == []
    assert result.created == result.merged
    assert [v.sku for v in result.merged] == ['NEW-abc-1-0001', 'NEW-abc-1-0002']
    first = result.merged[0]
    assert first.id is None
    assert (first.price, first.sale_price, first.quantity) == ('', '', 0)
    assert first.low_stock_threshold == 5
    assert first.status == 'active'


def test_defaults_for_new_variations_are_configurable():
    result = reconcile(
        size_by_color([S], [RED]), [],
        low_stock_threshold=2, status='inactive'
    )
    assert result.created[0].low_stock_threshold == 2
    assert result.created[0].status == 'inactive'


def test_deselecting_blue_keeps_reds_and_removes_blues():
    current = edited_matrix()

    result = reconcile(size_by_color([S, M], [RED]), current)

    assert [(v.id, v.price) for v in result.merged] == [(1, '10.00'), (3, '30.00')]
    assert result.merged[0] is current[0]
    assert result.created == []
    assert sorted(v.id for v in result.removed) == [2, 42]


def test_merged_follows_generation_order():
    current = list(reversed(edited_matrix()))
    result = reconcile(size_by_color([S, M], [RED, BLUE]), current)
    assert [v.id for v in result.merged] == [1, 2, 3, 42]


def test_edits_survive_regeneration():
    current = [variation(S, RED, id=7, price='100', quantity=5, sku='CUSTOM')]

    result = reconcile(size_by_color([S, M], [RED]), current)

    kept = result.merged[0]
    assert (kept.price, kept.quantity, kept.sku) == ('100', 5, 'CUSTOM')
    assert len(result.created) == 1


def test_reconcile_is_idempotent():
    combos = size_by_color([S, M], [RED, BLUE])
    first = reconcile(combos, edited_matrix()[:2])
    snapshot = [v.to_dict() for v in first.merged]

    second = reconcile(combos, first.merged)

    assert [v.to_dict() for v in second.merged] == snapshot
    assert second.removed == []
    assert second.created == []


def test_duplicate_current_variations_are_rejected():
    current = [variation(S, RED, id=1), variation(S, RED, id=2)]
    with pytest.raises(DuplicateCombinationError):
        reconcile(size_by_color([S], [RED]), current)


def test_duplicate_new_combinations_are_rejected():
    combos = size_by_color([S], [RED]) * 2
    with pytest.raises(DuplicateCombinationError) as exc_info:
        reconcile(combos, [])
    assert list(exc_info.value.combination_key) == [(SIZE, S), (COLOR, RED)]


def test_placeholder_sequence_passes_never_collide():
    skus = PlaceholderSkuSequence(prefix='TMP', token='t')
    skus.next_pass()
    first = [skus(), skus()]
    skus.next_pass()
    second = [skus(), skus()]

    assert first == ['TMP-t-1-0001', 'TMP-t-1-0002']
    assert second == ['TMP-t-2-0001', 'TMP-t-2-0002']


def test_placeholder_tokens_differ_between_sequences():
    assert PlaceholderSkuSequence().token != PlaceholderSkuSequence().token
