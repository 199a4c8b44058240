import pytest

from apps.variations.exceptions import (
    IncompleteAttributeError,
    NoVariationAttributesError,
)
from apps.variations.services import Combination, CombinationKey, generate
from apps.variations.services.selection import AttributeSelection
from .factories import BLUE, COLOR, GREEN, L, M, MATERIAL, RED, S, SIZE, COTTON, WOOL


def selection(attribute_id, values, used=True, name=''):
    return AttributeSelection(
        attribute_id=attribute_id,
        name=name,
        selected_value_ids=tuple(values),
        used_for_variations=used,
    )


def test_size_by_color_in_attribute_order():
    combos = generate([selection(SIZE, [S, M]), selection(COLOR, [RED, BLUE])])

    assert [c.pairs for c in combos] == [
        ((SIZE, S), (COLOR, RED)),
        ((SIZE, S), (COLOR, BLUE)),
        ((SIZE, M), (COLOR, RED)),
        ((SIZE, M), (COLOR, BLUE)),
    ]


def test_count_is_product_of_value_counts_and_keys_are_unique():
    selections = [
        selection(SIZE, [S, M, L]),
        selection(COLOR, [RED, BLUE, GREEN]),
        selection(MATERIAL, [COTTON, WOOL]),
    ]
    combos = generate(selections)

    assert len(combos) == 3 * 3 * 2
    assert len({c.key for c in combos}) == len(combos)
    for sel in selections:
        seen = {c.value_for(sel.attribute_id) for c in combos}
        assert seen == set(sel.selected_value_ids)


def test_generation_is_deterministic():
    selections = [selection(COLOR, [GREEN, RED]), selection(SIZE, [L, S])]
    assert generate(selections) == generate(selections)


def test_only_variation_attributes_contribute():
    combos = generate([
        selection(SIZE, [S, M]),
        selection(MATERIAL, [COTTON, WOOL], used=False),
    ])
    assert [c.pairs for c in combos] == [((SIZE, S),), ((SIZE, M),)]


def test_non_variation_attribute_may_be_empty():
    combos = generate([selection(SIZE, [S]), selection(COLOR, [], used=False)])
    assert len(combos) == 1


def test_empty_variation_attribute_is_rejected():
    with pytest.raises(IncompleteAttributeError) as exc_info:
        generate([selection(SIZE, [S, M]), selection(COLOR, [], name='Color')])

    assert exc_info.value.attribute_id == COLOR
    assert 'Color' in str(exc_info.value)


@pytest.mark.parametrize('selections', [
    [],
    [selection(SIZE, [S], used=False)],
])
def test_no_variation_attributes(selections):
    with pytest.raises(NoVariationAttributesError):
        generate(selections)


def test_key_ignores_pair_order():
    a = Combination(((SIZE, S), (COLOR, RED)))
    b = Combination(((COLOR, RED), (SIZE, S)))

    assert a != b
    assert a.key == b.key
    assert hash(a.key) == hash(b.key)


def test_key_does_not_collide_on_delimiters():
    # both would join to "a-b-c" under naive string building
    a = CombinationKey.from_pairs([('a-b', 'c'), ('d', 'e')])
    b = CombinationKey.from_pairs([('a', 'b-c'), ('d', 'e')])
    assert a != b


def test_key_sorts_mixed_id_types():
    key = CombinationKey.from_pairs([('color', 'red'), (2, 5), (1, 'x')])
    assert key.pairs == ((1, 'x'), (2, 5), ('color', 'red'))
    assert str(key) == '1=x, 2=5, color=red'


def test_value_for_unknown_attribute():
    with pytest.raises(KeyError):
        Combination(((SIZE, S),)).value_for(COLOR)
