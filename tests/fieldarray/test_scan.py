import pytest

from bitfieldarray import FieldArray, IndexOutOfRangeError


def test_scenario_next_bits(scenario):
    assert scenario.next_set_bit(0) == 2
    assert scenario.next_clear_bit(0) == 0


def test_next_set_bit(scenario):
    assert scenario.next_set_bit(2) == 2
    assert scenario.next_set_bit(3) == 3
    assert scenario.next_set_bit(4) == 7
    assert scenario.next_set_bit(9) == -1
    assert scenario.next_set_bit(10_000) == -1


def test_next_set_bit_combines_planes():
    fa = FieldArray(3)
    fa.set(10, 1)  # lowest plane only
    fa.set(20, 4)  # highest plane only
    assert fa.next_set_bit(0) == 10
    assert fa.next_set_bit(11) == 20


def test_next_clear_bit(scenario):
    assert scenario.next_clear_bit(2) == 4
    assert scenario.next_clear_bit(5) == 5


def test_next_clear_bit_stops_at_length(scenario):
    # slots 7 and 8 are set and length() is 9
    assert scenario.next_clear_bit(7) == -1
    assert scenario.next_clear_bit(9) == -1
    assert FieldArray(2).next_clear_bit(0) == -1


def test_next_clear_bit_needs_every_plane_clear():
    fa = FieldArray(2)
    fa.set_range(0, 3, 1)
    fa.set_range(4, 6, 2)
    fa.set(8, 3)
    # plane 0 is clear at 0..3, plane 1 at 4..6; only slot 7 is clear on both
    assert fa.next_clear_bit(0) == 7


def test_previous_set_bit(scenario):
    assert scenario.previous_set_bit(6) == 3
    assert scenario.previous_set_bit(3) == 3
    assert scenario.previous_set_bit(2) == 2
    assert scenario.previous_set_bit(1) == -1
    assert scenario.previous_set_bit(5000) == 8


def test_previous_set_bit_returns_nearest_across_planes():
    fa = FieldArray(3)
    fa.set(5, 4)
    fa.set(9, 1)
    fa.set(12, 2)
    assert fa.previous_set_bit(11) == 9
    assert fa.previous_set_bit(8) == 5
    assert fa.previous_set_bit(100) == 12


def test_previous_clear_bit(scenario):
    assert scenario.previous_clear_bit(3) == 1
    assert scenario.previous_clear_bit(8) == 6
    assert scenario.previous_clear_bit(0) == 0
    assert scenario.previous_clear_bit(5000) == 5000


def test_previous_clear_bit_needs_every_plane_clear():
    fa = FieldArray(2)
    fa.set(0, 1)
    fa.set_range(1, 3, 2)
    fa.set_range(4, 5, 1)
    assert fa.previous_clear_bit(5) == -1
    fa.clear(2)
    assert fa.previous_clear_bit(5) == 2


@pytest.mark.parametrize("method", [
    "next_set_bit", "next_clear_bit", "previous_set_bit", "previous_clear_bit",
])
def test_scans_reject_negative_start(scenario, method):
    with pytest.raises(IndexOutOfRangeError):
        getattr(scenario, method)(-1)


def test_length_cardinality_size(scenario):
    assert scenario.length() == 9
    assert scenario.cardinality() == 4
    assert scenario.size() >= 4 * 64


def test_cardinality_is_per_plane_maximum():
    fa = FieldArray(2)
    fa.set(0, 1)
    fa.set(1, 2)
    # two nonzero slots, but each plane holds only one bit
    assert fa.cardinality() == 1


def test_empty_array_stats():
    fa = FieldArray(3)
    assert fa.length() == 0
    assert fa.cardinality() == 0
    assert fa.size() == 0
    fa.set(0, 7)
    assert fa.size() == 3 * 64


def test_length_ignores_cleared_tail(scenario):
    assert scenario.length() == 9
    scenario.clear_range(7, 8)
    assert scenario.length() == 4


def test_iter_set_and_items(scenario):
    assert list(scenario.iter_set()) == [2, 3, 7, 8]
    assert list(scenario.items()) == [(2, 15), (3, 6), (7, 6), (8, 6)]
    assert list(FieldArray(2).iter_set()) == []
