import pytest

from bitfieldarray import BitarrayPlane, FieldArray, InvalidArgumentError


def _rebuild_scenario_without_tail():
    fa = FieldArray(4)
    fa.set(8, 6)
    fa.set(7, 6)
    fa.set(3, 6)
    fa.set(2, 15)
    return fa


def test_equal_ignores_history_and_capacity(scenario):
    other = _rebuild_scenario_without_tail()
    assert scenario.size() != other.size()
    assert scenario == other
    assert hash(scenario) == hash(other)


def test_width_must_match():
    a = FieldArray(2)
    b = FieldArray(3)
    assert a != b
    a.set(0, 1)
    b.set(0, 1)
    assert a != b


def test_any_plane_difference_breaks_equality(scenario):
    other = _rebuild_scenario_without_tail()
    other.set(3, 7)
    assert scenario != other


def test_not_equal_to_other_types(scenario):
    assert scenario != "FieldArray"
    assert scenario.__eq__(42) is NotImplemented


def test_hash_fits_in_32_bits(scenario):
    h = hash(scenario)
    assert 0 <= h <= 0xFFFF_FFFF


def test_usable_as_dict_key(scenario):
    seen = {scenario: "users"}
    assert seen[_rebuild_scenario_without_tail()] == "users"


def test_repr(scenario):
    assert repr(scenario) == "FieldArray(field_width=4, length=9)"


def test_plane_count_must_match_width():
    with pytest.raises(InvalidArgumentError):
        FieldArray._from_planes(3, [BitarrayPlane(), BitarrayPlane()])
