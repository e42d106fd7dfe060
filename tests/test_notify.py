import math

import pytest

from aircontrib.rules.notify import evaluate, norm, triplet


def reading(name, value):
    return {"reading": {"name": name, "value": value}}


THRESHOLDS = [
    {"name": "other", "notification": "n-other", "notificationLevel": "INFO", "value": [100.0]},
    {"name": "accel", "notification": "moved", "notificationLevel": "WARN", "value": [1.0, 1.0, 1.0]},
]


def test_triplet_fills_missing_with_zero():
    assert triplet("1.5") == [1.5, 0.0, 0.0]
    assert triplet("1,2") == [1.0, 2.0, 0.0]


def test_triplet_full():
    assert triplet("1,-2,3.25") == [1.0, -2.0, 3.25]


def test_triplet_invalid():
    with pytest.raises(ValueError):
        triplet("abc")
    with pytest.raises(ValueError):
        triplet("1, 2")


def test_norm_worked_example():
    assert norm([3.0, 4.0, 0.0]) == 5.0


def test_norm_is_symmetric_under_sign():
    assert norm([1.0, -2.0, 3.0]) == norm([-1.0, 2.0, -3.0])
    assert norm([0.0, 0.0, 0.0]) == 0.0


def test_empty_old_data_never_fires():
    assert evaluate({}, reading("accel", "9,9,9"), THRESHOLDS) == ("", "", "", False)


def test_fires_when_change_exceeds_threshold():
    result = evaluate(reading("accel", "0,0,0"), reading("accel", "3,4,0"), THRESHOLDS)
    assert result == ("accel", "moved", "WARN", True)


def test_small_change_does_not_fire():
    result = evaluate(reading("accel", "1,0,0"), reading("accel", "1.5,0,0"), THRESHOLDS)
    assert result == ("", "", "", False)


def test_unmatched_name_uses_zero_threshold():
    result = evaluate(reading("temp", "1"), reading("temp", "2"), THRESHOLDS)
    assert result == ("temp", "", "", True)


def test_no_change_never_fires():
    result = evaluate(reading("temp", "2"), reading("temp", "2"), THRESHOLDS)
    assert result[3] is False


def test_threshold_with_too_many_values():
    bad = [{"name": "x", "notification": "n", "notificationLevel": "L", "value": [1, 2, 3, 4]}]
    with pytest.raises(ValueError):
        evaluate(reading("x", "1"), reading("x", "2"), bad)


def test_magnitude_matters_not_direction():
    result = evaluate(reading("accel", "3,4,0"), reading("accel", "0,-4,3"), THRESHOLDS)
    assert result[3] is False
    assert math.isclose(norm(triplet("3,4,0")), norm(triplet("0,-4,3")))