import math

import pytest

from imulive.quaternion import Quaternion, QuaternionTable, parse_quaternion


def test_normalized_has_unit_norm():
    q = Quaternion(3.0, 4.0, 12.0, 84.0).normalized()
    assert math.isclose(q.norm, 1.0)


def test_normalized_keeps_direction():
    q = Quaternion(2.0, 0.0, 0.0, 0.0).normalized()
    assert q == Quaternion(1.0, 0.0, 0.0, 0.0)


def test_normalized_zero_raises():
    with pytest.raises(ValueError):
        Quaternion(0.0, 0.0, 0.0, 0.0).normalized()


def test_format_identity():
    assert Quaternion(1.0, 0.0, 0.0, 0.0).format() == "~[1,0,0,0]"


def test_parse_roundtrip():
    original = Quaternion(0.5, -0.25, 0.125, 0.75)
    assert parse_quaternion(original.format()) == original


def test_parse_plain_text():
    assert parse_quaternion("~[0.5,0.5,0.5,0.5]") == Quaternion(0.5, 0.5, 0.5, 0.5)


@pytest.mark.parametrize("text", ["~[1,2,3]", "~[a,b,c,d]", ""])
def test_parse_invalid(text):
    with pytest.raises(ValueError):
        parse_quaternion(text)


def _table():
    ident = Quaternion(1.0, 0.0, 0.0, 0.0)
    other = Quaternion(0.0, 1.0, 0.0, 0.0)
    return QuaternionTable(
        times=[0.0, 1.0, 2.0],
        rows=[[ident, other], [other, ident], [ident, ident]],
        labels=["pelvis_imu", "femur_r_imu"],
    )


@pytest.mark.parametrize(
    "time,expected", [(1.4, 1), (1.6, 2), (-5.0, 0), (10.0, 2), (0.0, 0), (2.0, 2)]
)
def test_nearest_row_index(time, expected):
    assert _table().nearest_row_index(time) == expected


def test_nearest_row_index_empty():
    with pytest.raises(IndexError):
        QuaternionTable(times=[], rows=[], labels=[]).nearest_row_index(0.0)


def test_remove_row_keeps_times_in_step():
    table = _table()
    table.remove_row(0)
    assert table.times == [1.0, 2.0]
    assert len(table.rows) == 2


def test_remove_column():
    table = _table()
    table.remove_column("pelvis_imu")
    assert table.labels == ["femur_r_imu"]
    assert all(len(row) == 1 for row in table.rows)


def test_remove_missing_column():
    with pytest.raises(KeyError):
        _table().remove_column("nothing")


def test_column_and_row():
    table = _table()
    assert table.column("femur_r_imu")[1] == Quaternion(1.0, 0.0, 0.0, 0.0)
    assert table.row(0) == [Quaternion(1.0, 0.0, 0.0, 0.0), Quaternion(0.0, 1.0, 0.0, 0.0)]


def test_row_is_copy():
    table = _table()
    row = table.row(0)
    row.clear()
    assert len(table.row(0)) == 2


def test_mismatched_lengths_rejected():
    with pytest.raises(ValueError):
        QuaternionTable(times=[0.0, 1.0], rows=[[]], labels=[])
    with pytest.raises(ValueError):
        QuaternionTable(times=[0.0], rows=[[Quaternion(1, 0, 0, 0)]], labels=[])


def test_duplicate_labels_rejected():
    q = Quaternion(1, 0, 0, 0)
    with pytest.raises(ValueError):
        QuaternionTable(times=[0.0], rows=[[q, q]], labels=["a", "a"])