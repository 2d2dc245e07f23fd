import pytest

from imulive.quaternion import Quaternion, QuaternionTable
from imulive.timeseries_io import (
    QUATERNION_HEADER,
    clip_dependent_data,
    clip_table,
    parse_tokens,
    quaternion_table_from_text_file,
    save_time_series_to_txt_file,
    write_quaternion_time_series,
)


def _table(times, labels):
    rows = [[Quaternion(1.0, 0.0, 0.0, 0.0) for _ in labels] for _ in times]
    return QuaternionTable(times, rows, labels)


def test_parse_tokens_splits_on_delimiter():
    assert parse_tokens("a\tb\tc", "\t") == ["a", "b", "c"]


def test_parse_tokens_without_delimiter_returns_whole_text():
    assert parse_tokens("abc", ",") == ["abc"]


def test_parse_tokens_keeps_empty_trailing_token():
    assert parse_tokens("a,", ",") == ["a", ""]


def test_parse_tokens_rejects_empty_delimiter():
    with pytest.raises(ValueError):
        parse_tokens("abc", "")


def test_save_time_series_content(tmp_path):
    path = tmp_path / "series.txt"
    save_time_series_to_txt_file([0, 1], [5, 6], path, "desc\n", "Time\tValue")
    assert path.read_text(encoding="utf-8") == "desc\nTime\tValue\n0\t5\n1\t6"


def test_save_time_series_length_mismatch(tmp_path):
    with pytest.raises(ValueError):
        save_time_series_to_txt_file([0, 1], [5], tmp_path / "x.txt", "", "")


def test_write_quaternion_time_series_header(tmp_path):
    path = tmp_path / "q.txt"
    write_quaternion_time_series(path, ["a_imu"], [0.5], [[Quaternion(1, 0, 0, 0)]])
    lines = path.read_text(encoding="utf-8").split("\n")
    assert lines[0] == QUATERNION_HEADER
    assert lines[1] == "Time (s)\ta_imu"
    assert lines[2] == "0.5\t~[1,0,0,0]"


def test_write_then_read_round_trip(tmp_path):
    path = tmp_path / "q.txt"
    labels = ["pelvis_imu", "femur_r_imu"]
    times = [0.0, 0.25, 0.5]
    rows = [
        [Quaternion(1, 0, 0, 0), Quaternion(0.5, 0.5, 0.5, 0.5)],
        [Quaternion(0, 1, 0, 0), Quaternion(0, 0, 1, 0)],
        [Quaternion(0, 0, 0, 1), Quaternion(-0.5, 0.5, -0.5, 0.5)],
    ]
    write_quaternion_time_series(path, labels, times, rows)
    table = quaternion_table_from_text_file(path)
    assert table.labels == labels
    assert table.times == times
    assert table.rows == rows


def test_read_trims_label_spaces(tmp_path):
    path = tmp_path / "q.txt"
    path.write_text(
        "description\nTime (s)\t a_imu \tb_imu\n1.5\t~[1,0,0,0]\t~[0,1,0,0]\n",
        encoding="utf-8",
    )
    table = quaternion_table_from_text_file(path)
    assert table.labels == ["a_imu", "b_imu"]
    assert table.times == [1.5]
    assert table.row(0) == [Quaternion(1, 0, 0, 0), Quaternion(0, 1, 0, 0)]


def test_read_without_rows_fails(tmp_path):
    path = tmp_path / "q.txt"
    path.write_text("description\nTime (s)\ta_imu", encoding="utf-8")
    with pytest.raises(ValueError):
        quaternion_table_from_text_file(path)


def test_read_bad_time_fails(tmp_path):
    path = tmp_path / "q.txt"
    path.write_text("d\nTime (s)\ta\nnope\t~[1,0,0,0]", encoding="utf-8")
    with pytest.raises(ValueError):
        quaternion_table_from_text_file(path)


def test_clip_table_exact_bounds():
    table = _table([0.0, 1.0, 2.0, 3.0, 4.0], ["a"])
    result = clip_table(table, 1.0, 3.0)
    assert result.times == [1.0, 2.0, 3.0]
    assert len(result.rows) == 3


def test_clip_table_uses_nearest_rows():
    table = _table([0.0, 1.0, 2.0, 3.0, 4.0], ["a"])
    clip_table(table, 0.9, 3.2)
    assert table.times == [1.0, 2.0, 3.0]


def test_clip_table_reversed_bounds():
    table = _table([0.0, 1.0, 2.0], ["a"])
    with pytest.raises(ValueError):
        clip_table(table, 2.0, 0.0)


def test_clip_dependent_data_keeps_order():
    table = _table([0.0, 1.0], ["a", "b", "c", "d"])
    result = clip_dependent_data(table, ["d", "b"])
    assert result.labels == ["b", "d"]
    assert all(len(row) == 2 for row in result.rows)