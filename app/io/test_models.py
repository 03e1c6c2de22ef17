from datetime import date

import pytest

from app.io.models import (
    SORTABLE_FIELDS,
    Prefs,
    Run,
    calc_duration,
    create_run,
    format_duration,
    format_float,
    modify_run,
    next_run_id,
    split_duration,
)


@pytest.mark.parametrize("seconds, expected", [
    (3600, "1:00:00"),
    (360, "6:00"),
    (5430, "1:30:30"),
    (59, "0:59"),
    (36005, "10:00:05"),
    (271.5, "4:31"),
    (301, "5:01"),
    (359.6, "6:00"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_float():
    assert format_float(10) == "10.00"
    assert format_float(13.259668) == "13.26"


def test_split_duration_is_inverse_of_calc_duration():
    assert split_duration(calc_duration(1, 30, 30)) == (1, 30, 30)
    assert split_duration(calc_duration(0, 90, 0)) == (1, 30, 0)


def test_next_run_id():
    assert next_run_id([]) == 1
    assert next_run_id([3, 1, 7]) == 8


def test_create_run_derives_metrics():
    run = create_run(date(2024, 5, 1), 1, 0, 0, 10, existing_ids=[])
    assert run.id == 1
    assert run.duration == 3600
    assert run.speed_pretty == "10.00"
    assert run.pace_pretty == "6:00"
    assert run.duration_pretty == "1:00:00"
    assert run.distance_pretty == "10.00"
    assert run.selected is False


def test_second_run_metrics():
    run = create_run(date(2024, 5, 1), 0, 90, 30, 20, existing_ids=[1])
    assert run.id == 2
    assert run.duration_pretty == "1:30:30"
    assert run.speed_pretty == "13.26"
    assert run.pace_pretty == "4:31"


def test_zero_values_do_not_divide():
    run = Run(id=1, date=date(2024, 5, 1), duration=0, distance=0)
    assert run.speed == 0
    assert run.pace == 0


def test_modify_keeps_id_and_recomputes():
    run = create_run(date(2024, 5, 1), 1, 0, 0, 10, existing_ids=[4])
    updated = modify_run(run, date(2024, 5, 2), 1800, 5)
    assert updated.id == run.id == 5
    assert updated.date == date(2024, 5, 2)
    assert updated.speed == pytest.approx(10.0)
    assert updated.pace == pytest.approx(360.0)


def test_selected_not_in_record_or_equality():
    run = Run(id=1, date=date(2024, 5, 1), duration=60, distance=1)
    marked = Run(id=1, date=date(2024, 5, 1), duration=60, distance=1, selected=True)
    assert run == marked
    assert "selected" not in run.to_record()


def test_sortable_fields_contract():
    assert set(SORTABLE_FIELDS) == {"date", "duration", "distance", "speed", "pace"}


def test_prefs_defaults_and_rejects_unknown():
    assert Prefs() == Prefs(sort_by="date", sort="asc")
    with pytest.raises(ValueError):
        Prefs(sort_by="heart_rate")
    with pytest.raises(ValueError):
        Prefs(sort="sideways")
