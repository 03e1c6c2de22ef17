from datetime import date

import pytest

from app.io.models import Prefs, Run
from app.io.store import FileStore, MemoryStore
from app.metrics.compute_metrics import compute_stats


def test_missing_files_read_as_defaults(tmp_path):
    store = FileStore(tmp_path / "nothing-here")
    assert store.load_runs() == []
    assert store.load_prefs() == Prefs()
    assert store.load_stats_cache() is None


def test_empty_runs_file_reads_as_empty(tmp_path):
    (tmp_path / "runs.csv").write_text("")
    assert FileStore(tmp_path).load_runs() == []


def test_runs_round_trip_without_selected_flag(tmp_path):
    store = FileStore(tmp_path)
    runs = [
        Run(id=1, date=date(2024, 5, 14), duration=3600, distance=10.0, selected=True),
        Run(id=2, date=date(2024, 5, 13), duration=5430, distance=20.5),
    ]
    store.save_runs(runs)

    assert "selected" not in (tmp_path / "runs.csv").read_text()
    loaded = store.load_runs()
    assert loaded == runs
    assert all(r.selected is False for r in loaded)
    assert isinstance(loaded[0].date, date)


def test_saving_empty_collection(tmp_path):
    store = FileStore(tmp_path)
    store.save_runs([Run(id=1, date=date(2024, 5, 14), duration=60, distance=1.0)])
    store.save_runs([])
    assert store.load_runs() == []


def test_prefs_and_stats_persist(tmp_path):
    store = FileStore(tmp_path)
    store.save_prefs(Prefs(sort_by="pace", sort="desc"))
    stats = compute_stats([Run(id=1, date=date(2024, 5, 14), duration=3600, distance=10.0)])
    store.save_stats_cache(stats)

    reopened = FileStore(tmp_path)
    assert reopened.load_prefs() == Prefs(sort_by="pace", sort="desc")
    assert reopened.load_stats_cache() == stats


def test_malformed_record_raises(tmp_path):
    (tmp_path / "runs.csv").write_text("id,date,duration,distance\n1,yesterday,3600,10\n")
    with pytest.raises(ValueError):
        FileStore(tmp_path).load_runs()


def test_missing_columns_raise(tmp_path):
    (tmp_path / "runs.csv").write_text("id,date\n1,2024-05-14\n")
    with pytest.raises(ValueError):
        FileStore(tmp_path).load_runs()


def test_memory_store_returns_copies():
    store = MemoryStore()
    runs = store.load_runs()
    runs.append(Run(id=1, date=date(2024, 5, 14), duration=60, distance=1.0))
    assert store.load_runs() == []
