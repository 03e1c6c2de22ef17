from __future__ import annotations
import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import List, Optional, Protocol

import pandas as pd

from app.io.models import Prefs, Run
from app.metrics.compute_metrics import StatsSnapshot

logger = logging.getLogger(__name__)

RUN_COLUMNS = ['id', 'date', 'duration', 'distance']


class RunStore(Protocol):
    '''
    Whole-collection load/save. A missing backing store reads as empty
    (runs) or default (prefs) or None (stats cache).
    '''

    def load_runs(self) -> List[Run]: ...

    def save_runs(self, runs: List[Run]) -> None: ...

    def load_prefs(self) -> Prefs: ...

    def save_prefs(self, prefs: Prefs) -> None: ...

    def load_stats_cache(self) -> Optional[StatsSnapshot]: ...

    def save_stats_cache(self, stats: StatsSnapshot) -> None: ...


def _row_to_run(row) -> Run:
    try:
        return Run(
            id=int(row['id']),
            date=date.fromisoformat(str(row['date'])),
            duration=float(row['duration']),
            distance=float(row['distance']),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f'Malformed run record: {dict(row)}') from e


class FileStore:
    '''
    Flat files under data_dir:
        runs.csv   - id,date,duration,distance
        prefs.json - sort preferences
        stats.json - cached StatsSnapshot
    '''

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.runs_path = self.data_dir / 'runs.csv'
        self.prefs_path = self.data_dir / 'prefs.json'
        self.stats_path = self.data_dir / 'stats.json'

    def _ensure_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _read_json(self, path: Path) -> Optional[dict]:
        if not path.exists() or path.stat().st_size == 0:
            return None
        return json.loads(path.read_text(encoding='utf-8'))

    def _write_json(self, path: Path, payload: dict) -> None:
        self._ensure_dir()
        path.write_text(json.dumps(payload, indent=2), encoding='utf-8')

    def load_runs(self) -> List[Run]:
        if not self.runs_path.exists():
            return []
        try:
            df = pd.read_csv(self.runs_path, dtype={'date': str})
        except pd.errors.EmptyDataError:
            return []
        missing = [c for c in RUN_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f'{self.runs_path} is missing columns: {missing}')
        runs = [_row_to_run(row) for _, row in df.iterrows()]
        logger.debug("Loaded %d runs from %s", len(runs), self.runs_path)
        return runs

    def save_runs(self, runs: List[Run]) -> None:
        self._ensure_dir()
        df = pd.DataFrame([r.to_record() for r in runs], columns=RUN_COLUMNS)
        df.to_csv(self.runs_path, index=False)
        logger.info("Saved %d runs to %s", len(runs), self.runs_path)

    def load_prefs(self) -> Prefs:
        payload = self._read_json(self.prefs_path)
        if payload is None:
            return Prefs()
        return Prefs(**payload)

    def save_prefs(self, prefs: Prefs) -> None:
        self._write_json(self.prefs_path, asdict(prefs))

    def load_stats_cache(self) -> Optional[StatsSnapshot]:
        payload = self._read_json(self.stats_path)
        if payload is None:
            return None
        return StatsSnapshot(**payload)

    def save_stats_cache(self, stats: StatsSnapshot) -> None:
        self._write_json(self.stats_path, asdict(stats))


class MemoryStore:
    '''In-process store for tests and scripts'''

    def __init__(self, runs: Optional[List[Run]] = None, prefs: Optional[Prefs] = None):
        self.runs: List[Run] = list(runs or [])
        self.prefs: Prefs = prefs or Prefs()
        self.stats: Optional[StatsSnapshot] = None

    def load_runs(self) -> List[Run]:
        return list(self.runs)

    def save_runs(self, runs: List[Run]) -> None:
        self.runs = list(runs)

    def load_prefs(self) -> Prefs:
        return self.prefs

    def save_prefs(self, prefs: Prefs) -> None:
        self.prefs = prefs

    def load_stats_cache(self) -> Optional[StatsSnapshot]:
        return self.stats

    def save_stats_cache(self, stats: StatsSnapshot) -> None:
        self.stats = stats
