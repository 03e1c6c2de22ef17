from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from app.io.form_parser import error_summary, parse_run_form, validate_run_form
from app.io.models import Run, calc_duration, create_run, modify_run
from app.io.store import RunStore
from app.metrics.compute_metrics import StatsSnapshot, compute_stats, days_since_phrase, last_run_date
from app.metrics.selection import remove_by_id, replace_run, select_by_id, sort_runs, toggle_prefs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    run: Optional[Run] = None
    errors: List[str] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors


def _save(store: RunStore, runs: List[Run]) -> None:
    # stats first: a run that cannot be aggregated never reaches the store
    stats = compute_stats(runs)
    store.save_runs(runs)
    store.save_stats_cache(stats)


def _rejected(errors: List[str]) -> ActionResult:
    return ActionResult(errors=errors, message=error_summary(errors))


def add_run(store: RunStore, form: Mapping[str, object], today: Optional[date] = None) -> ActionResult:
    errors = validate_run_form(form, today)
    if errors:
        return _rejected(errors)

    run_date, hrs, mins, secs, distance = parse_run_form(form)
    runs = store.load_runs()
    new_run = create_run(run_date, hrs, mins, secs, distance, (r.id for r in runs))
    _save(store, runs + [new_run])
    logger.info("Added run %d for %s", new_run.id, run_date)
    return ActionResult(run=new_run, message=f'New run added for {new_run.date_pretty}')


def edit_run(
    store: RunStore,
    run_id: int,
    form: Mapping[str, object],
    today: Optional[date] = None,
) -> Optional[ActionResult]:
    '''None when run_id is not in the store'''
    runs = store.load_runs()
    current = select_by_id(runs, run_id)
    if current is None:
        return None

    errors = validate_run_form(form, today)
    if errors:
        return _rejected(errors)

    run_date, hrs, mins, secs, distance = parse_run_form(form)
    updated = modify_run(current, run_date, calc_duration(hrs, mins, secs), distance)
    _save(store, replace_run(runs, updated))
    logger.info("Updated run %d", run_id)
    return ActionResult(run=updated, message=f'Run updated for {updated.date_pretty}')


def delete_run(store: RunStore, run_id: int) -> Optional[ActionResult]:
    runs = store.load_runs()
    target = select_by_id(runs, run_id)
    if target is None:
        return None
    _save(store, remove_by_id(runs, run_id))
    logger.info("Deleted run %d", run_id)
    return ActionResult(run=target, message='Okay, run deleted!')


def list_runs(store: RunStore, sort_by: Optional[str] = None) -> List[Run]:
    '''
    Runs ordered by the stored prefs. Passing sort_by toggles the prefs
    first (and persists them); unknown fields raise ValueError.
    '''
    prefs = store.load_prefs()
    if sort_by is not None:
        prefs = toggle_prefs(prefs, sort_by)
        store.save_prefs(prefs)
    return sort_runs(store.load_runs(), prefs.sort_by, prefs.sort)


def current_stats(store: RunStore, runs: List[Run]) -> StatsSnapshot:
    '''Stats recomputed from the runs; the cache is rewritten when it disagrees'''
    stats = compute_stats(runs)
    if store.load_stats_cache() != stats:
        store.save_stats_cache(stats)
        logger.debug("Stats cache refreshed (%d runs)", stats.count)
    return stats


def overview(store: RunStore, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    runs = store.load_runs()
    stats = current_stats(store, runs)
    last = last_run_date(runs)
    return {
        'stats': stats,
        'pretty': stats.pretty(),
        'last_run': days_since_phrase(last, today) if last else None,
    }
