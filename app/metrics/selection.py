from __future__ import annotations
from dataclasses import replace
from typing import Iterable, List, Optional
from app.io.models import SORTABLE_FIELDS, Prefs, Run


def sort_runs(runs: Iterable[Run], field: str, direction: str = 'asc') -> List[Run]:
    '''
    Stable sort on one of SORTABLE_FIELDS. 'desc' uses reverse=True, which
    Python keeps stable, so ties stay in their original order either way.
    '''
    if field not in SORTABLE_FIELDS:
        raise ValueError(f'Cannot sort runs by {field!r}')
    if direction not in ('asc', 'desc'):
        raise ValueError(f'Unknown sort direction: {direction!r}')
    return sorted(runs, key=lambda r: getattr(r, field), reverse=(direction == 'desc'))


def select_by_id(runs: Iterable[Run], run_id: int) -> Optional[Run]:
    for r in runs:
        if r.id == run_id:
            return r
    return None


def remove_by_id(runs: Iterable[Run], run_id: int) -> List[Run]:
    return [r for r in runs if r.id != run_id]


def replace_run(runs: Iterable[Run], updated: Run) -> List[Run]:
    return [updated if r.id == updated.id else r for r in runs]


def mark_selected(runs: Iterable[Run], run_id: int) -> List[Run]:
    # copies for display; stored runs keep selected=False
    return [replace(r, selected=(r.id == run_id)) for r in runs]


def toggle_prefs(prefs: Prefs, field: str) -> Prefs:
    '''Same field flips the direction, a new field starts ascending'''
    if field == prefs.sort_by:
        return Prefs(sort_by=field, sort='desc' if prefs.sort == 'asc' else 'asc')
    return Prefs(sort_by=field, sort='asc')
