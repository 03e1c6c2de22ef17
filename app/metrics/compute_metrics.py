from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional
from app.io.models import Run, format_duration, format_float, pace, speed


@dataclass(frozen=True)
class StatsSnapshot:
    count: int = 0
    average_pace: float = 0.0      # sec/km
    average_distance: float = 0.0  # km
    average_speed: float = 0.0     # km/h
    longest_distance: float = 0.0  # km
    total_distance: float = 0.0    # km

    def pretty(self) -> Dict[str, str]:
        return {
            'count': str(self.count),
            'average_pace': format_duration(self.average_pace),
            'average_distance': format_float(self.average_distance),
            'average_speed': format_float(self.average_speed),
            'longest_distance': format_float(self.longest_distance),
            'total_distance': format_float(self.total_distance),
        }


def compute_stats(runs: List[Run]) -> StatsSnapshot:
    '''
    Aggregate over all runs. Pace and speed come from the totals, not from
    averaging the per-run values, so long runs weigh more.
    '''
    count = len(runs)
    total_distance = sum(r.distance for r in runs)
    total_duration = sum(r.duration for r in runs)

    return StatsSnapshot(
        count=count,
        average_pace=pace(total_duration, total_distance),
        average_distance=(total_distance / count) if count > 0 else 0.0,
        average_speed=speed(total_distance, total_duration),
        longest_distance=max((r.distance for r in runs), default=0.0),
        total_distance=float(total_distance),
    )


def last_run_date(runs: List[Run]) -> Optional[date]:
    return max((r.date for r in runs), default=None)


def days_since_phrase(last_date: date, today: date) -> str:
    days = (today - last_date).days
    if days == 0:
        return 'Today!'
    if days == 1:
        return 'Yesterday'
    if days > 1:
        return f'{days} days ago'
    # only reachable with a future-dated run in the store
    return f'{abs(days)} days from now'
