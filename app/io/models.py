from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Tuple

SORTABLE_FIELDS: Tuple[str, ...] = ('date', 'duration', 'distance', 'speed', 'pace')
SORT_DIRECTIONS: Tuple[str, ...] = ('asc', 'desc')


def calc_duration(hrs: int, mins: int, secs: int) -> int:
    return hrs * 60 * 60 + mins * 60 + secs


def split_duration(seconds: float) -> Tuple[int, int, int]:
    '''
    Inverse of calc_duration, after rounding to the nearest whole second
    (ties round down, so 271.5 -> 271)
    '''
    total = max(0, math.ceil(seconds - 0.5))
    hrs, rem = divmod(total, 3600)
    mins, secs = divmod(rem, 60)
    return hrs, mins, secs


def speed(distance: float, duration: float) -> float:
    # km/h
    if duration == 0:
        return 0.0
    return distance * 3600 / duration


def pace(duration: float, distance: float) -> float:
    # sec/km
    if distance == 0:
        return 0.0
    return duration / distance


def format_duration(seconds: float) -> str:
    hrs, mins, secs = split_duration(seconds)
    if hrs > 0:
        return f'{hrs}:{mins:02d}:{secs:02d}'
    return f'{mins}:{secs:02d}'


def format_float(value: float) -> str:
    return f'{value:.2f}'


def next_run_id(existing_ids: Iterable[int]) -> int:
    '''
    max(existing ids) + 1, or 1 for an empty log.

    Two writers computing this from the same snapshot get the same id; the
    store has no allocation lock.
    '''
    return max(existing_ids, default=0) + 1


@dataclass(frozen=True)
class Run:
    id: int
    date: date
    duration: float  # seconds
    distance: float  # km
    selected: bool = field(default=False, compare=False)  # UI only, never stored

    @property
    def speed(self) -> float:
        return speed(self.distance, self.duration)

    @property
    def pace(self) -> float:
        return pace(self.duration, self.distance)

    @property
    def date_pretty(self) -> str:
        return self.date.isoformat()

    @property
    def duration_pretty(self) -> str:
        return format_duration(self.duration)

    @property
    def distance_pretty(self) -> str:
        return format_float(self.distance)

    @property
    def speed_pretty(self) -> str:
        return format_float(self.speed)

    @property
    def pace_pretty(self) -> str:
        return format_duration(self.pace)

    def to_record(self) -> dict:
        '''Persisted columns only'''
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'duration': self.duration,
            'distance': self.distance,
        }

    def to_display(self) -> dict:
        return {
            'id': self.id,
            'date': self.date_pretty,
            'duration': self.duration_pretty,
            'distance': self.distance_pretty,
            'speed': self.speed_pretty,
            'pace': self.pace_pretty,
            'selected': self.selected,
        }


def create_run(
    run_date: date,
    hrs: int,
    mins: int,
    secs: int,
    distance: float,
    existing_ids: Iterable[int],
) -> Run:
    # No validation here; callers go through form_parser first
    return Run(
        id=next_run_id(existing_ids),
        date=run_date,
        duration=calc_duration(hrs, mins, secs),
        distance=float(distance),
    )


def modify_run(run: Run, new_date: date, new_duration: float, new_distance: float) -> Run:
    return replace(run, date=new_date, duration=new_duration, distance=float(new_distance))


@dataclass(frozen=True)
class Prefs:
    sort_by: str = 'date'
    sort: str = 'asc'

    def __post_init__(self):
        if self.sort_by not in SORTABLE_FIELDS:
            raise ValueError(f'Unknown sort field: {self.sort_by}')
        if self.sort not in SORT_DIRECTIONS:
            raise ValueError(f'Unknown sort direction: {self.sort}')
