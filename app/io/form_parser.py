from __future__ import annotations
import logging
import math
import re
from decimal import Decimal
from datetime import date
from typing import List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

FORM_FIELDS = ('date', 'hours', 'minutes', 'seconds', 'distance')

_DATE_RE = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
_INT_RE = re.compile(r'[0-9]*')
_NUMBER_RE = re.compile(r'[0-9]+\.?[0-9]*|\.[0-9]+')

MAX_DURATION_HOURS = 1000
_MAX_DURATION = MAX_DURATION_HOURS * 3600
# longer digit strings are clamped before int(), all of them exceed _MAX_DURATION
_MAX_INT_DIGITS = 9

# form field -> label used in messages
_DURATION_LABELS = (('hours', 'hrs'), ('minutes', 'mins'), ('seconds', 'secs'))


def _raw(form: Mapping[str, object], key: str) -> str:
    value = form.get(key)
    return '' if value is None else str(value).strip()


def _parse_date(value: str) -> Optional[date]:
    if not _DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_int(value: str) -> Optional[int]:
    # blank counts as 0
    if not _INT_RE.fullmatch(value):
        return None
    digits = value.lstrip('0')
    if len(digits) > _MAX_INT_DIGITS:
        return 10 ** _MAX_INT_DIGITS
    return int(digits) if digits else 0


def _parse_distance(value: str) -> Optional[float]:
    if not value:
        return 0.0
    if not _NUMBER_RE.fullmatch(value):
        return None
    return float(value)


def _date_errors(value: str, today: date) -> List[str]:
    if not value:
        return ['The run date is missing']
    parsed = _parse_date(value)
    if parsed is None:
        return [f'Invalid run date: {value}']
    if parsed > today:
        return ['The run date cannot be in the future']
    return []


def _duration_errors(form: Mapping[str, object]) -> List[str]:
    errors: List[str] = []
    values = {}
    for key, label in _DURATION_LABELS:
        value = _parse_int(_raw(form, key))
        if value is None:
            errors.append(f"'{label}' should be an integer greater than or equal to 0")
        elif key == 'seconds' and value > 59:
            errors.append("'secs' should be an integer between 0 and 59")
        else:
            values[key] = value

    if len(values) < len(_DURATION_LABELS):
        return errors

    hrs, mins, secs = values['hours'], values['minutes'], values['seconds']
    total = hrs * 3600 + mins * 60 + secs
    if total <= 0:
        errors.append('The total duration should be greater than 0')
    elif total > _MAX_DURATION:
        errors.append(f'The total duration should be less than {MAX_DURATION_HOURS} hours')
    if hrs > 0 and mins > 59:
        errors.append("'mins' should be between 0 and 59")
    return errors


def _distance_errors(value: str) -> List[str]:
    parsed = _parse_distance(value)
    if parsed is None:
        return ['The distance should be a number greater than 0']
    if parsed == 0:
        return ['The distance should be greater than 0']
    if not math.isfinite(parsed):
        return ['The distance is too large']
    return []


def validate_run_form(form: Mapping[str, object], today: Optional[date] = None) -> List[str]:
    '''
    Check raw form strings {date, hours, minutes, seconds, distance}.

    Returns the error messages in display order (date, duration, distance);
    an empty list means the form can be parsed with parse_run_form.
    '''
    today = today or date.today()
    errors = (
        _date_errors(_raw(form, 'date'), today)
        + _duration_errors(form)
        + _distance_errors(_raw(form, 'distance'))
    )
    if errors:
        logger.warning("Rejected run form with %d error(s)", len(errors))
    return errors


def error_summary(errors: List[str]) -> Optional[str]:
    if not errors:
        return None
    if len(errors) == 1:
        return "There's an error in your input:"
    return 'There are some errors in your input:'


def parse_run_form(form: Mapping[str, object]) -> Tuple[date, int, int, int, float]:
    '''
    Typed (date, hours, minutes, seconds, distance) from a form that passed
    validate_run_form. Raises ValueError otherwise.
    '''
    run_date = _parse_date(_raw(form, 'date'))
    hrs, mins, secs = (_parse_int(_raw(form, key)) for key, _ in _DURATION_LABELS)
    distance = _parse_distance(_raw(form, 'distance'))
    if run_date is None or hrs is None or mins is None or secs is None or distance is None:
        raise ValueError('Run form has not been validated')
    return run_date, hrs, mins, secs, distance


def distance_input(distance: float) -> str:
    '''
    Stored distance as form text that parses back to the same float: shortest
    repr digits, never exponent notation
    '''
    return format(Decimal(repr(float(distance))), 'f')


def form_values(form: Mapping[str, object]) -> dict:
    '''Original values, echoed back so the user can correct them'''
    return {key: _raw(form, key) for key in FORM_FIELDS}
