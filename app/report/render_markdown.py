from __future__ import annotations
from typing import Any, Dict


def render_markdown(payload: Dict[str, Any]) -> str:
    '''
    Overview page as Markdown. payload is what runlog.actions.overview
    returns, plus an optional runner_name.
    '''
    runner_name = payload.get('runner_name', 'Runner')
    stats = payload.get('pretty', {})
    count = int(stats.get('count', 0) or 0)

    if count == 0:
        return f"""# Overall running report — {runner_name}

No runs yet. Add your first run to see your statistics.
"""

    md = f"""# Overall running report — {runner_name}

**Last run:** {payload.get("last_run")}

---

## Totals
- **Runs:** {count}
- **Total distance:** {stats.get("total_distance")} km
- **Longest run:** {stats.get("longest_distance")} km

## Averages
- **Distance:** {stats.get("average_distance")} km
- **Speed:** {stats.get("average_speed")} km/h
- **Pace:** {stats.get("average_pace")} per km
"""
    return md
