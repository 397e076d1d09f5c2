"""Time bucketing and activity feed merging for the user stats report"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from biplatform.utils.timezone import month_start

USAGE_MONTHS = 6
RECENT_LIMIT = 5


class ActivityType:
    DASHBOARD = "dashboard"
    CHART = "chart"
    MLMODEL = "mlmodel"


@dataclass(frozen=True)
class ActivityRecord:
    """One recently created entity, whatever its collection"""

    id: str
    name: str
    type: Optional[str]
    created_at: datetime
    activity_type: str

    def to_json(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "created_at": self.created_at.isoformat(),
            "activity_type": self.activity_type,
        }


def usage_windows(now: datetime, months: int = USAGE_MONTHS) -> List[Tuple[str, datetime, datetime]]:
    """
    Calendar-month intervals [start, end) in UTC, oldest first, ending with
    the month containing `now`. Each entry is (label "YYYY-MM", start, end).
    """
    windows = []
    for months_back in range(months - 1, -1, -1):
        start = month_start(now, months_back)
        end = month_start(now, months_back - 1)
        windows.append((start.strftime("%Y-%m"), start, end))
    return windows


def merge_recent_activity(
    feeds: Iterable[Iterable[ActivityRecord]], limit: int = RECENT_LIMIT
) -> List[ActivityRecord]:
    """
    Concatenate per-collection feeds, newest first, keep the first `limit`.
    Records with equal timestamps keep the order in which their feeds were given.
    """
    combined = [record for feed in feeds for record in feed]
    combined.sort(key=lambda record: record.created_at, reverse=True)
    return combined[:limit]
