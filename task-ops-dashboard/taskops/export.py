from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from taskops.models import Task

CSV_HEADERS = ["Task Name", "Description", "Client", "Assistant", "BOH", "FOH", "Created At"]
CSV_MIME = "text/csv"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def _quote(value: Optional[str]) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def task_to_csv_row(t: Task) -> List[str]:
    return [
        _quote(t.task_name),
        _quote(t.task_description),
        _quote(t.client),
        _quote(t.assistant),
        _yes_no(t.boh),
        _yes_no(t.foh),
        t.created_at.strftime(TIMESTAMP_FORMAT) if t.created_at else "",
    ]


def tasks_to_csv(tasks: Iterable[Task]) -> str:
    """Serialize tasks to CSV text.

    Text columns are always quoted; flag and timestamp columns never are.
    Lines are joined with a bare newline and there is no trailing newline.
    """
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(task_to_csv_row(t)) for t in tasks)
    return "\n".join(lines)


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}-{today.strftime('%Y-%m-%d')}.csv"
