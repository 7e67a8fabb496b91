from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pandas as pd
from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()

FLAG_FIELDS = ("boh", "foh")


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp into naive UTC; unparseable values become None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    try:
        return _to_naive_utc(datetime.fromisoformat(str(value)))
    except ValueError:
        ts = pd.to_datetime(value, errors="coerce", utc=True)
        if pd.isna(ts):
            return None
        return ts.tz_convert(None).to_pydatetime()


@dataclass(frozen=True)
class Task:
    id: str
    record_id: str = ""
    task_name: str = ""
    task_description: str = ""
    client: str = ""
    assistant: str = ""
    boh: bool = False
    foh: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            record_id=str(data.get("record_id") or ""),
            task_name=data.get("task_name") or "",
            task_description=data.get("task_description") or "",
            client=data.get("client") or "",
            assistant=data.get("assistant") or "",
            boh=bool(data.get("boh")),
            foh=bool(data.get("foh")),
            created_at=parse_timestamp(data.get("created_at")),
        )


class TaskRow(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True)
    record_id = Column(String(64), nullable=True)
    task_name = Column(Text, nullable=True)
    task_description = Column(Text, nullable=True)
    client = Column(String(256), nullable=True, index=True)
    assistant = Column(String(256), nullable=True, index=True)
    boh = Column(Boolean, default=False, nullable=False)
    foh = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def to_task(self) -> Task:
        return Task(
            id=str(self.id),
            record_id=str(self.record_id or ""),
            task_name=self.task_name or "",
            task_description=self.task_description or "",
            client=self.client or "",
            assistant=self.assistant or "",
            boh=bool(self.boh),
            foh=bool(self.foh),
            created_at=_to_naive_utc(self.created_at),
        )

    @classmethod
    def from_task(cls, task: Task) -> "TaskRow":
        return cls(
            id=task.id,
            record_id=task.record_id or None,
            task_name=task.task_name,
            task_description=task.task_description,
            client=task.client or None,
            assistant=task.assistant or None,
            boh=bool(task.boh),
            foh=bool(task.foh),
            created_at=task.created_at,
        )
