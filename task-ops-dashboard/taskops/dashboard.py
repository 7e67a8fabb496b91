"""Session state for the task operations dashboard.

One :class:`TaskDashboard` lives in ``st.session_state`` per browser session.
It keeps the local copy of the task list, the filter configuration, the
current page, the row selection and the in-flight mutation marker, and it
re-derives the filtered view, the stat counts and the suggestion map
whenever the task list or a filter changes.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Iterator, List, Optional, Set

from taskops.classify import category_suggestions
from taskops.export import export_filename, tasks_to_csv
from taskops.filters import (
    FilterConfig,
    TaskStats,
    compute_stats,
    distinct_values,
    filter_tasks,
    to_local,
    utcnow,
)
from taskops.models import FLAG_FIELDS, Task
from taskops.pagination import PAGE_SIZE, Page, clamp_page, paginate, results_label
from taskops.tasks_repo import TaskStore, TaskStoreError


logger = logging.getLogger(__name__)

BULK = "bulk"


def _check_flag(field: str) -> None:
    if field not in FLAG_FIELDS:
        raise ValueError(f"not a classification flag: {field!r}")


class TaskDashboard:
    def __init__(
        self,
        store: TaskStore,
        *,
        page_size: int = PAGE_SIZE,
        export_prefix: str = "ops-tasks",
        clock: Callable[[], datetime] = utcnow,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.page_size = max(1, int(page_size))
        self.export_prefix = export_prefix
        self._clock = clock
        self.tz = tz

        self.tasks: List[Task] = []
        self.filters = FilterConfig()
        self.current_page = 1
        self.selected: Set[str] = set()
        self.updating: Optional[str] = None
        self.loading = False
        self.delete_armed = False

        self.filtered_tasks: List[Task] = []
        self.stats: TaskStats = compute_stats([])
        self.suggestions: Dict[str, str] = {}

    # ---------------- derived state ----------------

    def _set_tasks(self, tasks: List[Task]) -> None:
        self.tasks = tasks
        self.stats = compute_stats(tasks)
        self.suggestions = category_suggestions(tasks)
        self._refilter()
        self.current_page = clamp_page(self.current_page, len(self.filtered_tasks), self.page_size)

    def _refilter(self) -> None:
        self.filtered_tasks = filter_tasks(self.tasks, self.filters, now=self._clock(), tz=self.tz)

    @property
    def assistants(self) -> List[str]:
        return distinct_values(self.tasks, "assistant")

    @property
    def clients(self) -> List[str]:
        return distinct_values(self.tasks, "client")

    # ---------------- loading ----------------

    def refresh(self) -> bool:
        self.loading = True
        try:
            tasks = self.store.fetch_all()
        except TaskStoreError as exc:
            logger.error("Error fetching tasks: %s", exc)
            return False
        finally:
            self.loading = False
        self._set_tasks(tasks)
        logger.info("Loaded %d tasks", len(tasks))
        return True

    # ---------------- filters ----------------

    def set_filters(self, config: FilterConfig) -> None:
        if config == self.filters:
            return
        self.filters = config
        self._refilter()
        self.current_page = 1

    def update_filters(self, **changes) -> None:
        self.set_filters(replace(self.filters, **changes))

    def set_stat_filter(self, stat_filter: str) -> None:
        self.update_filters(stat_filter=stat_filter)

    # ---------------- pagination ----------------

    @property
    def page(self) -> Page[Task]:
        return paginate(self.filtered_tasks, self.current_page, self.page_size)

    @property
    def page_tasks(self) -> List[Task]:
        return self.page.items

    @property
    def total_pages(self) -> int:
        return self.page.total_pages

    def go_to_page(self, page: int) -> None:
        self.current_page = clamp_page(page, len(self.filtered_tasks), self.page_size)

    @property
    def results_label(self) -> str:
        return results_label(self.page, len(self.tasks))

    # ---------------- selection ----------------

    def is_selected(self, task_id: str) -> bool:
        return task_id in self.selected

    def toggle_selection(self, task_id: str) -> None:
        if task_id in self.selected:
            self.selected.discard(task_id)
        else:
            self.selected.add(task_id)
        self.delete_armed = False

    def page_fully_selected(self) -> bool:
        ids = [t.id for t in self.page_tasks]
        return bool(ids) and all(i in self.selected for i in ids)

    def toggle_select_page(self) -> None:
        ids = [t.id for t in self.page_tasks]
        if all(i in self.selected for i in ids):
            self.selected.difference_update(ids)
        else:
            self.selected.update(ids)
        self.delete_armed = False

    def clear_selection(self) -> None:
        # An armed delete only ever applies to the selection it was armed on.
        self.selected = set()
        self.delete_armed = False

    # ---------------- mutations ----------------

    def is_locked(self, task_id: Optional[str] = None) -> bool:
        if self.updating == BULK:
            return True
        return task_id is not None and self.updating == task_id

    @contextmanager
    def _in_flight(self, marker: str) -> Iterator[bool]:
        if self.updating is not None:
            logger.warning("Ignoring %s update: %s is still in flight", marker, self.updating)
            yield False
            return
        self.updating = marker
        try:
            yield True
        finally:
            self.updating = None

    def _patch(self, ids: Set[str], field: str, value: bool) -> None:
        self._set_tasks([replace(t, **{field: value}) if t.id in ids else t for t in self.tasks])

    def toggle_flag(self, task_id: str, field: str, value: bool) -> bool:
        _check_flag(field)
        with self._in_flight(task_id) as acquired:
            if not acquired:
                return False
            try:
                self.store.update_fields(task_id, {field: bool(value)})
            except TaskStoreError as exc:
                logger.error("Error updating %s: %s", field, exc)
                return False
            self._patch({task_id}, field, bool(value))
        logger.info("Set %s=%s on task %s", field, bool(value), task_id)
        return True

    def bulk_set_flag(self, field: str, value: bool = True) -> bool:
        _check_flag(field)
        ids = set(self.selected)
        if not ids:
            return False
        with self._in_flight(BULK) as acquired:
            if not acquired:
                return False
            try:
                self.store.update_fields_bulk(sorted(ids), {field: bool(value)})
            except TaskStoreError as exc:
                logger.error("Error bulk updating %s: %s", field, exc)
                return False
            self._patch(ids, field, bool(value))
            self.clear_selection()
        logger.info("Set %s=%s on %d tasks", field, bool(value), len(ids))
        return True

    def arm_bulk_delete(self) -> None:
        if self.selected:
            self.delete_armed = True

    def cancel_bulk_delete(self) -> None:
        self.delete_armed = False

    def confirm_bulk_delete(self) -> bool:
        if not self.delete_armed:
            return False
        try:
            ids = set(self.selected)
            if not ids:
                return False
            with self._in_flight(BULK) as acquired:
                if not acquired:
                    return False
                try:
                    self.store.delete_bulk(sorted(ids))
                except TaskStoreError as exc:
                    logger.error("Error deleting tasks: %s", exc)
                    return False
                self._set_tasks([t for t in self.tasks if t.id not in ids])
                self.clear_selection()
        finally:
            self.delete_armed = False
        logger.info("Deleted %d tasks", len(ids))
        return True

    # ---------------- export ----------------

    def export_csv(self) -> str:
        return tasks_to_csv(self.filtered_tasks)

    def export_filename(self, today: Optional[date] = None) -> str:
        return export_filename(self.export_prefix, today or to_local(self._clock(), self.tz).date())
