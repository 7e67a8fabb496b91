"""Fill the configured tasks table with sample data, or import exported records, for local runs.

    python scripts/seed_tasks.py --count 60 --clear
    python scripts/seed_tasks.py --clear --from-json export.json
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional


sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from taskops.config import get_config  # noqa: E402
from taskops.filters import utcnow  # noqa: E402
from taskops.logging_setup import setup_logging  # noqa: E402
from taskops.models import Task  # noqa: E402
from taskops.tasks_repo import TaskStore  # noqa: E402


logger = logging.getLogger("taskops.seed")

SAMPLE_NAMES = [
    "Book a plumber for the kitchen leak", "Chase dry cleaner about suit", "Confirm dinner reservation",
    "Follow up with electrician on quote", "Find gardener availability next week", "Reserve table for anniversary",
    "Research hotel options in Lisbon", "Compare car insurance renewals", "Plan itinerary for Tokyo trip",
    "Gift ideas for mum's birthday", "Review tenancy contract", "Investigate school application deadlines",
    "Wedding planning: shortlist venues", "Property search in Bath", "Renovation budget spreadsheet",
    "Order printer ink", "Update address with bank", "Collect parcel from depot",
    "Sort out phone bill", "Return online order",
]
CLIENTS = ["Harper", "Okafor", "Lindqvist", "Mehta", "Duval", "Castellano"]
ASSISTANTS = ["Amira", "Ben", "Chloe", "Dev"]


def sample_tasks(count: int, *, now: Optional[datetime] = None, seed: Optional[int] = None) -> List[Task]:
    rng = random.Random(seed)
    now = now or utcnow()
    tasks = []
    for i in range(count):
        name = SAMPLE_NAMES[i % len(SAMPLE_NAMES)]
        flags = rng.choices([(False, False), (True, False), (False, True), (True, True)], weights=[5, 3, 3, 1])[0]
        created = now - timedelta(days=rng.randint(0, 60), minutes=rng.randint(0, 24 * 60))
        tasks.append(
            Task(
                id=str(uuid.uuid4()),
                record_id=f"REC-{1000 + i}",
                task_name=name,
                task_description=f"Sample task {i + 1} for {rng.choice(CLIENTS)}",
                client=rng.choice(CLIENTS),
                assistant=rng.choice(ASSISTANTS),
                boh=flags[0],
                foh=flags[1],
                created_at=created,
            )
        )
    return tasks


def load_tasks(path: Path) -> List[Task]:
    """Read task records exported from another store (a JSON list of objects).

    Records without an id get a fresh one; timestamps in any ISO-ish form are
    accepted.
    """
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON list of task records")
    return [Task.from_dict({**rec, "id": rec.get("id") or str(uuid.uuid4())}) for rec in records]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=45, help="number of tasks to insert")
    parser.add_argument("--clear", action="store_true", help="delete existing tasks first")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--from-json", type=Path, default=None, help="import task records from a JSON file instead")
    args = parser.parse_args(argv)

    config = get_config()
    setup_logging(config.log_level, log_dir=config.log_dir)

    store = TaskStore(config.database_url)
    if config.init_schema:
        store.init_schema()
    if args.clear:
        logger.info("Cleared %d existing tasks", store.delete_all())
    if args.from_json is not None:
        tasks = load_tasks(args.from_json)
    else:
        tasks = sample_tasks(max(0, args.count), seed=args.seed)
    store.insert_tasks(tasks)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
