"""
Record store for the todo list.

The whole collection lives in one JSON file. Every operation loads it fresh,
and every mutating operation writes the full list back. Mutations on the same
file, including the reset of a corrupt file, are serialized within the
process by a lock keyed on the file path.
"""
import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(gt=0)
    text: str
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class StoreError(Exception):
    pass


class InvalidTaskText(StoreError):
    def __init__(self):
        super().__init__("Todo text cannot be empty")


class TaskNotFound(StoreError):
    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Todo {task_id} not found")


class StoreWriteError(StoreError):
    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write {path}: {cause}")


_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault(path, threading.RLock())


def next_id(tasks: list[Task]) -> int:
    """Highest existing id + 1. An empty store starts again at 1."""
    if not tasks:
        return 1
    return max(t.id for t in tasks) + 1


def parse_id(raw) -> int | None:
    """Coerce an external id (int or string of digits) to int, or None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


class TaskStore:
    def __init__(self, path: Path):
        self.path = Path(path).expanduser().resolve()
        self._lock = _lock_for(self.path)

    def load(self) -> list[Task]:
        """
        Read the backing file.

        A missing or blank file is an empty store. A file that isn't a JSON
        array is overwritten with an empty store and its contents are lost.
        Records inside a valid array that don't validate are logged and
        skipped; the rest load normally.
        """
        with self._lock:
            if not self.path.exists():
                return []
            raw = self.path.read_bytes()
            if not raw.strip():
                return []
            try:
                records = json.loads(raw)
            except ValueError as e:
                return self._reset(f"not valid JSON: {e}")
            if not isinstance(records, list):
                return self._reset(f"top level is {type(records).__name__}, not an array")
            tasks = []
            for n, record in enumerate(records):
                try:
                    tasks.append(Task.model_validate(record))
                except ValidationError as e:
                    logger.warning("Skipping record %d in %s: %s", n, self.path, e.errors()[0]["msg"])
            return tasks

    def _reset(self, reason: str) -> list[Task]:
        logger.warning("%s is corrupted (%s). Resetting.", self.path, reason)
        try:
            self.persist([])
        except StoreWriteError:
            pass  # already logged; an empty list is still the answer
        return []

    def persist(self, tasks: list[Task]) -> None:
        """Replace the file with `tasks` via a temp file and rename. Raises StoreWriteError."""
        content = json.dumps([t.to_json() for t in tasks], indent=2, ensure_ascii=False)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Error writing todos to %s: %s", self.path, e)
            raise StoreWriteError(self.path, e) from e

    def add(self, text: str) -> Task:
        if not isinstance(text, str) or not text.strip():
            raise InvalidTaskText()
        with self._lock:
            tasks = self.load()
            task = Task(
                id=next_id(tasks),
                text=text,
                completed=False,
                created_at=datetime.now(timezone.utc),
            )
            tasks.append(task)
            self.persist(tasks)
        logger.info("Added todo %d", task.id)
        return task

    def complete(self, task_id) -> Task:
        wanted = parse_id(task_id)
        with self._lock:
            tasks = self.load()
            for task in tasks:
                if task.id == wanted:
                    task.completed = True
                    self.persist(tasks)
                    logger.info("Completed todo %d", task.id)
                    return task
        raise TaskNotFound(task_id)

    def remove(self, task_id) -> Task:
        wanted = parse_id(task_id)
        with self._lock:
            tasks = self.load()
            for i, task in enumerate(tasks):
                if task.id == wanted:
                    del tasks[i]
                    self.persist(tasks)
                    logger.info("Deleted todo %d", task.id)
                    return task
        raise TaskNotFound(task_id)

    def clear(self, confirm: Callable[[int], bool]) -> int:
        """
        Remove every task, but only if confirm(count) says yes.

        Returns the number removed: 0 when the store was already empty
        (confirm is not asked) or the answer was no (file left untouched).
        """
        with self._lock:
            tasks = self.load()
            if not tasks:
                return 0
            if not confirm(len(tasks)):
                logger.debug("Clear of %d todos declined", len(tasks))
                return 0
            self.persist([])
        logger.info("Cleared %d todos", len(tasks))
        return len(tasks)

    # Defined last: inside the class body the name shadows the builtin.
    def list(self):
        return self.load()
