#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path
from typing import Optional

import config
from store import InvalidTaskText, StoreWriteError, Task, TaskNotFound, TaskStore, parse_id

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _store_from_args(ns: argparse.Namespace) -> TaskStore:
    if getattr(ns, "file", None):
        return TaskStore(Path(ns.file))
    return TaskStore(config.TODOS_FILE)


def _print_tasks(tasks: list[Task]) -> None:
    if not tasks:
        print("No todos yet!")
        return
    print("\n--- Your Todos ---")
    for t in tasks:
        status = "[x]" if t.completed else "[ ]"
        print(f"{t.id}. {status} {t.text}")
    print("")


def _id_from_args(ns: argparse.Namespace) -> Optional[int]:
    task_id = parse_id(ns.id)
    if task_id is None:
        print(f"Invalid id: {ns.id}", file=sys.stderr)
    return task_id


def _ask_yes_no(count: int) -> bool:
    try:
        answer = input(f"Delete all {count} todos? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def cmd_add(ns: argparse.Namespace) -> int:
    store = _store_from_args(ns)
    try:
        store.add(ns.text)
    except InvalidTaskText as e:
        print(e, file=sys.stderr)
        return EXIT_USAGE
    print(f"✓ Todo added: {ns.text}")
    return EXIT_OK


def cmd_list(ns: argparse.Namespace) -> int:
    _print_tasks(_store_from_args(ns).list())
    return EXIT_OK


def cmd_done(ns: argparse.Namespace) -> int:
    task_id = _id_from_args(ns)
    if task_id is None:
        return EXIT_USAGE
    _store_from_args(ns).complete(task_id)
    print(f"✓ Todo {task_id} marked as done")
    return EXIT_OK


def cmd_delete(ns: argparse.Namespace) -> int:
    task_id = _id_from_args(ns)
    if task_id is None:
        return EXIT_USAGE
    deleted = _store_from_args(ns).remove(task_id)
    print(f"✓ Todo {task_id} deleted: {deleted.text}")
    return EXIT_OK


def cmd_clear(ns: argparse.Namespace) -> int:
    asked = []

    def confirm(count: int) -> bool:
        asked.append(count)
        return ns.yes or _ask_yes_no(count)

    removed = _store_from_args(ns).clear(confirm)
    if removed:
        print(f"✓ Cleared {removed} todos")
    elif asked:
        print("Cancelled.")
    else:
        print("No todos to clear.")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="todo",
        description="A tiny todo list kept in one JSON file.",
    )
    p.add_argument(
        "--file",
        help="Path to the todos JSON file (default: ./todos.json or TODOS_FILE env var)",
    )
    sub = p.add_subparsers(dest="cmd", required=True, metavar="{add,list,done,delete,clear}")

    s = sub.add_parser("add", help="Add a todo.")
    s.add_argument("text", help="What needs doing.")
    s.set_defaults(func=cmd_add)

    s = sub.add_parser("list", help="List all todos.")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("done", help="Mark a todo as done.")
    s.add_argument("id", help="Todo ID.")
    s.set_defaults(func=cmd_done)

    s = sub.add_parser("delete", help="Delete a todo.")
    s.add_argument("id", help="Todo ID.")
    s.set_defaults(func=cmd_delete)

    s = sub.add_parser("clear", help="Delete every todo (asks first).")
    s.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation.")
    s.set_defaults(func=cmd_clear)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    config.configure_logging("WARNING")
    parser = build_parser()
    ns = parser.parse_args(argv)
    try:
        return int(ns.func(ns))
    except TaskNotFound as e:
        print(e, file=sys.stderr)
        return EXIT_FAILED
    except StoreWriteError as e:
        print(f"Error writing todos: {e.cause}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
