# src/studyhouse/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..core.state import AppState, finish_sync, set_sync_phase
from ..focus.timer import TimerMode, format_time
from ..imports.sync import sync_document, sync_folder
from ..scheduling.review import level_label
from ..stats.aggregator import completion_histogram, month_grid, summarize
from ..tasks.task_models import Task, TaskNotFoundError, ToggleField

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

INTENSITY_MARKS = (".", "o", "O", "@")


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def resolve_task(state: AppState, ref: str) -> Task:
    """A task ref is a 1-based list position, else a unique id prefix."""
    tasks = state.task_store.tasks
    ref = (ref or "").strip()
    if ref.isdigit() and 1 <= int(ref) <= len(tasks):
        return tasks[int(ref) - 1]
    matches = [t for t in tasks if ref and t.id.startswith(ref)]
    if len(matches) != 1:
        raise TaskNotFoundError(ref)
    return matches[0]


def format_task(state: AppState, task: Task, pos: int | None = None) -> str:
    mark = "x" if task.completed else " "
    flags = ("!" if task.is_urgent else "") + ("?" if task.is_question else "")
    prefix = f"{pos:>3}. " if pos is not None else "   - "
    line = f"{prefix}[{mark}] {task.title}"
    if flags:
        line += f" {flags}"
    extra = [task.source.value]
    if task.category:
        extra.append(task.category)
    if state.strategy.name == "review":
        extra.append(level_label(task.repetition_level))
    elif task.manual_date:
        extra.append(f"pinned {task.manual_date}")
    return f"{line}  ({', '.join(extra)})"


def add_task_from_text(state: AppState, text: str) -> str:
    try:
        task = state.task_store.add(text)
    except ValueError:
        return "Nothing to add (empty title)."
    return f"Added: {task.title}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    plan = store.plan
    plan_str = f"{plan.start_date} .. {plan.target_end_date}" if plan.is_set else "not set"
    return (
        "Status:\n"
        f"  Scheduling: {state.strategy.name}\n"
        f"  Materials: {len(store)}\n"
        f"  Plan range: {plan_str}\n"
        f"  Sync phase: {'OPEN' if state.sync_phase else 'DONE'}\n"
        f"  Extractor: {type(state.extractor).__name__}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <title>"
    return add_task_from_text(state, " ".join(args))


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.tasks
    if not tasks:
        return "No materials yet. Type a title (or /add <title>) to capture one."
    lines = [f"Materials ({len(tasks)}):"]
    lines.extend(format_task(state, t, i) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def _toggle(state: AppState, args: list[str], field: ToggleField, usage: str) -> str:
    if not args:
        return usage
    try:
        task = resolve_task(state, args[0])
        updated = state.task_store.toggle(task.id, field)
    except TaskNotFoundError:
        return f"No such material: {args[0]}"
    return format_task(state, updated)


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <ref>  -> toggle completion

    In review mode completing a material schedules its next review.
    """
    return _toggle(state, args, ToggleField.COMPLETED, "Usage: /done <ref>")


def cmd_urgent(state: AppState, args: list[str]) -> str:
    return _toggle(state, args, ToggleField.URGENT, "Usage: /urgent <ref>")


def cmd_question(state: AppState, args: list[str]) -> str:
    return _toggle(state, args, ToggleField.QUESTION, "Usage: /question <ref>")


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <ref>"
    try:
        task = resolve_task(state, args[0])
        state.task_store.remove(task.id)
    except TaskNotFoundError:
        return f"No such material: {args[0]}"
    return f"Removed: {task.title}"


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) < 2 or not args[1].isdigit():
        return "Usage: /move <ref> <position>"
    try:
        task = resolve_task(state, args[0])
        state.task_store.move(task.id, int(args[1]) - 1)
    except TaskNotFoundError:
        return f"No such material: {args[0]}"
    return f"Moved: {task.title}"


def cmd_due(state: AppState, args: list[str]) -> str:
    snapshot = state.task_store.snapshot()
    due = state.strategy.due_today(snapshot)
    if not due:
        return f"Nothing due on {snapshot.today_str}. All caught up!"
    lines = [f"Due on {snapshot.today_str} ({len(due)}):"]
    positions = {t.id: i for i, t in enumerate(snapshot.tasks, start=1)}
    lines.extend(format_task(state, t, positions.get(t.id)) for t in due)
    return "\n".join(lines)


def cmd_plan(state: AppState, args: list[str]) -> str:
    """
    /plan                 -> show the day-by-day schedule
    /plan <start> <end>   -> set the plan range (YYYY-MM-DD)
    /plan clear           -> remove the plan range
    """
    store = state.task_store
    if args and args[0].lower() == "clear":
        store.set_plan("", "")
        return "Plan range cleared."

    if len(args) >= 2:
        try:
            plan = store.set_plan(args[0], args[1])
        except ValueError:
            return "Dates must be YYYY-MM-DD, e.g. /plan 2024-09-01 2024-12-20"
        note = "" if state.strategy.name == "plan" else " (review mode ignores the plan range)"
        return f"Plan range set: {plan.start_date} .. {plan.target_end_date}{note}"

    if args:
        return "Usage: /plan | /plan <start> <end> | /plan clear"

    snapshot = store.snapshot()
    buckets = state.strategy.assign_to_day(snapshot)
    if not buckets:
        return "No plan yet. Set one with /plan <start> <end>."
    positions = {t.id: i for i, t in enumerate(snapshot.tasks, start=1)}
    lines = []
    for day, tasks in buckets.items():
        marker = "  <- today" if day == snapshot.today_str else ""
        lines.append(f"{day} ({len(tasks)}){marker}")
        lines.extend(format_task(state, t, positions.get(t.id)) for t in tasks)
    return "\n".join(lines)


def cmd_pin(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /pin <ref> <YYYY-MM-DD>"
    try:
        task = resolve_task(state, args[0])
        updated = state.task_store.set_manual_date(task.id, args[1])
    except TaskNotFoundError:
        return f"No such material: {args[0]}"
    except ValueError:
        return "Dates must be YYYY-MM-DD."
    return f"Pinned {updated.title} to {updated.manual_date}."


def cmd_unpin(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /unpin <ref>"
    try:
        task = resolve_task(state, args[0])
        state.task_store.set_manual_date(task.id, None)
    except TaskNotFoundError:
        return f"No such material: {args[0]}"
    return f"Reset assignment of {task.title}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = summarize(state.task_store.snapshot(), state.strategy)
    return (
        "Dashboard:\n"
        f"  Daily goal: {s.daily_percentage}%  (due today: {s.due_today})\n"
        f"  Total mastered: {s.total_percentage}%\n"
        f"  Courses: {s.total}  Completed: {s.completed}  Urgent: {s.urgent}  "
        f"Questions: {s.questions}  Drive synced: {s.drive_synced}"
    )


def cmd_calendar(state: AppState, args: list[str]) -> str:
    snapshot = state.task_store.snapshot()
    grid = month_grid(snapshot.today.year, snapshot.today.month, completion_histogram(snapshot.tasks))
    cells = ["  "] * grid.leading_blanks
    cells.extend(f"{int(c.day[-2:]):>2}{INTENSITY_MARKS[c.level]}" for c in grid.cells)
    rows = [" S   M   T   W   T   F   S"]
    for i in range(0, len(cells), 7):
        rows.append(" ".join(c.ljust(3) for c in cells[i : i + 7]))
    return f"{grid.title}\n" + "\n".join(rows) + "\n  . none  o 1  O 2  @ 3+"


def _imports_closed(state: AppState) -> str | None:
    if state.sync_phase:
        return None
    return "Sync phase is closed. Use /sync reopen to import more materials."


def _after_import(state: AppState, created: list[Task], what: str) -> str:
    msg = f"Imported {len(created)} material(s) from {what}."
    if state.sync_popup_pending:
        msg += "\nSync successful! Done syncing for now? Use /sync done to start studying."
    return msg


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    closed = _imports_closed(state)
    if closed:
        return closed
    if not args:
        return "Usage: /import <path to curriculum PDF>"
    path = Path(" ".join(args)).expanduser()
    try:
        data = path.read_bytes()
    except OSError as e:
        return f"Cannot read {path}: {e.strerror or e}"

    if emit:
        emit(f"Extracting classes from {path.name}...")
    created = asyncio.run(sync_document(state, data))
    return _after_import(state, created, path.name)


def cmd_crawl(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    closed = _imports_closed(state)
    if closed:
        return closed
    link = " ".join(args).strip()
    if not link:
        return "Usage: /crawl <folder link>"
    if emit:
        emit("Crawling folder...")
    created = asyncio.run(sync_folder(state, link))
    return _after_import(state, created, "folder crawl")


def cmd_sync(state: AppState, args: list[str]) -> str:
    """
    /sync         -> show sync phase
    /sync done    -> finish syncing, start studying
    /sync reopen  -> go back to importing
    """
    sub = args[0].lower() if args else ""
    if sub == "done":
        finish_sync(state)
        return "Sync complete. Entering Study phase. Use /due to see today's reviews."
    if sub == "reopen":
        set_sync_phase(state, True)
        return "Sync re-opened. Use /import or /crawl to add materials."
    if sub:
        return "Usage: /sync | /sync done | /sync reopen"
    return f"Sync phase is {'OPEN' if state.sync_phase else 'DONE'}."


def cmd_timer(state: AppState, args: list[str]) -> str:
    """
    /timer                       -> show remaining time
    /timer start|pause|reset     -> control the countdown
    /timer focus|short|long      -> switch mode (25/5/15 minutes)
    """
    timer = state.timer
    sub = args[0].lower() if args else ""
    if sub == "start":
        timer.start()
    elif sub == "pause":
        timer.pause()
    elif sub == "reset":
        timer.reset()
    elif sub in {m.value for m in TimerMode}:
        timer.switch_mode(sub)
    elif sub:
        return "Usage: /timer [start|pause|reset|focus|short|long]"

    status = "running" if timer.is_active else ("finished" if timer.remaining() == 0 else "paused")
    return f"[{timer.mode.value}] {format_time(timer.remaining())} ({status})"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show scheduling mode, plan range and sync phase.")
registry.register("add", cmd_add, help_text="Capture a material: /add <title> (plain text works too).")
registry.register("list", cmd_list, help_text="List all materials.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <ref>.", aliases=["mastered"])
registry.register("urgent", cmd_urgent, help_text="Toggle the urgent flag: /urgent <ref>.")
registry.register("question", cmd_question, help_text="Toggle the question flag: /question <ref>.")
registry.register("rm", cmd_rm, help_text="Delete a material: /rm <ref>.", aliases=["del"])
registry.register("move", cmd_move, help_text="Reorder: /move <ref> <position>.")
registry.register("due", cmd_due, help_text="Show what is due today.", aliases=["study"])
registry.register("plan", cmd_plan, help_text="Study plan: /plan | /plan <start> <end> | /plan clear.")
registry.register("pin", cmd_pin, help_text="Assign a material to a day: /pin <ref> <YYYY-MM-DD>.")
registry.register("unpin", cmd_unpin, help_text="Reset a material's day assignment: /unpin <ref>.")
registry.register("stats", cmd_stats, help_text="Progress dashboard.")
registry.register("calendar", cmd_calendar, help_text="Completions heat map for this month.")
registry.register("import", cmd_import, help_text="Extract classes from a PDF: /import <path>.")
registry.register("crawl", cmd_crawl, help_text="Import a cloud folder: /crawl <link>.")
registry.register("sync", cmd_sync, help_text="Sync phase: /sync | /sync done | /sync reopen.")
registry.register("timer", cmd_timer, help_text="Focus timer: /timer [start|pause|reset|focus|short|long].")
