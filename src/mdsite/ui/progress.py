"""Rich progress display driven by pipeline events.

Pipeline stages report through a ``on_progress(event, payload)`` callback;
ProgressReporter turns those events into progress bars on stderr so stdout
stays reserved for diagnostics.
"""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)


class ProgressReporter:
    def __init__(self, console: Console | None = None, *, enabled: bool = True) -> None:
        self.console = console or Console(stderr=True)
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.console,
            transient=True,
            disable=not enabled,
        )
        self.enabled = enabled
        self._tasks: dict[str, TaskID] = {}
        self._totals: dict[str, int] = {}

    def __enter__(self) -> ProgressReporter:
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.progress.stop()

    def add_step(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def finish_task(self, task_id: TaskID) -> None:
        if task_id in self.progress.task_ids:
            self.progress.remove_task(task_id)

    def _start(self, key: str, description: str, total: int | None) -> None:
        if key in self._tasks:
            self._finish(key)
        self._tasks[key] = self.add_step(description, total=total)
        if total is not None:
            self._totals[key] = total

    def _advance(self, key: str) -> None:
        task_id = self._tasks.get(key)
        if task_id is not None:
            self.progress.advance(task_id)

    def _finish(self, key: str) -> None:
        task_id = self._tasks.pop(key, None)
        if task_id is not None:
            self.finish_task(task_id)

    def _log(self, message: str) -> None:
        if self.enabled:
            self.console.log(message)

    def emit(self, event: str, payload: dict[str, int | str]) -> None:
        if event == "load:start":
            self._start("documents", "Loading documents", int(payload.get("documents", 0)))
        elif event == "document:loaded":
            self._advance("documents")
        elif event == "graph:built":
            self._finish("documents")
            self._log(
                f"Graph: {payload.get('documents', 0)} documents, {payload.get('links', 0)} links"
            )
        elif event == "check:done":
            self._log(
                f"Check: {payload.get('unresolved', 0)} unresolved, "
                f"{payload.get('orphans', 0)} orphans"
            )
        elif event == "render:start":
            self._start("pages", "Rendering pages", int(payload.get("pages", 0)))
        elif event == "page:rendered":
            self._advance("pages")
        elif event == "write:done":
            self._finish("pages")


__all__ = ["ProgressReporter"]
