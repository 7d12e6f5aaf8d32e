"""Progress reporting for release runs.

The release engine never prints. It reports lifecycle transitions to a
:class:`Reporter`, and the CLI passes a :class:`RichReporter` that writes
them to the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from rich.markup import escape

if TYPE_CHECKING:
    from rich.console import Console


class CheckpointType(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class Reporter(Protocol):
    def checkpoint(self, message: str, kind: CheckpointType) -> None: ...


class RichReporter:
    """Render checkpoints with rich.

    Success checkpoints go to ``console``; failures to ``err_console``.
    """

    def __init__(self, console: Console, err_console: Console | None = None) -> None:
        self.console = console
        self.err_console = err_console or console

    def checkpoint(self, message: str, kind: CheckpointType) -> None:
        if kind == CheckpointType.SUCCESS:
            self.console.print(f"[green]✔[/] {escape(message)}")
        else:
            self.err_console.print(f"[red]✖[/] {escape(message)}")


@dataclass
class RecordingReporter:
    """Collect checkpoints in memory."""

    checkpoints: list[tuple[CheckpointType, str]] = field(default_factory=list)

    def checkpoint(self, message: str, kind: CheckpointType) -> None:
        self.checkpoints.append((kind, message))

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.checkpoints]

    @property
    def failures(self) -> list[str]:
        return [m for kind, m in self.checkpoints if kind == CheckpointType.FAILURE]
