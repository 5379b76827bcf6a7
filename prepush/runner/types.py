from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto


class TaskState(Enum):
    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()


class Handle(ABC):
    """A started invocation."""

    @abstractmethod
    def wait(self) -> int:
        """Block until the work is done and return its exit status."""


class Invocation(ABC):
    """Something that can be started once and yields an exit status."""

    @abstractmethod
    def start(self) -> Handle:
        """Launch the work without waiting for it.

        Raises OSError (or RuntimeError when no thread can be started) if the
        work can't be launched at all.
        """


@dataclass(frozen=True)
class Task:
    name: str
    invocation: Invocation


@dataclass(frozen=True)
class RunResult:
    task_name: str
    exit_status: int
    duration_s: float

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


@dataclass(frozen=True)
class Success:
    results: tuple[RunResult, ...]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    # First failing task in launch order.
    task_name: str
    exit_status: int
    results: tuple[RunResult, ...]

    @property
    def ok(self) -> bool:
        return False

    @property
    def failed(self) -> list[RunResult]:
        return [r for r in self.results if not r.ok]


OverallStatus = Success | Failure


class RunnerError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class LaunchFault(RunnerError):
    def __init__(self, task_name: str, cause: BaseException):
        super().__init__(f"could not launch check '{task_name}': {cause}")
        self.task_name = task_name
        self.cause = cause
