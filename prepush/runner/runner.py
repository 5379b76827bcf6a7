import logging
import subprocess
import time
from dataclasses import dataclass
from typing import Sequence

from prepush.config import HookConfig

from .invocation import CommandInvocation
from .types import (
    Failure,
    Handle,
    LaunchFault,
    OverallStatus,
    RunResult,
    Success,
    Task,
    TaskState,
)

logger = logging.getLogger(__name__)


@dataclass
class _Job:
    task: Task
    state: TaskState = TaskState.PENDING
    handle: Handle | None = None
    started: float = 0.0

    def launch(self) -> None:
        self.started = time.monotonic()
        self.handle = self.task.invocation.start()
        self.state = TaskState.RUNNING

    def join(self) -> RunResult:
        if self.state is not TaskState.RUNNING or self.handle is None:
            raise RuntimeError(f"{self.task.name}: cannot wait in state {self.state.name}")

        status = self.handle.wait()
        self.state = TaskState.COMPLETED
        return RunResult(self.task.name, status, time.monotonic() - self.started)


class TaskRunner:
    """Launch every task at once, then wait on them in launch order."""

    def run(self, tasks: Sequence[Task]) -> OverallStatus:
        if len(tasks) == 0:
            raise ValueError("TaskRunner.run needs at least one task")

        seen: set[str] = set()
        for task in tasks:
            if task.name in seen:
                raise ValueError(f"Duplicate task name: {task.name}")
            seen.add(task.name)

        jobs = [_Job(task) for task in tasks]
        launched: list[_Job] = []
        fault: LaunchFault | None = None

        for job in jobs:
            try:
                job.launch()
            except (OSError, RuntimeError, ValueError, subprocess.SubprocessError) as exc:
                logger.debug("Launch of %s failed: %s", job.task.name, exc)
                fault = LaunchFault(job.task.name, exc)
                fault.__cause__ = exc
                break
            logger.debug("Launched %s via %r", job.task.name, job.task.invocation)
            launched.append(job)

        # Already running children are reaped even when a later launch failed.
        results: list[RunResult] = []
        error: Exception | None = None
        for job in launched:
            try:
                result = job.join()
            except Exception as exc:
                logger.exception("Waiting on %s failed", job.task.name)
                error = error or exc
                continue
            logger.debug(
                "%s finished with %d after %.3fs",
                result.task_name,
                result.exit_status,
                result.duration_s,
            )
            results.append(result)

        if error is not None:
            raise error

        if fault is not None:
            raise fault

        for result in results:
            if not result.ok:
                logger.info("%s failed with exit status %d", result.task_name, result.exit_status)
                return Failure(result.task_name, result.exit_status, tuple(results))

        return Success(tuple(results))


def tasks_from_config(config: HookConfig) -> list[Task]:
    tasks = []
    for task in config:
        invocation = CommandInvocation(
            task.command,
            quiet=task.quiet,
            env=task.env,
            working_dir=task.working_dir,
        )
        tasks.append(Task(task.name, invocation))
    return tasks
