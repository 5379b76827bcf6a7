from .invocation import CallableInvocation, CommandInvocation
from .runner import TaskRunner, tasks_from_config
from .types import (
    Failure,
    Handle,
    Invocation,
    LaunchFault,
    OverallStatus,
    RunnerError,
    RunResult,
    Success,
    Task,
    TaskState,
)

__all__ = [
    "TaskRunner",
    "tasks_from_config",
    "Task",
    "RunResult",
    "Success",
    "Failure",
    "OverallStatus",
    "TaskState",
    "Invocation",
    "Handle",
    "CommandInvocation",
    "CallableInvocation",
    "RunnerError",
    "LaunchFault",
]
