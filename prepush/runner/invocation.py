import logging
import os
import subprocess
import threading
from typing import Callable, Sequence

from .types import Handle, Invocation

logger = logging.getLogger(__name__)


class _ProcessHandle(Handle):
    def __init__(self, proc: subprocess.Popen):
        self._proc = proc

    def wait(self) -> int:
        # Negative when the child was killed by a signal.
        return self._proc.wait()


class CommandInvocation(Invocation):
    """Run an external executable as a child process.

    The child inherits stdin, stderr, the environment and the working
    directory. `quiet` discards its stdout.
    """

    def __init__(
        self,
        argv: Sequence[str],
        *,
        quiet: bool = False,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
    ):
        if not argv:
            raise ValueError("argv must not be empty")
        self.argv = list(argv)
        self.quiet = quiet
        self.env = dict(env or {})
        self.working_dir = working_dir

    def start(self) -> Handle:
        proc = subprocess.Popen(
            self.argv,
            cwd=self.working_dir or None,
            env={**os.environ, **self.env} if self.env else None,
            stdout=subprocess.DEVNULL if self.quiet else None,
        )
        return _ProcessHandle(proc)

    def __repr__(self) -> str:
        return f"CommandInvocation({self.argv!r}, quiet={self.quiet})"


class _ThreadHandle(Handle):
    def __init__(self, thread: threading.Thread, box: dict[str, int]):
        self._thread = thread
        self._box = box

    def wait(self) -> int:
        self._thread.join()
        return self._box.get("status", 1)


class CallableInvocation(Invocation):
    """Run a callable on its own thread.

    The return value is the exit status (None counts as 0). SystemExit maps
    to its code; any other exception is logged and counts as 1, as does
    anything else that ends the thread without a status.
    """

    def __init__(self, fn: Callable[[], int | None], name: str | None = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "task")

    def start(self) -> Handle:
        box: dict[str, int] = {}
        thread = threading.Thread(
            target=self._call, args=(box,), name=f"prepush-{self.name}", daemon=True
        )
        thread.start()
        return _ThreadHandle(thread, box)

    def _call(self, box: dict[str, int]) -> None:
        status = 1
        try:
            result = self.fn()
            status = 0 if result is None else int(result)
        except SystemExit as exc:
            status = _exit_code_of(exc)
        except Exception:
            logger.exception("Task %s raised", self.name)
            status = 1
        finally:
            box["status"] = status

    def __repr__(self) -> str:
        return f"CallableInvocation({self.name!r})"


def _exit_code_of(exc: SystemExit) -> int:
    # Mirrors how the interpreter turns SystemExit into a process status.
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    return 1
