from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path

from .types import HookError

logger = logging.getLogger(__name__)

HOOK_NAME = "pre-push"


def find_hooks_dir(repo: str | Path = ".") -> Path:
    """Ask git where hooks live, honouring core.hooksPath."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--git-path", "hooks"],
            cwd=repo,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise HookError(f"Can't run git: {exc}") from exc

    if result.returncode != 0:
        raise HookError(f"{Path(repo).resolve()}: not a git repository\n{result.stderr.strip()}")

    hooks_dir = Path(result.stdout.strip())
    if not hooks_dir.is_absolute():
        hooks_dir = Path(repo).resolve() / hooks_dir
    return hooks_dir


def hook_script(config: str | None = None, python: str | None = None) -> str:
    argv = [python or sys.executable, "-m", "prepush"]
    if config is not None:
        argv += ["--config", str(Path(config).resolve())]
    argv.append("run")

    # git passes the remote name and url as arguments; they are not used.
    return "#!/bin/sh\nexec " + " ".join(shlex.quote(a) for a in argv) + "\n"


def install_hook(hooks_dir: str | Path, *, config: str | None = None, force: bool = False) -> Path:
    hooks_dir = Path(hooks_dir)
    target = hooks_dir / HOOK_NAME
    script = hook_script(config)

    if target.exists():
        if not target.is_file():
            raise HookError(f"{target} exists and is not a file")

        if target.read_text(encoding="utf-8", errors="replace") == script:
            logger.debug("%s already up to date", target)
            return target

        if not force:
            raise HookError(f"{target} already exists, use --force to replace it")

        logger.info("Replacing existing %s", target)

    hooks_dir.mkdir(parents=True, exist_ok=True)
    target.write_text(script, encoding="utf-8")
    target.chmod(0o755)
    return target
