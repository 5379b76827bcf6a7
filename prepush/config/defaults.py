from .types import HookConfig, TaskConfig

DEFAULT_CONFIG_FILE = "prepush.yml"

# The checks the repository's pre-push hook has always run. Only the format
# check keeps its stdout; the others are noisy on success.
DEFAULT_CHECKS: tuple[tuple[str, str, bool], ...] = (
    ("format", "./ci/check_fmt.sh", False),
    ("job-dependencies", "./ci/check_job_dependencies.sh", True),
    ("msrv", "./ci/check_msrvs.sh", True),
    ("readme", "./ci/check_readme.sh", True),
    ("versions", "./ci/check_versions.sh", True),
)


def default_config() -> HookConfig:
    tasks = {}
    for name, script, quiet in DEFAULT_CHECKS:
        tasks[name] = TaskConfig(name, [script], quiet=quiet)
    return HookConfig(tasks=tasks)
