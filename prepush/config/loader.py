import json
import shlex
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .defaults import DEFAULT_CONFIG_FILE, default_config
from .types import ConfigError, HookConfig, TaskConfig, UnsupportedConfigFormatError

_TASK_FIELDS = {"command", "quiet", "env", "working_dir"}


def resolve_config(path: str | Path | None, cwd: str | Path | None = None) -> HookConfig:
    """Pick the config for a run.

    An explicit path must exist. Without one, ``prepush.yml`` in `cwd` is used
    when present, otherwise the built-in checks.
    """
    if path is not None:
        return load_config(path)

    candidate = Path(cwd or ".") / DEFAULT_CONFIG_FILE
    if candidate.is_file():
        return load_config(candidate)

    return default_config()


def load_config(path: str | Path) -> HookConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_hook_config(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")

    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed but the top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_hook_config(raw: Mapping[str, Any]) -> HookConfig:
    tasks: dict[str, TaskConfig] = {}

    if "tasks" not in raw:
        raise ConfigError("Missing 'tasks' field")

    if not isinstance(raw["tasks"], Mapping):
        raise ConfigError(f"'tasks' must be a mapping, got {type(raw['tasks'])}")

    if len(raw["tasks"]) < 1:
        raise ConfigError("There must be at least one task in the config file")

    for name, fields in raw["tasks"].items():
        if not isinstance(name, str):
            raise ConfigError(f"Task name must be a string, got {type(name)}")

        if not isinstance(fields, Mapping):
            raise ConfigError(f"{name} must be a mapping")

        name_norm = name.strip()

        if len(name_norm) < 1:
            raise ConfigError("A task name can't be empty")

        if name_norm in tasks:
            raise ConfigError(f"Duplicate task name after normalization: {name_norm}")

        tasks[name_norm] = _build_task_config(name_norm, fields)

    return HookConfig(tasks=tasks)


def _build_task_config(name: str, fields: Mapping[str, Any]) -> TaskConfig:
    for field in fields.keys():
        if field not in _TASK_FIELDS:
            raise ConfigError(f"{name}: Can't process: {field}")

    if "command" not in fields:
        raise ConfigError(f"{name}: missing 'command'")

    if not isinstance(fields["command"], str):
        raise ConfigError(f"{name}: The command should be a string")

    try:
        argv = shlex.split(fields["command"])
    except ValueError as exc:
        raise ConfigError(f"{name}: Can't split command: {exc}") from exc

    if not argv:
        raise ConfigError(f"{name}: Command missing")

    if any("\0" in word for word in argv):
        raise ConfigError(f"{name}: The command can't contain NUL bytes")

    quiet = fields.get("quiet", False)
    if not isinstance(quiet, bool):
        raise ConfigError(f"{name}: 'quiet' should be true or false")

    env = {}
    if "env" in fields:
        if not isinstance(fields["env"], Mapping):
            raise ConfigError(f"{name}: Env should be a mapping")

        for key, item in fields["env"].items():
            if not isinstance(key, str):
                raise ConfigError(f"{name}: {key} should be a string")

            if len(key.strip()) < 1:
                raise ConfigError(f"{name}: A key can't be empty")

            if "=" in key or "\0" in key:
                raise ConfigError(f"{name}: {key!r} is not a valid environment variable name")

            if not isinstance(item, str):
                raise ConfigError(f"{name}: {item} should be a string")

            if "\0" in item:
                raise ConfigError(f"{name}: {key} can't contain NUL bytes")

            env[key.strip()] = item

    working_dir = None
    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError(f"{name}: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError(f"{name}: Please provide a string or remove this field")

        working_dir = fields["working_dir"].strip()

    return TaskConfig(name, argv, quiet, env, working_dir)
