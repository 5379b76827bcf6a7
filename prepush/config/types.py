from dataclasses import dataclass, field


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


@dataclass
class TaskConfig:
    name: str
    command: list[str]
    quiet: bool = False
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None


@dataclass
class HookConfig:
    # Insertion order is launch order.
    tasks: dict[str, TaskConfig]

    def __iter__(self):
        yield from self.tasks.values()

    def __len__(self):
        return len(self.tasks)

    def has_task(self, name: str) -> bool:
        return name in self.tasks

    def get_task(self, name: str) -> TaskConfig:
        if not self.has_task(name):
            raise KeyError(name)

        return self.tasks[name]

    def task_names(self) -> list[str]:
        return list(self.tasks.keys())

    def select(self, names: list[str]) -> "HookConfig":
        """Keep only `names`, preserving the configured order."""
        for name in names:
            if not self.has_task(name):
                raise ConfigError(f"Unknown check: {name}")

        wanted = set(names)
        return HookConfig(
            tasks={n: t for n, t in self.tasks.items() if n in wanted}
        )
