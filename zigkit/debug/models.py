"""Task, build template and debug request types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

EnvPairs = List[Tuple[str, str]]


@dataclass
class BuildTask:
    """
    A generic build task as configured by the user.

    Attributes:
        label: Display label
        command: Program to run (e.g. "zig")
        args: Positional arguments
        env: Environment pairs
        cwd: Working directory, if any
    """

    label: str
    command: str
    args: List[str] = field(default_factory=list)
    env: EnvPairs = field(default_factory=list)
    cwd: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildTask":
        """
        Build a task from its JSON form.

        ``env`` may be a mapping or a list of [key, value] pairs.
        """
        env = data.get("env") or []
        if isinstance(env, dict):
            pairs = [(str(k), str(v)) for k, v in env.items()]
        else:
            pairs = [(str(k), str(v)) for k, v in env]

        return cls(
            label=data.get("label") or data.get("command", ""),
            command=data["command"],
            args=[str(arg) for arg in data.get("args") or []],
            env=pairs,
            cwd=data.get("cwd"),
        )


@dataclass
class BuildTemplate:
    """Command, arguments, environment and cwd sufficient to re-run a build step."""

    label: str
    command: str
    args: List[str] = field(default_factory=list)
    env: EnvPairs = field(default_factory=list)
    cwd: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "command": self.command,
            "args": self.args,
            "env": dict(self.env),
            "cwd": self.cwd,
        }


@dataclass
class DebugScenario:
    """One-shot debug scenario: build first, then debug what the locator finds."""

    adapter: str
    label: str
    build: BuildTemplate
    locator_name: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "adapter": self.adapter,
            "label": self.label,
            "build": {"template": self.build.to_dict(), "locator_name": self.locator_name},
            "config": self.config,
        }


@dataclass
class LaunchRequest:
    """Program, arguments, environment and cwd sufficient to start a debuggee."""

    program: str
    cwd: Optional[str] = None
    args: List[str] = field(default_factory=list)
    env: EnvPairs = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request": "launch",
            "program": self.program,
            "cwd": self.cwd,
            "args": self.args,
            "env": dict(self.env),
        }


class IntentKind(Enum):
    """What a build task asks for."""

    BUILD_RUN = "build-run"
    TEST_NO_EXEC = "test-no-exec"
    UNSUPPORTED = "unsupported"


@dataclass
class BuildTaskIntent:
    """
    Classified build task.

    Attributes:
        kind: Recognized intent
        task: The task it was derived from
    """

    kind: IntentKind
    task: BuildTask

    @property
    def supported(self) -> bool:
        return self.kind is not IntentKind.UNSUPPORTED


__all__ = [
    "EnvPairs",
    "BuildTask",
    "BuildTemplate",
    "DebugScenario",
    "LaunchRequest",
    "IntentKind",
    "BuildTaskIntent",
]
