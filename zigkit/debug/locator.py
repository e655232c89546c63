"""
Build task to debug request translation.

Two operations share one reading of a task's positional arguments:

- ``create_scenario`` turns a runnable task (``zig build run``, ``zig test ...``)
  into a debug scenario whose build step produces a debuggable binary. A task
  it does not understand yields ``None``.
- ``run_dap_locator`` is called after that build step and names the program
  to launch. Here an unknown task is an error: the host is about to launch.

Program paths follow Zig conventions: ``zig build`` installs to
``zig-out/bin/<project>`` where the project is named after the working
directory, and test binaries are emitted to a fixed ``zig_test`` path.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from zigkit.core.exceptions import UnsupportedBuildTaskError
from zigkit.core.platform import PlatformTarget, binary_name, detect_platform
from zigkit.debug.models import (
    BuildTask,
    BuildTaskIntent,
    BuildTemplate,
    DebugScenario,
    IntentKind,
    LaunchRequest,
)

logger = logging.getLogger(__name__)

TOOL = "zig"
LOCATOR_NAME = "zig"
TEST_EXE_NAME = "zig_test"
BUILD_OUTPUT_DIR = "zig-out/bin"

Rule = Tuple[Callable[[List[str]], bool], IntentKind]

# First match wins
SCENARIO_RULES: List[Rule] = [
    (lambda args: args[:2] == ["build", "run"], IntentKind.BUILD_RUN),
    (lambda args: args[:1] == ["test"], IntentKind.TEST_NO_EXEC),
]


def classify_task(task: BuildTask) -> BuildTaskIntent:
    """
    Classify a task by its leading positional arguments.

    Example:
        >>> classify_task(BuildTask("run", "zig", ["build", "run"])).kind
        <IntentKind.BUILD_RUN: 'build-run'>
        >>> classify_task(BuildTask("fmt", "zig", ["fmt"])).kind
        <IntentKind.UNSUPPORTED: 'unsupported'>
    """
    for predicate, kind in SCENARIO_RULES:
        if predicate(task.args):
            return BuildTaskIntent(kind=kind, task=task)
    return BuildTaskIntent(kind=IntentKind.UNSUPPORTED, task=task)


class TaskTranslator:
    """
    Translates Zig build tasks into debug scenarios and launch requests.

    Args:
        platform: Platform information (auto-detected if None)
        test_binary_dir: Directory test binaries are emitted to (default: cwd)
    """

    def __init__(
        self,
        platform: Optional[PlatformTarget] = None,
        test_binary_dir: Optional[Path] = None,
    ):
        self.platform = platform or detect_platform()
        self.test_binary_dir = Path(test_binary_dir) if test_binary_dir else Path.cwd()

    @property
    def test_binary_path(self) -> str:
        """Path the test binary is emitted to and launched from."""
        return str(self.test_binary_dir / binary_name(self.platform, TEST_EXE_NAME))

    def create_scenario(
        self,
        build_task: BuildTask,
        resolved_label: str,
        debug_adapter_name: str,
    ) -> Optional[DebugScenario]:
        """
        Create a debug scenario for a task.

        Args:
            build_task: Task to translate
            resolved_label: Label of the scenario
            debug_adapter_name: Debug adapter to use

        Returns:
            DebugScenario, or None when the task is not one we understand
        """
        intent = classify_task(build_task)
        if not intent.supported:
            logger.debug(f"No debug scenario for task {build_task.label!r}")
            return None

        if intent.kind is IntentKind.BUILD_RUN:
            template = self._build_run_template(build_task)
        else:
            template = self._test_no_exec_template(build_task)

        return DebugScenario(
            adapter=debug_adapter_name,
            label=resolved_label,
            build=template,
            locator_name=LOCATOR_NAME,
        )

    def run_dap_locator(self, build_task: BuildTask) -> LaunchRequest:
        """
        Find the program a finished build task produced.

        Args:
            build_task: The build step of a scenario

        Returns:
            LaunchRequest for the produced program

        Raises:
            UnsupportedBuildTaskError: If the task is not a build or test task,
                or a build task has no working directory
        """
        first = build_task.args[0] if build_task.args else None

        if first == "build":
            program = f"{BUILD_OUTPUT_DIR}/{self._project_name(build_task)}"
        elif first == "test":
            program = self.test_binary_path
        else:
            raise UnsupportedBuildTaskError(
                f"Unsupported build task: {build_task.command} {' '.join(build_task.args)}".rstrip()
            )

        return LaunchRequest(
            program=program,
            cwd=build_task.cwd,
            args=[],
            env=list(build_task.env),
        )

    def _build_run_template(self, task: BuildTask) -> BuildTemplate:
        return BuildTemplate(
            label=f"{TOOL} build",
            command=TOOL,
            args=["build"],
            env=list(task.env),
            cwd=task.cwd,
        )

    def _test_no_exec_template(self, task: BuildTask) -> BuildTemplate:
        emit_bin = f"-femit-bin={self.test_binary_path}"

        if self.platform.is_windows:
            # The Windows shell re-tokenizes the command line
            args = [f'"{arg}"' for arg in task.args]
            args += ["--test-no-exec", f'"{emit_bin}"']
        else:
            args = list(task.args) + ["--test-no-exec", emit_bin]

        return BuildTemplate(
            label=f"{TOOL} test --test-no-exec",
            command=task.command,
            args=args,
            env=list(task.env),
            cwd=task.cwd,
        )

    def _project_name(self, task: BuildTask) -> str:
        if not task.cwd:
            raise UnsupportedBuildTaskError(
                "Build task has no working directory to name the project after"
            )

        cwd = task.cwd
        if self.platform.is_windows:
            cwd = cwd.replace("\\", "/")

        name = cwd.rstrip("/").rsplit("/", 1)[-1]
        if not name:
            raise UnsupportedBuildTaskError(f"Cannot derive project name from {task.cwd!r}")
        return name


__all__ = [
    "TOOL",
    "LOCATOR_NAME",
    "TEST_EXE_NAME",
    "SCENARIO_RULES",
    "classify_task",
    "TaskTranslator",
]
