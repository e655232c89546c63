"""
Debug support for Zig build tasks.

Turns ``zig build run`` and ``zig test`` tasks into debug scenarios and
locates the binaries they produce.
"""

from .locator import TaskTranslator, classify_task
from .models import (
    BuildTask,
    BuildTaskIntent,
    BuildTemplate,
    DebugScenario,
    IntentKind,
    LaunchRequest,
)

__all__ = [
    "TaskTranslator",
    "classify_task",
    "BuildTask",
    "BuildTaskIntent",
    "BuildTemplate",
    "DebugScenario",
    "IntentKind",
    "LaunchRequest",
]
