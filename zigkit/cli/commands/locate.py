"""
Locate command implementation.

Reads a build task as JSON and prints either the debug scenario built from it
or the launch request for the program it produced.
"""

import json
import logging
import sys
from pathlib import Path

from zigkit.core.exceptions import UnsupportedBuildTaskError
from zigkit.debug.locator import TaskTranslator
from zigkit.debug.models import BuildTask

logger = logging.getLogger(__name__)


def load_task(source: str) -> BuildTask:
    """
    Load a task from a JSON file or stdin.

    Args:
        source: File path, or '-' for stdin

    Returns:
        Parsed BuildTask

    Raises:
        ValueError: If the JSON is not a task object
    """
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(Path(source), "r") as f:
            data = json.load(f)

    if not isinstance(data, dict) or "command" not in data:
        raise ValueError("Task JSON must be an object with a 'command' field")

    return BuildTask.from_dict(data)


def run(args) -> int:
    """
    Run the locate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for an unsupported launch task)
    """
    task = load_task(args.task)
    translator = TaskTranslator()

    if args.mode == "scenario":
        scenario = translator.create_scenario(
            task, args.label or task.label, args.adapter
        )
        print(json.dumps(scenario.to_dict() if scenario else None, indent=2))
        return 0

    try:
        request = translator.run_dap_locator(task)
    except UnsupportedBuildTaskError as e:
        logger.error(str(e))
        return 1

    print(json.dumps(request.to_dict(), indent=2))
    return 0
