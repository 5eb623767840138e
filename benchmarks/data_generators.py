"""
Test data generators for JSONC parsing benchmarks.

Builds configuration-style documents, the kind JSONC is mostly written
for, and renders them either as strict JSON (so the standard libraries
can parse them too) or as JSONC with line comments, block comments and
trailing commas. A fixed seed keeps runs comparable.
"""

import json
import random
import string
from typing import Any

SEED = 20240115

DATA_TYPES = [
    "editor_settings",
    "task_list",
    "nested_structure",
    "string_heavy",
]

_SPECIAL_CHARS = '"\\/\b\f\n\r\t\U0001f600\xe9'


def generate_test_data(data_type: str, dialect: str = "json") -> str:
    """Generates a benchmark document of the given shape and dialect."""
    generators = {
        "editor_settings": _editor_settings,
        "task_list": _task_list,
        "nested_structure": _nested_structure,
        "string_heavy": _string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    data = generators[data_type](random.Random(SEED))
    if dialect == "json":
        return json.dumps(data)
    if dialect == "jsonc":
        return "// generated benchmark document\n" + _to_jsonc(data, 0)
    raise ValueError(f"Unknown dialect: {dialect}")


def _to_jsonc(obj: Any, level: int) -> str:
    """Renders ``obj`` with comments and trailing commas."""
    indent = "  " * (level + 1)
    closing = "  " * level
    if isinstance(obj, dict):
        if not obj:
            return "{}"
        lines = [
            f"{indent}{json.dumps(key)}: {_to_jsonc(value, level + 1)},"
            for key, value in obj.items()
        ]
        return "{ /* object */\n" + "\n".join(lines) + f"\n{closing}}}"
    if isinstance(obj, list):
        if not obj:
            return "[]"
        lines = [f"{indent}{_to_jsonc(item, level + 1)}," for item in obj]
        return "[ // array\n" + "\n".join(lines) + f"\n{closing}]"
    return json.dumps(obj)


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_lowercase, k=length))


def _editor_settings(rng: random.Random) -> dict[str, Any]:
    """A flat settings file of a few hundred bytes."""
    return {
        "editor.fontSize": 14,
        "editor.tabSize": 4,
        "editor.wordWrap": "on",
        "editor.rulers": [80, 100],
        "files.trimTrailingWhitespace": True,
        "files.exclude": {"**/.git": True, "**/__pycache__": True},
        "python.analysis.typeCheckingMode": "strict",
        "workbench.colorTheme": f"Theme {_word(rng, 6).title()}",
        "telemetry.enableTelemetry": False,
        "window.zoomLevel": 0.5,
        "search.exclude": None,
    }


def _task_list(rng: random.Random) -> dict[str, Any]:
    """A long array of task definitions mixing every value type."""
    tasks = []
    for index in range(200):
        tasks.append(
            {
                "label": f"task-{index}-{_word(rng, 8)}",
                "type": rng.choice(["shell", "process", "npm"]),
                "command": _word(rng, rng.randint(3, 12)),
                "args": [_word(rng, 5) for _ in range(rng.randint(0, 4))],
                "isBackground": rng.random() < 0.2,
                "priority": rng.randint(-10, 10),
                "timeout": round(rng.uniform(0.5, 120.0), 3),
                "dependsOn": None if index == 0 else f"task-{index - 1}",
            }
        )
    return {"version": "2.0.0", "tasks": tasks}


def _nested_structure(rng: random.Random) -> dict[str, Any]:
    """A binary tree of workspace folders six levels deep."""

    def folder(depth: int) -> dict[str, Any]:
        if depth == 0:
            return {"path": _word(rng, 10)}
        return {
            "depth": depth,
            "name": _word(rng, 12),
            "children": [folder(depth - 1), folder(depth - 1)],
            "settings": {"inherit": rng.random() < 0.5},
        }

    return folder(6)


def _string_heavy(rng: random.Random) -> dict[str, Any]:
    """Localized messages full of escapes and non-ASCII characters."""

    def message() -> str:
        alphabet = string.ascii_letters + string.digits + " "
        return "".join(
            rng.choice(_SPECIAL_CHARS if rng.random() < 0.3 else alphabet)
            for _ in range(50)
        )

    return {
        "messages": {f"msg_{index}": message() for index in range(100)},
        "paths": [
            f"C:\\Users\\{_word(rng, 8)}\\project_{index}\\settings.json"
            for index in range(20)
        ],
    }
