"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, List

import pytest

from qualflow.logging import logger
from qualflow.models.schemas import Code


def make_code(name: str, definition: str = "", frequency: int = 1, examples=None, type: str = "constructed") -> Code:
    return Code(name=name, definition=definition, frequency=frequency, examples=list(examples or []), type=type)


@pytest.fixture
def stress_codes() -> List[Code]:
    """Codes from a study of how students cope with academic stress."""
    return [
        make_code("managing-stress", "coping strategies", 5, ["I try to manage my stress by planning"]),
        make_code("feeling-anxious", "anxiety emotions", 4, ["I was feeling anxious all week"], "in_vivo"),
        make_code("seeking-support", "asking for help", 3, ["I asked my friends for help"]),
        make_code("academic-pressure", "school demands", 4, ["The workload keeps growing"]),
    ]


@pytest.fixture
def interview_text() -> str:
    return (
        "I feel anxious about exams. Managing stress through meditation helps.\n"
        "\n"
        "My relationship with my teachers is a challenge. "
        'As one friend said, "it was a total nightmare" for everyone.\n'
        "\n"
        "Planning my week is a strategy that works. I felt relieved afterwards."
    )


@pytest.fixture
def write_json_file(tmp_path: Path) -> Callable[[str, object], Path]:
    def _write(name: str, data: object) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def detach_log_files():
    """Close any log file a test attached to the ``qualflow`` logger."""
    yield
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()
