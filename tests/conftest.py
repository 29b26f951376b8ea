"""Test configuration and fixtures."""

import tempfile
from pathlib import Path
from typing import Any

import pytest

from bountyscout.config import reset_config

WELL_DEFINED_TITLE = "Add JSON output to export command"
WELL_DEFINED_BODY = """Add a `--json` flag to the export command so output can be piped to other tools.

Steps:
1. Parse the new flag in the argument parser.
2. Serialize each record with the existing serializer.
3. Write one JSON object per line to stdout.

Example usage: `tool export --json > out.jsonl`. Tests must cover the empty export case.
"""


def make_record(
    record_id: str = "b-1",
    *,
    amount: int = 150000,
    org: str = "acme",
    title: str = WELL_DEFINED_TITLE,
    body: str = WELL_DEFINED_BODY,
    **internal: Any,
) -> dict[str, Any]:
    """Build a raw record mapping as the fetch layer would hand it over."""
    return {
        "id": record_id,
        "status": "open",
        "reward": {"amount": amount, "currency": "USD"},
        "org": {"handle": org, "name": org.title()},
        "task": {"title": title, "body": body, "url": f"https://github.com/{org}/repo/issues/1"},
        "internal": internal,
    }


def evaluated_record(record_id: str = "b-1", **overrides: Any) -> dict[str, Any]:
    """A record that passes the decision engine's gate."""
    internal = {
        "evaluation_status": "evaluated",
        "go_no_go": "go",
        "complexity_score": 3,
        "success_probability": 75,
        "evaluation_confidence": 70,
    }
    record_fields = {k: overrides.pop(k) for k in ("amount", "org", "title", "body") if k in overrides}
    internal.update(overrides)
    return make_record(record_id, **record_fields, **internal)


def history_records(org: str, attempts: int, successes: int) -> list[dict[str, Any]]:
    """Past records for an organization with the given outcome counts."""
    records = []
    for i in range(attempts):
        if i < successes:
            internal = {
                "implementation_status": "completed",
                "implementation_result": {"ready_for_submission": True},
                "complexity_score": 4,
            }
        else:
            internal = {"implementation_status": "failed", "complexity_score": 6}
        records.append(make_record(f"{org}-past-{i}", org=org, amount=20000, **internal))
    return records


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch, tmp_path):
    """Isolate tests from config files and reset global state."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def evaluated_factory():
    return evaluated_record


@pytest.fixture
def history_factory():
    return history_records


@pytest.fixture
def well_defined_issue():
    """Title and body of a clear, small issue with no red flags."""
    return WELL_DEFINED_TITLE, WELL_DEFINED_BODY
