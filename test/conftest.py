"""
pinentry-anyrun Test Fixtures

Shared fixtures for the unit and end-to-end suites:
- fake_picker: in-memory SecretPicker for protocol tests
- mock_picker: factory writing a shell script that stands in for anyrun
"""

import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Make the package importable when running from a source checkout.
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pinentry_anyrun.errors import GatewayError  # noqa: E402
from pinentry_anyrun.state import SessionState  # noqa: E402


# =============================================================================
# In-memory Picker
# =============================================================================


class FakePicker:
    """SecretPicker that returns a fixed secret or raises a fixed error."""

    def __init__(self, secret: Optional[str] = None, error: Optional[GatewayError] = None):
        self.secret = secret
        self.error = error
        self.calls: List[SessionState] = []

    def request_secret(self, state: SessionState) -> str:
        self.calls.append(state)
        if self.error is not None:
            raise self.error
        return self.secret


@pytest.fixture
def fake_picker() -> FakePicker:
    """Picker that answers every GETPIN with 'hunter2'."""
    return FakePicker(secret="hunter2")


# =============================================================================
# Mock Picker Script
# =============================================================================


@dataclass
class MockPicker:
    """A generated picker script plus the files it records into."""

    path: Path
    stdin_file: Path
    args_file: Path
    extra_args: list = field(default_factory=list)

    @property
    def command(self) -> list:
        return [str(self.path), *self.extra_args]

    @property
    def received(self) -> str:
        """The line the picker read from its stdin."""
        return self.stdin_file.read_text(encoding="utf-8")

    @property
    def args(self) -> list:
        return self.args_file.read_text().splitlines()

    @property
    def was_called(self) -> bool:
        return self.stdin_file.exists()


@pytest.fixture
def mock_picker(tmp_path) -> Callable[..., MockPicker]:
    """
    Factory for mock anyrun scripts.

    The script records its arguments and the line it reads, optionally
    sleeps, prints ``output`` (or the raw printf ``output_format``) and
    exits with ``exit_code``. ``output=None`` prints nothing, which the
    gateway treats as a cancel.
    """
    counter = {"n": 0}

    def make(
        output: Optional[str] = None,
        exit_code: int = 0,
        sleep: float = 0,
        output_format: Optional[str] = None,
        extra_args: Optional[list] = None,
    ) -> MockPicker:
        counter["n"] += 1
        workdir = tmp_path / f"picker-{counter['n']}"
        workdir.mkdir()
        stdin_file = workdir / "stdin"
        args_file = workdir / "args"

        lines = [
            "#!/bin/bash",
            "# Mock anyrun for tests",
            f"printf '%s\\n' \"$@\" > {shlex.quote(str(args_file))}",
            "IFS= read -r line",
            f"printf '%s' \"$line\" > {shlex.quote(str(stdin_file))}",
        ]
        if sleep:
            lines.append(f"sleep {sleep}")
        if output_format is not None:
            lines.append(f"printf {shlex.quote(output_format)}")
        elif output is not None:
            lines.append(f"printf '%s\\n' {shlex.quote(output)}")
        lines.append(f"exit {exit_code}")

        script = workdir / "anyrun"
        script.write_text("\n".join(lines) + "\n", encoding="utf-8")
        script.chmod(0o755)
        return MockPicker(script, stdin_file, args_file, list(extra_args or []))

    return make


# =============================================================================
# Marker Helpers
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: end-to-end tests running the module")
    config.addinivalue_line("markers", "slow: tests that wait on a sleeping picker")
