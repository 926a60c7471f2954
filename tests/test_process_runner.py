from __future__ import annotations

import sys

import pytest

from adapters.process_runner import SubprocessRunner
from core.domain.errors import CommandError


def test_captures_output_and_exit_code():
    result = SubprocessRunner().run([sys.executable, "-c", "import sys; print('hi'); sys.exit(3)"])

    assert result.returncode == 3
    assert result.stdout.strip() == "hi"
    assert not result.ok


def test_check_raises_command_error():
    with pytest.raises(CommandError) as excinfo:
        SubprocessRunner().run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(1)"],
            check=True,
        )

    assert excinfo.value.result.returncode == 1
    assert "boom" in excinfo.value.message


def test_missing_executable_maps_to_127():
    result = SubprocessRunner().run(["definitely-not-a-real-binary-xyz"])

    assert result.returncode == 127
    assert not result.ok
