import sys

import pytest

from longhorn_check.errors import CommandError, CommandTimeout, ToolNotFound
from longhorn_check.shell import Shell


def test_returns_stdout():
    out = Shell().run([sys.executable, "-c", "print('hello')"])
    assert out.strip() == "hello"


def test_passes_stdin():
    out = Shell().run([sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"], input="abc")
    assert out.strip() == "ABC"


def test_nonzero_exit_raises_with_stderr():
    with pytest.raises(CommandError) as exc:
        Shell().run([sys.executable, "-c", "import sys; sys.stderr.write('NotFound: nope'); sys.exit(3)"])
    assert exc.value.returncode == 3
    assert exc.value.stderr == "NotFound: nope"
    assert exc.value.not_found


def test_missing_tool():
    with pytest.raises(ToolNotFound) as exc:
        Shell().run(["definitely-not-a-real-binary-xyz", "version"])
    assert "not available" in str(exc.value)
    assert exc.value.returncode is None


def test_timeout():
    with pytest.raises(CommandTimeout):
        Shell().run([sys.executable, "-c", "import time; time.sleep(5)"], timeout_s=0.2)
