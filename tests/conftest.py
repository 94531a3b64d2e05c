"""Pytest configuration for the Lox test suite."""

import io
import sys
from pathlib import Path

import pytest

# Make the lox package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from lox import Lox


class LoxRun:
    """Output of one run: captured stdout/stderr and the driver itself."""

    def __init__(self, lox, out, err):
        self.lox = lox
        self.out = out
        self.err = err

    @property
    def lines(self):
        return self.out.splitlines()


def run_source(source: str) -> LoxRun:
    stdout = io.StringIO()
    stderr = io.StringIO()
    lox = Lox(stdout=stdout, stderr=stderr)
    lox.run(source)
    return LoxRun(lox, stdout.getvalue(), stderr.getvalue())


@pytest.fixture
def run():
    return run_source


@pytest.fixture
def lox():
    """A driver with captured streams, for tests that call the stages directly."""
    return Lox(stdout=io.StringIO(), stderr=io.StringIO())
