"""Shared pytest fixtures for Jabuti tests."""

from datetime import datetime

import pytest

CANONICAL_CONTRACT = """\
contract Sample {
  variables {
    a = 1
    b = a
  }

  dates {
    beginDate = 2024-01-01 00:00:00
    dueDate = 2024-12-31 23:59:59
  }

  parties {
    application = "App"
    process = "Proc"
  }

  clauses {
    right A {
      rolePlayer = application
      operation = push
      terms {
        Timeout(10)
      }
    }

    obligation B {
      rolePlayer = process
      operation = poll
      terms {
        MessageContent("x"),
        Timeout(5)
      }

      onBreach(log("late"))
    }
  }
}
"""

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def contract_text() -> str:
    """A small, already canonically formatted contract."""
    return CANONICAL_CONTRACT


@pytest.fixture
def fixed_clock():
    """Clock returning 2024-01-01 12:00:00."""
    return lambda: FIXED_NOW
