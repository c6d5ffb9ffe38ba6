"""Global pytest configuration.

CLI tests switch the package log level through ``--verbose``/``--quiet``;
restore the default afterwards so tests relying on INFO records stay
independent of execution order.
"""

from __future__ import annotations

import logging

import pytest

from refdash.logging import set_global_log_level


@pytest.fixture(autouse=True)
def _default_log_level():
    yield
    set_global_log_level(logging.INFO)
