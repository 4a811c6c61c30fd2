"""Shared pytest fixtures for depsentinel tests."""

from __future__ import annotations

import pytest
from helpers import CLASSPATH

from depsentinel.classpath import StaticClasspathResolver


@pytest.fixture
def resolver():
    return StaticClasspathResolver(CLASSPATH)
