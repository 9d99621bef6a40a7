"""Pytest configuration for whitted tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Modules that declare Taichi fields are imported inside the tests, after
    this fixture has run.
    """
    from whitted.core.settings import init_backend

    init_backend(arch=ti.cpu, seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear every scene registry before and after each test."""
    from whitted.scene.manager import clear_all

    clear_all()
    yield
    clear_all()