"""Pytest fixtures for pestr tests."""
import pytest

from pestr.models import Geometry


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Drop PESTR_* overrides and point the config file at an empty temp dir."""
    for name in (
        "PESTR_CPUS_PER_NODE",
        "PESTR_SEARCH_CONSERVE_NODES",
        "PESTR_SEARCH_PE_RADIUS",
        "PESTR_SEARCH_THREAD_RADIUS",
        "PESTR_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PESTR_CONFIG", str(tmp_path / "config.toml"))


@pytest.fixture
def partial_geometry():
    """24 x 4 on 36-core nodes: two full nodes and one with 6 tasks."""
    return Geometry.new(36, False, 24, 4)
