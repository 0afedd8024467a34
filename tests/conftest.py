"""Shared fixtures for the tablegen tests."""

import pytest

CONFIG_ENV_VARS = (
    "TABLEGEN_INTERFACE_PATH",
    "TABLEGEN_PRIMARY_TYPES",
    "TABLEGEN_DEFAULT_PRIMARY_TYPE",
)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in an empty directory with no tablegen environment variables."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
