"""
Shared pytest fixtures for brickreader tests.

Provides environment management for configuration tests and a default
ManagerConfig for manager tests.
"""

import os
from typing import Dict, Generator

import pytest

from brickreader.config import ManagerConfig

CONFIG_ENV_VARS = (
    "DATABRICKS_HOST",
    "WORKSPACE_NAME",
    "DATABRICKS_TOKEN",
    "DB_TOKEN",
    "DATABRICKS_PRINCIPAL",
    "USER_NAME",
    "BRICKREADER_MAX_CONCURRENT_FETCHES",
    "BRICKREADER_STRICT_AUTH",
    "AZURE_STORAGE_ACCOUNT_NAME",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_TENANT_ID",
)


@pytest.fixture
def clean_environment() -> Generator[None, None, None]:
    """
    Fixture that removes every configuration variable for the test duration.

    Restores the original values after the test completes.
    """
    original: Dict[str, str] = {name: os.environ[name] for name in CONFIG_ENV_VARS if name in os.environ}
    for name in CONFIG_ENV_VARS:
        os.environ.pop(name, None)
    yield
    for name in CONFIG_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(original)


@pytest.fixture
def workspace_environment(clean_environment: None) -> Dict[str, str]:
    """Fixture that sets the minimal workspace variables."""
    values = {
        "DATABRICKS_HOST": "https://adb-123.11.azuredatabricks.net/",
        "DATABRICKS_TOKEN": "dapi-test-token",
        "DATABRICKS_PRINCIPAL": "alice@example.com",
    }
    os.environ.update(values)
    return values


@pytest.fixture
def storage_environment(workspace_environment: Dict[str, str]) -> Dict[str, str]:
    """Fixture that adds Azure storage credentials on top of the workspace variables."""
    values = {
        "AZURE_STORAGE_ACCOUNT_NAME": "lakeaccount",
        "AZURE_CLIENT_ID": "client-id",
        "AZURE_CLIENT_SECRET": "client-secret",
        "AZURE_TENANT_ID": "tenant-id",
    }
    os.environ.update(values)
    return {**workspace_environment, **values}


@pytest.fixture
def manager_config() -> ManagerConfig:
    """ManagerConfig for alice@example.com against a fake workspace."""
    return ManagerConfig(
        workspace_host="adb-123.11.azuredatabricks.net",
        token="dapi-test-token",
        principal="alice@example.com",
    )
