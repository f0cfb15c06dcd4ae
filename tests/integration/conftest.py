"""
Integration test fixtures for brickreader.

These tests talk to a real Databricks workspace. They are skipped unless the
workspace variables (DATABRICKS_HOST, DATABRICKS_TOKEN, DATABRICKS_PRINCIPAL)
are set; BRICKREADER_TEST_TABLE names a Delta table the principal can read.
"""

import logging
import os

import pytest
from dotenv import load_dotenv

from brickreader.api import MetastoreClient, Transport
from brickreader.config import ManagerConfig
from brickreader.exceptions import ConfigurationError
from brickreader.manager import DeltaLakeManager

logger = logging.getLogger(__name__)


def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def integration_config() -> ManagerConfig:
    """
    Session-scoped ManagerConfig from the environment (and a .env file).

    Skips the session's integration tests when the workspace is not configured.
    """
    load_dotenv()
    try:
        config = ManagerConfig.from_env()
    except ConfigurationError as e:
        pytest.skip(f"Databricks workspace not configured: {e}")
    return config


@pytest.fixture(scope="session")
def metastore(integration_config: ManagerConfig) -> MetastoreClient:
    """MetastoreClient against the configured workspace."""
    transport = Transport(
        integration_config.workspace_host,
        integration_config.token,
        timeout=integration_config.request_timeout_seconds,
    )
    client = MetastoreClient(transport)
    ok, user = client.current_user()
    if not ok or user is None:
        pytest.skip("Could not connect to Databricks with the configured token")
    logger.info(f"Connected to Databricks as {user.user_name}")
    return client


@pytest.fixture(scope="session")
def manager(integration_config: ManagerConfig, metastore: MetastoreClient) -> DeltaLakeManager:
    """Non-strict DeltaLakeManager sharing the session's metastore client."""
    return DeltaLakeManager(integration_config, metastore=metastore, strict=False)


@pytest.fixture(scope="session")
def test_table() -> str:
    """Full name of a readable Delta table (BRICKREADER_TEST_TABLE)."""
    name = os.getenv("BRICKREADER_TEST_TABLE")
    if not name:
        pytest.skip("BRICKREADER_TEST_TABLE not set")
    return name
