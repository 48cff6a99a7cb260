"""Pytest configuration and shared fixtures."""

import pytest

from svn_connector.connector.configuration import ConnectorConfiguration
from svn_connector.connector.svn_connector import SvnConnector
from svn_connector.utils.context import Context
from tests.fakes import BASE_URL, FakeSvnClient


def make_env_vars(**overrides):
    """Environment variables as load_env_vars() returns them, with defaults."""
    env_vars = {
        "LOG_LEVEL": "DEBUG",
        "SVN_BINARY": "svn",
        "SVN_CONNECTOR_CONFIG": "connectors.yaml",
        "SVN_CONNECTOR_DISABLE_TLS_VERIFICATION": False,
        "SVN_USERNAME": "",
        "SVN_PASSWORD": "",
        "TRUNCATED_OUTPUT_MAX_LINE_LENGTH": 200,
        "TRUNCATED_OUTPUT_MAX_LINES": 11,
    }
    env_vars.update(overrides)
    return env_vars


@pytest.fixture
def ctx():
    """Context with default environment variables."""
    return Context(make_env_vars())


@pytest.fixture
def fake_client():
    """In-memory svn repository, empty apart from its root."""
    return FakeSvnClient()


@pytest.fixture
def temporary_file_store(tmp_path):
    """Directory working copies are staged in."""
    store = tmp_path / "store"
    store.mkdir()
    return store


@pytest.fixture
def configuration(temporary_file_store):
    return ConnectorConfiguration(
        "svn-1",
        "Process models",
        {
            "repositoryPath": BASE_URL,
            "temporaryFileStore": str(temporary_file_store),
        },
    )


@pytest.fixture
def connector(ctx, fake_client, configuration):
    """SvnConnector initialized against the fake repository."""
    svn_connector = SvnConnector(ctx, svn_client=fake_client)
    svn_connector.init(configuration)
    return svn_connector
