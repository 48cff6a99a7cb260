"""Tests for get_root, get_children, and get_node against the fake repository."""

import pytest

from svn_connector.connector.base import is_secured, is_threadsafe
from svn_connector.connector.node import ConnectorNode, ConnectorNodeType
from svn_connector.connector.svn_connector import SvnConnector
from svn_connector.exceptions import ConnectorError
from svn_connector.svn.client import SvnClientError
from svn_connector.svn.entry import NodeKind
from tests.fakes import BASE_DATE, BASE_URL


@pytest.fixture
def procs_folder(fake_client):
    fake_client.add("procs", NodeKind.DIR)
    fake_client.add("procs/a.bpmn", content=b"<definitions/>")
    fake_client.add("procs/b.png", content=b"\x89PNG")
    fake_client.add("procs/c.txt", content=b"notes")
    fake_client.add("procs/d", NodeKind.DIR)
    return fake_client


class TestGetRoot:
    """Test the fixed root node."""

    def test_root_is_folder(self, connector, fake_client):
        """Verify the root is a folder at "/", without asking the repository."""
        root = connector.get_root()

        assert root.id == "/"
        assert root.label == "/"
        assert root.type == ConnectorNodeType.FOLDER
        assert root.connector_id == "svn-1"
        assert fake_client.calls == []


class TestGetChildren:
    """Test listing folders."""

    def test_mixed_folder(self, connector, procs_folder):
        """Verify one node per entry, typed by kind and extension, under the parent's id."""
        children = connector.get_children(ConnectorNode("/procs", type=ConnectorNodeType.FOLDER))

        assert [child.id for child in children] == ["/procs/a.bpmn", "/procs/b.png", "/procs/c.txt", "/procs/d"]
        assert [child.type for child in children] == [
            ConnectorNodeType.BPMN_FILE,
            ConnectorNodeType.PNG_FILE,
            ConnectorNodeType.ANY_FILE,
            ConnectorNodeType.FOLDER,
        ]
        assert all(child.last_modified == BASE_DATE for child in children)
        assert all(child.connector_id == "svn-1" for child in children)

    def test_lists_parent_address(self, connector, procs_folder):
        """Verify the listing is requested for the parent's URL."""
        connector.get_children(ConnectorNode("/procs"))

        assert procs_folder.method_calls("list") == [("MainThread", "list", f"{BASE_URL}/procs")]

    def test_root_children(self, connector, procs_folder):
        """Verify children of the root."""
        children = connector.get_children(connector.get_root())

        assert [(child.id, child.type) for child in children] == [("/procs", ConnectorNodeType.FOLDER)]

    def test_empty_folder(self, connector, fake_client):
        """Verify an empty folder has no children."""
        fake_client.add("empty", NodeKind.DIR)

        assert connector.get_children(ConnectorNode("/empty")) == []

    def test_missing_folder(self, connector):
        """Verify a listing failure is raised as ConnectorError, with the svn error as its cause."""
        with pytest.raises(ConnectorError) as excinfo:
            connector.get_children(ConnectorNode("/missing"))

        assert excinfo.value.operation == "get_children"
        assert excinfo.value.node_id == "/missing"
        assert "Process models" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, SvnClientError)

    def test_nodes_are_not_cached(self, connector, procs_folder):
        """Verify each call reads the repository again."""
        connector.get_children(ConnectorNode("/procs"))
        procs_folder.add("procs/e.bpmn")

        children = connector.get_children(ConnectorNode("/procs"))

        assert "/procs/e.bpmn" in [child.id for child in children]
        assert len(procs_folder.method_calls("list")) == 2


class TestGetNode:
    """Test resolving single nodes."""

    def test_existing_file(self, connector, procs_folder):
        """Verify an existing file is resolved with its type and date."""
        node = connector.get_node("/procs/a.bpmn")

        assert node.id == "/procs/a.bpmn"
        assert node.label == "a.bpmn"
        assert node.type == ConnectorNodeType.BPMN_FILE
        assert node.last_modified == BASE_DATE

    def test_existing_folder(self, connector, procs_folder):
        """Verify an existing folder is resolved as a folder."""
        assert connector.get_node("/procs/d").type == ConnectorNodeType.FOLDER

    def test_missing_node(self, connector, procs_folder):
        """Verify a missing node is None, not an error."""
        assert connector.get_node("/procs/missing.bpmn") is None

    def test_backend_failure(self, connector, procs_folder):
        """Verify a backend failure is reported as a missing node."""
        procs_folder.fail_on.add("get_dir_entry")

        assert connector.get_node("/procs/a.bpmn") is None


class TestOperationMarkers:
    """Test which operations are marked for the hosting application."""

    @pytest.mark.parametrize("operation", [
        "get_children", "get_node", "get_content", "get_content_information",
        "create_node", "update_content", "delete_node",
    ])
    def test_secured_and_threadsafe(self, operation):
        function = getattr(SvnConnector, operation)

        assert is_secured(function)
        assert is_threadsafe(function)

    def test_root_is_secured_only(self):
        assert is_secured(SvnConnector.get_root)
        assert not is_threadsafe(SvnConnector.get_root)

    def test_login_is_threadsafe_only(self):
        assert is_threadsafe(SvnConnector.login)
        assert not is_secured(SvnConnector.login)
