"""Tests for get_content and get_content_information."""

import pytest

from svn_connector.connector.node import ConnectorNode, ConnectorNodeType, ContentInformation
from svn_connector.exceptions import ConnectorError
from svn_connector.svn.entry import NodeKind
from tests.fakes import BASE_DATE, BASE_URL


@pytest.fixture
def procs_folder(fake_client):
    fake_client.add("procs", NodeKind.DIR)
    fake_client.add("procs/order.bpmn", content=b"<definitions/>")
    fake_client.add("procs/order.png", content=b"\x89PNG\r\n")
    fake_client.add("procs/notes.txt", content=b"notes")
    return fake_client


class TestGetContent:
    """Test fetching node content."""

    def test_bpmn_content(self, connector, procs_folder):
        """Verify file bytes are returned as a stream."""
        node = ConnectorNode("/procs/order.bpmn", type=ConnectorNodeType.BPMN_FILE)

        assert connector.get_content(node).read() == b"<definitions/>"

    def test_png_content_path_is_remapped(self, connector, procs_folder):
        """Verify a PNG node named after its diagram reads the sibling .png file."""
        node = ConnectorNode("/procs/order.bpmn", type=ConnectorNodeType.PNG_FILE)

        assert connector.get_content(node).read() == b"\x89PNG\r\n"
        assert procs_folder.method_calls("get_content") == [("MainThread", "get_content", f"{BASE_URL}/procs/order.png")]

    def test_missing_png_is_none(self, connector, procs_folder):
        """Verify a rendered image which doesn't exist yet is None, not an error."""
        node = ConnectorNode("/procs/invoice.bpmn", type=ConnectorNodeType.PNG_FILE)

        assert connector.get_content(node) is None

    @pytest.mark.parametrize("node_type", [ConnectorNodeType.BPMN_FILE, ConnectorNodeType.ANY_FILE])
    def test_missing_file_raises(self, connector, procs_folder, node_type):
        """Verify a missing regular file raises ConnectorError."""
        node = ConnectorNode("/procs/invoice.bpmn", type=node_type)

        with pytest.raises(ConnectorError) as excinfo:
            connector.get_content(node)

        assert excinfo.value.operation == "get_content"
        assert excinfo.value.node_id == "/procs/invoice.bpmn"


class TestContentPath:
    """Test the path the content of each node type is read from."""

    @pytest.mark.parametrize("id, node_type, expected", [
        ("/procs/order.bpmn", ConnectorNodeType.BPMN_FILE, "/procs/order.bpmn"),
        ("/procs/order.bpmn", ConnectorNodeType.PNG_FILE, "/procs/order.png"),
        ("/procs/order.png", ConnectorNodeType.PNG_FILE, "/procs/order.png"),
        ("/procs/diagram", ConnectorNodeType.PNG_FILE, "/procs/diagram.png"),
        ("/v1.2/diagram", ConnectorNodeType.PNG_FILE, "/v1.2/diagram.png"),
        ("/procs/notes.txt", ConnectorNodeType.ANY_FILE, "/procs/notes.txt"),
    ])
    def test_content_path(self, connector, id, node_type, expected):
        """Verify only the last extension of PNG nodes is rewritten."""
        assert connector._content_path(ConnectorNode(id, type=node_type)) == expected


class TestGetContentInformation:
    """Test content freshness metadata."""

    def test_existing_file(self, connector, procs_folder):
        """Verify the current last modified date is read from the repository."""
        stale = ConnectorNode("/procs/order.bpmn", type=ConnectorNodeType.BPMN_FILE, last_modified=None)

        content_information = connector.get_content_information(stale)

        assert content_information == ContentInformation(True, BASE_DATE)
        assert content_information.exists()

    def test_deleted_node(self, connector, procs_folder):
        """Verify a freshly deleted node is not found, without raising."""
        node = connector.get_node("/procs/order.bpmn")
        connector.delete_node(node)

        content_information = connector.get_content_information(node)

        assert content_information == ContentInformation.not_found()
        assert not content_information.exists()
        assert content_information.last_modified is None

    def test_backend_failure(self, connector, procs_folder):
        """Verify a backend failure is reported as not found."""
        procs_folder.fail_on.add("get_dir_entry")

        assert not connector.get_content_information(ConnectorNode("/procs/order.bpmn")).exists()

    def test_folder_is_rejected(self, connector, procs_folder):
        """Verify content information of a folder is a usage error."""
        with pytest.raises(ValueError):
            connector.get_content_information(ConnectorNode("/procs"))
