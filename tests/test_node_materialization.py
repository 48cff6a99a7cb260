"""Unit tests for building nodes from svn directory entries."""

from datetime import datetime, timezone
import itertools

import pytest

from svn_connector.connector.node import ConnectorNodeType
from svn_connector.connector.svn_connector import node_type_for
from svn_connector.svn.entry import DirEntry, NodeKind


NAMES = [
    "order.bpmn",
    "order.xml",
    "diagram.png",
    "notes.txt",
    "README",
    "",
    ".bpmn",
    "archive.bpmn.zip",
    "IMAGE.PNG",
    "folder.with.dots",
]


class TestNodeTypeFor:
    """Test inferring node types from svn kind and file name."""

    @pytest.mark.parametrize("name, expected", [
        ("order.bpmn", ConnectorNodeType.BPMN_FILE),
        ("order.xml", ConnectorNodeType.BPMN_FILE),
        ("diagram.png", ConnectorNodeType.PNG_FILE),
        ("notes.txt", ConnectorNodeType.ANY_FILE),
        ("README", ConnectorNodeType.ANY_FILE),
        ("archive.bpmn.zip", ConnectorNodeType.ANY_FILE),
        ("IMAGE.PNG", ConnectorNodeType.ANY_FILE),
    ])
    def test_files_are_typed_by_extension(self, name, expected):
        """Verify file entries are typed by their (case sensitive) extension."""
        assert node_type_for(NodeKind.FILE, name) == expected

    @pytest.mark.parametrize("kind, name", itertools.product([NodeKind.DIR, NodeKind.OTHER], NAMES))
    def test_non_files_are_folders(self, kind, name):
        """Verify anything that isn't a file is a folder, whatever its name."""
        assert node_type_for(kind, name) == ConnectorNodeType.FOLDER

    @pytest.mark.parametrize("kind, name", itertools.product(list(NodeKind), NAMES + [None]))
    def test_inference_is_total(self, kind, name):
        """Verify every kind and name maps to exactly one concrete type, without raising."""
        node_type = node_type_for(kind, name)

        assert node_type in ConnectorNodeType
        assert node_type != ConnectorNodeType.UNSPECIFIED


class TestMaterialize:
    """Test building child nodes from listing entries."""

    DATE = datetime(2024, 3, 5, 14, 22, 31, tzinfo=timezone.utc)

    def test_child_of_folder(self, connector):
        """Verify id, label, type, date, and connector id are set from the entry."""
        node = connector.materialize("/procs", DirEntry("a.bpmn", NodeKind.FILE, self.DATE))

        assert node.id == "/procs/a.bpmn"
        assert node.label == "a.bpmn"
        assert node.type == ConnectorNodeType.BPMN_FILE
        assert node.last_modified == self.DATE
        assert node.connector_id == "svn-1"

    def test_child_of_root(self, connector):
        """Verify children of the root get a single leading slash."""
        node = connector.materialize("/", DirEntry("procs", NodeKind.DIR, self.DATE))

        assert node.id == "/procs"
        assert node.type == ConnectorNodeType.FOLDER

    def test_parent_with_trailing_slash(self, connector):
        """Verify a trailing slash on the parent id doesn't double up."""
        node = connector.materialize("/procs/", DirEntry("b.png", NodeKind.FILE, self.DATE))

        assert node.id == "/procs/b.png"
        assert node.type == ConnectorNodeType.PNG_FILE

    def test_unknown_kind(self, connector):
        """Verify entries of unknown kinds become folders."""
        node = connector.materialize("/", DirEntry("thing", NodeKind.from_svn("unknown"), None))

        assert node.type == ConnectorNodeType.FOLDER
        assert node.last_modified is None
