#!/usr/bin/env python3
# Nodes of the document tree exposed by connectors, and their content metadata

# Import Python standard modules
from datetime import datetime
from enum import Enum
from typing import Optional


class ConnectorNodeType(Enum):
    FOLDER = "FOLDER"
    BPMN_FILE = "BPMN_FILE"
    PNG_FILE = "PNG_FILE"
    ANY_FILE = "ANY_FILE"
    UNSPECIFIED = "UNSPECIFIED"

    def is_file(self) -> bool:
        return self in (ConnectorNodeType.BPMN_FILE, ConnectorNodeType.PNG_FILE, ConnectorNodeType.ANY_FILE)


class ConnectorNode:
    """
    A file or folder in a connector's tree

    id is the slash-delimited path of the node, rooted at "/"
    Node objects are built fresh by each connector call, and are not kept or refreshed by the connector
    """

    def __init__(
            self,
            id: str,
            label: Optional[str] = None,
            type: ConnectorNodeType = ConnectorNodeType.UNSPECIFIED,
            last_modified: Optional[datetime] = None,
            connector_id = None,
        ):
        self.id = id
        self.label = label if label is not None else id
        self.type = type
        self.last_modified = last_modified
        self.connector_id = connector_id

    def __repr__(self):
        return f"ConnectorNode(id={self.id!r}, label={self.label!r}, type={self.type.name}, connector_id={self.connector_id!r})"

    def __eq__(self, other):
        if not isinstance(other, ConnectorNode):
            return NotImplemented
        return self.id == other.id and self.connector_id == other.connector_id

    def __hash__(self):
        return hash((self.id, self.connector_id))

    def to_dict(self) -> dict:
        """For structured logging and the CLI"""

        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.name,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "connector_id": self.connector_id,
        }


class ContentInformation:
    """Whether a node's content exists, and when it was last modified"""

    def __init__(self, available: bool, last_modified: Optional[datetime] = None):
        self.available = available
        self.last_modified = last_modified

    @classmethod
    def not_found(cls) -> "ContentInformation":
        return cls(False, None)

    def exists(self) -> bool:
        return self.available

    def __repr__(self):
        return f"ContentInformation(available={self.available!r}, last_modified={self.last_modified!r})"

    def __eq__(self, other):
        if not isinstance(other, ContentInformation):
            return NotImplemented
        return self.available == other.available and self.last_modified == other.last_modified
