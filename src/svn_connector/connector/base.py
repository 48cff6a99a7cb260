#!/usr/bin/env python3
# Base Connector class

# Import svn_connector modules
from svn_connector.connector.configuration import ConnectorConfiguration
from svn_connector.connector.node import ConnectorNode, ConnectorNodeType, ContentInformation

# Import Python standard modules
from typing import BinaryIO, List, Optional


def secured(function):
    """Mark a connector operation as requiring an authorized caller; enforced by the hosting application"""

    function.secured = True
    return function


def threadsafe(function):
    """Mark a connector operation as safe to call concurrently from multiple threads"""

    function.threadsafe = True
    return function


def is_secured(function) -> bool:
    return getattr(function, "secured", False)


def is_threadsafe(function) -> bool:
    return getattr(function, "threadsafe", False)


class Connector:
    """Base class for connectors to document repositories."""

    def __init__(self):
        self.configuration = None

    def get_configuration(self) -> Optional[ConnectorConfiguration]:
        return self.configuration

    def set_configuration(self, configuration: ConnectorConfiguration) -> None:
        self.configuration = configuration

    def init(self, configuration: ConnectorConfiguration) -> None:
        """Initialize the connector from its configuration."""
        raise NotImplementedError("Subclasses must implement init()")

    def login(self, username: str, password: str) -> None:
        """Set the credentials used for subsequent calls."""
        raise NotImplementedError("Subclasses must implement login()")

    def get_root(self) -> ConnectorNode:
        raise NotImplementedError("Subclasses must implement get_root()")

    def get_children(self, parent: ConnectorNode) -> List[ConnectorNode]:
        raise NotImplementedError("Subclasses must implement get_children()")

    def get_node(self, id: str) -> Optional[ConnectorNode]:
        raise NotImplementedError("Subclasses must implement get_node()")

    def create_node(self, parent_id: str, id: str, label: str, type: ConnectorNodeType) -> ConnectorNode:
        raise NotImplementedError("Subclasses must implement create_node()")

    def delete_node(self, node: ConnectorNode) -> None:
        raise NotImplementedError("Subclasses must implement delete_node()")

    def update_content(self, node: ConnectorNode, new_content: BinaryIO) -> ContentInformation:
        raise NotImplementedError("Subclasses must implement update_content()")

    def get_content(self, node: ConnectorNode) -> Optional[BinaryIO]:
        raise NotImplementedError("Subclasses must implement get_content()")

    def get_content_information(self, node: ConnectorNode) -> ContentInformation:
        raise NotImplementedError("Subclasses must implement get_content_information()")
