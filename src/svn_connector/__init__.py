#!/usr/bin/env python3
# Connector to browse, read, and change a tree of files in a Subversion repository

# Import svn_connector modules
from svn_connector.connector.configuration import ConnectorConfiguration
from svn_connector.connector.node import ConnectorNode, ConnectorNodeType, ContentInformation
from svn_connector.connector.svn_connector import SvnConnector
from svn_connector.exceptions import ConfigurationError, ConnectorError

__all__ = [
    "ConfigurationError",
    "ConnectorConfiguration",
    "ConnectorError",
    "ConnectorNode",
    "ConnectorNodeType",
    "ContentInformation",
    "SvnConnector",
]
