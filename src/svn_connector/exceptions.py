#!/usr/bin/env python3
# Exceptions raised to callers of the connector

class ConnectorError(Exception):
    """
    Raised by connector operations when the svn repository can't be read or written

    Callers only ever see this type for backend failures, never the svn client's own exceptions;
    the underlying exception is chained as __cause__
    """

    def __init__(self, message: str, operation: str = None, node_id: str = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.node_id = node_id


class ConfigurationError(ConnectorError):
    """Raised when the connector configuration is missing or unusable, ex. no repositoryPath"""
