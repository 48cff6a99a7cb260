#!/usr/bin/env python3
# Connector configuration, as handed to Connector.init()

# Import Python standard modules
from types import MappingProxyType
from typing import Mapping, Optional

CONFIG_KEY_REPOSITORY_PATH = "repositoryPath"
CONFIG_KEY_TEMPORARY_FILE_STORE = "temporaryFileStore"


class ConnectorConfiguration:
    """
    Identity and string properties of one configured connector

    The properties are read-only once the configuration is built
    """

    def __init__(self, id, label: str, properties: Optional[Mapping[str, str]] = None):
        self.id = id
        self.label = label
        self._properties = MappingProxyType(dict(properties or {}))

    @property
    def properties(self) -> Mapping[str, str]:
        return self._properties

    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._properties.get(key, default)

    def __repr__(self):
        return f"ConnectorConfiguration(id={self.id!r}, label={self.label!r}, properties={dict(self._properties)!r})"
