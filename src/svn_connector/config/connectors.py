#!/usr/bin/env python3
# Parse the YAML file of connector configurations

# File format:
#
# procs:                                    # Connector id
#   label: Process models                   # Optional, defaults to the id
#   repositoryPath: https://svn.example.com/repo/trunk/processes
#   temporaryFileStore: ${SVN_CONNECTOR_TMP} # Optional

# Import svn_connector modules
from svn_connector.connector.configuration import CONFIG_KEY_REPOSITORY_PATH, ConnectorConfiguration
from svn_connector.exceptions import ConfigurationError
from svn_connector.utils.context import Context
from svn_connector.utils.log import log

# Import Python standard modules
from typing import Dict

# Import third party modules
import yaml # https://pyyaml.org/wiki/PyYAMLDocumentation


def load_from_file(ctx: Context, connectors_file_path: str) -> Dict[str, ConnectorConfiguration]:
    """Load and parse the YAML configuration file, keyed by connector id"""

    try:

        with open(connectors_file_path, "r") as connectors_file:

            # This should return a dict
            connectors = yaml.safe_load(connectors_file)

    except IsADirectoryError as exception:
        raise ConfigurationError(f"Connector configuration file not found at {connectors_file_path}, but found a directory") from exception

    except FileNotFoundError as exception:
        raise ConfigurationError(f"Connector configuration file not found at {connectors_file_path}") from exception

    except yaml.YAMLError as exception:
        raise ConfigurationError(f"YAML syntax error in {connectors_file_path}, please lint it: {exception}") from exception

    configurations = parse_connectors(connectors, connectors_file_path)

    log(ctx, f"Parsed {len(configurations)} connector configurations from {connectors_file_path}", "debug", {"connectors": list(configurations)})

    return configurations


def parse_connectors(connectors, source: str = "connector configuration") -> Dict[str, ConnectorConfiguration]:
    """Convert the parsed YAML dict into ConnectorConfiguration objects, validating the required keys"""

    if connectors is None:
        return {}

    if not isinstance(connectors, dict):
        raise ConfigurationError(f"{source} must be a mapping of connector ids to connector properties, found {type(connectors).__name__}")

    configurations = {}

    for connector_id, properties in connectors.items():

        if not isinstance(properties, dict):
            raise ConfigurationError(f"Connector {connector_id} in {source} must be a mapping of properties")

        # Connector properties are strings, ex. a port number in a URL shouldn't be an int
        properties = {str(key): str(value) for key, value in properties.items() if value is not None}

        if not properties.get(CONFIG_KEY_REPOSITORY_PATH):
            raise ConfigurationError(f"Connector {connector_id} in {source} is missing required key {CONFIG_KEY_REPOSITORY_PATH}")

        label = properties.pop("label", str(connector_id))

        configurations[str(connector_id)] = ConnectorConfiguration(str(connector_id), label, properties)

    return configurations
