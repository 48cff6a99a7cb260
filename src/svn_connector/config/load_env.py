#!/usr/bin/env python3
# Load Environment variables into context

# Import svn_connector modules
# context and logging are not available, as it would create a circular import
# Loading and validating environment variables are separate modules, because validation uses context and logging

# Import Python standard modules
from os import environ

# Import third party modules
from dotenv import load_dotenv # https://pypi.org/project/python-dotenv/


def _to_bool(value) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_env_vars(dotenv_path: str = None) -> dict:
    """Load config from environment variables"""

    # Read the contents of the .env file into env vars, from the current directory if no path is given
    # Do not overwrite any existing env vars with the same name (default behaviour),
    # so that env vars set by the caller take precedence
    load_dotenv(dotenv_path=dotenv_path, override=False)

    # Create empty env_vars dict to return at function exit
    env_vars = {}

    # Try to read the variables from the environment
    # Set defaults in case they're not defined, where appropriate
    # Handle type casting here, instead of throughout the code

    # DEBUG INFO WARNING ERROR CRITICAL
    env_vars["LOG_LEVEL"]                               = str(environ.get("LOG_LEVEL"                               , "INFO" ))
    env_vars["SVN_BINARY"]                              = str(environ.get("SVN_BINARY"                              , "svn" ))
    # YAML file of connector configurations, used by the command line tool
    env_vars["SVN_CONNECTOR_CONFIG"]                    = str(environ.get("SVN_CONNECTOR_CONFIG"                    , "connectors.yaml" ))
    env_vars["SVN_CONNECTOR_DISABLE_TLS_VERIFICATION"]  = _to_bool(environ.get("SVN_CONNECTOR_DISABLE_TLS_VERIFICATION" , "false" ))
    env_vars["SVN_USERNAME"]                            = str(environ.get("SVN_USERNAME"                            , "" ))
    env_vars["SVN_PASSWORD"]                            = str(environ.get("SVN_PASSWORD"                            , "" ))
    env_vars["TRUNCATED_OUTPUT_MAX_LINE_LENGTH"]        = int(environ.get("TRUNCATED_OUTPUT_MAX_LINE_LENGTH"        , 200 ))
    env_vars["TRUNCATED_OUTPUT_MAX_LINES"]              = int(environ.get("TRUNCATED_OUTPUT_MAX_LINES"              , 11 ))

    return env_vars
