#!/usr/bin/env python3
# Resolve the local directory under which svn working copies are staged

# Import svn_connector modules
from svn_connector.utils.context import Context
from svn_connector.utils.log import log

# Import Python standard modules
from os import environ
from typing import Optional
import os
import re
import tempfile

# Matches ${NAME}, where NAME is read from the process environment when the connector is initialized
INDIRECTION_PATTERN = re.compile(r"^\$\{(?P<name>[^}]+)\}$")


def default_temporary_file_store() -> str:
    return tempfile.gettempdir()


def resolve_temporary_file_store(ctx: Context, configured_value: Optional[str]) -> str:
    """
    Resolve the temporaryFileStore connector property into a local directory path

    - Not configured: the platform's temp directory
    - ${NAME}: the value of the NAME environment variable,
      or the platform's temp directory, with a warning, if NAME is unset, or names something other than a directory
    - Anything else: used as is
    """

    default = default_temporary_file_store()

    if not configured_value:
        return default

    match = INDIRECTION_PATTERN.match(configured_value.strip())
    if not match:
        return configured_value

    variable_name = match.group("name")
    variable_value = environ.get(variable_name)

    if not variable_value:
        log(ctx, f"Could not read temporary file store path from environment variable {variable_name}, it is not set; using {default}", "warning")
        return default

    # The directory doesn't need to exist yet, it's created on the first checkout,
    # but if something else is already at the path, checkouts would fail
    if os.path.exists(variable_value) and not os.path.isdir(variable_value):
        log(ctx, f"Could not use temporary file store path {variable_value} from environment variable {variable_name}, it is not a directory; using {default}", "warning")
        return default

    log(ctx, f"Loading temporary file store path from environment variable {variable_name}: {variable_value}", "info")

    return variable_value
