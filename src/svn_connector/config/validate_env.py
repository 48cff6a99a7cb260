#!/usr/bin/env python3
# Validate environment variables

# Loading and validating environment variables are separate modules, because validation uses context and logging

# Import svn_connector modules
from svn_connector.utils.context import Context
from svn_connector.utils.log import log
from svn_connector.utils.logger import LOG_LEVEL_NAMES


def validate_env_vars(ctx: Context) -> None:
    """Validate inputs here, now that the logger is instantiated, instead of throughout the code"""

    if ctx.env_vars["TRUNCATED_OUTPUT_MAX_LINES"] <= 0:
        raise ValueError("TRUNCATED_OUTPUT_MAX_LINES must be greater than 0")

    # textwrap.shorten needs room for its placeholder text
    if ctx.env_vars["TRUNCATED_OUTPUT_MAX_LINE_LENGTH"] < 100:
        raise ValueError("TRUNCATED_OUTPUT_MAX_LINE_LENGTH must be at least 100")

    if ctx.env_vars["LOG_LEVEL"].upper() not in LOG_LEVEL_NAMES:
        log(ctx, f"LOG_LEVEL={ctx.env_vars['LOG_LEVEL']} is not one of {LOG_LEVEL_NAMES}, using INFO", "warning")

    # Keep the password out of the logs, even when the env vars are logged
    if ctx.env_vars.get("SVN_PASSWORD"):
        ctx.add_secrets(ctx.env_vars["SVN_PASSWORD"])

    return None
