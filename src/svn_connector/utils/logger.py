#!/usr/bin/env python3
# Configure structlog to write JSON Lines through stdlib logging
# Doesn't import Context, so it can be configured before the Context exists

# One event per svn process, with everything known about the run, rather than many small events
# https://brandur.org/canonical-log-lines#what-are-they

# Import Python standard modules
from sys import stdout
import logging

# Import third party modules
import structlog
from structlog.processors import CallsiteParameter


LOG_LEVEL_NAMES = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

# Top level keys, in output order; other keys follow, sorted
KEY_ORDER = [
    "date",
    "time",
    "message",
    "level",
    "correlation_id",
    "connector",
    "operation",
    "node",
    "process",
    "psutils",
]

# Where CallsiteParameterAdder's keys go, under "code"
CODE_LOCATION_KEYS = {
    "module":       "module",
    "func_name":    "function",
    "lineno":       "line",
}


def configure_logger(log_level: str) -> None:
    """Send structlog events through the root stdlib logger, rendered as one JSON object per line"""

    level_name = str(log_level).upper()
    if level_name not in LOG_LEVEL_NAMES:
        level_name = "INFO"

    # An application embedding the connector may have configured the root logger already;
    # basicConfig leaves it alone in that case
    logging.basicConfig(stream=stdout, level=level_name, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.CallsiteParameterAdder(
                parameters=[CallsiteParameter.MODULE, CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO],
                # Report the caller of log(), not log() itself
                additional_ignores=["svn_connector.utils.log"],
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            group_code_location,
            order_keys,
            structlog.processors.JSONRenderer(default=str),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        cache_logger_on_first_use=True,
    )


def group_code_location(logger, method_name, event_dict):
    """Move the call site keys into one "code" dict"""

    code = {
        name: event_dict.pop(key)
        for key, name in CODE_LOCATION_KEYS.items()
        if key in event_dict
    }

    if code:
        event_dict["code"] = code

    return event_dict


def order_keys(logger, method_name, event_dict):
    """Rename event to message, and put keys in KEY_ORDER, then alphabetical order, at every level"""

    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")

    return sort_dict_by_key_order(event_dict, KEY_ORDER)


def sort_dict_by_key_order(input_dict: dict, key_order: list = None) -> dict:
    """
    Keys in key_order first, in that order, then the remaining keys alphabetically

    Nested dicts are sorted alphabetically, except "code", which reads module, function, line
    """

    key_order = key_order or []
    rank = {key: position for position, key in enumerate(key_order)}

    ordered_keys = sorted(input_dict, key=lambda key: (rank.get(key, len(rank)), str(key)))

    return {
        key: (
            sort_dict_by_key_order(input_dict[key])
            if isinstance(input_dict[key], dict) and key != "code"
            else input_dict[key]
        )
        for key in ordered_keys
    }
