#!/usr/bin/env python3
# log(), the single function every module uses to emit a structured log event

# Import svn_connector modules
from svn_connector.utils import secret
from svn_connector.utils.context import Context
from svn_connector.utils.logger import LOG_LEVEL_NAMES

# Import Python standard modules
from datetime import datetime
import threading
import time

# Import third party modules
import structlog


def log(
        ctx:                Context,
        message:            str,
        level_name:         str             = "DEBUG",
        structured_data:    dict            = None,
        correlation_id:     str             = None,
        exception:          BaseException   = None,
        ) -> None:
    """
    Emit one log event, at level_name, with structured_data merged into its top level

    The caller's module, function, and line are added by the logger configuration, not here

    Args:
        ctx: Context, for the secrets to redact and the host fields
        message: Human readable message; svn URLs in it are redacted like the structured fields
        level_name: One of LOG_LEVEL_NAMES, case insensitive; anything else logs at DEBUG
        structured_data: Extra fields, ex. {"connector": {...}, "operation": "create_node"}
        correlation_id: Ties together the events of one svn process, or one connector operation
        exception: Rendered with its traceback
    """

    level_name = str(level_name).upper()
    if level_name not in LOG_LEVEL_NAMES:
        level_name = "DEBUG"

    fields = secret.redact(ctx, _event_fields(ctx, structured_data, correlation_id))

    # Not redacted, structlog formats it after this function returns
    if exception is not None:
        fields["exc_info"] = exception

    emit = getattr(structlog.get_logger(), level_name.lower())
    emit(secret.redact(ctx, message), **fields)


def _event_fields(ctx: Context, structured_data: dict = None, correlation_id: str = None) -> dict:
    """Fields common to every event, then the caller's fields, without empty values"""

    now = time.time()
    local_now = datetime.fromtimestamp(now)

    fields = {
        "date":         local_now.date().isoformat(),
        "time":         local_now.time().isoformat(),
        "timestamp":    f"{now:.4f}",
        "host": {
            "name":             ctx.hostname,
            "pid":              ctx.pid,
            "start_datetime":   ctx.start_datetime,
            "thread":           threading.current_thread().name,
            "uptime":           _format_uptime(now - ctx.start_timestamp),
        },
        "correlation_id": correlation_id,
    }

    fields.update(structured_data or {})

    return _drop_empty(fields)


def _format_uptime(uptime_seconds: float) -> str:
    """ex. 93784 -> 1d 2h 3m 4s; zero days, hours, and minutes are left out, seconds never are"""

    minutes, seconds = divmod(int(uptime_seconds), 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    parts = [f"{value}{unit}" for value, unit in ((days, "d"), (hours, "h"), (minutes, "m")) if value]
    parts.append(f"{seconds}s")

    return " ".join(parts)


def _drop_empty(value):
    """Recursively drop None, "", {}, and [] values from dicts and lists; 0 and False are kept"""

    if isinstance(value, dict):
        return {key: _drop_empty(item) for key, item in value.items() if _is_loggable(item)}

    if isinstance(value, list):
        return [_drop_empty(item) for item in value if _is_loggable(item)]

    return value


def _is_loggable(value) -> bool:

    if value is None or (isinstance(value, str) and value == ""):
        return False

    if isinstance(value, (dict, list)) and not value:
        return False

    return True
