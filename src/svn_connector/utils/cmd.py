#!/usr/bin/env python3
# Run the svn binary as a subprocess, and log one canonical line per run

# Import svn_connector modules
from svn_connector.utils.context import Context
from svn_connector.utils.log import log

# Import Python standard modules
from typing import Any, Dict, List, Optional
import subprocess
import textwrap
import time
import uuid

# Import third party modules
import psutil # Check for breaking changes https://github.com/giampaolo/psutil/blob/master/HISTORY.rst


def run_subprocess(
        ctx:        Context,
        args:       List[str],
        password:   Optional[str]   = None,
        quiet:      bool            = False,
        name:       str             = "",
        text:       bool            = True,
    ) -> Dict[str, Any]:
    """
    Run args to completion, and return what the svn client needs from the run

    Never raises for a failed run; callers check result["success"]

    Args:
        ctx: Context object
        args: Command, ex. ["svn", "list", "--xml", url]
        password: Written to the process' stdin, followed by a newline, for svn --password-from-stdin
        quiet: Only log the run if it couldn't be started, ex. for svn info, where a missing path is an expected failure
        name: Short name to find the run in the logs, ex. svn_list
        text:
            True: result["output"] is stdout decoded into a list of lines
            False: result["output"] is stdout as bytes, ex. svn cat of a PNG file

    Returns:
        Dict with keys: args, name, output, stderr, pid, return_code, success, status_message_reason, span, execution_time_seconds
    """

    result = {
        "args":                     " ".join(args),
        "name":                     name,
        "output":                   [] if text else b"",
        "stderr":                   [],
        "pid":                      None,
        "return_code":              None,
        "success":                  False,
        "status_message_reason":    None,
        "span":                     uuid.uuid4().hex[:8],   # Correlates the log line with the caller's logs
    }

    process_metadata = {}
    log_level = "debug"
    started = time.monotonic()

    try:

        with psutil.Popen(args, stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE) as process:

            result["pid"] = process.pid
            process_metadata = _get_process_metadata(ctx, process)

            # communicate() closes stdin when there's no password, so svn never waits on a prompt
            stdin_input = f"{password}\n".encode() if password else None
            stdout_bytes, stderr_bytes = process.communicate(stdin_input)

            result["return_code"] = process.returncode

    # The binary couldn't be started, ex. svn isn't installed, or SVN_BINARY is wrong
    except OSError as exception:

        result["stderr"] = [str(exception)]
        result["status_message_reason"] = f"could not start: {type(exception).__name__}: {exception}"
        log_level = "error"

    else:

        result["stderr"] = stderr_bytes.decode(errors="replace").splitlines()

        if text:
            result["output"] = stdout_bytes.decode(errors="replace").splitlines()
        else:
            result["output"] = stdout_bytes

        result["success"] = result["return_code"] == 0
        result["status_message_reason"] = "succeeded" if result["success"] else "failed"

        if not result["success"] and not quiet:
            log_level = "error"

    result["execution_time_seconds"] = round(time.monotonic() - started, 4)

    if not quiet or log_level != "debug":
        log_process_status(ctx, result, process_metadata, log_level, text)

    return result


def _get_process_metadata(ctx: Context, process: psutil.Popen) -> Dict:
    """Read the process attributes to log; svn often exits before they can be read"""

    try:
        with process.oneshot():
            return process.as_dict(attrs=ctx.psutils_process_attributes_to_fetch)
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return {}


def log_process_status(ctx: Context, result: Dict, process_metadata: Dict, log_level: str, text: bool = True) -> None:
    """Log a finished run, with its output cut down to a readable size"""

    process = {key: value for key, value in result.items() if key not in ("output", "stderr")}

    if text:
        process["output_line_count"] = len(result["output"])
        process["truncated_output"] = truncate_output(ctx, result["output"])
    else:
        process["output_byte_count"] = len(result["output"])

    process["truncated_stderr"] = truncate_output(ctx, result["stderr"])

    psutils = dict(process_metadata)
    if "memory_percent" in psutils:
        psutils["memory_percent"] = round(psutils["memory_percent"], 4)

    log(ctx, f"Process {result['name'] or 'run'} {result['status_message_reason']}", log_level, {"process": process, "psutils": psutils}, correlation_id=result["span"])


def truncate_output(ctx: Context, output: List[str]) -> List[str]:
    """
    Cut output down for logging

    Empty lines are dropped
    Output longer than TRUNCATED_OUTPUT_MAX_LINES keeps its first and last max/2 lines, around a marker line
    Lines longer than TRUNCATED_OUTPUT_MAX_LINE_LENGTH are shortened, with a marker at the end
    """

    max_lines       = ctx.get_env_var("TRUNCATED_OUTPUT_MAX_LINES", 11)
    max_line_length = ctx.get_env_var("TRUNCATED_OUTPUT_MAX_LINE_LENGTH", 200)

    lines = [line for line in output if line]

    if len(output) > max_lines:

        keep = max_lines // 2
        lines = [
            *lines[:keep],
            f"...TRUNCATED FROM {len(output)} LINES TO {max_lines} LINES FOR LOGS...",
            *lines[max(len(lines) - keep, keep):],
        ]

    return [_shorten(line, max_line_length) for line in lines]


def _shorten(line: str, width: int) -> str:

    if len(line) <= width:
        return line

    return textwrap.shorten(
        line,
        width=width,
        placeholder=f"...LINE TRUNCATED FROM {len(line)} CHARACTERS TO {width} CHARACTERS FOR LOGS",
    )
