"""Logging setup and result/error rendering shared by the zodforge commands."""

import json
import logging
import os
import traceback
from typing import Any, NoReturn

import click

from zodforge.errors import ZodforgeError

DEBUG_ENV_VAR = "ZODFORGE_DEBUG"
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"

# Error attributes that locate a failure inside the source document
ERROR_CONTEXT_FIELDS = ("ref", "operation", "kind", "keyword", "keywords")


def debug_enabled(flag: bool = False) -> bool:
    """Whether debug output is on, from ``--debug`` or ``ZODFORGE_DEBUG``.

    The environment variable counts when set to 1, true, yes or on.
    """
    if flag:
        return True
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr: DEBUG and up in debug mode, WARNING otherwise."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    level = logging.DEBUG if debug_enabled(debug) else logging.WARNING
    logging.basicConfig(level=level, handlers=[handler], force=True)


def format_error(error: Exception, debug: bool = False) -> dict[str, Any]:
    """Build the error payload reported by the commands.

    Conversion errors report their bare message plus every context attribute
    they carry: the reference, the operation in progress, and the offending
    kind or composition keyword. Other exceptions report their text.

    Args:
        error: The exception that stopped the command
        debug: Whether to attach the formatted traceback

    Returns:
        Payload with ``error`` and ``type`` keys plus any context fields
    """
    message = error.message if isinstance(error, ZodforgeError) else str(error)
    payload: dict[str, Any] = {"error": message, "type": type(error).__name__}

    for field in ERROR_CONTEXT_FIELDS:
        value = getattr(error, field, None)
        if value is not None:
            payload[field] = value

    if debug:
        payload["traceback"] = "".join(traceback.format_exception(error))
    return payload


def output_result(result: Any, json_output: bool = False) -> None:
    """Print a command result: a JSON envelope, one line per list item, or plain text."""
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
        return

    for line in result if isinstance(result, list) else [result]:
        click.echo(line)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> NoReturn:
    """Report an error and abort the command.

    JSON mode prints the payload from :func:`format_error` on stdout; text
    mode prints ``Error [<type>]: <message with context>`` on stderr.

    Raises:
        click.Abort: Always
    """
    payload = format_error(error, debug_enabled(debug))

    if json_output:
        click.echo(json.dumps({"status": "error", **payload}, indent=2, default=str))
    else:
        click.echo(f"Error [{payload['type']}]: {error}", err=True)
        if "traceback" in payload:
            click.echo(payload["traceback"], err=True)

    raise click.Abort()
