"""
CLI utilities for command line reconstruction and logging setup.
"""

import logging
from pathlib import Path

import click

COMMAND_NAME = "starknet_jsonrpc_codegen"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return COMMAND_NAME

    cmd_parts = [COMMAND_NAME]

    for param in click_command.params:
        if not isinstance(param, click.Option) or param.name not in cli_args:
            continue

        value = cli_args[param.name]
        # Flags, defaults and the commit are not part of what shapes the output
        if not value or param.is_flag or value == param.default or param.name == "commit":
            continue

        # File paths are shown by name only so that the header does not leak local directories
        if isinstance(value, (str, Path)):
            path_obj = Path(str(value))
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        else:
            formatted_value = str(value)

        flag = param.opts[0] if param.opts else f"--{param.name}"
        cmd_parts.extend([flag, formatted_value])

    return " ".join(cmd_parts)


class ClickLogHandler(logging.Handler):
    """Writes log records to the stderr stream click currently uses."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG when verbose and WARNING otherwise."""
    handler = ClickLogHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger(COMMAND_NAME)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
