"""CLI output utilities and formatting."""

from typing import NoReturn

import click
from colorama import Fore, Style

BANNER = f"""
{Fore.YELLOW}╔════════════════════════════════════════════════╗{Style.RESET_ALL}
{Fore.YELLOW}║{Style.RESET_ALL}   {Fore.CYAN}{Style.BRIGHT}plumb{Style.RESET_ALL}                                        {Fore.YELLOW}║{Style.RESET_ALL}
{Fore.YELLOW}║{Style.RESET_ALL}   {Fore.WHITE}{Style.BRIGHT}A minimal Git client in Python{Style.RESET_ALL}               {Fore.YELLOW}║{Style.RESET_ALL}
{Fore.YELLOW}╚════════════════════════════════════════════════╝{Style.RESET_ALL}
"""


def _styled(color: str, marker: str, message: str) -> str:
    return f"{color}{marker} {message}{Style.RESET_ALL}"


def success(message: str) -> str:
    """Green, ticked."""
    return _styled(Fore.GREEN, '✓', message)


def info(message: str) -> str:
    return _styled(Fore.CYAN, '→', message)


def warning(message: str) -> str:
    return _styled(Fore.YELLOW, '⚠', message)


def error(message: str) -> str:
    """Red, crossed."""
    return _styled(Fore.RED, '✗', message)


def abort(message: str) -> NoReturn:
    """Print message as an error and stop the command with a non-zero exit."""
    click.echo(error(message))
    raise click.Abort()
