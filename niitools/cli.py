"""Command line tool for managing the monorepo."""

from __future__ import annotations

import argparse
import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from niitools.root_path import get_root_path
from niitools.todo import print_tasks

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)

_GENERATE_COMMAND = ["nix", "run", ".#generateFiles"]

# `addlicense` can fail because it assumes any directory with a dot in its name is a file.
_FIX_COMMANDS = (
    ["alejandra", "."],
    ["taplo", "format", "--colors", "always", "."],
    ["cargo", "clippy", "--fix", "--allow-dirty"],
    ["cargo", "fmt"],
    ["cargo", "hakari", "generate"],
    ["cargo", "hakari", "manage-deps", "--yes"],
    ["addlicense", "-s", "-l", "mpl", "-ignore", "**/*.*/**/*", "."],
    _GENERATE_COMMAND,
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its required subcommand."""
    parser = argparse.ArgumentParser(
        prog="forja", description="Management tool for the build system of the monorepo."
    )
    subcommands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    subcommands.add_parser("todo", help="Print the current tasks to do")
    subcommands.add_parser("check", help="Check the quality of the code")
    subcommands.add_parser("fix", help="Try to fix issues in the code")
    subcommands.add_parser("gen", help="Regenerate all machine made files")
    return parser


def _todo(root: Path) -> None:
    print_tasks(root)


def _generate(root: Path) -> None:
    logger.info("Generating machine provided files...")
    subprocess.run(_GENERATE_COMMAND, cwd=root, check=True)


def _check(root: Path) -> None:
    logger.info("Checking with the Nix build system")
    flake_command = ["nix", "flake", "check", "--log-format", "internal-json", str(root)]
    with subprocess.Popen(
        flake_command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
    ) as producer:
        subprocess.run(["nom", "--json"], stdin=producer.stdout, check=True)
    if producer.returncode:
        raise subprocess.CalledProcessError(producer.returncode, flake_command)


def _fix(root: Path) -> None:
    logger.info("Trying to fix as many files as possible")
    for command in _FIX_COMMANDS:
        subprocess.run(command, cwd=root, check=True)


_COMMANDS = {"todo": _todo, "gen": _generate, "check": _check, "fix": _fix}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the tool; returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        _COMMANDS[args.command](get_root_path())
    except (OSError, ValueError, subprocess.CalledProcessError) as error:
        logger.error("%s", error)
        return 1
    return 0