"""CLI entry point: argument parsing, logging setup and exit codes.

Subcommands:
    pomcli add [-f pom.xml] [--test] group:artifact[:version] ...   # add dependencies
    pomcli search group:artifact                                    # show latest versions
"""

import argparse
import logging
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

import httpx

from .add_command import add_dependencies
from .coordinates import parse_dependency, parse_query
from .exceptions import InvalidFormatError, PomCliError, UnresolvableCoordinateError
from .pom_models import Scope
from .search import SearchRequest, SolrSearch

logger = logging.getLogger(__name__)

# Scope flags of the add command, in the order they are listed in --help.
SCOPE_FLAGS = [
    (Scope.COMPILE, "Add as compile dependency. This is the default"),
    (Scope.RUNTIME, "Add as runtime dependency"),
    (Scope.PROVIDED, "Add as provided dependency"),
    (Scope.TEST, "Add as test dependency"),
    (Scope.IMPORT, "Add as import dependency"),
]


def _dependency_arg(token: str):
    """argparse ``type=`` converter for DEPENDENCY arguments."""
    try:
        return parse_dependency(token)
    except (InvalidFormatError, UnresolvableCoordinateError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _query_arg(token: str):
    try:
        return parse_query(token)
    except InvalidFormatError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pomcli", description="Edit Maven pom.xml files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add dependencies to a pom.xml")
    add.add_argument("--file", "-f", type=Path, default=Path("pom.xml"), help="POM to edit (default: pom.xml)")
    scopes = add.add_mutually_exclusive_group()
    for scope, help_text in SCOPE_FLAGS:
        scopes.add_argument(
            f"--{scope.value}", dest="scope", action="store_const", const=scope, help=help_text
        )
    add.add_argument(
        "dependencies", nargs="+", type=_dependency_arg, metavar="DEPENDENCY",
        help="groupId:artifactId[:version] or path to either a directory, pom.xml, or a jar file",
    )

    search = subparsers.add_parser("search", help="Search Maven Central for an artifact")
    search.add_argument("query", type=_query_arg, metavar="QUERY", help="[groupId:]artifactId[:version]")
    search.add_argument("--rows", "-n", type=int, default=20, help="Maximum number of results (default: 20)")
    return parser


def _run_add(args) -> None:
    add_dependencies(args.file, args.dependencies, args.scope)


def _run_search(args) -> None:
    with SolrSearch() as client:
        docs = client.search(SearchRequest(q=str(args.query), rows=args.rows))
    if not docs:
        logger.warning("No artifacts found for %s", args.query)
    for doc in docs:
        print(f"{doc.group_id}:{doc.artifact_id}:{doc.latest_version}")


def main(argv: Optional[list] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        if args.command == "add":
            _run_add(args)
        else:
            _run_search(args)
    except (PomCliError, OSError, ET.ParseError, httpx.HTTPError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
