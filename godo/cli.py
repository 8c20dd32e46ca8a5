"""
Command line front end.

    godo [-l LIST] some words   add a todo to LIST (default: Inbox)
    godo ls                     print every todo on the server
    godo fetch URL...           print each URL's body, one after the other
    godo fetchall URL...        fetch all URLs concurrently and summarize
    godo server                 run the server
"""

import argparse
import sys
from typing import List, Optional

import httpx

from godo import __version__
from godo.client import ClientError, TodoClient
from godo.config import get_settings
from godo.fetch import FetchError, fetch, run_fetch_all

COMMANDS = ("ls", "fetch", "fetchall", "server")


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="godo",
        description="Command line todo list client and server rolled together.",
        epilog=f"commands: {', '.join(COMMANDS)}; anything else is added as a todo",
    )
    parser.add_argument(
        "-l", "--list",
        dest="list_name",
        default=settings.default_list,
        help="name of the list to which this item will be added (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("words", nargs=argparse.REMAINDER, help="command and its arguments, or the todo text")
    return parser


def print_response(response: httpx.Response) -> int:
    print(response.text)
    print(f"\nStatus: {response.status_code} {response.reason_phrase}")
    return 1 if response.is_error else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.words:
        parser.error("a command or todo text is required")

    command, rest = args.words[0], args.words[1:]

    if command in ("fetch", "fetchall") and not rest:
        parser.error(f"{command} needs at least one URL")

    try:
        if command == "server":
            from godo.main import run_server
            run_server()
            return 0

        if command == "fetch":
            fetch(rest, sys.stdout.buffer)
            return 0

        if command == "fetchall":
            run_fetch_all(rest, sys.stdout)
            return 0

        with TodoClient() as client:
            if command == "ls":
                return print_response(client.list_todos())
            return print_response(client.add_todo(args.list_name, " ".join(args.words)))

    except (ClientError, FetchError) as e:
        print(f"godo: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
