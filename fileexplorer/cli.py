"""Command-line front door for fileexplorer.

Turns CLI options into one ``NavigationRequest``, runs it against an
``Explorer`` built from persisted config, and prints the result as JSON or
HTML.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import config
from .render import render_html
from .types import FaultView, NavigationRequest

EXIT_CONFIGURATION_FAULT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a directory subtree confined to a root and manage favorite files."
    )
    parser.add_argument("root", nargs="?", default=None, help="Root directory. Defaults to config, then cwd.")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--dir", dest="directory", metavar="PATH", help="Directory to list, relative to root.")
    target.add_argument("--file", metavar="PATH", help="File to describe, relative to root.")
    favorite = parser.add_mutually_exclusive_group()
    favorite.add_argument("--favadd", metavar="PATH", help="Add a file to favorites.")
    favorite.add_argument("--favrem", metavar="PATH", help="Remove a path from favorites.")
    parser.add_argument("--document-root", default=None, help="Directory direct URLs are computed against.")
    parser.add_argument("--favorites", metavar="FILE", default=None, help="Favorites sidecar file.")
    parser.add_argument("--no-favorites", action="store_true", help="Disable favorites handling.")
    parser.add_argument("--show-hidden", action="store_true", help="List dot-files too.")
    parser.add_argument("--format", choices=("json", "html"), default="json", help="Output format.")
    parser.add_argument("--base-link", default="", help="Link prefix for HTML navigation links.")
    parser.add_argument("--style", default=None, help="Pygments style name for markup files.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")
    return parser


def main(default_root: Path | None = None) -> None:
    """Parse CLI arguments and run one navigation request.

    ``default_root`` is primarily for tests; when omitted and neither the
    positional root nor config provide one, the current working directory is
    used. Exits with status 2 on document-root/root configuration faults.
    """
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    root = args.root or config.load_root() or str(default_root or Path.cwd())
    explorer = config.explorer_from_config(
        root=root,
        document_root=args.document_root,
        favorites_path=args.favorites,
        use_favorites=False if args.no_favorites else None,
        show_hidden=True if args.show_hidden else None,
        style=args.style,
    )
    request = NavigationRequest(
        directory=args.directory,
        file=args.file,
        add_favorite=args.favadd,
        remove_favorite=args.favrem,
    )
    result = explorer.explore(request)

    if args.format == "html":
        sys.stdout.write(render_html(result, args.base_link) + "\n")
    else:
        sys.stdout.write(json.dumps(result.to_dict(), indent=2) + "\n")

    if isinstance(result, FaultView):
        raise SystemExit(EXIT_CONFIGURATION_FAULT)


if __name__ == "__main__":
    main()
