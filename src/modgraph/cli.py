"""CLI entry point: argument parsing and subcommand dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from modgraph import __version__
from modgraph.config import load_config, resolve_path


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the modgraph logger: level from --verbose/--quiet or config, console handler,
    optional file handler from config.
    """
    config = load_config(None)
    log_cfg = config.get("logging") or {}
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"
    else:
        level_name = (log_cfg.get("level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("modgraph")
    root.setLevel(level)
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(fmt)
        root.addHandler(console)
        log_file = log_cfg.get("file")
        if log_file:
            try:
                fh = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
                fh.setFormatter(fmt)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Cannot open log file %s: %s", log_file, e)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modgraph",
        description="Extract module-level import/export graphs from JavaScript and TypeScript files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    # Same flags on subparsers so "modgraph graph . -v" works
    global_flags = argparse.ArgumentParser(add_help=False)
    log_grp = global_flags.add_mutually_exclusive_group()
    log_grp.add_argument("-v", "--verbose", action="store_true", help=argparse.SUPPRESS)
    log_grp.add_argument("-q", "--quiet", action="store_true", help=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    # graph
    p_graph = subparsers.add_parser(
        "graph",
        help="Build import/export graphs for a file or directory and print them as JSON.",
        parents=[global_flags],
    )
    p_graph.add_argument("path", type=Path, nargs="?", default=Path("."), help="File or directory (default: .).")
    p_graph.add_argument("--jobs", "-j", type=int, help="Files to process in parallel (default: walker.jobs from config).")
    p_graph.add_argument(
        "--keep-going",
        action="store_true",
        help="Exit 0 even when some files failed (errors are still reported).",
    )
    p_graph.add_argument("--compact", action="store_true", help="Print JSON on one line.")
    p_graph.set_defaults(run="graph")

    # resolve
    p_resolve = subparsers.add_parser(
        "resolve",
        help="Resolve a single module specifier and print it as JSON.",
        parents=[global_flags],
    )
    p_resolve.add_argument("specifier", help='Specifier as written (e.g. "./util", "copy:./x", "lodash").')
    p_resolve.add_argument(
        "--from",
        dest="from_dir",
        type=Path,
        default=Path("."),
        help="Directory of the importing file (default: .).",
    )
    p_resolve.set_defaults(run="resolve")

    # config
    p_config = subparsers.add_parser("config", help="Show configuration.", parents=[global_flags])
    p_config.add_argument("path", type=Path, nargs="?", default=Path("."), help="Project path for project-local config (default: .).")
    p_config.add_argument("--show", action="store_true", help="Display current settings.")
    p_config.set_defaults(run="config")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=getattr(args, "verbose", False),
        quiet=getattr(args, "quiet", False),
    )
    run = getattr(args, "run", None)
    if not run:
        parser.print_help()
        sys.exit(0)

    if hasattr(args, "path"):
        args.path = resolve_path(args.path)
    if hasattr(args, "from_dir"):
        args.from_dir = resolve_path(args.from_dir)

    if run == "graph":
        from modgraph.commands.graph_cmd import run as cmd_run
    elif run == "resolve":
        from modgraph.commands.resolve_cmd import run as cmd_run
    elif run == "config":
        from modgraph.commands.config_cmd import run as cmd_run
    else:
        parser.print_help()
        sys.exit(0)

    cmd_run(args)


if __name__ == "__main__":
    main()
