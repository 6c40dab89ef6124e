"""Resolve command: run the specifier resolver once."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from modgraph.analysis import UnresolvedSpecifier
from modgraph.config import find_project_root, get_project_root, load_config, resolver_from_config


def run(args: Namespace) -> None:
    """Print the resolved ModuleSpecifier as JSON; exit 1 if it cannot be resolved."""
    specifier: str = args.specifier
    from_dir = Path(getattr(args, "from_dir", Path("."))).resolve()

    config = load_config(find_project_root(from_dir) or get_project_root(from_dir))
    resolver = resolver_from_config(config)
    try:
        resolved = resolver.resolve(specifier, from_dir)
    except UnresolvedSpecifier as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    json.dump(resolved.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
