"""Show configuration (CLI command)."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from modgraph.config import find_project_root, load_config


def run(args: Namespace) -> None:
    """Run the config command: print merged settings (defaults + global + project)."""
    show = getattr(args, "show", False)
    path = getattr(args, "path", Path("."))

    if not show:
        print("Error: specify --show.", file=sys.stderr)
        sys.exit(1)

    project_root = find_project_root(Path(path).resolve())
    config = load_config(project_root)
    json.dump(config, sys.stdout, indent=2)
    sys.stdout.write("\n")
