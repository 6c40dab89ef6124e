"""Graph command: build import/export graphs for a file or directory and print JSON."""

from __future__ import annotations

import json
import sys
import time
from argparse import Namespace
from pathlib import Path

from modgraph.config import find_project_root, get_project_root, load_config
from modgraph.walker import walk


def run(args: Namespace) -> None:
    """Run the graph command."""
    path = Path(getattr(args, "path", Path("."))).resolve()
    jobs = getattr(args, "jobs", None)
    keep_going = getattr(args, "keep_going", False)
    compact = getattr(args, "compact", False)

    if not path.exists():
        print(f"Error: path does not exist: {path.as_posix()}", file=sys.stderr)
        sys.exit(1)
    if jobs is not None and jobs < 1:
        print("Error: --jobs must be at least 1.", file=sys.stderr)
        sys.exit(1)

    config = load_config(find_project_root(path) or get_project_root(path))

    start = time.perf_counter()
    result = walk(path, config=config, jobs=jobs)
    elapsed = time.perf_counter() - start

    json.dump(result.to_dict(), sys.stdout, indent=None if compact else 2)
    sys.stdout.write("\n")

    total = len(result.graphs) + len(result.errors)
    if total == 0:
        print("No JavaScript or TypeScript files found.", file=sys.stderr)
        return
    print(
        f"Built {len(result.graphs)} graph(s) from {total} file(s) in {elapsed:.1f}s.",
        file=sys.stderr,
    )
    if result.errors:
        print(f"  ({len(result.errors)} file(s) failed)", file=sys.stderr)
        for rel, message in result.errors.items():
            print(f"  {rel}: {message}", file=sys.stderr)
        if not keep_going:
            sys.exit(1)
