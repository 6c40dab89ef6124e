"""modgraph: module-level import/export graphs for JavaScript and TypeScript."""

__version__ = "0.1.0"
