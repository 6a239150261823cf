"""
docsync package

Mirrors documentation trees from upstream GitHub repositories into local
folders, optionally converting MDX to Markdown.

- `docsync.sync.domain`: models, filtering rules, MDX conversion, config validation
- `docsync.sync.infrastructure`: retrying HTTP fetcher, GitHub contents client, filesystem sink
- `docsync.sync.application.workflows`: the per-source sync workflow
- `docsync.cli`: command line entrypoint
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
