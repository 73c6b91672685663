"""A searchable CI/CD and Kubernetes reference guide.

This package loads the guide content from YAML, drives the documentation
viewer (load phase, sidebar search, navigation, copy acknowledgements) on an
``asyncio`` loop, and renders the page with Jinja2 templates.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from cicd_guide import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
