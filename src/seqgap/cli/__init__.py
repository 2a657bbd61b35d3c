"""seqgap command-line interface."""

from seqgap.cli.app import app

__all__ = ["app"]
