"""Command-line interface."""

from projector_mapping.cli.arguments import parse_arguments

__all__ = ["parse_arguments"]
