"""Utility modules for the projector mapping tool."""

from projector_mapping.utils.logging_utils import setup_logging

__all__ = [
    "setup_logging",
]
