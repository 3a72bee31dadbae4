"""Adapters for external collaborators."""

from projector_mapping.adapters.fakes import FakeGalvoDevice, FakeSlmDevice

__all__ = [
    "FakeGalvoDevice",
    "FakeSlmDevice",
]
