"""Tests for project metadata."""

from __future__ import annotations

from pathlib import Path
import tomllib
import typing

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_python_floor_supports_typing_self():
    """typing.Self を使うため Python 3.11 以上を要求する"""
    with PYPROJECT.open("rb") as f:
        project = tomllib.load(f)["project"]

    assert project["requires-python"] == ">=3.11"
    assert hasattr(typing, "Self")
