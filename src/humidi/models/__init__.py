"""Pydantic models for humidi."""

from .config import DEFAULT_CONFIG_PATH, HuMidiConfig

__all__ = ["DEFAULT_CONFIG_PATH", "HuMidiConfig"]
