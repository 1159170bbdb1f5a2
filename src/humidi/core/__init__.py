"""Core engine: subscriptions, note tracking and the input session."""

from .engine import HuMidi
from .registry import SubscriptionRegistry
from .tracker import NoteTracker

__all__ = ["HuMidi", "NoteTracker", "SubscriptionRegistry"]
