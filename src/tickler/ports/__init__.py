"""Ports - interfaces/protocols for external dependencies."""

from .event_source import EventSource
from .ack_store import AcknowledgementStore

__all__ = [
    "EventSource",
    "AcknowledgementStore",
]
