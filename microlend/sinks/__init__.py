"""Event sinks for streaming book changes."""

from microlend.sinks.base import EventSink
from microlend.sinks.kafka import KafkaEventSink

__all__ = ["EventSink", "KafkaEventSink"]
