"""Kafka sink streaming ledger and audit events."""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from microlend.config import KafkaConfig
from microlend.exceptions import SinkError
from microlend.models import Event
from microlend.sinks.base import EventSink
from microlend.store.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    topic_prefix: str = "dev.microlend"
    acks: str = "all"  # "0", "1", "all"
    batch_size: int = 16384  # bytes
    linger_ms: int = 5  # ms to wait for batching
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3

    @classmethod
    def from_kafka_config(cls, config: KafkaConfig) -> "ProducerConfig":
        """Build from application settings, read through their client config dict."""
        settings = config.to_dict()
        return cls(
            bootstrap_servers=settings["bootstrap.servers"],
            topic_prefix=config.topic_prefix,
            acks=settings["acks"],
            linger_ms=settings["linger.ms"],
            compression=settings["compression.type"],
            retries=settings["retries"],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "retries": self.retries,
            "linger.ms": self.linger_ms,
            "batch.size": self.batch_size,
            "compression.type": self.compression,
        }


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0

    @property
    def pending(self) -> int:
        return self.sent - self.delivered - self.failed


class KafkaEventSink(EventSink):
    """Publish book events to one topic per collection.

    ``ledger.collection`` goes to ``<prefix>.ledger``, ``audit.create`` to
    ``<prefix>.audit``. Messages are keyed by the event subject (loan id
    or actor) so one loan's entries stay ordered on one partition.
    """

    def __init__(self, config: ProducerConfig | KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | KafkaConfig | str
            Producer configuration, application Kafka settings, or a
            bootstrap servers string.
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)
        elif isinstance(config, KafkaConfig):
            config = ProducerConfig.from_kafka_config(config)

        self.config = config
        self.producer = self._create_producer()
        self.stats = ProducerStats(start_time=time.time())

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(self.config.to_dict())

    def topic_for(self, event: Event) -> str:
        collection = event.event_type.split(".", 1)[0]
        return f"{self.config.topic_prefix}.{collection}"

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def publish(self, event: Event) -> None:
        topic = self.topic_for(event)
        value = json.dumps(to_dict(event), ensure_ascii=False).encode("utf-8")
        try:
            self.producer.produce(
                topic=topic,
                key=event.subject.encode("utf-8") if event.subject else None,
                value=value,
                headers={"event_type": event.event_type},
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Failed to publish {event.event_type} to {topic}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def flush(self, timeout: float = 30.0) -> int:
        """Flush pending messages; returns how many are still queued."""
        return self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        remaining = self.flush()
        if remaining:
            logger.warning("Kafka sink closed with %d undelivered messages", remaining)
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
