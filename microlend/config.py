"""Configuration management for microlend."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from microlend.exceptions import ConfigurationError

STORE_BACKENDS = ("memory", "json", "postgres")


@dataclass
class StoreConfig:
    """Which persistence backend the book is opened on."""

    backend: str = "memory"
    json_path: Path = field(default_factory=lambda: Path("data") / "book.json")
    pretty_json: bool = False

    def __post_init__(self) -> None:
        if self.backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.backend!r}, expected one of {STORE_BACKENDS}"
            )


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "microlend"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "documents"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class KafkaConfig:
    """Kafka producer configuration for the ledger event stream."""

    enabled: bool = False
    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.microlend"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class LendingConfig:
    """Business-facing presentation defaults."""

    currency_symbol: str = "₱"
    admin_name: str = "Admin"
    admin_area: str = "HQ"


@dataclass
class MicrolendConfig:
    """Main configuration for microlend."""

    store: StoreConfig = field(default_factory=StoreConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    lending: LendingConfig = field(default_factory=LendingConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "MicrolendConfig":
        """Create config from environment variables."""
        import os

        try:
            port = int(os.getenv("POSTGRES_PORT", "5432"))
        except ValueError as e:
            raise ConfigurationError(f"POSTGRES_PORT must be an integer: {e}") from e

        store = StoreConfig(
            backend=os.getenv("MICROLEND_STORE", "memory"),
            json_path=Path(os.getenv("MICROLEND_JSON_PATH", str(Path("data") / "book.json"))),
            pretty_json=os.getenv("MICROLEND_PRETTY_JSON", "false").lower() == "true",
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=port,
            database=os.getenv("POSTGRES_DB", "microlend"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        kafka = KafkaConfig(
            enabled=os.getenv("KAFKA_ENABLED", "false").lower() == "true",
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.microlend"),
        )

        lending = LendingConfig(
            currency_symbol=os.getenv("MICROLEND_CURRENCY", "₱"),
        )

        return cls(
            store=store,
            postgres=postgres,
            kafka=kafka,
            lending=lending,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
