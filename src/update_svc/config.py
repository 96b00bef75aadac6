"""Configuration for the extension update service."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8192
    reload: bool = False


@dataclass
class CatalogConfig:
    """Catalog configuration."""
    # Path to catalog definition file (YAML or JSON)
    definition_file: str | None = None

    # Storage prefix for entries that don't set download_base
    download_root: str = "https://s3.amazonaws.com/brave-extensions/release"


@dataclass
class UpstreamConfig:
    """Where to send clients asking about extensions we don't serve."""
    # Batch requests naming a single unknown extension
    component_update_url: str = "https://update.googleapis.com/service/update2?braveRedirect=true"

    # Webstore requests for unknown extensions; the client's query is appended
    webstore_update_url: str = "https://clients2.google.com/service/update2/crx"


@dataclass
class LoggingConfig:
    """Process logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Config:
    """Main configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            catalog=CatalogConfig(**data.get("catalog", {})),
            upstream=UpstreamConfig(**data.get("upstream", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str) -> Config:
        """Load config from a YAML or JSON file, chosen by extension."""
        if path.endswith((".yaml", ".yml")):
            return cls.from_yaml(path)
        return cls.from_json(path)
