"""
Configuration management for Crypto News Feed.

Uses Pydantic for validation and pydantic-settings for environment variable support.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crypto_news_feed.models.feed import FeedDescriptor


# Built-in feed registry
DEFAULT_FEEDS: tuple[FeedDescriptor, ...] = (
    FeedDescriptor(name="CoinDesk", url="https://www.coindesk.com/arc/outboundfeeds/rss/", color="#F7931A"),
    FeedDescriptor(name="Cointelegraph", url="https://cointelegraph.com/rss", color="#00D4AA"),
    FeedDescriptor(name="CryptoSlate", url="https://cryptoslate.com/feed/", color="#6B46C1"),
    FeedDescriptor(name="Bitcoin.com", url="https://news.bitcoin.com/feed/", color="#4CAF50"),
    FeedDescriptor(name="NewsBTC", url="https://www.newsbtc.com/feed/", color="#FF9800"),
    FeedDescriptor(name="CryptoPotato", url="https://cryptopotato.com/feed/", color="#E91E63"),
    FeedDescriptor(name="U.Today", url="https://u.today/rss", color="#2196F3"),
)


class FetcherConfig(BaseSettings):
    """Feed fetcher configuration."""

    model_config = SettingsConfigDict(env_prefix="FETCHER_")

    # CORS relay; the feed URL is passed as the ``url`` query parameter
    relay_url: str = Field(
        default="https://api.allorigins.win/raw",
        description="Relay endpoint (empty string fetches feeds directly)"
    )

    # HTTP settings
    timeout_seconds: int = Field(default=30, ge=1, le=300, description="Request timeout")
    user_agent: str = Field(
        default="Crypto-News-Feed/0.1.0",
        description="User-Agent header"
    )
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=5, ge=0, le=20)


class ParserConfig(BaseSettings):
    """Item parser configuration."""

    model_config = SettingsConfigDict(env_prefix="PARSER_")

    max_items_per_feed: int = Field(default=20, ge=1, le=1000, description="Items kept per feed")
    description_max_length: int = Field(
        default=200, ge=1, description="Description length before truncation"
    )
    ellipsis: str = Field(default="...", description="Marker appended to truncated text")
    id_length: int = Field(default=20, ge=1, le=256, description="Article id length")


class SchedulerConfig(BaseSettings):
    """Refresh scheduler configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    enabled: bool = Field(default=True, description="Enable periodic refresh")
    timezone: str = Field(default="UTC", description="Scheduler timezone")
    refresh_interval_seconds: int = Field(default=300, ge=1, description="Refresh interval")
    notification_seconds: float = Field(
        default=3.0, gt=0, description="How long the new-article notification stays up"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        description="Log format"
    )

    # File logging
    file_enabled: bool = Field(default=True, description="Enable file logging")
    file_path: str = Field(default="logs/crypto_news_feed.log", description="Log file path")
    rotation: str = Field(default="10 MB", description="Log rotation size")
    retention: str = Field(default="7 days", description="Log retention period")

    # Console logging
    console_enabled: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v

    @field_validator("file_path")
    @classmethod
    def ensure_directory_exists(cls, v: str) -> str:
        """Ensure the log directory exists."""
        Path(v).parent.mkdir(parents=True, exist_ok=True)
        return v


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CRYPTO_NEWS_",
        case_sensitive=False,
    )

    # Application
    version: str = Field(default="0.1.0", description="Application version")
    app_name: str = Field(default="Crypto News Feed", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    # Feed registry
    feeds: list[FeedDescriptor] = Field(
        default_factory=lambda: list(DEFAULT_FEEDS),
        description="Feed sources, fixed for the process lifetime"
    )

    # Sub-configurations
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("feeds")
    @classmethod
    def validate_unique_names(cls, v: list[FeedDescriptor]) -> list[FeedDescriptor]:
        """Reject duplicate feed names."""
        names = [feed.name for feed in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate feed names: {duplicates}")
        return v


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Load configuration from a YAML file.

    Note: Values loaded from YAML take precedence over environment variables.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Config instance loaded from the file.
    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    with yaml_file.open("r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    config_classes = {
        "fetcher": FetcherConfig,
        "parser": ParserConfig,
        "scheduler": SchedulerConfig,
        "logging": LoggingConfig,
    }

    main_config = {}
    for key, value in config_dict.items():
        if key in config_classes:
            # Nested configs are rebuilt so env vars still fill unset fields
            main_config[key] = config_classes[key](**(value or {}))
        else:
            main_config[key] = value

    return Config(**main_config)


def set_config(config: Config) -> Config:
    """Install ``config`` as the global configuration instance."""
    global _config
    _config = config
    return _config


def reload_config() -> Config:
    """Reload configuration from environment and YAML files."""
    global _config
    _config = None

    config_yaml = Path("config/config.yaml")
    if config_yaml.exists():
        _config = load_config_from_yaml(str(config_yaml))
    else:
        _config = Config()

    return _config
