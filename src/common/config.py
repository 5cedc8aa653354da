"""Configuration loader for the news analysis pipeline."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml
from dotenv import load_dotenv

load_dotenv()

T = TypeVar("T")

CONFIG_DIR = Path(os.environ.get("CONFIG_DIR", Path(__file__).resolve().parent.parent.parent / "configs"))


@dataclass
class ExtractionConfig:
    api_url: str = "https://api.diffbot.com/v3/article"
    token: str | None = None
    timeout: int = 30
    min_interval_seconds: float = 13.0
    rate_limit_cooldown_seconds: float = 60.0
    rate_limit_key: str = "diffbot"


@dataclass
class AnalysisConfig:
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    timeout: float = 60.0
    max_tokens: int = 1000


@dataclass
class QuotaConfig:
    enabled: bool = True
    default_limit: int = 5
    retention_days: int = 7


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///news_analysis.db"
    echo: bool = False


@dataclass
class ReportConfig:
    tag_url_template: str = "/tags/{tag_id}"


@dataclass
class PipelineConfig:
    log_level: str = "INFO"
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    quota: QuotaConfig = field(default_factory=QuotaConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> PipelineConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".
        config_dir: Directory holding the YAML files.

    Returns:
        Loaded PipelineConfig object
    """
    path = find_config_path(config_name, config_dir, env_var="CONFIG_ENV")
    return _parse_config(load_yaml(path))


def _parse_config(data: dict) -> PipelineConfig:
    """Parse config dictionary into PipelineConfig, filling secrets from the environment."""
    extraction_data = data.get("extraction") or {}
    extraction = ExtractionConfig(
        api_url=extraction_data.get("api_url", ExtractionConfig.api_url),
        token=extraction_data.get("token") or os.environ.get("DIFFBOT_TOKEN"),
        timeout=extraction_data.get("timeout", 30),
        min_interval_seconds=float(extraction_data.get("min_interval_seconds", 13.0)),
        rate_limit_cooldown_seconds=float(extraction_data.get("rate_limit_cooldown_seconds", 60.0)),
        rate_limit_key=extraction_data.get("rate_limit_key", "diffbot"),
    )

    analysis_data = data.get("analysis") or {}
    analysis = AnalysisConfig(
        model=analysis_data.get("model", "gpt-4o-mini"),
        api_key=analysis_data.get("api_key") or os.environ.get("OPENAI_API_KEY"),
        timeout=float(analysis_data.get("timeout", 60.0)),
        max_tokens=analysis_data.get("max_tokens", 1000),
    )

    quota_data = data.get("quota") or {}
    quota = QuotaConfig(
        enabled=quota_data.get("enabled", True),
        default_limit=quota_data.get("default_limit", 5),
        retention_days=quota_data.get("retention_days", 7),
    )

    database_data = data.get("database") or {}
    database = DatabaseConfig(
        url=os.environ.get("DATABASE_URL") or database_data.get("url", DatabaseConfig.url),
        echo=database_data.get("echo", False),
    )

    report = ReportConfig(
        tag_url_template=(data.get("report") or {}).get("tag_url_template", "/tags/{tag_id}"),
    )

    return PipelineConfig(
        log_level=data.get("log_level") or "INFO",
        extraction=extraction,
        analysis=analysis,
        quota=quota,
        database=database,
        report=report,
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[PipelineConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
