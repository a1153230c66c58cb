"""
Configuration for InkReflect.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "INKREFLECT_"


class LLMConfig(BaseModel):
    """Text generation provider configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str | None = None  # provider default when unset
    api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout: float = 120.0


class TokenizerConfig(BaseModel):
    """Token estimation configuration."""

    provider: str = "approximate"  # approximate, tiktoken
    model: str = "cl100k_base"  # tiktoken encoding name
    chars_per_token: float = Field(default=3.6, gt=0.0)


class ReflectionConfig(BaseModel):
    """Reflection pipeline configuration."""

    min_entries: int = Field(default=1, ge=1)
    sampling_threshold: int = Field(default=50, ge=1)
    sample_target: int = Field(default=40, ge=1)
    max_tokens_per_entry: int = Field(default=400, ge=1)
    operation: str = "weekly_monthly_summary"
    strategy_label: str = "Chunked Processing"


class CacheConfig(BaseModel):
    """Reflection cache configuration."""

    backend: str = "sqlite"  # sqlite, memory
    db_path: str = "data/inkreflect.db"
    storage_key: str = "reflection_cache_v1"
    ttl_hours: float = Field(default=24.0, gt=0.0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    reflection: ReflectionConfig = Field(default_factory=ReflectionConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            INKREFLECT_LLM_PROVIDER: Text generation provider (ollama, openai)
            INKREFLECT_LLM_MODEL: Model name
            INKREFLECT_LLM_BASE_URL: Provider base URL
            INKREFLECT_LLM_API_KEY: API key (for OpenAI)
            INKREFLECT_LLM_TEMPERATURE / INKREFLECT_LLM_MAX_TOKENS / INKREFLECT_LLM_TIMEOUT
            INKREFLECT_TOKENIZER_PROVIDER: approximate or tiktoken
            INKREFLECT_TOKENIZER_CHARS_PER_TOKEN: Characters per estimated token
            INKREFLECT_SAMPLING_THRESHOLD / INKREFLECT_SAMPLE_TARGET
            INKREFLECT_MAX_TOKENS_PER_ENTRY: Per-entry truncation cap
            INKREFLECT_CACHE_BACKEND: sqlite or memory
            INKREFLECT_CACHE_DB_PATH: SQLite file for the persistent cache tier
            INKREFLECT_CACHE_TTL_HOURS: Cache lifetime in hours
            INKREFLECT_LOG_LEVEL / INKREFLECT_LOG_TO_FILE / INKREFLECT_LOG_DIR
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get prefixed environment variable with type conversion."""
            value = os.getenv(f"{ENV_PREFIX}{key}")
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        llm = LLMConfig()
        tokenizer = TokenizerConfig()
        reflection = ReflectionConfig()
        cache = CacheConfig()
        logging = LoggingConfig()

        return cls(
            llm=LLMConfig(
                provider=get_env("LLM_PROVIDER", llm.provider),
                model=get_env("LLM_MODEL", llm.model),
                base_url=get_env("LLM_BASE_URL"),
                api_key=get_env("LLM_API_KEY"),
                temperature=get_env("LLM_TEMPERATURE", llm.temperature),
                max_tokens=get_env("LLM_MAX_TOKENS", llm.max_tokens),
                timeout=get_env("LLM_TIMEOUT", llm.timeout),
            ),
            tokenizer=TokenizerConfig(
                provider=get_env("TOKENIZER_PROVIDER", tokenizer.provider),
                model=get_env("TOKENIZER_MODEL", tokenizer.model),
                chars_per_token=get_env("TOKENIZER_CHARS_PER_TOKEN", tokenizer.chars_per_token),
            ),
            reflection=ReflectionConfig(
                min_entries=get_env("MIN_ENTRIES", reflection.min_entries),
                sampling_threshold=get_env("SAMPLING_THRESHOLD", reflection.sampling_threshold),
                sample_target=get_env("SAMPLE_TARGET", reflection.sample_target),
                max_tokens_per_entry=get_env(
                    "MAX_TOKENS_PER_ENTRY", reflection.max_tokens_per_entry
                ),
                operation=get_env("OPERATION", reflection.operation),
            ),
            cache=CacheConfig(
                backend=get_env("CACHE_BACKEND", cache.backend),
                db_path=get_env("CACHE_DB_PATH", cache.db_path),
                storage_key=get_env("CACHE_STORAGE_KEY", cache.storage_key),
                ttl_hours=get_env("CACHE_TTL_HOURS", cache.ttl_hours),
            ),
            logging=LoggingConfig(
                level=get_env("LOG_LEVEL", logging.level),
                log_to_file=get_env("LOG_TO_FILE", logging.log_to_file),
                log_dir=get_env("LOG_DIR", logging.log_dir),
                file_rotation=get_env("LOG_FILE_ROTATION", logging.file_rotation),
                file_retention=get_env("LOG_FILE_RETENTION", logging.file_retention),
                compression=get_env("LOG_COMPRESSION", logging.compression),
                serialize=get_env("LOG_SERIALIZE", logging.serialize),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        A section is taken from the environment only when it differs from the
        defaults, so YAML values survive for sections the environment leaves alone.
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)
        default = cls()

        final_dict = {**config_dict}
        for section in ("llm", "tokenizer", "reflection", "cache", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
