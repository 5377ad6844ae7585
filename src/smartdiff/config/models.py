"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SMARTDIFF__SECTION__KEY)
3. Repo YAML (.smartdiff/config.yaml)
4. Global YAML (~/.config/smartdiff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SMARTDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    SMARTDIFF__LOGGING__LEVEL=DEBUG
    SMARTDIFF__GITHUB__TIMEOUT_SEC=30
    SMARTDIFF__GITHUB__MAX_FILES=500
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from smartdiff.config.constants import DEFAULT_EXTENSIONS, MAX_FILES_LIMIT, PER_PAGE_MAX

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SMARTDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Results go to stdout, logs to stderr.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GitHubConfig(BaseModel):
    """GitHub API access.

    Env vars:
        SMARTDIFF__GITHUB__TOKEN: API token (GITHUB_TOKEN is used when unset)
        SMARTDIFF__GITHUB__TIMEOUT_SEC: Per-request timeout
        SMARTDIFF__GITHUB__MAX_FILES: Refuse pull requests touching more files
        SMARTDIFF__GITHUB__MAX_FILE_BYTES: Skip parsing files larger than this
    """

    api_url: str = Field(
        default="https://api.github.com",
        description="API root. Point at /api/v3 for GitHub Enterprise.",
    )
    token: str | None = Field(
        default=None,
        description="Personal access token. Anonymous access is heavily rate limited.",
    )
    timeout_sec: float = Field(
        default=12.0,
        description="Per-request timeout. "
        "RISK: Too low fails on large pull requests; too high hangs the CLI.",
    )
    max_files: int = Field(
        default=200,
        description="Pull requests touching more files than this are refused.",
    )
    max_file_bytes: int = Field(
        default=300_000,
        description="Files larger than this are not fetched for parsing.",
    )
    per_page: int = Field(
        default=100,
        description="Page size for paginated listings.",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API URL must be http(s): {v}")
        return v.rstrip("/")

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("max_files")
    @classmethod
    def validate_max_files(cls, v: int) -> int:
        if not (1 <= v <= MAX_FILES_LIMIT):
            raise ValueError(f"max_files must be 1-{MAX_FILES_LIMIT}, got {v}")
        return v

    @field_validator("per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        if not (1 <= v <= PER_PAGE_MAX):
            raise ValueError(f"per_page must be 1-{PER_PAGE_MAX}, got {v}")
        return v


class AnalysisConfig(BaseModel):
    """What gets handed to the block extractor.

    Env vars:
        SMARTDIFF__ANALYSIS__EXTENSIONS: JSON list of file suffixes
    """

    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File suffixes analyzed structurally. Other files only "
        "appear in the standard diff.",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"Extension must start with '.': {ext}")
        return v


class SmartDiffConfig(BaseModel):
    """Root configuration for smartdiff.

    All settings can be configured via:
    1. Environment variables: SMARTDIFF__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
