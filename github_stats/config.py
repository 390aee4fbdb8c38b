"""Configuration management for GitHub Stats."""

import json
import os
import re
from pathlib import Path
from typing import Any, Literal, Optional

import pytz
from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_OUTPUT_FILE_NAME = "github-stats"
APPSETTINGS_FILE = "appsettings.json"

# Keys used by the appsettings.json "GithubOptions" section, normalized
# (lowercase, no underscores), mapped to Settings field names.
APPSETTINGS_KEYS = {
    "user": "github_user",
    "apikey": "github_api_key",
    "org": "github_org",
    "repo": "github_repo",
    "urlroot": "github_url_root",
    "teamid": "team_id",
    "appname": "app_name",
    "outputfilename": "output_file_name",
}


def _normalize_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


class AppSettingsJsonSource(PydanticBaseSettingsSource):
    """Reads one section of appsettings.json and its per-environment overlay.

    ``appsettings.json`` is read first, then ``appsettings.{Environment}.json``
    where the environment name comes from ``GITHUB_STATS_ENVIRONMENT``
    (default ``Production``). Values in the overlay win. Missing files are
    skipped.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        json_file: str = "appsettings.json",
        section: str = "GithubOptions",
    ):
        super().__init__(settings_cls)
        self.json_file = Path(json_file)
        self.section = section
        self.environment = os.environ.get("GITHUB_STATS_ENVIRONMENT", "Production")
        self._values = self._load()

    def _candidate_files(self) -> list[Path]:
        overlay = self.json_file.with_name(
            f"{self.json_file.stem}.{self.environment}{self.json_file.suffix}"
        )
        return [self.json_file, overlay]

    def _load(self) -> dict[str, Any]:
        field_names = {_normalize_key(name): name for name in self.settings_cls.model_fields}
        values: dict[str, Any] = {}
        for path in self._candidate_files():
            if not path.is_file():
                continue
            data = json.loads(path.read_text(encoding="utf-8"))
            section = data.get(self.section) or {}
            for key, value in section.items():
                normalized = _normalize_key(key)
                field_name = APPSETTINGS_KEYS.get(normalized) or field_names.get(normalized)
                if field_name:
                    values[field_name] = value
        return values

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {key: value for key, value in self._values.items() if value is not None}


class Settings(BaseSettings):
    """Application settings loaded from the environment and appsettings.json."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # GitHub connection
    github_user: str = Field(
        default="",
        description="GitHub login used for the rate limit lookup",
    )
    github_api_key: str = Field(
        default="",
        description="GitHub Personal Access Token",
    )
    github_org: str = Field(
        default="",
        description="Organization that owns the repository and the team",
    )
    github_repo: str = Field(
        default="",
        description="Repository name (without the organization)",
    )
    github_url_root: Optional[str] = Field(
        default=None,
        description="API base URL for GitHub Enterprise (e.g. https://ghe.example.com/api/v3)",
    )

    # Report
    team_id: Optional[int] = Field(
        default=None,
        description="Id of the team whose members are reported on",
        gt=0,
    )
    app_name: str = Field(
        default="github-stats",
        description="User agent sent with every API request",
    )
    output_file_name: Optional[str] = Field(
        default=None,
        description="Base name of the .txt and .csv report files",
    )
    output_dir: str = Field(
        default=".",
        description="Directory the report files are written to",
    )
    timezone: str = Field(
        default="UTC",
        description="Timezone for printed timestamps",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format: 'text' for human-readable, 'json' for structured",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            AppSettingsJsonSource(settings_cls, json_file=APPSETTINGS_FILE),
            file_secret_settings,
        )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a valid IANA timezone name."""
        try:
            pytz.timezone(v)
            return v
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {v}. Must be a valid IANA timezone name.")

    @field_validator("github_org", "github_repo")
    @classmethod
    def validate_name_format(cls, v: str) -> str:
        """Validate organization and repository names."""
        if v and not re.match(r"^[a-zA-Z0-9_.-]+$", v):
            raise ValueError(f"Invalid GitHub name: {v}")
        return v

    @field_validator("github_url_root", "output_file_name")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank optional strings as absent."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def fq_repo(self) -> str:
        """Fully-qualified repository name (org/repo)."""
        return f"{self.github_org}/{self.github_repo}"

    @property
    def report_base_name(self) -> str:
        """Base name for the report files."""
        return self.output_file_name or DEFAULT_OUTPUT_FILE_NAME

    def report_paths(self) -> tuple[Path, Path]:
        """Get the (text, csv) report file paths.

        Returns:
            Tuple of paths for the text summary and the CSV export.
        """
        base = Path(self.output_dir) / self.report_base_name
        return base.with_name(f"{base.name}.txt"), base.with_name(f"{base.name}.csv")


def load_settings() -> Settings:
    """Load and return application settings.

    Returns:
        Settings instance with values from the configured sources.
    """
    return Settings()
