"""Runtime settings loaded from environment variables and CLI flags."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class DebugInfoSettings(BaseSettings):
    """Configuration for azure-debug-info.

    Values are read from environment variables (case-insensitive) and
    optionally from a ``.env`` file in the working directory.  Keyword
    arguments passed to the constructor take precedence, which is how CLI
    flags override the environment.
    """

    azure_environment: str = "AzurePublicCloud"
    azure_imds_probe: bool = True

    verbose: bool = False
    debug: bool = False
    log_json: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("azure_environment")
    @classmethod
    def _strip_environment(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("AZURE_ENVIRONMENT must not be empty")
        return value


def load_settings(**overrides: object) -> DebugInfoSettings:
    """Build settings from the environment, applying non-``None`` *overrides*."""
    values = {k: v for k, v in overrides.items() if v is not None}
    return DebugInfoSettings(**values)  # type: ignore[arg-type]
