"""Salesforce CLI configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_seconds, optional_env_var
from .errors import InvalidConfigurationError

DEFAULT_SF_EXECUTABLE: Final[str] = "sf"
DEFAULT_QUERY_TIMEOUT_SECONDS: Final[float] = 120.0
DEFAULT_RETRIEVE_TIMEOUT_SECONDS: Final[float] = 300.0


@dataclass(frozen=True, slots=True)
class SalesforceCliConfig:
    """Holds the settings used to invoke the ``sf`` command line."""

    executable: str = DEFAULT_SF_EXECUTABLE
    target_org: str | None = None
    query_timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS
    retrieve_timeout_seconds: float = DEFAULT_RETRIEVE_TIMEOUT_SECONDS

    def target_org_args(self) -> list[str]:
        return ["--target-org", self.target_org] if self.target_org else []


def get_salesforce_cli_config(
    *,
    target_org: str | None = None,
    query_timeout_seconds: float | None = None,
) -> SalesforceCliConfig:
    if query_timeout_seconds is not None and query_timeout_seconds <= 0:
        raise InvalidConfigurationError(
            f"Query timeout must be positive, got {query_timeout_seconds}"
        )
    return SalesforceCliConfig(
        executable=optional_env_var("FLOWDELETE_SF_EXECUTABLE") or DEFAULT_SF_EXECUTABLE,
        target_org=target_org or optional_env_var("FLOWDELETE_TARGET_ORG"),
        query_timeout_seconds=query_timeout_seconds
        or env_seconds("FLOWDELETE_QUERY_TIMEOUT", DEFAULT_QUERY_TIMEOUT_SECONDS),
        retrieve_timeout_seconds=env_seconds(
            "FLOWDELETE_RETRIEVE_TIMEOUT", DEFAULT_RETRIEVE_TIMEOUT_SECONDS
        ),
    )
