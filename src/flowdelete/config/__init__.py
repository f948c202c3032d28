"""Application configuration helpers."""

from __future__ import annotations

from .env import env_seconds, optional_env_var
from .errors import ConfigurationError, InvalidConfigurationError
from .logging import configure_logging
from .project import ProjectConfig, get_project_config
from .salesforce import SalesforceCliConfig, get_salesforce_cli_config

__all__ = [
    "ConfigurationError",
    "InvalidConfigurationError",
    "ProjectConfig",
    "SalesforceCliConfig",
    "configure_logging",
    "env_seconds",
    "get_project_config",
    "get_salesforce_cli_config",
    "optional_env_var",
]
