"""Application configuration helpers."""

from __future__ import annotations

from .cluster import ClusterConfig, get_cluster_config
from .env import env_flag, env_list, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .reconcile import (
    DEFAULT_DECLARATION_ROOT,
    PassConfig,
    get_pass_config,
    get_reconcile_options,
)

__all__ = [
    "DEFAULT_DECLARATION_ROOT",
    "ClusterConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "PassConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "env_flag",
    "env_list",
    "get_cluster_config",
    "get_pass_config",
    "get_reconcile_options",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
