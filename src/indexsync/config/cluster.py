"""Search cluster connection settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, optional_env_var, require_env_var
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig

CLUSTER_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ClusterConfig:
    """Holds the cluster endpoint and the HTTP behaviour used to reach it."""

    url: str
    resilience: ResilienceConfig
    legacy_templates: bool = False


def get_cluster_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> ClusterConfig:
    url = require_env_var("INDEXSYNC_CLUSTER_URL").strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"INDEXSYNC_CLUSTER_URL must be an http(s) URL: {url!r}")

    username = optional_env_var("INDEXSYNC_USERNAME")
    password = optional_env_var("INDEXSYNC_PASSWORD")
    api_key = optional_env_var("INDEXSYNC_API_KEY")
    if (username is None) != (password is None):
        raise ConfigurationError("INDEXSYNC_USERNAME and INDEXSYNC_PASSWORD must be set together")
    if api_key is not None and username is not None:
        raise ConfigurationError("Use either an API key or basic auth, not both")

    headers = {"Authorization": f"ApiKey {api_key}"} if api_key is not None else None
    basic_auth = (username, password) if username is not None and password is not None else None

    return ClusterConfig(
        url=url,
        legacy_templates=env_flag("INDEXSYNC_LEGACY_TEMPLATES"),
        resilience=resilience
        or ResilienceConfig(
            name="cluster",
            base_url=url,
            timeout_seconds=CLUSTER_TIMEOUT_SECONDS,
            verify_tls=env_flag("INDEXSYNC_VERIFY_TLS", default=True),
            basic_auth=basic_auth,
            default_headers=headers,
        ),
    )
