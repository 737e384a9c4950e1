"""Reconciliation pass configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from indexsync.domain.reconciliation.contracts import ReconcileOptions

from .env import env_flag, env_list, optional_env_var
from .errors import ConfigurationError

DEFAULT_DECLARATION_ROOT: Final[str] = "es"


@dataclass(frozen=True, slots=True)
class PassConfig:
    """Where declarations live and how a full pass treats them."""

    root: Path
    options: ReconcileOptions
    fail_fast: bool = True


def get_reconcile_options() -> ReconcileOptions:
    try:
        return ReconcileOptions(
            force=env_flag("INDEXSYNC_FORCE"),
            relevant_settings=env_list("INDEXSYNC_RELEVANT_SETTINGS"),
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def get_pass_config() -> PassConfig:
    root = optional_env_var("INDEXSYNC_ROOT") or DEFAULT_DECLARATION_ROOT
    return PassConfig(
        root=Path(root).expanduser(),
        options=get_reconcile_options(),
        fail_fast=not env_flag("INDEXSYNC_KEEP_GOING"),
    )
