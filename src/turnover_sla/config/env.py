# src/turnover_sla/config/env.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from turnover_sla.models import EnvCfg

try:
    from dotenv import dotenv_values, find_dotenv, load_dotenv  # type: ignore
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "Missing dependency 'python-dotenv'. Install it with:\n"
        "  pip install python-dotenv"
    ) from e


class EnvError(RuntimeError):
    """A strict lookup found required CLI defaults unset."""


# CLI defaults; a run works without any of them.
APP_KEYS: Tuple[str, ...] = (
    "TURNOVER_SLA_CONFIG",   # run-config JSON (mapping/rules/filters)
    "TURNOVER_SLA_SHEET",    # sheet name or 0-based index
)


def env(name: str, *, default: Optional[str] = None, required: bool = False, cast=None):
    """os.getenv with `required` (KeyError) and an optional `cast`."""
    raw = os.getenv(name)
    if raw is None:
        if required:
            raise KeyError(name)
        return default
    return cast(raw) if cast is not None else raw


def _resolve_dotenv(dotenv_path: Optional[Path]) -> Optional[Path]:
    if dotenv_path:
        return Path(dotenv_path)
    found = find_dotenv(filename=".env", usecwd=True)
    return Path(found) if found else None


def load_env(
    dotenv_path: Optional[Path] = None,
    *,
    override: bool = False,
    required_keys: Tuple[str, ...] = (),
    strict: bool = False,
) -> Dict[str, str]:
    """
    Push a .env file into os.environ and return its key/values.

    Without `dotenv_path` the file is searched upward from the CWD; a missing
    file is not an error. With `strict=True`, `required_keys` absent from the
    final environment raise EnvError.
    """
    path = _resolve_dotenv(dotenv_path)
    values: Dict[str, str] = {}
    if path is not None and path.is_file():
        load_dotenv(dotenv_path=path, override=override)
        values = {k: v for k, v in dotenv_values(path).items() if v is not None}

    if strict:
        missing = [k for k in required_keys if not os.getenv(k)]
        if missing:
            raise EnvError(
                f"Missing required environment variable(s): {', '.join(missing)}")
    return values


def get_app_env(dotenv_path: Path | str | None = ".env", *, strict: bool = False) -> EnvCfg:
    """CLI defaults from the process env, then `.env`. Blank values read as unset."""
    load_env(
        Path(dotenv_path) if dotenv_path else None,
        required_keys=APP_KEYS,
        strict=strict,
    )
    return EnvCfg(**{k: env(k) or None for k in APP_KEYS})


__all__ = [
    "EnvError",
    "APP_KEYS",
    "load_env",
    "env",
    "get_app_env",
]
