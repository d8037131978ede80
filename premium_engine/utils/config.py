# premium_engine/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


def env_flag(key: str, default: bool = False) -> bool:
    v = _env(key)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    data_dir: Path
    rate_table_dir: Path


def get_project_root() -> Path:
    """
    Resolve repo root robustly.
    Assumes this file lives at: <root>/premium_engine/utils/config.py
    """
    return Path(__file__).resolve().parents[2]


def get_paths() -> ProjectPaths:
    root = get_project_root()
    data_dir = root / "data"
    rate_table_dir = Path(_env("RATE_TABLE_DIR", str(data_dir / "rate_table")) or data_dir / "rate_table")
    return ProjectPaths(
        root=root,
        data_dir=data_dir,
        rate_table_dir=rate_table_dir,
    )


@dataclass(frozen=True)
class AwsConfig:
    region: Optional[str]
    rate_table_s3_uri: Optional[str]

    @property
    def enabled(self) -> bool:
        return self.rate_table_s3_uri is not None


def get_aws_config() -> AwsConfig:
    """
    Configure S3 usage via environment variables.
    Keep it optional so local runs are frictionless.

    Env:
      AWS_REGION / AWS_DEFAULT_REGION (optional)
      RATE_TABLE_S3_URI (optional, e.g. s3://bucket/rate_table)
    """
    return AwsConfig(
        region=_env("AWS_REGION") or _env("AWS_DEFAULT_REGION"),
        rate_table_s3_uri=_env("RATE_TABLE_S3_URI", None),
    )


def get_log_level() -> str:
    return (_env("LOG_LEVEL", "INFO") or "INFO").upper()
