from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import urlparse

from premium_engine.utils.io import s3_download_file, s3_list_keys

logger = logging.getLogger(__name__)

RATE_TABLE_STEMS = ("products", "plans")
# Same preference as utils.io.find_table
TABLE_SUFFIXES = (".csv", ".parquet")


def parse_s3_uri(uri: str) -> tuple[str, str]:
    p = urlparse(uri)
    if p.scheme != "s3" or not p.netloc:
        raise ValueError(f"RATE_TABLE_S3_URI must be s3://bucket/prefix, got: {uri}")
    return p.netloc, p.path.strip("/")


def _has_local_table(local_dir: Path, stem: str) -> bool:
    for suf in TABLE_SUFFIXES:
        lp = local_dir / f"{stem}{suf}"
        if lp.exists() and lp.stat().st_size > 0:
            return True
    return False


def ensure_rate_table_downloaded(
    *,
    rate_table_s3_uri: str,
    local_dir: Path,
    aws_region: Optional[str] = None,
    stems: Iterable[str] = RATE_TABLE_STEMS,
) -> Path:
    """
    Ensure every rate table exists in local_dir as <stem>.csv or <stem>.parquet.
    Missing ones are fetched from <rate_table_s3_uri>/<stem>.csv, or .parquet
    when the prefix has no csv. Returns local_dir.
    """
    bucket, prefix = parse_s3_uri(rate_table_s3_uri)
    local_dir = Path(local_dir)

    missing = [s for s in stems if not _has_local_table(local_dir, s)]
    if not missing:
        return local_dir

    available = set(s3_list_keys(bucket, f"{prefix}/" if prefix else "", region=aws_region))

    for stem in missing:
        for suf in TABLE_SUFFIXES:
            name = f"{stem}{suf}"
            key = f"{prefix}/{name}" if prefix else name
            if key not in available:
                continue
            # drop empty leftovers so find_table does not pick them up
            for leftover in (local_dir / f"{stem}{s}" for s in TABLE_SUFFIXES):
                if leftover.exists() and leftover.stat().st_size == 0:
                    leftover.unlink()
            lp = local_dir / name
            logger.info("Downloading rate table file s3://%s/%s -> %s", bucket, key, lp)
            s3_download_file(bucket, key, lp, region=aws_region)
            break
        else:
            raise FileNotFoundError(
                f"No {stem}.csv or {stem}.parquet found under s3://{bucket}/{prefix}"
            )

    return local_dir
