from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def find_table(directory: Union[str, Path], stem: str) -> Path:
    """
    Locate <stem>.csv or <stem>.parquet inside directory (csv wins if both exist).
    """
    directory = Path(directory)
    for suf in (".csv", ".parquet"):
        candidate = directory / f"{stem}{suf}"
        if candidate.exists():
            return candidate
    raise FileNotFoundError(f"No {stem}.csv or {stem}.parquet found in: {directory}")


def read_df(path: Union[str, Path], **kwargs: Any) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suf = path.suffix.lower()
    if suf == ".csv":
        return pd.read_csv(path, **kwargs)
    if suf == ".parquet":
        return pd.read_parquet(path)
    raise ValueError(f"Unsupported dataframe format: {suf}")


def read_text_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a table with every cell as a string (no float coercion, blanks -> "").
    Money columns are parsed to Decimal by the caller.
    """
    df = read_df(path, dtype=str, keep_default_na=False)
    return df.astype(str)


# ---------------------------
# Optional S3 support
# ---------------------------
def _boto3_client(service: str, region: Optional[str] = None):
    try:
        import boto3  # type: ignore
    except ImportError as e:
        raise ImportError(
            "boto3 is required for S3 operations. Install with: pip install boto3"
        ) from e
    return boto3.client(service, region_name=region)


def s3_download_file(
    bucket: str, key: str, local_path: Path, region: Optional[str] = None
) -> None:
    local_path = Path(local_path)
    ensure_dir(local_path.parent)
    s3 = _boto3_client("s3", region=region)
    s3.download_file(bucket, key, str(local_path))


def s3_list_keys(bucket: str, prefix: str = "", region: Optional[str] = None) -> List[str]:
    s3 = _boto3_client("s3", region=region)
    keys: List[str] = []
    for page in s3.get_paginator("list_objects_v2").paginate(Bucket=bucket, Prefix=prefix):
        keys.extend(obj["Key"] for obj in page.get("Contents", []))
    return keys
