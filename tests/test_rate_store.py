import pytest

from premium_engine.utils import rate_store
from premium_engine.utils.rate_store import ensure_rate_table_downloaded, parse_s3_uri


@pytest.fixture()
def bucket(monkeypatch):
    """Fake S3: `keys` is what the bucket holds, `calls` records downloads."""
    state = {"keys": set(), "calls": [], "listed": 0}

    def fake_list(bucket_name, prefix="", region=None):
        state["listed"] += 1
        return [k for k in state["keys"] if k.startswith(prefix)]

    def fake_download(bucket_name, key, local_path, region=None):
        state["calls"].append((bucket_name, key, local_path.name, region))
        local_path.write_text("x\n")

    monkeypatch.setattr(rate_store, "s3_list_keys", fake_list)
    monkeypatch.setattr(rate_store, "s3_download_file", fake_download)
    return state


@pytest.mark.parametrize(
    "uri,expected",
    [
        ("s3://rates/prod/rate_table", ("rates", "prod/rate_table")),
        ("s3://rates/prod/", ("rates", "prod")),
        ("s3://rates", ("rates", "")),
    ],
)
def test_parse_s3_uri(uri, expected):
    assert parse_s3_uri(uri) == expected


@pytest.mark.parametrize("uri", ["https://rates/prod", "s3:///prod", "rates/prod"])
def test_parse_s3_uri_rejects(uri):
    with pytest.raises(ValueError):
        parse_s3_uri(uri)


def test_downloads_missing_files(tmp_path, bucket):
    bucket["keys"] = {"prod/products.csv", "prod/plans.csv", "prod/products.parquet"}

    out = ensure_rate_table_downloaded(
        rate_table_s3_uri="s3://rates/prod", local_dir=tmp_path, aws_region="us-east-1"
    )

    assert out == tmp_path
    assert bucket["calls"] == [
        ("rates", "prod/products.csv", "products.csv", "us-east-1"),
        ("rates", "prod/plans.csv", "plans.csv", "us-east-1"),
    ]


def test_parquet_only_prefix(tmp_path, bucket):
    bucket["keys"] = {"prod/products.parquet", "prod/plans.parquet"}
    (tmp_path / "plans.csv").write_text("")

    ensure_rate_table_downloaded(rate_table_s3_uri="s3://rates/prod", local_dir=tmp_path)

    assert [c[1] for c in bucket["calls"]] == ["prod/products.parquet", "prod/plans.parquet"]
    assert not (tmp_path / "plans.csv").exists()
    assert (tmp_path / "plans.parquet").exists()


def test_existing_files_are_kept(tmp_path, bucket):
    bucket["keys"] = {"products.csv", "plans.csv"}
    (tmp_path / "products.parquet").write_text("PAR1")
    (tmp_path / "plans.csv").write_text("")

    ensure_rate_table_downloaded(rate_table_s3_uri="s3://rates", local_dir=tmp_path)

    assert bucket["calls"] == [("rates", "plans.csv", "plans.csv", None)]


def test_nothing_listed_when_all_present(tmp_path, bucket):
    (tmp_path / "products.csv").write_text("product_id\n1\n")
    (tmp_path / "plans.csv").write_text("plan_id\n1\n")

    ensure_rate_table_downloaded(rate_table_s3_uri="s3://rates/prod", local_dir=tmp_path)

    assert bucket["listed"] == 0
    assert bucket["calls"] == []


def test_missing_remote_table(tmp_path, bucket):
    bucket["keys"] = {"prod/products.csv"}
    with pytest.raises(FileNotFoundError, match="plans.csv or plans.parquet"):
        ensure_rate_table_downloaded(rate_table_s3_uri="s3://rates/prod", local_dir=tmp_path)
