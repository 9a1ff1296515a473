# tests/conftest.py
"""Shared test fixtures and helpers.

Fake storage:
- FakeObjectStore: in-memory stand-in for the boto3 S3 client. Supports
  the calls ObjectUploader makes (put_object, put_object_acl, delete_object,
  close) and failure injection per key. A failed put stores nothing, matching the
  atomic-or-absent behaviour of a single-shot put.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, BinaryIO

import pytest
from botocore.exceptions import ClientError
from hypothesis import Phase, Verbosity, settings

TEST_ENDPOINT = "http://oss-cn-hangzhou.aliyuncs.com"
TEST_ACCESS_KEY_ID = "test-access-key-id"
TEST_ACCESS_KEY_SECRET = "test-access-key-secret"
TEST_BUCKET = "output-bucket"


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"injected {code}"}}, operation)


class FakeObjectStore:
    """In-memory object store with the S3 client calls the uploader uses.

    Attributes:
        objects: Stored bytes keyed by (bucket, key)
        acls: Canned ACL keyed by (bucket, key)
        calls: Ordered (operation, key) log
        fail_put_keys: Keys whose put_object raises
        fail_acl_keys: Keys whose put_object_acl raises
        fail_delete_keys: Keys whose delete_object raises
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.acls: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_put_keys: set[str] = set()
        self.fail_acl_keys: set[str] = set()
        self.fail_delete_keys: set[str] = set()
        self.closed = False

    def put_object(self, *, Bucket: str, Key: str, Body: BinaryIO, **kwargs: Any) -> dict[str, Any]:  # noqa: N803
        self.calls.append(("put_object", Key))
        if Key in self.fail_put_keys:
            raise _client_error("InternalError", "PutObject")
        self.objects[(Bucket, Key)] = Body.read()
        return {"ETag": '"fake"'}

    def put_object_acl(self, *, Bucket: str, Key: str, ACL: str) -> dict[str, Any]:  # noqa: N803
        self.calls.append(("put_object_acl", Key))
        if Key in self.fail_acl_keys:
            raise _client_error("AccessDenied", "PutObjectAcl")
        self.acls[(Bucket, Key)] = ACL
        return {}

    def delete_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        self.calls.append(("delete_object", Key))
        if Key in self.fail_delete_keys:
            raise _client_error("InternalError", "DeleteObject")
        self.objects.pop((Bucket, Key), None)
        self.acls.pop((Bucket, Key), None)
        return {}

    def close(self) -> None:
        self.closed = True

    def keys(self, bucket: str = TEST_BUCKET) -> list[str]:
        """Keys in upload order."""
        return [key for (b, key) in self.objects if b == bucket]

    def get(self, key: str, bucket: str = TEST_BUCKET) -> bytes:
        return self.objects[(bucket, key)]


def make_config(**overrides: Any) -> dict[str, Any]:
    """Helper to create OSS output config dicts with defaults."""
    config: dict[str, Any] = {
        "endpoint": TEST_ENDPOINT,
        "access_key_id": TEST_ACCESS_KEY_ID,
        "access_key_secret": TEST_ACCESS_KEY_SECRET,
        "bucket": TEST_BUCKET,
        "file_ext": ".csv",
    }
    config.update(overrides)
    return config


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Empty directory used as the staging file location."""
    directory = tmp_path / "staging"
    directory.mkdir()
    return directory


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
