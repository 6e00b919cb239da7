"""S3-backed host store: one object per key under a prefix."""

from __future__ import annotations

import json
from typing import Any, Iterator

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from chunkprop.config import ChunkPropConfig
from chunkprop.errors import StorageBackendError
from chunkprop.stores.base import check_entry
from chunkprop.values import SerializedValue, decode_primitive, encode_primitive

_DELETE_BATCH = 1000


class S3Store:
    """Host store keeping each entry as a small JSON object in S3."""

    backend = "s3"

    def __init__(
        self,
        *,
        bucket: str,
        prefix: str = "",
        config: ChunkPropConfig | None = None,
        client: Any = None,
    ) -> None:
        cfg = config or ChunkPropConfig()
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.max_value_bytes = cfg.max_chunk_size

        if client is None:
            session = boto3.Session(region_name=cfg.s3_region)
            client = session.client(
                "s3",
                region_name=cfg.s3_region,
                endpoint_url=cfg.s3_endpoint_url,
                config=BotoConfig(
                    connect_timeout=cfg.s3_request_timeout_s,
                    read_timeout=cfg.s3_request_timeout_s,
                    retries={"max_attempts": 5, "mode": "standard"},
                ),
            )
        self._s3 = client

    # --- Key/object helpers ---

    def _k(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def _strip(self, object_key: str) -> str:
        if self.prefix:
            return object_key[len(self.prefix) + 1 :]
        return object_key

    def _is_not_found(self, err: Exception) -> bool:
        if isinstance(err, ClientError):
            code = err.response.get("Error", {}).get("Code", "")
            return code in {"NoSuchKey", "404", "NotFound"}
        return False

    def _iter_objects(self) -> Iterator[dict[str, Any]]:
        paginator = self._s3.get_paginator("list_objects_v2")
        kwargs: dict[str, Any] = {"Bucket": self.bucket}
        if self.prefix:
            kwargs["Prefix"] = f"{self.prefix}/"
        for page in paginator.paginate(**kwargs):
            yield from page.get("Contents", [])

    # --- HostStore ---

    def read(self, key: str) -> SerializedValue:
        try:
            resp = self._s3.get_object(Bucket=self.bucket, Key=self._k(key))
        except Exception as e:
            if self._is_not_found(e):
                return None
            raise StorageBackendError("read", f"{key}: {e}") from e
        doc = json.loads(resp["Body"].read().decode("utf-8"))
        return decode_primitive(doc["kind"], doc["value_json"])

    def write(self, key: str, value: SerializedValue = None) -> None:
        if value is None:
            try:
                self._s3.delete_object(Bucket=self.bucket, Key=self._k(key))
            except Exception as e:
                raise StorageBackendError("delete", f"{key}: {e}") from e
            return
        check_entry(key, value, self.max_value_bytes)
        kind, value_json = encode_primitive(value)
        body = json.dumps({"kind": kind, "value_json": value_json}, separators=(",", ":"))
        try:
            self._s3.put_object(
                Bucket=self.bucket,
                Key=self._k(key),
                Body=body.encode("utf-8"),
                ContentType="application/json",
            )
        except Exception as e:
            raise StorageBackendError("write", f"{key}: {e}") from e

    def list_keys(self) -> list[str]:
        return [self._strip(obj["Key"]) for obj in self._iter_objects()]

    def total_byte_count(self) -> int:
        return sum(
            len(self._strip(obj["Key"]).encode("utf-8")) + int(obj.get("Size", 0))
            for obj in self._iter_objects()
        )

    def clear_all(self) -> None:
        batch: list[dict[str, str]] = []
        for obj in self._iter_objects():
            batch.append({"Key": obj["Key"]})
            if len(batch) == _DELETE_BATCH:
                self._delete_batch(batch)
                batch = []
        if batch:
            self._delete_batch(batch)

    def _delete_batch(self, batch: list[dict[str, str]]) -> None:
        resp = self._s3.delete_objects(
            Bucket=self.bucket, Delete={"Objects": batch, "Quiet": True}
        )
        errors = resp.get("Errors") or []
        if errors:
            raise StorageBackendError(
                "clear_all", f"{len(errors)} object(s) could not be deleted: {errors[0]}"
            )

    def storage_info(self) -> dict[str, Any]:
        return {
            "backend": self.backend,
            "bucket": self.bucket,
            "prefix": self.prefix,
            "max_value_bytes": self.max_value_bytes,
        }

    def close(self) -> None:
        pass
