"""
S3-based key-value store.

Each key is one object: {prefix}/{key}.json
Works against AWS S3 or any compatible endpoint (MinIO, localstack).
"""

import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.errors import StoreError
from .store import KeyValueStore

_MISSING_CODES = ("NoSuchKey", "404", "NotFound")


class S3KeyValueStore(KeyValueStore):
    """
    One S3 object per key.

    Object key: {prefix}/{key}.json
    Body: the stored string, UTF-8, ContentType application/json

    Credentials come from the environment (AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY) or the usual boto3 chain.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "lifebalance",
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
    ) -> None:
        """
        Initialize S3 store.

        Args:
            bucket: S3 bucket name
            prefix: Key prefix (default: "lifebalance")
            endpoint_url: S3 endpoint URL (for MinIO, localstack, etc.)
            region: AWS region (default: us-east-1)

        Raises:
            StoreError: If client creation fails or the bucket is not accessible
        """
        self.bucket = bucket
        self.prefix = prefix.rstrip("/")
        self.endpoint_url = endpoint_url
        self.region = region

        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region,
            )
        except (BotoCoreError, ValueError) as e:
            raise StoreError(f"Failed to create S3 client: {e}") from e

        # Verify bucket exists (can be disabled for performance)
        if os.getenv("LIFEBALANCE_S3_SKIP_BUCKET_CHECK", "").lower() != "true":
            try:
                self.s3_client.head_bucket(Bucket=bucket)
            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "Unknown")
                raise StoreError(
                    f"Bucket '{bucket}' not accessible (code: {error_code})"
                ) from e
            except BotoCoreError as e:
                raise StoreError(f"Bucket '{bucket}' not accessible: {e}") from e

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}/{key}.json"

    def get(self, key: str) -> Optional[str]:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=self._object_key(key))
            return response["Body"].read().decode("utf-8")
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _MISSING_CODES:
                return None
            raise StoreError(f"Failed to read {key} from S3: {e}") from e
        except (BotoCoreError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read {key} from S3: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=self._object_key(key),
                Body=value.encode("utf-8"),
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"Failed to write {key} to S3: {e}") from e

    def delete(self, key: str) -> None:
        # S3 delete of a missing key already succeeds
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=self._object_key(key))
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"Failed to delete {key} from S3: {e}") from e
