from typing import Any

import threading

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

logger = structlog.get_logger()


class S3ImageStore:
    """Put and delete image objects in a single S3 bucket.

    Failures are logged and reported as ``False``; callers decide what the
    HTTP response should be.
    """

    def __init__(self, bucket: str, region: str, client: Any | None = None) -> None:
        self.bucket = bucket
        self.region = region
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> Any:
        # Store calls run in worker threads; boto3.client on the default session is not thread-safe.
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def put(self, key: str, body: bytes, content_type: str, metadata: dict[str, str]) -> bool:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                Metadata=metadata,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("image_store_put_failed", bucket=self.bucket, key=key, error=str(e))
            return False
        logger.info("image_stored", bucket=self.bucket, key=key, size=len(body))
        return True

    def delete(self, key: str) -> bool:
        # S3 answers 204 for missing keys too, so absent and removed look the same.
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("image_store_delete_failed", bucket=self.bucket, key=key, error=str(e))
            return False
        logger.info("image_deleted", bucket=self.bucket, key=key)
        return True
