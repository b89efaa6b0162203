import logging
import posixpath
from typing import Iterable, Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class ImageStorageService:
    """Removes uploaded package images from the S3 bucket backing the URLs."""

    def __init__(
        self,
        bucket: Optional[str],
        prefix: str = "uploads/packages",
        region: str = "ap-south-1",
    ):
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.s3 = boto3.client("s3", region_name=region) if bucket else None

    def key_for(self, image_url: str) -> str:
        filename = posixpath.basename(urlparse(image_url).path)
        return f"{self.prefix}/{filename}" if self.prefix else filename

    def delete_images(self, image_urls: Iterable[str]) -> int:
        if self.s3 is None:
            return 0

        keys = [self.key_for(url) for url in image_urls if url]
        if not keys:
            return 0
        try:
            self.s3.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
            )
        except ClientError as err:
            logger.error(f"Error deleting images {keys} from {self.bucket}: {err}")
            return 0
        logger.info(f"Deleted {len(keys)} images from {self.bucket}")
        return len(keys)
