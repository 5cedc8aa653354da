import logging
import os
from datetime import datetime, timezone
from typing import Any

import boto3
from dotenv import load_dotenv

from common.serialization import jsonl_filename, to_jsonl

load_dotenv()

logger = logging.getLogger(__name__)


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3")


def build_s3_key(prefix: str, timestamp: datetime, filename: str) -> str:
    """Build a partitioned S3 key path."""
    return (
        f"{prefix}/"
        f"year={timestamp.year:04d}/"
        f"month={timestamp.month:02d}/"
        f"day={timestamp.day:02d}/"
        f"{filename}"
    )


def upload_jsonl_records_to_s3(records: list[Any], prefix: str) -> str:
    """
    Upload result records to S3 as one JSONL object under a date-partitioned key.

    Args:
        records: Dataclass objects (or dicts) to upload
        prefix: S3 prefix (e.g., "processed_articles", "quota_statistics")

    Returns:
        The S3 key written.
    """
    bucket = os.environ["S3_BUCKET_NAME"]
    now = datetime.now(timezone.utc)
    key = build_s3_key(prefix, now, jsonl_filename(prefix, now))

    get_s3_client().put_object(
        Bucket=bucket,
        Key=key,
        Body=to_jsonl(records).encode("utf-8"),
        ContentType="application/jsonl",
    )

    logger.info("Uploaded %d records to s3://%s/%s", len(records), bucket, key)
    return key
