"""PDF text extraction with AWS Textract asynchronous text detection.

Textract reads the document straight from S3; we start a job, poll until it
leaves ``IN_PROGRESS``, then page through the results with ``NextToken`` and
keep the text of every ``WORD`` block.

>>> service = TextractService()
>>> words = service.pdf_to_text("s3://my-bucket/reports/q3.pdf")
"""

from __future__ import annotations

import logging
import time
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from chainkit import config
from chainkit.errors import AWSInvalidAuthenticationError, AWSServerError, MalformedUriError
from chainkit.services.metrics import metrics

logger = logging.getLogger(__name__)

_AUTH_ERROR_CODES = {
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "AccessDeniedException",
    "ExpiredTokenException",
}


def parse_s3_uri(uri: str) -> tuple[str, str] | None:
    """Split ``s3://bucket/path/to/key`` into ``(bucket, "path/to/key")``.

    Returns ``None`` when the URI has no bucket or no key.
    """
    parts = uri.split("/", 3)
    if len(parts) < 4 or parts[0] != "s3:" or parts[1] or not parts[2] or not parts[3]:
        return None
    return parts[2], parts[3]


def _aws_error(exc: Exception) -> Exception:
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code", "")
        if code in _AUTH_ERROR_CODES:
            return AWSInvalidAuthenticationError(str(exc))
    return AWSServerError(str(exc))


class TextractService:
    def __init__(
        self,
        client: Any | None = None,
        *,
        poll_interval: float | None = None,
        max_wait: float | None = None,
    ) -> None:
        if client is None:
            import boto3

            client = boto3.client("textract")
        self.client = client
        self.poll_interval = (
            poll_interval if poll_interval is not None else config.TEXTRACT_POLL_INTERVAL_SECONDS
        )
        self.max_wait = max_wait

    def _start(self, bucket: str, key: str) -> str:
        try:
            with metrics.timed("textract", "start_document_text_detection"):
                response = self.client.start_document_text_detection(
                    DocumentLocation={"S3Object": {"Bucket": bucket, "Name": key}},
                )
        except (BotoCoreError, ClientError) as exc:
            raise _aws_error(exc) from exc
        job_id = response.get("JobId")
        if not job_id:
            raise AWSServerError("Textract did not return a JobId")
        return job_id

    def _get_page(self, job_id: str, next_token: str | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"JobId": job_id}
        if next_token:
            kwargs["NextToken"] = next_token
        try:
            with metrics.timed("textract", "get_document_text_detection"):
                return self.client.get_document_text_detection(**kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise _aws_error(exc) from exc

    def pdf_to_text(self, bucket_uri: str) -> list[str]:
        """Return the words Textract detected in the PDF at *bucket_uri*, in order."""
        parsed = parse_s3_uri(bucket_uri)
        if parsed is None:
            raise MalformedUriError("Malformed Bucket URI")
        bucket, key = parsed

        job_id = self._start(bucket, key)
        logger.info("Textract job %s started for s3://%s/%s", job_id, bucket, key)

        started = time.monotonic()
        response = self._get_page(job_id, None)
        while response.get("JobStatus") == "IN_PROGRESS":
            if self.max_wait is not None and time.monotonic() - started > self.max_wait:
                raise AWSServerError(f"Textract job {job_id} did not finish within {self.max_wait}s")
            logger.debug("Textract job %s in progress, waiting %.1fs", job_id, self.poll_interval)
            time.sleep(self.poll_interval)
            response = self._get_page(job_id, None)

        status = response.get("JobStatus")
        if status not in ("SUCCEEDED", "PARTIAL_SUCCESS"):
            logger.error("Textract job %s ended with status %s", job_id, status)
            raise AWSServerError("Could not get text from PDF")

        blocks: list[dict[str, Any]] = list(response.get("Blocks", []))
        next_token = response.get("NextToken")
        while next_token:
            response = self._get_page(job_id, next_token)
            blocks.extend(response.get("Blocks", []))
            next_token = response.get("NextToken")

        words = [b["Text"] for b in blocks if b.get("BlockType") == "WORD" and "Text" in b]
        logger.info("Textract job %s finished: %d words", job_id, len(words))
        return words
