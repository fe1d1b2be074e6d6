"""Built-in tools.

Like any tool handed to the agent, these return a human-readable string even
on failure, so the model can explain the problem instead of the run aborting.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from chainkit.errors import AWSError
from chainkit.tools.base import tool

logger = logging.getLogger(__name__)

# Textract output can be long; the agent only needs enough to answer
MAX_PDF_CHARS = 8000


@tool
def current_datetime(_: str) -> str:
    """Returns the current date and time in UTC. Use this to resolve relative
    dates like "today", "tomorrow" or "next week". The input is ignored."""
    now = datetime.now(UTC)
    return now.strftime("%A %d %B %Y, %H:%M UTC")


@tool
def pdf_to_text(s3_uri: str) -> str:
    """Extracts the text of a PDF stored in S3. Input must be the S3 URI of
    the document, e.g. s3://bucket/path/to/file.pdf"""
    from chainkit.ai_helpers.textract import TextractService

    uri = s3_uri.strip().strip('"')
    try:
        words = TextractService().pdf_to_text(uri)
    except AWSError as e:
        logger.error("Failed to extract text from %s: %s", uri, e)
        return f"Sorry, I couldn't read that PDF. {e}"

    if not words:
        return f"No text was found in {uri}."
    text = " ".join(words)
    if len(text) > MAX_PDF_CHARS:
        text = text[:MAX_PDF_CHARS] + " …[truncated]"
    return text


BUILTIN_TOOLS = [current_datetime, pdf_to_text]
