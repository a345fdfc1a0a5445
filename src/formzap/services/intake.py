"""Raw request bodies to :class:`FormSubmission`.

``multipart/form-data`` is parsed with python-multipart; uploaded files are
kept as :class:`python_multipart.File` objects so the decoder rejects them.
Anything else is treated as ``application/x-www-form-urlencoded``.
"""

from __future__ import annotations

from io import BytesIO

import structlog
from python_multipart import parse_form
from python_multipart.multipart import Field, File

from formzap.domain.submission import FormSubmission
from formzap.errors import FormDecodeError

logger = structlog.get_logger(__name__)

MULTIPART = "multipart/form-data"
URLENCODED = "application/x-www-form-urlencoded"


def submission_from_body(body: bytes, content_type: str = URLENCODED) -> FormSubmission:
    """Parse a request body into a submission, preserving part order.

    Raises:
        FormDecodeError: the body is not valid for *content_type*.
    """
    if content_type.strip().lower().startswith(MULTIPART):
        return _from_multipart(body, content_type)
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"url-encoded body is not valid UTF-8: {exc}"
        raise FormDecodeError(msg) from exc
    return FormSubmission.from_query_string(text)


def _from_multipart(body: bytes, content_type: str) -> FormSubmission:
    submission = FormSubmission()

    def on_field(field: Field) -> None:
        name = (field.field_name or b"").decode("utf-8")
        submission.append(name, (field.value or b"").decode("utf-8"))

    def on_file(file: File) -> None:
        name = (file.field_name or b"").decode("utf-8")
        submission.append(name, file)

    headers = {"Content-Type": content_type, "Content-Length": str(len(body))}
    try:
        parse_form(headers, BytesIO(body), on_field, on_file)
    except (ValueError, UnicodeDecodeError) as exc:
        msg = f"malformed multipart body: {exc}"
        raise FormDecodeError(msg) from exc
    logger.debug("intake.multipart", keys=len(submission))
    return submission
