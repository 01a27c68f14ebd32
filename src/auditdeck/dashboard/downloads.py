import base64
import os
from dataclasses import dataclass

import structlog

from ..audit.models import ExportResult
from ..core.errors import GENERIC_ERROR_MESSAGE, ExportFailed

log = structlog.get_logger()


@dataclass(frozen=True)
class DownloadBlob:
    """Client-side download assembled from an export result."""

    file_name: str
    mime_type: str
    content: str
    data_uri: str


def ensure_success(result: ExportResult) -> ExportResult:
    if not result.success:
        raise ExportFailed(result.error_message or GENERIC_ERROR_MESSAGE)
    return result


def to_data_uri(result: ExportResult) -> str:
    """Encode export content as a base64 data URI."""
    encoded = base64.b64encode(result.content.encode("utf-8")).decode("ascii")
    return f"data:{result.mime_type};base64,{encoded}"


def to_download(result: ExportResult) -> DownloadBlob:
    ensure_success(result)
    return DownloadBlob(
        file_name=os.path.basename(result.file_name) or "export.txt",
        mime_type=result.mime_type,
        content=result.content,
        data_uri=to_data_uri(result),
    )


def write_blob(blob: DownloadBlob, out_dir: str) -> str:
    """
    Write a download blob to out_dir.

    Args:
        blob: Download assembled from an export result
        out_dir: Target directory, created if missing

    Returns:
        Path of the written file
    """
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, blob.file_name)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(blob.content)
    log.info("exports.written", path=path, mime_type=blob.mime_type)
    return path


def write_export(result: ExportResult, out_dir: str) -> str:
    return write_blob(to_download(result), out_dir)
