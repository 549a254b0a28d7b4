"""Temporary on-disk staging for uploaded audio files."""

import shutil
import uuid
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import UploadFile

from api.audio.shared_models import UploadedAudio
from api.errors import ValidationError

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = "Nenhum arquivo enviado"


def _upload_size(upload_file: UploadFile) -> int:
    upload_file.file.seek(0, 2)
    size = upload_file.file.tell()
    upload_file.file.seek(0)
    return size


def stage_upload(upload_file: Optional[UploadFile], upload_dir: Path, max_size: int) -> UploadedAudio:
    """
    Validate an uploaded file and write it under ``upload_dir``.

    Args:
        upload_file: Multipart file field, ``None`` when the request carried none
        upload_dir: Working directory for staged files
        max_size: Maximum accepted size in bytes

    Returns:
        UploadedAudio pointing at a unique path inside ``upload_dir``

    Raises:
        ValidationError: If the file is missing or larger than ``max_size``
    """
    if upload_file is None or not upload_file.filename:
        raise ValidationError(NO_FILE_MESSAGE)

    size = _upload_size(upload_file)
    if size > max_size:
        raise ValidationError(
            f"Arquivo muito grande ({size / 1024 / 1024:.2f} MB). "
            f"Máximo: {max_size / 1024 / 1024:.0f} MB"
        )

    suffix = Path(upload_file.filename).suffix
    file_path = upload_dir / f"{uuid.uuid4().hex}{suffix}"

    try:
        with open(file_path, "wb") as f:
            shutil.copyfileobj(upload_file.file, f)
    except OSError:
        file_path.unlink(missing_ok=True)
        raise

    staged = UploadedAudio(
        path=file_path,
        original_name=upload_file.filename,
        size_bytes=size,
        content_type=upload_file.content_type,
    )
    logger.info(f"📁 Arquivo recebido: {staged.original_name} ({staged.size_mb:.2f} MB)")
    return staged


def release_upload(staged: UploadedAudio) -> None:
    """Delete a staged file; a file that is already gone is not an error."""
    staged.path.unlink(missing_ok=True)
    logger.info("🗑️ Arquivo temporário deletado")


@contextmanager
def staged_upload(
    upload_file: Optional[UploadFile],
    upload_dir: Path,
    max_size: int,
) -> Iterator[UploadedAudio]:
    """
    Stage an upload for the duration of a ``with`` block.

    The staged file is deleted when the block exits, whether it returns
    normally or raises. Validation failures happen before anything is written.
    """
    staged = stage_upload(upload_file, upload_dir, max_size)
    try:
        yield staged
    finally:
        release_upload(staged)
