"""Service for uploading, serving and deleting client, project and task attachments."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.attachments.models import (
    AttachmentBase,
    ClientAttachment,
    ProjectAttachment,
    TaskAttachment,
)
from src.core.attachments.schemas import OwnerType
from src.core.config import settings
from src.core.exceptions import NotFoundError, StorageError, ValidationError
from src.modules.clients.models import Client
from src.modules.projects.models import Project
from src.modules.tasks.models import Task

logger = logging.getLogger(__name__)

ATTACHMENT_MODELS: dict[OwnerType, type[AttachmentBase]] = {
    OwnerType.CLIENT: ClientAttachment,
    OwnerType.PROJECT: ProjectAttachment,
    OwnerType.TASK: TaskAttachment,
}
OWNER_MODELS = {
    OwnerType.CLIENT: Client,
    OwnerType.PROJECT: Project,
    OwnerType.TASK: Task,
}

ALLOWED_CONTENT_PREFIXES = ("image/", "video/", "audio/", "text/")
ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.oasis.opendocument.text",
    "application/vnd.oasis.opendocument.spreadsheet",
    "application/zip",
    "application/x-zip-compressed",
    "application/csv",
    "application/json",
}


def is_allowed_content_type(content_type: str) -> bool:
    return content_type in ALLOWED_CONTENT_TYPES or content_type.startswith(ALLOWED_CONTENT_PREFIXES)


def _owner_id(attachment: AttachmentBase, owner_type: OwnerType) -> int:
    return getattr(attachment, owner_type.foreign_key)


def _s3_client():
    import aioboto3

    session = aioboto3.Session()
    return session.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.s3_region,
    )


async def _upload_to_s3(key: str, content: bytes, content_type: str) -> None:
    """Upload bytes to S3/R2 bucket."""
    async with _s3_client() as s3:
        await s3.put_object(
            Bucket=settings.s3_bucket,
            Key=key,
            Body=content,
            ContentType=content_type,
        )


async def _download_from_s3(key: str) -> bytes:
    """Download object from S3/R2 bucket."""
    async with _s3_client() as s3:
        response = await s3.get_object(Bucket=settings.s3_bucket, Key=key)
        async with response["Body"] as stream:
            return await stream.read()


async def _delete_from_s3(key: str) -> None:
    async with _s3_client() as s3:
        await s3.delete_object(Bucket=settings.s3_bucket, Key=key)


async def ensure_owner_exists(db: AsyncSession, owner_type: OwnerType, owner_id: int) -> None:
    model = OWNER_MODELS[owner_type]
    result = await db.execute(select(model.id).where(model.id == owner_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(owner_type.value.capitalize(), owner_id)


async def list_all_attachments(db: AsyncSession) -> dict[OwnerType, list[AttachmentBase]]:
    """All attachments grouped by owner type, newest upload first inside each group."""
    grouped: dict[OwnerType, list[AttachmentBase]] = {}
    for owner_type, model in ATTACHMENT_MODELS.items():
        result = await db.execute(select(model).order_by(model.upload_date.desc(), model.id.desc()))
        grouped[owner_type] = list(result.scalars().all())
    return grouped


async def list_owner_attachments(
    db: AsyncSession, owner_type: OwnerType, owner_id: int
) -> list[AttachmentBase]:
    model = ATTACHMENT_MODELS[owner_type]
    fk = getattr(model, owner_type.foreign_key)
    result = await db.execute(
        select(model).where(fk == owner_id).order_by(model.upload_date.desc(), model.id.desc())
    )
    return list(result.scalars().all())


async def get_attachment(
    db: AsyncSession, owner_type: OwnerType, owner_id: int, attachment_id: int
) -> AttachmentBase | None:
    """Get attachment by id, scoped to its owner. A different owner counts as missing."""
    model = ATTACHMENT_MODELS[owner_type]
    result = await db.execute(select(model).where(model.id == attachment_id))
    attachment = result.scalar_one_or_none()
    if attachment is None or _owner_id(attachment, owner_type) != owner_id:
        return None
    return attachment


def parse_tags(raw: str | None) -> list[str] | None:
    """Split a comma-separated tag string; blank entries are dropped."""
    if not raw:
        return None
    tags = [tag.strip() for tag in raw.split(",") if tag.strip()]
    return tags or None


async def save_attachment(
    db: AsyncSession,
    owner_type: OwnerType,
    owner_id: int,
    file: UploadFile,
    uploaded_by: int | None = None,
    description: str | None = None,
    tags: list[str] | None = None,
) -> AttachmentBase:
    """Save uploaded file to storage and create the attachment record for its owner."""
    if not file.filename or not file.filename.strip():
        raise ValidationError("File name is required", field="file")

    content_type = file.content_type or ""
    if not is_allowed_content_type(content_type):
        raise ValidationError(
            f"Allowed types: images, video, audio, text, PDF, office documents and ZIP. Got: {content_type}",
            field="file",
        )

    content = await file.read()
    if len(content) > settings.max_upload_size:
        raise ValidationError(
            f"File size must not exceed {settings.max_upload_size_mb} MB", field="file"
        )

    await ensure_owner_exists(db, owner_type, owner_id)

    # Sanitize filename, keep extension
    base = Path(file.filename).stem[:100] or "file"
    ext = Path(file.filename).suffix[:20] or ""
    safe_name = f"{base}{ext}".replace("..", "").replace("/", "_")

    unique = uuid.uuid4().hex[:12]
    relative_path = f"{owner_type.segment}/{owner_id}/{unique}_{safe_name}"

    if settings.use_s3:
        await _upload_to_s3(relative_path, content, content_type)
    else:
        full_path = settings.storage_dir / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content)

    model = ATTACHMENT_MODELS[owner_type]
    attachment = model(
        file_name=file.filename[:255],
        file_size=len(content),
        file_type=content_type,
        file_url=relative_path,
        uploaded_by=uploaded_by,
        description=description,
        tags=tags,
        **{owner_type.foreign_key: owner_id},
    )
    db.add(attachment)
    try:
        await db.flush()
        await db.refresh(attachment)
    except Exception:
        await remove_stored_file(relative_path)
        raise
    logger.info(
        "Stored %s attachment %s for %s %s (%d bytes)",
        owner_type.value, attachment.id, owner_type.value, owner_id, len(content),
    )
    return attachment


async def get_attachment_content(attachment: AttachmentBase) -> bytes:
    """Read attachment bytes from storage (local or S3/R2)."""
    if settings.use_s3:
        from botocore.exceptions import ClientError

        try:
            return await _download_from_s3(attachment.file_url)
        except ClientError as e:
            logger.warning("Could not read %s from bucket: %s", attachment.file_url, e)
            raise StorageError("File not found in storage")
    try:
        full_path = settings.storage_dir / attachment.file_url.lstrip("/")
        return full_path.read_bytes()
    except FileNotFoundError:
        raise StorageError("File not found on disk")


async def remove_stored_file(file_url: str) -> bool:
    """
    Best-effort removal of stored bytes once no record points at them.

    Failures are logged and reported as False; the caller has already
    committed (or abandoned) the database change, so there is nothing left
    to undo.
    """
    try:
        if settings.use_s3:
            from botocore.exceptions import ClientError

            try:
                await _delete_from_s3(file_url)
            except ClientError as e:
                logger.warning("Could not remove %s from bucket: %s", file_url, e)
                return False
        else:
            (settings.storage_dir / file_url.lstrip("/")).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove stored file %s: %s", file_url, e)
        return False
    return True


async def delete_attachment(
    db: AsyncSession, owner_type: OwnerType, owner_id: int, attachment_id: int
) -> str:
    """
    Delete the attachment record and return its storage key.

    The stored bytes are left in place: the caller removes them with
    remove_stored_file() after the transaction commits, so a failed commit
    never leaves a record pointing at a missing file.
    """
    attachment = await get_attachment(db, owner_type, owner_id, attachment_id)
    if attachment is None:
        raise NotFoundError("Attachment", attachment_id)

    file_url = attachment.file_url
    await db.delete(attachment)
    await db.flush()
    logger.info("Deleted %s attachment %s of %s %s", owner_type.value, attachment_id, owner_type.value, owner_id)
    return file_url
