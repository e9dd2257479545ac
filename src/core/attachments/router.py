"""API for listing, uploading, downloading and deleting attachments."""

import io
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.attachments.schemas import (
    ClientAttachmentResponse,
    GroupedAttachments,
    OwnerSegment,
    OwnerType,
    ProjectAttachmentResponse,
    TaskAttachmentResponse,
)
from src.core.attachments.service import (
    delete_attachment,
    get_attachment,
    get_attachment_content,
    list_all_attachments,
    list_owner_attachments,
    parse_tags,
    remove_stored_file,
    save_attachment,
)
from src.core.database import get_db
from src.core.exceptions import NotFoundError
from src.shared.schemas import ApiResponse

router = APIRouter(prefix="/attachments", tags=["Attachments"])

RESPONSE_SCHEMAS: dict[OwnerType, type[BaseModel]] = {
    OwnerType.CLIENT: ClientAttachmentResponse,
    OwnerType.PROJECT: ProjectAttachmentResponse,
    OwnerType.TASK: TaskAttachmentResponse,
}


def _serialize(owner_type: OwnerType, attachment) -> dict:
    return RESPONSE_SCHEMAS[owner_type].model_validate(attachment).model_dump(mode="json")


def content_disposition(file_name: str) -> str:
    """Header value with a quoted ASCII fallback and the exact UTF-8 name (RFC 6266)."""
    fallback = "".join(
        ch if ch.isascii() and ch.isprintable() and ch not in {'"', "\\"} else "_" for ch in file_name
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


@router.get("/all", response_model=ApiResponse[GroupedAttachments])
async def get_all_attachments(db: AsyncSession = Depends(get_db)):
    """Every attachment, grouped as {clients, projects, tasks}."""
    grouped = await list_all_attachments(db)
    return ApiResponse(
        success=True,
        data=GroupedAttachments(
            clients=[ClientAttachmentResponse.model_validate(a) for a in grouped[OwnerType.CLIENT]],
            projects=[ProjectAttachmentResponse.model_validate(a) for a in grouped[OwnerType.PROJECT]],
            tasks=[TaskAttachmentResponse.model_validate(a) for a in grouped[OwnerType.TASK]],
        ),
    )


@router.get("/{segment}/{owner_id}", response_model=ApiResponse[list[dict]])
async def get_owner_attachments(
    segment: OwnerSegment,
    owner_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Attachments of one client, project or task."""
    owner_type = segment.owner_type
    attachments = await list_owner_attachments(db, owner_type, owner_id)
    return ApiResponse(success=True, data=[_serialize(owner_type, a) for a in attachments])


@router.post("/{segment}/{owner_id}", response_model=ApiResponse[dict], status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    segment: OwnerSegment,
    owner_id: int,
    file: UploadFile = File(...),
    description: str | None = Form(None),
    tags: str | None = Form(None),
    uploaded_by: int | None = Form(None),
    db: AsyncSession = Depends(get_db),
):
    """Upload a file for a client, project or task. Tags are comma separated."""
    owner_type = segment.owner_type
    attachment = await save_attachment(
        db,
        owner_type,
        owner_id,
        file,
        uploaded_by=uploaded_by,
        description=(description or "").strip() or None,
        tags=parse_tags(tags),
    )
    try:
        await db.commit()
    except Exception:
        await remove_stored_file(attachment.file_url)
        raise
    return ApiResponse(success=True, message="File uploaded", data=_serialize(owner_type, attachment))


@router.get("/{segment}/{owner_id}/download/{attachment_id}")
async def download_attachment(
    segment: OwnerSegment,
    owner_id: int,
    attachment_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Download attachment file. Uses local storage or S3/R2."""
    attachment = await get_attachment(db, segment.owner_type, owner_id, attachment_id)
    if not attachment:
        raise NotFoundError("Attachment", attachment_id)
    content = await get_attachment_content(attachment)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=attachment.file_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(attachment.file_name)},
    )


@router.delete("/{segment}/{owner_id}/{attachment_id}", response_model=ApiResponse[None])
async def remove_attachment(
    segment: OwnerSegment,
    owner_id: int,
    attachment_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete one attachment of a client, project or task."""
    file_url = await delete_attachment(db, segment.owner_type, owner_id, attachment_id)
    await db.commit()
    await remove_stored_file(file_url)
    return ApiResponse(success=True, message="Attachment deleted successfully", data=None)
