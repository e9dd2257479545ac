"""Display metadata for attachments: file kind, icon, label, colour and coarse category."""

from enum import StrEnum
from pathlib import PurePosixPath

from src.core.attachments.schemas import OwnerType


class FileKind(StrEnum):
    IMAGE = "image"
    PDF = "pdf"
    SPREADSHEET = "spreadsheet"
    ARCHIVE = "archive"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENT = "document"
    OTHER = "other"


class FileCategory(StrEnum):
    """Coarse filter offered by the file manager."""

    ALL = "all"
    IMAGES = "images"
    DOCUMENTS = "documents"
    MEDIA = "media"


# Icon identifiers of the front-end icon set.
FILE_ICONS: dict[FileKind, str] = {
    FileKind.IMAGE: "file-image",
    FileKind.PDF: "file-text",
    FileKind.SPREADSHEET: "file-spreadsheet",
    FileKind.ARCHIVE: "file-archive",
    FileKind.AUDIO: "file-audio",
    FileKind.VIDEO: "file-video",
    FileKind.DOCUMENT: "file-text",
    FileKind.OTHER: "file",
}
DEFAULT_ICON = "file"

FILE_COLORS: dict[FileKind, str] = {
    FileKind.IMAGE: "blue",
    FileKind.PDF: "red",
    FileKind.SPREADSHEET: "green",
    FileKind.ARCHIVE: "purple",
    FileKind.AUDIO: "yellow",
    FileKind.VIDEO: "pink",
    FileKind.DOCUMENT: "sky",
    FileKind.OTHER: "gray",
}
DEFAULT_COLOR = "gray"

FILE_LABELS: dict[FileKind, str] = {
    FileKind.IMAGE: "Imagem",
    FileKind.PDF: "PDF",
    FileKind.SPREADSHEET: "Planilha",
    FileKind.ARCHIVE: "Arquivo",
    FileKind.AUDIO: "Áudio",
    FileKind.VIDEO: "Vídeo",
    FileKind.DOCUMENT: "Documento",
}

OWNER_LABELS: dict[OwnerType, str] = {
    OwnerType.CLIENT: "Cliente",
    OwnerType.PROJECT: "Projeto",
    OwnerType.TASK: "Tarefa",
}

EXTENSION_KINDS: dict[str, FileKind] = {
    ".jpg": FileKind.IMAGE,
    ".jpeg": FileKind.IMAGE,
    ".png": FileKind.IMAGE,
    ".gif": FileKind.IMAGE,
    ".webp": FileKind.IMAGE,
    ".svg": FileKind.IMAGE,
    ".pdf": FileKind.PDF,
    ".xls": FileKind.SPREADSHEET,
    ".xlsx": FileKind.SPREADSHEET,
    ".ods": FileKind.SPREADSHEET,
    ".csv": FileKind.SPREADSHEET,
    ".zip": FileKind.ARCHIVE,
    ".rar": FileKind.ARCHIVE,
    ".7z": FileKind.ARCHIVE,
    ".mp3": FileKind.AUDIO,
    ".wav": FileKind.AUDIO,
    ".aac": FileKind.AUDIO,
    ".mp4": FileKind.VIDEO,
    ".mov": FileKind.VIDEO,
    ".avi": FileKind.VIDEO,
    ".mkv": FileKind.VIDEO,
    ".doc": FileKind.DOCUMENT,
    ".docx": FileKind.DOCUMENT,
    ".odt": FileKind.DOCUMENT,
    ".txt": FileKind.DOCUMENT,
}

DOCUMENT_MARKERS = ("pdf", "word", "document", "text", "sheet")


def _kind_from_mime(mime_type: str) -> FileKind | None:
    # Checked in order: spreadsheet MIME types also contain "document".
    if mime_type.startswith("image/"):
        return FileKind.IMAGE
    if "pdf" in mime_type:
        return FileKind.PDF
    if "spreadsheet" in mime_type or "excel" in mime_type:
        return FileKind.SPREADSHEET
    if "zip" in mime_type or "compressed" in mime_type:
        return FileKind.ARCHIVE
    if mime_type.startswith("audio/"):
        return FileKind.AUDIO
    if mime_type.startswith("video/"):
        return FileKind.VIDEO
    if "word" in mime_type or "document" in mime_type:
        return FileKind.DOCUMENT
    return None


def file_kind(mime_type: str | None, file_name: str | None = None) -> FileKind:
    """Classify by MIME type, then by file extension, else OTHER."""
    kind = _kind_from_mime((mime_type or "").lower())
    if kind is not None:
        return kind
    if file_name:
        return EXTENSION_KINDS.get(PurePosixPath(file_name.lower()).suffix, FileKind.OTHER)
    return FileKind.OTHER


def icon_for(kind: str) -> str:
    """Icon identifier for a kind key; unknown keys get the generic file icon."""
    try:
        return FILE_ICONS[FileKind(kind)]
    except ValueError:
        return DEFAULT_ICON


def color_for(kind: str) -> str:
    try:
        return FILE_COLORS[FileKind(kind)]
    except ValueError:
        return DEFAULT_COLOR


def label_for(kind: str, owner_type: OwnerType) -> str:
    """Display label; kinds without a label fall back to the owner label (as in the file list)."""
    try:
        return FILE_LABELS.get(FileKind(kind)) or OWNER_LABELS[owner_type]
    except ValueError:
        return OWNER_LABELS[owner_type]


def category_matches(mime_type: str | None, category: FileCategory) -> bool:
    mime = (mime_type or "").lower()
    if category is FileCategory.IMAGES:
        return mime.startswith("image/")
    if category is FileCategory.DOCUMENTS:
        return any(marker in mime for marker in DOCUMENT_MARKERS)
    if category is FileCategory.MEDIA:
        return mime.startswith(("video/", "audio/"))
    return True
