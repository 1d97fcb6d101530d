"""
Client-side attachment checks, run before any upload.
"""

import mimetypes
from pathlib import Path
from typing import Optional

from pathy_admin.errors import AttachmentError
from pathy_admin.models.chat import AttachmentKind

MB = 1024 * 1024

ALLOWED_TYPES = {
    "image/jpeg": AttachmentKind.IMAGE,
    "image/png": AttachmentKind.IMAGE,
    "image/webp": AttachmentKind.IMAGE,
    "video/mp4": AttachmentKind.VIDEO,
    "video/mpeg": AttachmentKind.VIDEO,
    "video/quicktime": AttachmentKind.VIDEO,
    "application/pdf": AttachmentKind.DOCUMENT,
}

SIZE_LIMITS = {
    AttachmentKind.IMAGE: 5 * MB,
    AttachmentKind.VIDEO: 100 * MB,
    AttachmentKind.DOCUMENT: 100 * MB,
}


class OutgoingAttachment:
    """A validated file ready for multipart upload."""

    __slots__ = ("file_name", "content_type", "content", "kind")

    def __init__(self, file_name: str, content_type: str, content: bytes, kind: AttachmentKind):
        self.file_name = file_name
        self.content_type = content_type
        self.content = content
        self.kind = kind

    @property
    def size(self) -> int:
        return len(self.content)

    def as_file(self) -> tuple[str, bytes, str]:
        return (self.file_name, self.content, self.content_type)

    def __repr__(self) -> str:
        return f"OutgoingAttachment({self.file_name!r}, {self.content_type!r}, {self.size} bytes)"


def validate_attachment(content_type: str, size: int) -> AttachmentKind:
    """Check type and size against the allow-list. Returns the attachment kind."""
    kind = ALLOWED_TYPES.get(content_type)
    if kind is None:
        raise AttachmentError(
            "Only JPEG, PNG, WebP, MP4, MPEG, QuickTime, or PDF files are allowed.",
            details={"content_type": content_type},
        )
    limit = SIZE_LIMITS[kind]
    if size > limit:
        label = "Image" if kind is AttachmentKind.IMAGE else "Video or PDF"
        raise AttachmentError(
            f"{label} file size must be less than {limit // MB}MB.",
            details={"size": size, "limit": limit},
        )
    return kind


def guess_content_type(file_name: str) -> Optional[str]:
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type


def prepare_attachment(
    file_name: str,
    content: bytes,
    content_type: Optional[str] = None,
) -> OutgoingAttachment:
    content_type = content_type or guess_content_type(file_name) or "application/octet-stream"
    kind = validate_attachment(content_type, len(content))
    return OutgoingAttachment(file_name, content_type, content, kind)


def load_attachment(path: "str | Path") -> OutgoingAttachment:
    """Read and validate a file from disk. The size is checked before reading."""
    path = Path(path)
    content_type = guess_content_type(path.name) or "application/octet-stream"
    validate_attachment(content_type, path.stat().st_size)
    return prepare_attachment(path.name, path.read_bytes(), content_type)
