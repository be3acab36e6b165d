"""Document service — upload storage on disk plus metadata records."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import ALLOWED_UPLOAD_TYPES, UPLOAD_EXTENSIONS, DocumentType
from shift_manager.common.exceptions import BadRequestException, NotFoundException
from shift_manager.config import settings
from shift_manager.documents.models import Document
from shift_manager.documents.schemas import DocumentCreate

logger = logging.getLogger(__name__)


def format_file_size(size_in_bytes: int) -> str:
    if size_in_bytes < 1024:
        return f"{size_in_bytes} B"
    if size_in_bytes < 1024 * 1024:
        return f"{size_in_bytes / 1024:.1f} KB"
    return f"{size_in_bytes / (1024 * 1024):.1f} MB"


def _is_inside_upload_dir(path: str) -> bool:
    root = os.path.realpath(settings.UPLOAD_DIR)
    return os.path.realpath(path).startswith(root + os.sep)


class DocumentService:
    """Async operations for scanned documents."""

    @staticmethod
    async def list_documents(db: AsyncSession, user: User) -> Sequence[Document]:
        result = await db.execute(
            select(Document)
            .where(Document.user_id == user.id)
            .order_by(Document.created_at.desc(), Document.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_document(db: AsyncSession, document_id: int) -> Document:
        document = await db.get(Document, document_id)
        if document is None:
            raise NotFoundException("Document")
        return document

    @staticmethod
    async def store_upload(
        db: AsyncSession,
        user: User,
        *,
        filename: Optional[str],
        content_type: Optional[str],
        contents: bytes,
        name: Optional[str] = None,
    ) -> Document:
        """Validate and persist an uploaded file, then record it."""
        if content_type not in ALLOWED_UPLOAD_TYPES:
            raise BadRequestException(
                f"File type '{content_type}' not allowed. Accepted: JPEG, PNG, GIF, PDF.",
            )
        if len(contents) > settings.max_upload_bytes:
            raise BadRequestException(
                f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB} MB.",
            )

        doc_type = DocumentType.pdf if content_type == "application/pdf" else DocumentType.image
        upload_dir = os.path.join(settings.UPLOAD_DIR, "pdf" if doc_type == DocumentType.pdf else "images")
        os.makedirs(upload_dir, exist_ok=True)

        # UUID-only filename; the extension follows the declared content type
        file_path = os.path.join(upload_dir, f"{uuid.uuid4().hex}{UPLOAD_EXTENSIONS[content_type]}")
        with open(file_path, "wb") as f:
            f.write(contents)

        document = Document(
            user_id=user.id,
            name=name or filename or os.path.basename(file_path),
            type=doc_type.value,
            size=format_file_size(len(contents)),
            path=file_path,
            thumbnail_path=file_path if doc_type == DocumentType.image else None,
        )
        db.add(document)
        await db.flush()
        logger.info("Stored document %s (%s) for user %s", document.id, document.size, user.id)
        return document

    @staticmethod
    async def create_document(db: AsyncSession, body: DocumentCreate, user: User) -> Document:
        if not (body.name and body.type and body.path and body.size):
            raise BadRequestException("Missing required fields")
        if body.type not in (DocumentType.image.value, DocumentType.pdf.value):
            raise BadRequestException("Document type must be 'image' or 'pdf'")

        document = Document(**body.model_dump(), user_id=user.id)
        db.add(document)
        await db.flush()
        return document

    @staticmethod
    async def file_path(db: AsyncSession, document_id: int) -> tuple[Document, str]:
        """Return the document and the on-disk path it may be served from."""
        document = await DocumentService.get_document(db, document_id)
        path = document.path
        if not path or not _is_inside_upload_dir(path) or not os.path.isfile(path):
            raise NotFoundException("Document file")
        return document, path

    @staticmethod
    async def delete_document(db: AsyncSession, document_id: int, user: User) -> None:
        document = await DocumentService.get_document(db, document_id)
        path = document.path

        await create_audit_entry(
            db,
            action="delete",
            entity_type="document",
            entity_id=document.id,
            actor_id=user.id,
            old_values={"name": document.name, "path": document.path},
        )
        await db.delete(document)
        await db.flush()

        # Only drop the file once the row delete went through
        if path and _is_inside_upload_dir(path) and os.path.isfile(path):
            os.remove(path)
