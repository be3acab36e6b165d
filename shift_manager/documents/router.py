"""Documents router — upload, metadata records, file streaming."""

import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.access import has_data_access
from shift_manager.auth.dependencies import get_current_user, require_role
from shift_manager.auth.models import User
from shift_manager.common.constants import DocumentType, Resource, UserRole
from shift_manager.database import get_db
from shift_manager.documents.schemas import DocumentCreate, DocumentResponse
from shift_manager.documents.service import DocumentService

router = APIRouter(
    prefix="",
    tags=["documents"],
    dependencies=[Depends(require_role(UserRole.admin, UserRole.company))],
)


# ── GET /: own documents ───────────────────────────────────────────

@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await DocumentService.list_documents(db, user)


# ── POST /upload: multipart upload ────────────────────────────────

@router.post("/upload", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    contents = await file.read()
    return await DocumentService.store_upload(
        db,
        user,
        filename=file.filename,
        content_type=file.content_type,
        contents=contents,
        name=name,
    )


# ── POST /: metadata record ───────────────────────────────────────

@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(
    body: DocumentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await DocumentService.create_document(db, body, user)


# ── GET /file/{id}: stream stored file ────────────────────────────

@router.get("/file/{id}")
async def get_document_file(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.document)),
):
    document, path = await DocumentService.file_path(db, id)
    media_type = mimetypes.guess_type(path)[0]
    if media_type is None:
        media_type = "application/pdf" if document.type == DocumentType.pdf.value else "application/octet-stream"
    return FileResponse(path, media_type=media_type)


# ── GET /{id} ──────────────────────────────────────────────────────

@router.get("/{id}", response_model=DocumentResponse)
async def get_document(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.document)),
):
    return await DocumentService.get_document(db, id)


# ── DELETE /{id}: removes the file too ────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_document(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.document)),
):
    await DocumentService.delete_document(db, id, user)
    return Response(status_code=204)
