"""Document tests — multipart upload, type checks, serving and deleting files."""

from __future__ import annotations

import os

import pytest

from shift_manager.common.constants import UserRole
from shift_manager.config import settings
from shift_manager.documents.service import DocumentService, format_file_size

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF\n"


@pytest.mark.parametrize(
    "size, expected",
    [(512, "512 B"), (2048, "2.0 KB"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


async def _upload(client, headers, *, filename="uctenka.pdf", content_type="application/pdf", data=PDF_BYTES):
    return await client.post(
        "/api/documents/upload",
        files={"file": (filename, data, content_type)},
        data={"name": "Účtenka březen"},
        headers=headers,
    )


async def test_upload_stores_file_and_record(client, company, auth_headers_for):
    resp = await _upload(client, await auth_headers_for(company))
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Účtenka březen"
    assert data["type"] == "pdf"
    assert data["userId"] == company.id
    assert data["path"].startswith(settings.UPLOAD_DIR)
    assert os.path.isfile(data["path"])
    # Stored under a generated name, not the client's
    assert "uctenka" not in os.path.basename(data["path"])


async def test_upload_image_gets_thumbnail(client, company, auth_headers_for):
    resp = await _upload(
        client, await auth_headers_for(company), filename="scan.png", content_type="image/png", data=b"\x89PNG\r\n",
    )
    data = resp.json()
    assert data["type"] == "image"
    assert data["thumbnailPath"] == data["path"]


async def test_upload_rejects_other_types(client, company, auth_headers_for):
    resp = await _upload(
        client, await auth_headers_for(company), filename="notes.txt", content_type="text/plain", data=b"hello",
    )
    assert resp.status_code == 400


async def test_serve_uploaded_file(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    uploaded = await _upload(client, headers)

    resp = await client.get(f"/api/documents/file/{uploaded.json()['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content == PDF_BYTES


@pytest.mark.parametrize(
    "filename, content_type, data",
    [
        ("scan.png", "image/png", b"\x89PNG\r\n\x1a\n"),
        ("anim.gif", "image/gif", b"GIF89a"),
        ("foto.jpeg", "image/jpeg", b"\xff\xd8\xff\xe0"),
    ],
)
async def test_image_served_with_its_own_type(client, company, auth_headers_for, filename, content_type, data):
    headers = await auth_headers_for(company)
    uploaded = await _upload(client, headers, filename=filename, content_type=content_type, data=data)
    assert os.path.splitext(uploaded.json()["path"])[1] in (".png", ".gif", ".jpg")

    resp = await client.get(f"/api/documents/file/{uploaded.json()['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == content_type
    assert resp.content == data


async def test_file_outside_upload_dir_not_served(client, company, auth_headers_for, tmp_path):
    outside = tmp_path / "secret.pdf"
    outside.write_bytes(PDF_BYTES)
    headers = await auth_headers_for(company)
    created = await client.post(
        "/api/documents",
        json={"name": "secret", "type": "pdf", "size": "1 KB", "path": str(outside)},
        headers=headers,
    )
    assert created.status_code == 201

    resp = await client.get(f"/api/documents/file/{created.json()['id']}", headers=headers)
    assert resp.status_code == 404


async def test_metadata_record_validation(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    missing = await client.post("/api/documents", json={"name": "x"}, headers=headers)
    assert missing.status_code == 400

    bad_type = await client.post(
        "/api/documents",
        json={"name": "x", "type": "video", "size": "1 KB", "path": "/tmp/x"},
        headers=headers,
    )
    assert bad_type.status_code == 400


async def test_delete_removes_file(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    uploaded = (await _upload(client, headers)).json()

    resp = await client.delete(f"/api/documents/{uploaded['id']}", headers=headers)
    assert resp.status_code == 204
    assert not os.path.exists(uploaded["path"])


async def test_failed_delete_keeps_file(client, db, company, auth_headers_for, monkeypatch):
    uploaded = (await _upload(client, await auth_headers_for(company))).json()

    async def broken_flush(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(db, "flush", broken_flush)
    with pytest.raises(RuntimeError):
        await DocumentService.delete_document(db, uploaded["id"], company)

    # The record survives, so the file must too
    assert os.path.isfile(uploaded["path"])


async def test_documents_are_private(client, company, make_user, worker, auth_headers_for):
    other = await make_user(role=UserRole.company)
    uploaded = (await _upload(client, await auth_headers_for(other))).json()

    headers = await auth_headers_for(company)
    assert (await client.get(f"/api/documents/{uploaded['id']}", headers=headers)).status_code == 403
    assert (await client.get("/api/documents", headers=headers)).json() == []

    as_worker = await client.get("/api/documents", headers=await auth_headers_for(worker))
    assert as_worker.status_code == 403
