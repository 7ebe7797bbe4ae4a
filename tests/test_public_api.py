"""HTTP-level tests: headers, permissions, public onboarding endpoints and errors."""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import KTP_FIELDS, FakeOcrExtractor, checked_declaration
from recruitment.core.config import settings
from recruitment.core.dependencies import (
    get_contract_creator,
    get_db,
    get_file_storage,
    get_notifier,
    get_ocr_extractor,
)
from recruitment.main import app

pytestmark = pytest.mark.sqlite


@pytest.fixture
def extractor():
    return FakeOcrExtractor(KTP_FIELDS, confidence=0.9)


@pytest_asyncio.fixture
async def client(session_factory, storage, notifier, contracts, extractor):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ocr_extractor] = lambda: extractor
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_contract_creator] = lambda: contracts

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http

    app.dependency_overrides.clear()


@pytest.fixture
def recruiter_headers(recruiter):
    return {
        "X-Tenant-ID": str(recruiter.tenant_id),
        "X-User-ID": recruiter.user_id,
        "X-Permissions": ",".join(sorted(recruiter.permissions)),
    }


@pytest.fixture
def hrd_headers(hrd):
    return {
        "X-Tenant-ID": str(hrd.tenant_id),
        "X-User-ID": hrd.user_id,
        "X-Permissions": "hrd:decide",
    }


async def _candidate_in_onboarding(client, headers):
    response = await client.post("/candidates", json={"full_name": "Eka Putri"}, headers=headers)
    assert response.status_code == 201
    candidate_id = response.json()["id"]
    for target in (
        "screening",
        "screened_pass",
        "submitted",
        "interview_scheduled",
        "interview_passed",
        "onboarding",
    ):
        response = await client.post(
            f"/candidates/{candidate_id}/transitions",
            json={"target_status": target},
            headers=headers,
        )
        assert response.status_code == 200, response.text
    link = await client.get(f"/candidates/{candidate_id}/onboarding-link", headers=headers)
    assert link.status_code == 200
    return candidate_id, link.json()["token"]


async def _upload(client, token, document_type, content_type="image/jpeg", data=b"\xff\xd8\xff image"):
    return await client.post(
        f"/public/onboarding/{token}/documents",
        data={"document_type": document_type},
        files={"file": (f"{document_type}.bin", data, content_type)},
    )


@pytest.mark.asyncio
async def test_health_reports_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    assert body["alembic_head"] == "0001_onboarding_pipeline"
    assert body["alembic_head_ok"] is False
    assert body["ocr_enabled"] is True
    assert body["storage_backend"] == "MemoryStorage"


@pytest.mark.asyncio
async def test_tenant_header_is_required(client, recruiter_headers):
    headers = dict(recruiter_headers)
    headers.pop("X-Tenant-ID")

    response = await client.get("/candidates", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "tenant_required"


@pytest.mark.asyncio
async def test_tenant_header_must_be_uuid(client, recruiter_headers):
    response = await client.get("/candidates", headers={**recruiter_headers, "X-Tenant-ID": "acme"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "tenant_invalid"


@pytest.mark.asyncio
async def test_user_header_is_required(client, recruiter_headers):
    headers = dict(recruiter_headers)
    headers.pop("X-User-ID")

    response = await client.get("/candidates", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthenticated"


@pytest.mark.asyncio
async def test_missing_permission_is_forbidden(client, hrd_headers):
    response = await client.post("/candidates", json={"full_name": "Eka Putri"}, headers=hrd_headers)

    assert response.status_code == 403
    assert response.json()["error"]["details"] == {"permission": "candidates:write"}


@pytest.mark.asyncio
async def test_invalid_transition_is_a_conflict(client, recruiter_headers):
    created = await client.post("/candidates", json={"full_name": "Eka Putri"}, headers=recruiter_headers)
    candidate_id = created.json()["id"]

    response = await client.post(
        f"/candidates/{candidate_id}/transitions",
        json={"target_status": "hired"},
        headers=recruiter_headers,
    )

    assert response.status_code == 409
    assert response.json()["error"] == {
        "code": "invalid_transition",
        "message": "Cannot move candidate from 'new' to 'hired'",
        "details": {"current": "new", "requested": "hired"},
    }


@pytest.mark.asyncio
async def test_link_not_issued_yet(client, recruiter_headers):
    created = await client.post("/candidates", json={"full_name": "Eka Putri"}, headers=recruiter_headers)

    response = await client.get(f"/candidates/{created.json()['id']}/onboarding-link", headers=recruiter_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "link_not_issued"


@pytest.mark.asyncio
async def test_public_onboarding_through_http(client, recruiter_headers, extractor, storage):
    candidate_id, token = await _candidate_in_onboarding(client, recruiter_headers)

    view = await client.get(f"/public/onboarding/{token}")
    assert view.status_code == 200
    assert view.json()["full_name"] == "Eka Putri"

    ktp = await _upload(client, token, "ktp")
    assert ktp.status_code == 201, ktp.text
    assert ktp.json()["extracted_data"]["id_number"] == "3201234567890001"
    assert extractor.calls == 1

    kk = await _upload(client, token, "kk", content_type="application/pdf", data=b"%PDF-1.4")
    assert kk.status_code == 201

    saved = await client.patch(f"/public/onboarding/{token}/form", json={"bank_name": "Mandiri"})
    assert saved.status_code == 200
    assert saved.json()["gender"] == "male"

    form = await client.get(f"/public/onboarding/{token}/form")
    assert form.json()["uploaded_document_types"] == ["kk", "ktp"]
    assert form.json()["form"]["bank_name"] == "Mandiri"

    declaration = checked_declaration(unchecked=["k2", "final"]).model_dump(mode="json")
    refused = await client.post(f"/public/onboarding/{token}/submit", json={"declaration": declaration})
    assert refused.status_code == 422
    assert refused.json()["error"]["code"] == "missing_acknowledgements"
    assert refused.json()["error"]["details"]["ids"] == ["k2", "final"]

    declaration = checked_declaration().model_dump(mode="json")
    submitted = await client.post(f"/public/onboarding/{token}/submit", json={"declaration": declaration})
    assert submitted.status_code == 200, submitted.text
    assert submitted.json()["submitted_at"] is not None

    candidate = await client.get(f"/candidates/{candidate_id}", headers=recruiter_headers)
    assert candidate.json()["status"] == "onboarding_completed"

    documents = await client.get(f"/candidates/{candidate_id}/documents", headers=recruiter_headers)
    kk_document = next(doc for doc in documents.json() if doc["document_type"] == "kk")
    content = await client.get(
        f"/candidates/{candidate_id}/documents/{kk_document['id']}/content", headers=recruiter_headers
    )
    assert content.status_code == 200
    assert content.content == b"%PDF-1.4"
    assert content.headers["content-type"] == "application/pdf"


@pytest.mark.asyncio
async def test_link_failures_share_one_response(client, recruiter_headers):
    candidate_id, token = await _candidate_in_onboarding(client, recruiter_headers)
    await _upload(client, token, "ktp")
    await _upload(client, token, "kk")
    declaration = checked_declaration().model_dump(mode="json")
    await client.post(f"/public/onboarding/{token}/submit", json={"declaration": declaration})

    used = await client.get(f"/public/onboarding/{token}")
    unknown = await client.get("/public/onboarding/does-not-exist")

    assert used.status_code == unknown.status_code == 404
    assert used.json() == unknown.json() == {
        "error": {"code": "link_invalid", "message": "Link invalid or expired"}
    }


@pytest.mark.asyncio
async def test_low_confidence_upload_asks_for_a_new_photo(client, recruiter_headers, extractor):
    _, token = await _candidate_in_onboarding(client, recruiter_headers)
    extractor.confidence = 0.3

    response = await _upload(client, token, "ktp")

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "low_confidence"
    assert response.json()["error"]["details"]["confidence"] == 0.3


@pytest.mark.asyncio
async def test_ktp_pdf_is_unsupported(client, recruiter_headers):
    _, token = await _candidate_in_onboarding(client, recruiter_headers)

    response = await _upload(client, token, "ktp", content_type="application/pdf")

    assert response.status_code == 415
    assert response.json()["error"]["code"] == "unsupported_file_type"


@pytest.mark.asyncio
async def test_oversized_upload_is_refused_over_http(client, recruiter_headers, storage, monkeypatch):
    _, token = await _candidate_in_onboarding(client, recruiter_headers)
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 16)

    response = await _upload(client, token, "kk", data=b"x" * 64)

    assert response.status_code == 413
    details = response.json()["error"]["details"]
    assert details["limit"] == 16
    assert details["size"] > 16
    assert storage.files == {}


@pytest.mark.asyncio
async def test_hrd_reject_requires_comment_over_http(client, hrd_headers):
    response = await client.post(f"/hrd/forms/{uuid.uuid4()}/reject", json={"comment": " "}, headers=hrd_headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "comment_required"
