"""
Pytest configuration and shared fixtures.

Service and API tests run against a throwaway SQLite file per test
(aiosqlite), with the schema created from the models. Collaborators
(OCR, storage, notifications, contracts) are in-memory fakes.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest_recruitment.db")

import asyncio
import uuid
from typing import Any, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from recruitment.core.context import RequestContext
from recruitment.core.permissions import Permissions
from recruitment.core.pipeline import CandidateStatus
from recruitment.db.base import Base
from recruitment.models import Candidate, OnboardingForm
from recruitment.repositories.onboarding_link_repository import OnboardingLinkRepository
from recruitment.schemas.candidate import CandidateCreate
from recruitment.schemas.onboarding import DeclarationChecklist, OnboardingSubmission, RecruiterFormUpdate
from recruitment.services.declaration import default_declaration_checklist
from recruitment.services.document_intake_service import DocumentIntakeService
from recruitment.services.ocr.base import OcrExtraction
from recruitment.services.ocr.ktp_fields import map_ktp_to_form
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.pipeline_factory import build_pipeline
from recruitment.services.public_onboarding_service import PublicOnboardingService


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "sqlite: uses a throwaway SQLite database, no server needed")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


# --- Fakes -----------------------------------------------------------------------


class FakeOcrExtractor:
    """Returns a fixed extraction; can be slowed down or made to fail."""

    provider = "fake"

    def __init__(
        self,
        fields: Optional[Dict[str, Any]] = None,
        confidence: float = 0.9,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ):
        self.fields = fields or {}
        self.confidence = confidence
        self.delay = delay
        self.error = error
        self.calls = 0

    async def extract(self, image_bytes: bytes, content_type: str) -> OcrExtraction:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return OcrExtraction(fields=dict(self.fields), confidence=self.confidence)


class SpyMapper:
    """Records every call before delegating to the real KTP field mapper."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, fields):
        self.calls.append(dict(fields))
        return map_ktp_to_form(fields)


class MemoryStorage:
    def __init__(self):
        self.files: Dict[str, bytes] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.files[key] = data
        return key

    async def get(self, ref: str) -> bytes:
        return self.files[ref]


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.stages: List[tuple] = []
        self.decisions: List[tuple] = []

    async def stage_changed(self, tenant_id, candidate_id, from_status, to_status, actor):
        if self.fail:
            raise RuntimeError("notification service down")
        self.stages.append((candidate_id, from_status, to_status))

    async def hrd_decided(self, tenant_id, candidate_id, form_id, decision, actor, comment=None):
        if self.fail:
            raise RuntimeError("notification service down")
        self.decisions.append((form_id, decision, comment))


class RecordingContractCreator:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.requests = []

    async def request_contract(self, request):
        if self.fail:
            raise RuntimeError("contract service down")
        self.requests.append(request)


def checked_declaration(unchecked: Iterable[str] = ()) -> DeclarationChecklist:
    """Default checklist with everything ticked except ``unchecked`` ids."""
    unchecked = set(unchecked)
    checklist = default_declaration_checklist()
    for item in checklist.ketentuan + checklist.sanksi + [checklist.final_declaration]:
        item.checked = item.id not in unchecked
    return checklist


KTP_FIELDS = {
    "nik": "3201234567890001",
    "nama": "BUDI SANTOSO",
    "tempat_lahir": "BOGOR",
    "tanggal_lahir": "17-08-1990",
    "jenis_kelamin": "LAKI-LAKI",
    "alamat": "JL. MAWAR NO. 5",
    "rt_rw": "003/007",
    "kel_desa": "SUKAMAJU",
    "kecamatan": "CIBINONG",
    "kabupaten_kota": "KABUPATEN BOGOR",
    "provinsi": "JAWA BARAT",
    "agama": "ISLAM",
    "status_perkawinan": "BELUM KAWIN",
}


# --- Database --------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'recruitment.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def tenant_id():
    return uuid.uuid4()


@pytest.fixture
def recruiter(tenant_id):
    return RequestContext(
        tenant_id=tenant_id,
        user_id="recruiter@example.com",
        permissions=frozenset({Permissions.CANDIDATES_WRITE, Permissions.ONBOARDING_REVIEW}),
    )


@pytest.fixture
def hrd(tenant_id):
    return RequestContext(
        tenant_id=tenant_id,
        user_id="hrd@example.com",
        permissions=frozenset({Permissions.HRD_DECIDE}),
    )


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def contracts():
    return RecordingContractCreator()


# --- Pipeline driver -------------------------------------------------------------------

TO_ONBOARDING = [
    CandidateStatus.SCREENING,
    CandidateStatus.SCREENED_PASS,
    CandidateStatus.SUBMITTED,
    CandidateStatus.INTERVIEW_SCHEDULED,
    CandidateStatus.INTERVIEW_PASSED,
    CandidateStatus.ONBOARDING,
]


class PipelineDriver:
    """Walks candidates through the pipeline; each step uses its own session like a request would."""

    def __init__(self, session_factory, recruiter: RequestContext, storage: MemoryStorage):
        self.session_factory = session_factory
        self.recruiter = recruiter
        self.storage = storage

    async def new_candidate(self, name: str = "Budi Santoso") -> Candidate:
        async with self.session_factory() as db:
            return await build_pipeline(db).create_candidate(self.recruiter, CandidateCreate(full_name=name))

    async def move(self, candidate_id, *targets: CandidateStatus) -> Candidate:
        async with self.session_factory() as db:
            pipeline = build_pipeline(db)
            candidate = None
            for target in targets:
                candidate = await pipeline.transition(self.recruiter, candidate_id, target)
            return candidate

    async def candidate_in_onboarding(self, name: str = "Budi Santoso") -> Candidate:
        candidate = await self.new_candidate(name)
        return await self.move(candidate.id, *TO_ONBOARDING)

    async def latest_token(self, candidate_id) -> str:
        async with self.session_factory() as db:
            link = await OnboardingLinkRepository(db).latest_for_candidate(self.recruiter.tenant_id, candidate_id)
            return link.token

    async def status_of(self, candidate_id) -> CandidateStatus:
        async with self.session_factory() as db:
            candidate = await build_pipeline(db).get_candidate(self.recruiter, candidate_id)
            return candidate.status

    async def form_of(self, candidate_id) -> OnboardingForm:
        async with self.session_factory() as db:
            return await OnboardingFormService(db).get(self.recruiter, candidate_id)

    async def upload(
        self,
        token: str,
        document_type: str,
        extractor: Optional[FakeOcrExtractor] = None,
        content_type: str = "image/jpeg",
        data: bytes = b"\xff\xd8\xff fake image",
        **kwargs,
    ):
        async with self.session_factory() as db:
            service = DocumentIntakeService(db, extractor, self.storage, **kwargs)
            return await service.upload_document(
                token, data, document_type, content_type=content_type, filename=f"{document_type}.jpg"
            )

    async def submit(self, token: str, declaration: Optional[DeclarationChecklist] = None, **fields):
        submission = OnboardingSubmission(
            declaration=declaration or checked_declaration(),
            **fields,
        )
        async with self.session_factory() as db:
            return await PublicOnboardingService(db, build_pipeline(db)).submit(token, submission)

    async def submitted_candidate(self, name: str = "Budi Santoso") -> Candidate:
        candidate = await self.candidate_in_onboarding(name)
        token = await self.latest_token(candidate.id)
        await self.upload(token, "ktp", FakeOcrExtractor(KTP_FIELDS, confidence=0.9))
        await self.upload(token, "kk", content_type="application/pdf")
        await self.submit(token, bank_name="BRI", bank_account_number="0123456789")
        return candidate

    async def candidate_awaiting_hrd(self, name: str = "Budi Santoso"):
        """Submitted, reviewed, terms filled and sent to HRD. Returns (candidate, form)."""
        candidate = await self.submitted_candidate(name)
        async with self.session_factory() as db:
            forms = OnboardingFormService(db)
            await forms.update_by_recruiter(
                self.recruiter,
                candidate.id,
                RecruiterFormUpdate(
                    employment_start_date="2026-11-02",
                    employment_duration_months=12,
                    employment_salary="5500000",
                ),
            )
            await forms.mark_data_reviewed(self.recruiter, candidate.id)
        await self.move(candidate.id, CandidateStatus.CONTRACT_REQUESTED)
        return candidate, await self.form_of(candidate.id)


@pytest.fixture
def driver(session_factory, recruiter, storage):
    return PipelineDriver(session_factory, recruiter, storage)
