"""HRD queue, approve/reject decisions and reopening."""

import asyncio
from datetime import date

import pytest

from conftest import RecordingContractCreator, RecordingNotifier
from recruitment.core.pipeline import CandidateStatus
from recruitment.errors import AlreadyDecided, CommentRequired, IncompleteOnboarding
from recruitment.schemas.onboarding import RecruiterFormUpdate
from recruitment.services.onboarding_form_service import OnboardingFormService
from recruitment.services.pipeline_factory import build_hrd_service

pytestmark = pytest.mark.sqlite


@pytest.mark.asyncio
async def test_form_shows_up_in_pending_queue(db, hrd, driver):
    candidate, form = await driver.candidate_awaiting_hrd("Citra Lestari")

    pending = await build_hrd_service(db).list_pending(hrd)

    assert [item.id for item in pending] == [form.id]
    assert pending[0].candidate_name == "Citra Lestari"
    assert pending[0].submitted_for_hrd_at is not None
    assert pending[0].hrd_decision is None


@pytest.mark.asyncio
async def test_approve_hires_and_requests_contract(db, hrd, driver, contracts, notifier):
    candidate, form = await driver.candidate_awaiting_hrd()

    request = await build_hrd_service(db, contracts=contracts, notifier=notifier).approve(hrd, form.id)

    assert request.candidate_id == candidate.id
    assert request.employment_terms.start_date == date(2026, 11, 2)
    assert request.employment_terms.duration_months == 12
    assert request.employment_terms.salary == "5500000"
    assert request.approved_by == hrd.actor
    assert contracts.requests == [request]
    assert notifier.decisions == [(form.id, "approved", None)]
    assert (candidate.id, "contract_requested", "hired") in notifier.stages

    assert await driver.status_of(candidate.id) == CandidateStatus.HIRED
    decided = await driver.form_of(candidate.id)
    assert decided.hrd_approved_at is not None
    assert decided.locked_at is not None
    assert decided.hrd_decided_by == hrd.actor


@pytest.mark.asyncio
async def test_second_approve_is_refused(session_factory, hrd, driver, contracts):
    _, form = await driver.candidate_awaiting_hrd()
    async with session_factory() as db:
        await build_hrd_service(db, contracts=contracts).approve(hrd, form.id)

    async with session_factory() as db:
        with pytest.raises(AlreadyDecided) as exc_info:
            await build_hrd_service(db, contracts=contracts).approve(hrd, form.id)

    assert exc_info.value.status_code == 409
    assert exc_info.value.details["decision"] == "approved"
    assert len(contracts.requests) == 1


@pytest.mark.asyncio
async def test_concurrent_approve_and_reject_have_one_winner(session_factory, hrd, driver, contracts):
    candidate, form = await driver.candidate_awaiting_hrd()

    async def approve():
        async with session_factory() as db:
            return await build_hrd_service(db, contracts=contracts).approve(hrd, form.id)

    async def reject():
        async with session_factory() as db:
            return await build_hrd_service(db, contracts=contracts).reject(hrd, form.id, "missing KK")

    results = await asyncio.gather(approve(), reject(), return_exceptions=True)

    failures = [result for result in results if isinstance(result, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], AlreadyDecided)

    decided = await driver.form_of(candidate.id)
    status = await driver.status_of(candidate.id)
    if isinstance(results[1], AlreadyDecided):
        assert decided.hrd_approved_at is not None and decided.hrd_rejected_at is None
        assert status == CandidateStatus.HIRED
        assert len(contracts.requests) == 1
    else:
        assert decided.hrd_rejected_at is not None and decided.hrd_approved_at is None
        assert status == CandidateStatus.ONBOARDING_COMPLETED
        assert contracts.requests == []


@pytest.mark.asyncio
async def test_reject_requires_a_comment(session_factory, hrd, driver):
    candidate, form = await driver.candidate_awaiting_hrd()

    async with session_factory() as db:
        for comment in (None, "", "   "):
            with pytest.raises(CommentRequired):
                await build_hrd_service(db).reject(hrd, form.id, comment)

    untouched = await driver.form_of(candidate.id)
    assert untouched.hrd_rejected_at is None
    assert untouched.locked_at is None
    assert await driver.status_of(candidate.id) == CandidateStatus.CONTRACT_REQUESTED


@pytest.mark.asyncio
async def test_reject_returns_candidate_to_recruiter(session_factory, hrd, driver, notifier):
    candidate, form = await driver.candidate_awaiting_hrd()

    async with session_factory() as db:
        rejected = await build_hrd_service(db, notifier=notifier).reject(hrd, form.id, "missing KK")

    assert rejected.hrd_comment == "missing KK"
    assert rejected.hrd_decision == "rejected"
    assert notifier.decisions == [(form.id, "rejected", "missing KK")]
    assert await driver.status_of(candidate.id) == CandidateStatus.ONBOARDING_COMPLETED

    async with session_factory() as db:
        service = build_hrd_service(db)
        assert await service.list_pending(hrd) == []
        history = await service.decisions_for_form(hrd, form.id)
    assert [(item.decision, item.comment) for item in history] == [("rejected", "missing KK")]


@pytest.mark.asyncio
async def test_reopened_form_can_be_sent_again_and_approved(session_factory, recruiter, hrd, driver, contracts):
    candidate, form = await driver.candidate_awaiting_hrd()
    async with session_factory() as db:
        await build_hrd_service(db).reject(hrd, form.id, "salary is wrong")

    async with session_factory() as db:
        reopened = await build_hrd_service(db).reopen(recruiter, form.id)
    assert reopened.hrd_rejected_at is None
    assert reopened.locked_at is None
    assert reopened.submitted_for_hrd_at is None
    assert reopened.data_reviewed_at is None
    assert reopened.hrd_comment == "salary is wrong"

    async with session_factory() as db:
        forms = OnboardingFormService(db)
        await forms.update_by_recruiter(recruiter, candidate.id, RecruiterFormUpdate(employment_salary="6000000"))
        await forms.mark_data_reviewed(recruiter, candidate.id)
    await driver.move(candidate.id, CandidateStatus.CONTRACT_REQUESTED)

    async with session_factory() as db:
        request = await build_hrd_service(db, contracts=contracts).approve(hrd, form.id)
        history = await build_hrd_service(db).decisions_for_form(hrd, form.id)

    assert request.employment_terms.salary == "6000000"
    assert await driver.status_of(candidate.id) == CandidateStatus.HIRED
    assert [item.decision for item in history] == ["rejected", "reopened", "approved"]


@pytest.mark.asyncio
async def test_approved_form_cannot_be_reopened(session_factory, recruiter, hrd, driver):
    _, form = await driver.candidate_awaiting_hrd()
    async with session_factory() as db:
        await build_hrd_service(db).approve(hrd, form.id)

    async with session_factory() as db:
        with pytest.raises(AlreadyDecided):
            await build_hrd_service(db).reopen(recruiter, form.id)


@pytest.mark.asyncio
async def test_approve_needs_employment_terms(db, recruiter, hrd, driver):
    candidate = await driver.submitted_candidate()
    form = await OnboardingFormService(db).get(recruiter, candidate.id)

    with pytest.raises(IncompleteOnboarding) as exc_info:
        await build_hrd_service(db).approve(hrd, form.id)

    assert exc_info.value.missing == [
        "employment_start_date",
        "employment_duration_months",
        "employment_salary",
    ]


@pytest.mark.asyncio
async def test_form_not_sent_to_hrd_cannot_be_decided(session_factory, recruiter, hrd, driver):
    candidate, form = await driver.candidate_awaiting_hrd()
    async with session_factory() as db:
        await build_hrd_service(db).reject(hrd, form.id, "redo")
    async with session_factory() as db:
        await build_hrd_service(db).reopen(recruiter, form.id)

    async with session_factory() as db:
        with pytest.raises(IncompleteOnboarding) as approve_info:
            await build_hrd_service(db).approve(hrd, form.id)
    async with session_factory() as db:
        with pytest.raises(IncompleteOnboarding) as reject_info:
            await build_hrd_service(db).reject(hrd, form.id, "still wrong")

    assert approve_info.value.missing == reject_info.value.missing == ["submitted_for_hrd_at"]
    assert await driver.status_of(candidate.id) == CandidateStatus.ONBOARDING_COMPLETED


@pytest.mark.asyncio
async def test_collaborator_failures_do_not_undo_approval(db, hrd, driver):
    candidate, form = await driver.candidate_awaiting_hrd()
    contracts = RecordingContractCreator(fail=True)

    request = await build_hrd_service(db, contracts=contracts, notifier=RecordingNotifier(fail=True)).approve(
        hrd, form.id
    )

    assert request.form_id == form.id
    assert await driver.status_of(candidate.id) == CandidateStatus.HIRED


@pytest.mark.asyncio
async def test_rejecting_the_candidate_withdraws_the_hrd_request(session_factory, recruiter, hrd, driver, contracts):
    candidate, form = await driver.candidate_awaiting_hrd()

    await driver.move(candidate.id, CandidateStatus.REJECTED)

    async with session_factory() as db:
        service = build_hrd_service(db, contracts=contracts)
        assert await service.list_pending(hrd) == []
        with pytest.raises(IncompleteOnboarding) as exc_info:
            await service.approve(hrd, form.id)
    assert exc_info.value.missing == ["submitted_for_hrd_at"]

    withdrawn = await driver.form_of(candidate.id)
    assert withdrawn.submitted_for_hrd_at is None
    assert withdrawn.hrd_decision is None
    assert contracts.requests == []
    assert await driver.status_of(candidate.id) == CandidateStatus.REJECTED

    async with session_factory() as db:
        history = await build_hrd_service(db).decisions_for_form(hrd, form.id)
    assert [(item.decision, item.actor) for item in history] == [("withdrawn", recruiter.actor)]


@pytest.mark.asyncio
async def test_rejecting_before_onboarding_needs_no_form(driver):
    candidate = await driver.new_candidate()

    await driver.move(candidate.id, CandidateStatus.REJECTED)

    assert await driver.status_of(candidate.id) == CandidateStatus.REJECTED
