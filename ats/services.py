"""
ATS Services - Business logic for candidate-facing operations.

This module provides:
- register_candidate: self-service candidate registration
- apply_to_job: public application flow with duplicate guard
- update_candidate_profile: candidate profile edits
- upload_candidate_document: document upload with compensating cleanup

Every function works on the repositories of one tenant database and
opens its transactions on that database.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from api.exceptions import (
    DeadlinePassedError,
    DuplicateApplicationError,
    DuplicateCandidateError,
    InvalidInputError,
    ResourceNotFoundError,
)
from core.storage import DocumentStorage
from core_identity.models import normalize_email
from tenants.logging import audit_logger
from tenants.repositories import RepositoryFactory

from . import lifecycle
from .lifecycle import Actor
from .models import Application, Candidate, CandidateAccount, JobDescription
from .tasks import send_application_received_email

logger = logging.getLogger(__name__)


PROFILE_FIELDS = (
    'first_name', 'last_name', 'phone',
    'contact_info', 'professional_info', 'education', 'experience', 'preferences',
)

APPLICATION_FIELDS = (
    'cover_letter', 'resume_url', 'skills', 'current_ctc', 'expected_ctc',
    'current_location', 'notice_period_days', 'willing_to_relocate',
    'custom_answers', 'documents',
)


# =============================================================================
# CANDIDATES
# =============================================================================

def _create_candidate(repositories: RepositoryFactory, profile: Dict[str, Any],
                      password: Optional[str]) -> Candidate:
    """Create a candidate and its active, unverified account."""
    candidate = repositories.candidates.create(**{
        key: value for key, value in profile.items()
        if key in PROFILE_FIELDS or key == 'email'
    })

    account = CandidateAccount(candidate=candidate, is_active=True, is_email_verified=False)
    if password:
        account.set_password(password)
    else:
        account.set_unusable_password()
    account.save(using=repositories.db_alias)

    candidate.account = account
    return candidate


def register_candidate(repositories: RepositoryFactory, profile: Dict[str, Any], password: str) -> Candidate:
    """
    Register a candidate with the tenant.

    Raises:
        DuplicateCandidateError: the email is already registered in this tenant.
    """
    profile = dict(profile)
    profile['email'] = normalize_email(profile.get('email'))

    if repositories.candidates.exists(email=profile['email']):
        raise DuplicateCandidateError()

    try:
        with transaction.atomic(using=repositories.db_alias):
            candidate = _create_candidate(repositories, profile, password)
    except IntegrityError as e:
        logger.warning(f"Concurrent registration for {profile['email']}: {e}")
        raise DuplicateCandidateError() from e

    logger.info(f"Candidate {candidate.pk} registered")
    return candidate


def update_candidate_profile(candidate: Candidate, changes: Dict[str, Any]) -> Candidate:
    """Apply profile ``changes``; email, account and documents are never touched."""
    update_fields = []
    for name in PROFILE_FIELDS:
        if name in changes:
            setattr(candidate, name, changes[name])
            update_fields.append(name)

    if update_fields:
        candidate.save(using=candidate._state.db, update_fields=[*update_fields, 'updated_at'])
        logger.info(f"Candidate {candidate.pk} updated {', '.join(update_fields)}")
    return candidate


# =============================================================================
# APPLYING
# =============================================================================

@dataclass(frozen=True)
class ApplyResult:
    application: Application
    candidate: Candidate
    job: JobDescription
    candidate_created: bool = False


def find_open_job(repositories: RepositoryFactory, job_reference: str) -> JobDescription:
    """
    Job by id or shareable link, only while active and published.

    Raises:
        ResourceNotFoundError: no open job matches.
    """
    job = repositories.jobs.all().open_for_applications().by_reference(job_reference).first()
    if job is None:
        raise ResourceNotFoundError(
            detail="Job not found or no longer available",
            resource_id=job_reference,
        )
    return job


def apply_to_job(repositories: RepositoryFactory, job_reference: str,
                 candidate_data: Dict[str, Any], application_data: Dict[str, Any] = None) -> ApplyResult:
    """
    Submit an application for the candidate identified by email.

    Unknown candidates are created on the fly. The job row is locked while
    the duplicate check, the insert and the counter increment run, and the
    confirmation email is queued once the transaction commits.

    Raises:
        ResourceNotFoundError: the job is missing, inactive or unpublished.
        DeadlinePassedError: the application deadline is over.
        DuplicateApplicationError: already applied and the job allows one
            application per candidate.
    """
    db_alias = repositories.db_alias
    application_data = {
        key: value for key, value in (application_data or {}).items()
        if key in APPLICATION_FIELDS
    }

    job = find_open_job(repositories, job_reference)
    if job.is_deadline_passed:
        raise DeadlinePassedError()

    email = normalize_email(candidate_data.get('email'))
    if not email:
        raise InvalidInputError(detail="Candidate email is required")

    with transaction.atomic(using=db_alias):
        job = repositories.jobs.all().select_for_update().get(pk=job.pk)

        candidate = repositories.candidates.all().filter(email=email).first()
        candidate_created = candidate is None
        if candidate_created:
            profile = {**candidate_data, 'email': email}
            candidate = _create_candidate(repositories, profile, candidate_data.get('password'))

        already_applied = repositories.applications.exists(job=job, candidate=candidate)
        if already_applied and not job.allow_multiple_applications:
            raise DuplicateApplicationError()

        application = repositories.applications.create(
            job=job,
            candidate=candidate,
            status=lifecycle.ApplicationStatus.SUBMITTED,
            **application_data,
        )
        application.append_timeline(lifecycle.record_submission(Actor.for_identity(candidate)).events)
        job.increment_applications()

        tenant_key = repositories.tenant_key
        application_id = str(application.pk)
        transaction.on_commit(
            lambda: send_application_received_email.delay(tenant_key, application_id),
            using=db_alias,
            robust=True,
        )

    logger.info(f"Application {application.pk} submitted for job {job.pk}")
    return ApplyResult(
        application=application,
        candidate=candidate,
        job=job,
        candidate_created=candidate_created,
    )


# =============================================================================
# DOCUMENTS
# =============================================================================

def validate_document_file(uploaded_file) -> None:
    """
    Reject files before anything is stored.

    Raises:
        InvalidInputError: no file, a disallowed MIME type or a file over the size limit.
    """
    if uploaded_file is None:
        raise InvalidInputError(detail="Please upload a file")

    allowed_types = getattr(settings, 'CANDIDATE_DOCUMENT_MIME_TYPES', [])
    content_type = getattr(uploaded_file, 'content_type', '') or ''
    if content_type not in allowed_types:
        raise InvalidInputError(
            detail="Invalid file type. Only PDF, DOC, DOCX, JPG, and PNG files are allowed."
        )

    max_size = getattr(settings, 'CANDIDATE_DOCUMENT_MAX_SIZE', 5 * 1024 * 1024)
    if uploaded_file.size > max_size:
        raise InvalidInputError(detail=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB.")


def upload_candidate_document(repositories: RepositoryFactory, candidate_id, uploaded_file,
                              document_type: str, storage: DocumentStorage = None) -> Dict[str, Any]:
    """
    Store a candidate document and record it on the candidate.

    The file is stored first. If the document type is invalid, the
    candidate is gone or anything else fails afterwards, the stored file is
    deleted before the error propagates. Once the candidate row points at
    the new file, the document it replaced is deleted.

    Returns:
        The document record, with its ``type``.
    """
    validate_document_file(uploaded_file)
    storage = storage or DocumentStorage()

    public_id = f"{candidate_id}_{int(time.time() * 1000)}"
    stored = storage.store(uploaded_file, public_id=public_id)

    try:
        if document_type not in Candidate.DocumentType.values:
            raise InvalidInputError(detail="Invalid document type")

        candidate = repositories.candidates.get_or_none(pk=candidate_id)
        if candidate is None:
            raise ResourceNotFoundError(resource_type='Candidate', resource_id=candidate_id)

        record = stored.as_record(uploaded_at=timezone.now())
        previous = candidate.set_document(document_type, record)
    except Exception:
        storage.discard(stored.public_id)
        raise

    if previous and previous.get('public_id') and previous['public_id'] != stored.public_id:
        storage.discard(previous['public_id'])

    audit_logger.log_document_upload(candidate, document_type, stored.public_id)
    return {'type': document_type, **record}
