"""
ATS Models - Applicant Tracking System

This module implements the tenant-database recruiting records:
- Candidates and their login accounts
- Job descriptions with shareable links and application counters
- Applications with screening, feedback and rejection details
- The append-only application timeline
- Interviews and communications attached to an application

Status changes go through ``ats.lifecycle``; the adapters on
``Application`` persist the resulting status and timeline rows in one
transaction on the application's own database.
"""

import secrets
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.core.validators import MaxLengthValidator, MaxValueValidator, MinValueValidator
from django.db import models, transaction
from django.db.models import Count, F, Max, Q
from django.utils import timezone
from django.utils.text import slugify
from django.utils.translation import gettext_lazy as _

from api.exceptions import InvalidInputError
from core.db.exceptions import ImmutableRecordError
from core.db.models import AppendOnlyQuerySet, TimestampedModel, UndeletableQuerySet
from core_identity.models import CredentialMixin, IdentityMixin, IdentityType, normalize_email
from tenants.logging import audit_logger

from . import lifecycle
from .lifecycle import Actor, ApplicationStatus, Transition


# =============================================================================
# CANDIDATES
# =============================================================================

class CandidateQuerySet(models.QuerySet):

    def for_login(self):
        return self.select_related('account')

    def without_credentials(self):
        """Load candidates for request authentication; the hash is never read."""
        return self.select_related('account').defer('account__password')

    def active(self):
        return self.filter(account__is_active=True)


class Candidate(IdentityMixin, TimestampedModel):
    """
    Candidate profile of one tenant.

    Email is unique within the tenant database only; the same person may
    register with several tenants. Password and lockout state live on the
    related ``CandidateAccount``.
    """

    class DocumentType(models.TextChoices):
        RESUME = 'resume', _('Resume')
        COVER_LETTER = 'coverLetter', _('Cover letter')
        CERTIFICATE = 'certificate', _('Certificate')
        PROFILE_PICTURE = 'profilePicture', _('Profile picture')

    identity_type = IdentityType.CANDIDATE

    # Personal info
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True)

    # Profile sections
    contact_info = models.JSONField(default=dict, blank=True)
    professional_info = models.JSONField(default=dict, blank=True)
    education = models.JSONField(default=list, blank=True)
    experience = models.JSONField(default=list, blank=True)
    preferences = models.JSONField(default=dict, blank=True)

    # One record per DocumentType: url, public_id, original_name, mime_type, size, uploaded_at
    documents = models.JSONField(default=dict, blank=True)

    objects = CandidateQuerySet.as_manager()

    class Meta:
        verbose_name = _('Candidate')
        verbose_name_plural = _('Candidates')
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    @property
    def credentials(self):
        return self.account

    @property
    def account_is_active(self) -> bool:
        try:
            return self.account.is_active
        except ObjectDoesNotExist:
            return False

    def get_document(self, document_type: str) -> Optional[Dict]:
        return (self.documents or {}).get(document_type)

    def set_document(self, document_type: str, record: Dict) -> Optional[Dict]:
        """
        Store ``record`` under ``document_type``.

        Returns:
            The record it replaced, if any.
        """
        documents = dict(self.documents or {})
        previous = documents.get(document_type)
        documents[document_type] = record
        self.documents = documents
        self.save(using=self._state.db, update_fields=['documents', 'updated_at'])
        return previous


class CandidateAccount(CredentialMixin, TimestampedModel):
    """Login account of a candidate."""

    candidate = models.OneToOneField(
        Candidate,
        on_delete=models.CASCADE,
        related_name='account'
    )
    is_active = models.BooleanField(default=True)
    is_email_verified = models.BooleanField(default=False)

    class Meta:
        verbose_name = _('Candidate account')
        verbose_name_plural = _('Candidate accounts')

    def __str__(self):
        return f"Account of {self.candidate_id}"


# =============================================================================
# JOB DESCRIPTIONS
# =============================================================================

class JobDescriptionQuerySet(models.QuerySet):

    def open_for_applications(self):
        return self.filter(is_active=True, status=JobDescription.JobStatus.PUBLISHED)

    def by_reference(self, reference: str):
        """Match a job by id or by shareable link."""
        condition = Q(shareable_link=reference)
        try:
            condition |= Q(pk=uuid.UUID(str(reference)))
        except ValueError:
            pass
        return self.filter(condition)


class JobDescription(TimestampedModel):
    """
    Job opening published by a tenant.

    Candidates reach it through its id or its shareable link.
    """

    class JobStatus(models.TextChoices):
        DRAFT = 'draft', _('Draft')
        PUBLISHED = 'published', _('Published')
        CLOSED = 'closed', _('Closed')
        ARCHIVED = 'archived', _('Archived')

    class EmploymentType(models.TextChoices):
        FULL_TIME = 'full_time', _('Full-time')
        PART_TIME = 'part_time', _('Part-time')
        CONTRACT = 'contract', _('Contract')
        INTERNSHIP = 'internship', _('Internship')
        TEMPORARY = 'temporary', _('Temporary')

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200, blank=True)
    employment_type = models.CharField(
        max_length=20,
        choices=EmploymentType.choices,
        default=EmploymentType.FULL_TIME
    )
    status = models.CharField(
        max_length=20,
        choices=JobStatus.choices,
        default=JobStatus.DRAFT,
        db_index=True
    )
    is_active = models.BooleanField(default=True)
    application_deadline = models.DateTimeField(null=True, blank=True)
    shareable_link = models.SlugField(max_length=80, unique=True, blank=True)

    # Application settings
    allow_multiple_applications = models.BooleanField(default=False)
    applications_count = models.PositiveIntegerField(default=0)

    created_by = models.ForeignKey(
        'core_identity.StaffUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='job_descriptions'
    )

    objects = JobDescriptionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Job description')
        verbose_name_plural = _('Job descriptions')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'is_active'], name='ats_jobdesc_status_2b1f0c_idx'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.shareable_link:
            self.shareable_link = self.generate_shareable_link()
        super().save(*args, **kwargs)

    def generate_shareable_link(self) -> str:
        base = slugify(self.title)[:60] or 'job'
        return f"{base}-{secrets.token_hex(4)}"

    @property
    def is_deadline_passed(self) -> bool:
        return bool(self.application_deadline and self.application_deadline < timezone.now())

    @property
    def is_open(self) -> bool:
        return self.is_active and self.status == self.JobStatus.PUBLISHED

    def increment_applications(self) -> int:
        """Add exactly one to the application counter in the database."""
        type(self)._default_manager.using(self._state.db).filter(pk=self.pk).update(
            applications_count=F('applications_count') + 1
        )
        self.refresh_from_db(using=self._state.db, fields=['applications_count'])
        return self.applications_count


# =============================================================================
# APPLICATIONS
# =============================================================================

class ApplicationQuerySet(UndeletableQuerySet):

    def by_status(self, status: str):
        return self.filter(status=status).select_related('candidate', 'job')

    def for_job(self, job):
        return self.filter(job=job).select_related('candidate')

    def for_candidate(self, candidate):
        return self.filter(candidate=candidate).select_related('job')

    def status_statistics(self, job) -> List[Dict]:
        """Application counts per status for one job: ``[{status, count}]``."""
        return list(
            self.filter(job=job)
            .values('status')
            .annotate(count=Count('id'))
            .order_by('status')
        )


class Application(TimestampedModel):
    """
    A candidate's application to a job description.

    Applications are never deleted. Status, interviews, communications and
    screening change only through the adapter methods below, each of which
    appends to the timeline.
    """

    class RejectionCategory(models.TextChoices):
        QUALIFICATIONS = 'qualifications', _('Qualifications')
        EXPERIENCE = 'experience', _('Experience')
        SKILLS = 'skills', _('Skills')
        CULTURAL_FIT = 'cultural_fit', _('Cultural fit')
        SALARY_EXPECTATIONS = 'salary_expectations', _('Salary expectations')
        AVAILABILITY = 'availability', _('Availability')
        INTERVIEW_PERFORMANCE = 'interview_performance', _('Interview performance')
        OTHER = 'other', _('Other')

    job = models.ForeignKey(
        JobDescription,
        on_delete=models.PROTECT,
        related_name='applications'
    )
    candidate = models.ForeignKey(
        Candidate,
        on_delete=models.PROTECT,
        related_name='applications'
    )
    status = models.CharField(
        max_length=30,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.SUBMITTED,
        db_index=True
    )
    applied_at = models.DateTimeField(default=timezone.now, db_index=True)

    # Application content
    cover_letter = models.TextField(blank=True, validators=[MaxLengthValidator(2000)])
    resume_url = models.CharField(max_length=1000, blank=True)
    skills = models.JSONField(default=list, blank=True)
    current_ctc = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    expected_ctc = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    current_location = models.CharField(max_length=100, blank=True)
    notice_period_days = models.PositiveIntegerField(null=True, blank=True)
    willing_to_relocate = models.BooleanField(default=False)
    custom_answers = models.JSONField(default=list, blank=True)
    documents = models.JSONField(default=dict, blank=True)

    # Screening
    screening_score = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(100)]
    )
    screening_notes = models.TextField(blank=True)
    screened_by = models.ForeignKey(
        'core_identity.StaffUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='screened_applications'
    )
    screened_at = models.DateTimeField(null=True, blank=True)
    screening_criteria = models.JSONField(default=list, blank=True)

    # Recruiter feedback
    recruiter_notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True, help_text=_('Never shown to candidates'))
    feedback_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    feedback_tags = models.JSONField(default=list, blank=True)

    # Rejection
    rejection_category = models.CharField(max_length=30, choices=RejectionCategory.choices, blank=True)
    rejection_details = models.TextField(blank=True)
    rejection_feedback = models.TextField(blank=True, help_text=_('Shared with the candidate'))

    objects = ApplicationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Application')
        verbose_name_plural = _('Applications')
        ordering = ['-applied_at']
        indexes = [
            models.Index(fields=['job', 'status'], name='ats_applica_job_id_5d0a41_idx'),
            models.Index(fields=['candidate', 'applied_at'], name='ats_applica_candida_8e3c27_idx'),
            models.Index(fields=['status', 'applied_at'], name='ats_applica_status_c94b1e_idx'),
        ]

    def __str__(self):
        return f"{self.candidate_id} -> {self.job_id} ({self.status})"

    def delete(self, using=None, keep_parents=False):
        raise ImmutableRecordError(self._meta.label, 'delete')

    @property
    def db_alias(self) -> str:
        return self._state.db

    @property
    def days_since_application(self) -> int:
        return (timezone.now() - self.applied_at).days

    @property
    def is_terminal(self) -> bool:
        return self.status in lifecycle.TERMINAL_STATUSES

    # -------------------------------------------------------------------------
    # Persistence adapters
    # -------------------------------------------------------------------------

    def _locked_status(self) -> str:
        """Current status, read with the row locked for the running transaction."""
        status = (
            type(self)._default_manager.using(self.db_alias)
            .select_for_update()
            .filter(pk=self.pk)
            .values_list('status', flat=True)
            .first()
        )
        return status or self.status

    def _apply(self, transition: Transition, **field_values):
        """Write the new status and ``field_values``, then append the events."""
        self.status = transition.status
        for name, value in field_values.items():
            setattr(self, name, value)

        self.save(using=self.db_alias, update_fields=['status', 'updated_at', *field_values])
        self.append_timeline(transition.events)

    def append_timeline(self, events) -> List['ApplicationTimelineEntry']:
        entries = ApplicationTimelineEntry.objects.using(self.db_alias)
        last_sequence = entries.filter(application=self).aggregate(last=Max('sequence'))['last'] or 0

        return entries.bulk_create([
            ApplicationTimelineEntry(
                application=self,
                sequence=last_sequence + offset,
                action=event.action,
                actor_type=event.actor.actor_type,
                actor_id=event.actor.actor_id or '',
                performed_at=event.performed_at,
                notes=event.notes,
                previous_status=event.previous_status,
                new_status=event.new_status,
            )
            for offset, event in enumerate(events, start=1)
        ])

    def update_status(self, new_status: str, performed_by=None, notes: str = '',
                      rejection_category: str = '', rejection_details: str = '',
                      rejection_feedback: str = '') -> Transition:
        """
        Move the application to ``new_status`` and record it on the timeline.

        Rejection details are stored only when moving to ``rejected``.
        """
        field_values = {}
        if new_status == ApplicationStatus.REJECTED:
            field_values = {
                'rejection_category': rejection_category or '',
                'rejection_details': rejection_details or '',
                'rejection_feedback': rejection_feedback or '',
            }

        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.update_status(
                current, new_status, actor=Actor.for_identity(performed_by), notes=notes
            )
            self._apply(transition, **field_values)

        audit_logger.log_status_change(self, current, transition.status, identity=performed_by)
        return transition

    def withdraw(self, performed_by=None, reason: str = '') -> Transition:
        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.withdraw(current, actor=Actor.for_identity(performed_by), reason=reason)
            self._apply(transition)

        audit_logger.log_status_change(self, current, transition.status, identity=performed_by)
        return transition

    def schedule_interview(self, interview_type: str, scheduled_at: datetime, interviewer=None,
                           duration_minutes: int = 60, meeting_link: str = '', location: str = '',
                           performed_by=None) -> 'Interview':
        """
        Append an interview. Submitted and under-review applications move
        to ``interview_scheduled``.
        """
        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.schedule_interview(
                current, scheduled_at, actor=Actor.for_identity(performed_by or interviewer)
            )

            interviews = Interview.objects.using(self.db_alias)
            last_sequence = interviews.filter(application=self).aggregate(last=Max('sequence'))['last'] or 0
            interview = interviews.create(
                application=self,
                sequence=last_sequence + 1,
                interview_type=interview_type,
                scheduled_at=scheduled_at,
                duration_minutes=duration_minutes,
                interviewer=interviewer,
                meeting_link=meeting_link or '',
                location=location or '',
            )
            self._apply(transition)

        if transition.status != current:
            audit_logger.log_status_change(self, current, transition.status, identity=performed_by)
        return interview

    def add_communication(self, communication_type: str, subject: str = '', content: str = '',
                          sent_by=None) -> 'Communication':
        """Append a communication; the status is left as it is."""
        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.add_communication(
                current, communication_type, subject, actor=Actor.for_identity(sent_by)
            )
            communication = Communication.objects.using(self.db_alias).create(
                application=self,
                communication_type=communication_type,
                subject=subject or '',
                content=content or '',
                sent_by=sent_by,
            )
            self._apply(transition)
        return communication

    def record_screening(self, score: int, screened_by=None, notes: str = '',
                         criteria: Optional[List[Dict]] = None) -> Transition:
        """
        Store the screening result (score 0-100, criteria scores 0-10).

        Raises:
            InvalidInputError: a score is out of range.
        """
        criteria = list(criteria or [])
        for criterion in criteria:
            criterion_score = criterion.get('score')
            if criterion_score is not None and not 0 <= criterion_score <= 10:
                raise InvalidInputError(detail="Screening criteria scores must be between 0 and 10")

        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.record_screening(
                current, score, actor=Actor.for_identity(screened_by), notes=notes
            )
            self._apply(
                transition,
                screening_score=score,
                screening_notes=notes or '',
                screened_by=screened_by,
                screened_at=timezone.now(),
                screening_criteria=criteria,
            )
        return transition

    def record_feedback(self, rating: Optional[int] = None, notes: str = '', internal_notes: str = '',
                        tags: Optional[List[str]] = None, performed_by=None) -> Transition:
        """
        Store the recruiter feedback (rating 1-5, notes, internal notes, tags).

        Internal notes stay off the timeline.
        """
        with transaction.atomic(using=self.db_alias):
            current = self._locked_status()
            transition = lifecycle.record_feedback(
                current, rating, actor=Actor.for_identity(performed_by), notes=notes
            )
            self._apply(
                transition,
                feedback_rating=rating,
                recruiter_notes=notes or '',
                internal_notes=internal_notes or '',
                feedback_tags=list(tags or []),
            )
        return transition


class ApplicationTimelineEntry(models.Model):
    """
    One line of an application's history.

    Entries are inserted once and never changed or removed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    application = models.ForeignKey(
        Application,
        on_delete=models.PROTECT,
        related_name='timeline'
    )
    sequence = models.PositiveIntegerField()
    action = models.CharField(max_length=255)
    actor_type = models.CharField(max_length=20, default='system')
    actor_id = models.CharField(max_length=64, blank=True)
    performed_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)
    previous_status = models.CharField(max_length=30, blank=True)
    new_status = models.CharField(max_length=30, blank=True)

    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        verbose_name = _('Application timeline entry')
        verbose_name_plural = _('Application timeline entries')
        ordering = ['sequence']
        constraints = [
            models.UniqueConstraint(
                fields=['application', 'sequence'],
                name='ats_timeline_unique_application_sequence'
            ),
        ]

    def __str__(self):
        return f"#{self.sequence} {self.action}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(self._meta.label, 'update')
        super().save(*args, **kwargs)

    def delete(self, using=None, keep_parents=False):
        raise ImmutableRecordError(self._meta.label, 'delete')


# =============================================================================
# INTERVIEWS
# =============================================================================

class Interview(TimestampedModel):
    """Interview attached to an application, ordered by ``sequence``."""

    class InterviewType(models.TextChoices):
        PHONE = 'phone', _('Phone')
        VIDEO = 'video', _('Video')
        IN_PERSON = 'in-person', _('In person')
        TECHNICAL = 'technical', _('Technical')
        HR = 'hr', _('HR')
        FINAL = 'final', _('Final')

    class InterviewStatus(models.TextChoices):
        SCHEDULED = 'scheduled', _('Scheduled')
        COMPLETED = 'completed', _('Completed')
        CANCELLED = 'cancelled', _('Cancelled')
        RESCHEDULED = 'rescheduled', _('Rescheduled')

    class Recommendation(models.TextChoices):
        STRONGLY_RECOMMEND = 'strongly_recommend', _('Strongly recommend')
        RECOMMEND = 'recommend', _('Recommend')
        NEUTRAL = 'neutral', _('Neutral')
        NOT_RECOMMEND = 'not_recommend', _('Not recommend')
        STRONGLY_NOT_RECOMMEND = 'strongly_not_recommend', _('Strongly not recommend')

    application = models.ForeignKey(
        Application,
        on_delete=models.PROTECT,
        related_name='interviews'
    )
    sequence = models.PositiveIntegerField()
    interview_type = models.CharField(max_length=20, choices=InterviewType.choices)
    scheduled_at = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField(default=60)
    interviewer = models.ForeignKey(
        'core_identity.StaffUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='interviews'
    )
    status = models.CharField(
        max_length=20,
        choices=InterviewStatus.choices,
        default=InterviewStatus.SCHEDULED
    )

    # Feedback
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    strengths = models.JSONField(default=list, blank=True)
    weaknesses = models.JSONField(default=list, blank=True)
    feedback_notes = models.TextField(blank=True)
    recommendation = models.CharField(max_length=30, choices=Recommendation.choices, blank=True)

    meeting_link = models.URLField(max_length=500, blank=True)
    location = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _('Interview')
        verbose_name_plural = _('Interviews')
        ordering = ['sequence']
        constraints = [
            models.UniqueConstraint(
                fields=['application', 'sequence'],
                name='ats_interview_unique_application_sequence'
            ),
        ]

    def __str__(self):
        return f"{self.get_interview_type_display()} interview #{self.sequence}"

    def submit_feedback(self, rating: int, strengths=None, weaknesses=None, notes: str = '',
                        recommendation: str = '', mark_completed: bool = True,
                        performed_by=None) -> Transition:
        """
        Store interviewer feedback.

        With ``mark_completed`` the interview is completed and an application
        in ``interview_scheduled`` becomes ``interviewed``.

        Raises:
            InvalidInputError: rating outside 1-5 or unknown recommendation.
        """
        if rating is None or not 1 <= rating <= 5:
            raise InvalidInputError(detail="Interview rating must be between 1 and 5")
        if recommendation and recommendation not in self.Recommendation.values:
            raise InvalidInputError(detail=f"Unknown recommendation '{recommendation}'")

        db_alias = self._state.db
        application = self.application
        actor = Actor.for_identity(performed_by)

        with transaction.atomic(using=db_alias):
            self.rating = rating
            self.strengths = list(strengths or [])
            self.weaknesses = list(weaknesses or [])
            self.feedback_notes = notes or ''
            self.recommendation = recommendation or ''
            update_fields = ['rating', 'strengths', 'weaknesses', 'feedback_notes',
                             'recommendation', 'updated_at']
            if mark_completed:
                self.status = self.InterviewStatus.COMPLETED
                update_fields.append('status')
            self.save(using=db_alias, update_fields=update_fields)

            current = application._locked_status()
            transition = lifecycle.complete_interview(
                current, actor=actor, rating=rating, promote=mark_completed
            )
            application._apply(transition)

        if transition.status != current:
            audit_logger.log_status_change(application, current, transition.status, identity=performed_by)
        return transition


# =============================================================================
# COMMUNICATIONS
# =============================================================================

class Communication(models.Model):
    """Message exchanged with the candidate about an application."""

    class CommunicationType(models.TextChoices):
        EMAIL = 'email', _('Email')
        PHONE = 'phone', _('Phone')
        MESSAGE = 'message', _('Message')
        INTERVIEW_INVITE = 'interview_invite', _('Interview invite')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    application = models.ForeignKey(
        Application,
        on_delete=models.PROTECT,
        related_name='communications'
    )
    communication_type = models.CharField(max_length=20, choices=CommunicationType.choices)
    subject = models.CharField(max_length=255, blank=True)
    content = models.TextField(blank=True)
    sent_by = models.ForeignKey(
        'core_identity.StaffUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='communications'
    )
    sent_at = models.DateTimeField(default=timezone.now)
    is_read = models.BooleanField(default=False)

    objects = UndeletableQuerySet.as_manager()

    class Meta:
        verbose_name = _('Communication')
        verbose_name_plural = _('Communications')
        ordering = ['sent_at']

    def __str__(self):
        return f"{self.get_communication_type_display()}: {self.subject}"

    def delete(self, using=None, keep_parents=False):
        raise ImmutableRecordError(self._meta.label, 'delete')

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(using=self._state.db, update_fields=['is_read'])
