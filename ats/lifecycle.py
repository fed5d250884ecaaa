"""
ATS Lifecycle - application status transitions without persistence.

Every function takes the current status plus the request details and
returns a ``Transition``: the status after the operation and the timeline
events it produces. Nothing here touches the database; the adapters on
``ats.models.Application`` persist the result.

Statuses:
    submitted -> under_review -> shortlisted -> interview_scheduled
    -> interviewed -> selected | rejected
    on_hold and withdrawn are reachable from any non-terminal status.
    selected, rejected and withdrawn are terminal.

``update_status`` accepts any move unless ``ATS_ENFORCE_STATUS_TRANSITIONS``
is on, in which case moves outside ``ALLOWED_TRANSITIONS`` raise
``InvalidStatusTransitionError``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from api.exceptions import InvalidInputError, InvalidStatusTransitionError


class ApplicationStatus(models.TextChoices):
    SUBMITTED = 'submitted', _('Submitted')
    UNDER_REVIEW = 'under_review', _('Under review')
    SHORTLISTED = 'shortlisted', _('Shortlisted')
    INTERVIEW_SCHEDULED = 'interview_scheduled', _('Interview scheduled')
    INTERVIEWED = 'interviewed', _('Interviewed')
    SELECTED = 'selected', _('Selected')
    REJECTED = 'rejected', _('Rejected')
    WITHDRAWN = 'withdrawn', _('Withdrawn')
    ON_HOLD = 'on_hold', _('On hold')


TERMINAL_STATUSES = frozenset({
    ApplicationStatus.SELECTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})

# Statuses from which scheduling an interview moves the application forward
INTERVIEW_PROMOTION_STATUSES = frozenset({
    ApplicationStatus.SUBMITTED,
    ApplicationStatus.UNDER_REVIEW,
})

_EXITS = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN, ApplicationStatus.ON_HOLD})

ALLOWED_TRANSITIONS = {
    ApplicationStatus.SUBMITTED: _EXITS | {
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW_SCHEDULED,
    },
    ApplicationStatus.UNDER_REVIEW: _EXITS | {
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW_SCHEDULED,
    },
    ApplicationStatus.SHORTLISTED: _EXITS | {ApplicationStatus.INTERVIEW_SCHEDULED},
    ApplicationStatus.INTERVIEW_SCHEDULED: _EXITS | {ApplicationStatus.INTERVIEWED},
    ApplicationStatus.INTERVIEWED: _EXITS | {ApplicationStatus.SELECTED},
    ApplicationStatus.ON_HOLD: frozenset({
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW_SCHEDULED,
        ApplicationStatus.INTERVIEWED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.SELECTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}


# =============================================================================
# VALUE OBJECTS
# =============================================================================

@dataclass(frozen=True)
class Actor:
    """Who performed a timeline action."""

    actor_type: str = 'system'
    actor_id: Optional[str] = None

    @classmethod
    def system(cls) -> 'Actor':
        return cls()

    @classmethod
    def for_identity(cls, identity) -> 'Actor':
        if identity is None:
            return cls.system()
        return cls(actor_type=str(identity.identity_type), actor_id=str(identity.pk))


@dataclass(frozen=True)
class TimelineEvent:
    action: str
    actor: Actor = field(default_factory=Actor.system)
    notes: str = ''
    previous_status: str = ''
    new_status: str = ''
    performed_at: datetime = field(default_factory=timezone.now)


@dataclass(frozen=True)
class Transition:
    """Result of a lifecycle operation."""

    status: str
    events: Tuple[TimelineEvent, ...] = ()

    @property
    def event(self) -> TimelineEvent:
        return self.events[0]


def _validate_status(value: str) -> str:
    if value not in ApplicationStatus.values:
        raise InvalidInputError(detail=f"Unknown application status '{value}'")
    return value


def transitions_enforced() -> bool:
    return bool(getattr(settings, 'ATS_ENFORCE_STATUS_TRANSITIONS', False))


def is_allowed_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


# =============================================================================
# TRANSITIONS
# =============================================================================

def record_submission(actor: Actor = None) -> Transition:
    """Initial timeline entry of a new application."""
    return Transition(
        status=ApplicationStatus.SUBMITTED,
        events=(TimelineEvent(
            action='Application submitted',
            actor=actor or Actor.system(),
            new_status=ApplicationStatus.SUBMITTED,
        ),),
    )


def update_status(current: str, new: str, actor: Actor = None, notes: str = '',
                  strict: Optional[bool] = None) -> Transition:
    """
    Move an application to ``new``.

    Any status may follow any status unless ``strict`` (default: the
    ``ATS_ENFORCE_STATUS_TRANSITIONS`` setting) is on. Exactly one timeline
    event is produced either way.

    Raises:
        InvalidInputError: ``new`` is not an application status.
        InvalidStatusTransitionError: strict mode and the move is not allowed.
    """
    _validate_status(new)
    if strict is None:
        strict = transitions_enforced()

    if strict and not is_allowed_transition(current, new):
        raise InvalidStatusTransitionError(current_status=current, target_status=new)

    return Transition(
        status=new,
        events=(TimelineEvent(
            action=f"Status changed from {current} to {new}",
            actor=actor or Actor.system(),
            notes=notes or '',
            previous_status=current,
            new_status=new,
        ),),
    )


def withdraw(current: str, actor: Actor = None, reason: str = '') -> Transition:
    """
    Candidate-initiated withdrawal.

    Raises:
        InvalidStatusTransitionError: the application is already terminal.
    """
    if current in TERMINAL_STATUSES:
        raise InvalidStatusTransitionError(
            current_status=current,
            target_status=ApplicationStatus.WITHDRAWN,
        )
    return update_status(current, ApplicationStatus.WITHDRAWN, actor=actor, notes=reason)


def schedule_interview(current: str, scheduled_at: datetime, actor: Actor = None) -> Transition:
    """
    Schedule an interview.

    Only submitted and under-review applications move to
    ``interview_scheduled``; any other status is kept. One timeline event
    is produced in every case.
    """
    status = current
    if current in INTERVIEW_PROMOTION_STATUSES:
        status = ApplicationStatus.INTERVIEW_SCHEDULED

    return Transition(
        status=status,
        events=(TimelineEvent(
            action=f"Interview scheduled for {scheduled_at.isoformat()}",
            actor=actor or Actor.system(),
            previous_status=current if status != current else '',
            new_status=status if status != current else '',
        ),),
    )


def complete_interview(current: str, actor: Actor = None, rating: Optional[int] = None,
                       promote: bool = True) -> Transition:
    """
    Interview feedback submitted. With ``promote`` a scheduled application
    becomes interviewed.
    """
    status = current
    if promote and current == ApplicationStatus.INTERVIEW_SCHEDULED:
        status = ApplicationStatus.INTERVIEWED

    action = 'Interview feedback submitted'
    if rating is not None:
        action = f"{action} (rating {rating}/5)"

    return Transition(
        status=status,
        events=(TimelineEvent(
            action=action,
            actor=actor or Actor.system(),
            previous_status=current if status != current else '',
            new_status=status if status != current else '',
        ),),
    )


def add_communication(current: str, communication_type: str, subject: str,
                      actor: Actor = None) -> Transition:
    """Log a communication; the status never changes."""
    return Transition(
        status=current,
        events=(TimelineEvent(
            action=f"{communication_type} sent: {subject}",
            actor=actor or Actor.system(),
        ),),
    )


def record_screening(current: str, score: int, actor: Actor = None, notes: str = '') -> Transition:
    """
    Record a screening score (0-100); the status never changes.

    Raises:
        InvalidInputError: score outside 0-100.
    """
    if score is None or not 0 <= score <= 100:
        raise InvalidInputError(detail="Screening score must be between 0 and 100")

    return Transition(
        status=current,
        events=(TimelineEvent(
            action=f"Screening completed with score {score}",
            actor=actor or Actor.system(),
            notes=notes or '',
        ),),
    )


def record_feedback(current: str, rating: Optional[int] = None, actor: Actor = None,
                    notes: str = '') -> Transition:
    """
    Record recruiter feedback on the application; the status never changes.

    Raises:
        InvalidInputError: rating given outside 1-5.
    """
    if rating is not None and not 1 <= rating <= 5:
        raise InvalidInputError(detail="Feedback rating must be between 1 and 5")

    action = "Recruiter feedback recorded"
    if rating is not None:
        action = f"{action} (rating {rating}/5)"

    return Transition(
        status=current,
        events=(TimelineEvent(
            action=action,
            actor=actor or Actor.system(),
            notes=notes or '',
        ),),
    )
