"""
Application lifecycle tests (pure transition functions, no database).
"""

from datetime import datetime, timezone as dt_timezone

import pytest

from api.exceptions import InvalidInputError, InvalidStatusTransitionError
from ats import lifecycle
from ats.lifecycle import ALLOWED_TRANSITIONS, Actor, ApplicationStatus, TERMINAL_STATUSES


RECRUITER = Actor(actor_type='user', actor_id='staff-1')


class TestUpdateStatus:

    @pytest.mark.parametrize('current,new', [
        (ApplicationStatus.SUBMITTED, ApplicationStatus.SELECTED),
        (ApplicationStatus.REJECTED, ApplicationStatus.UNDER_REVIEW),
        (ApplicationStatus.WITHDRAWN, ApplicationStatus.SHORTLISTED),
    ])
    def test_permissive_by_default(self, settings, current, new):
        settings.ATS_ENFORCE_STATUS_TRANSITIONS = False

        transition = lifecycle.update_status(current, new, actor=RECRUITER)

        assert transition.status == new

    def test_emits_exactly_one_event(self):
        transition = lifecycle.update_status(
            ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW,
            actor=RECRUITER, notes='Looks promising',
        )

        assert len(transition.events) == 1
        event = transition.event
        assert event.action == 'Status changed from submitted to under_review'
        assert event.previous_status == ApplicationStatus.SUBMITTED
        assert event.new_status == ApplicationStatus.UNDER_REVIEW
        assert event.notes == 'Looks promising'
        assert event.actor == RECRUITER

    def test_system_actor_when_none_given(self):
        transition = lifecycle.update_status(ApplicationStatus.SUBMITTED, ApplicationStatus.ON_HOLD)

        assert transition.event.actor.actor_type == 'system'
        assert transition.event.actor.actor_id is None

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidInputError):
            lifecycle.update_status(ApplicationStatus.SUBMITTED, 'hired')

    def test_strict_mode_rejects_moves_outside_table(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            lifecycle.update_status(
                ApplicationStatus.SUBMITTED, ApplicationStatus.SELECTED, strict=True
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.extra_data == {
            'current_status': 'submitted',
            'target_status': 'selected',
        }

    def test_strict_mode_follows_setting(self, settings):
        settings.ATS_ENFORCE_STATUS_TRANSITIONS = True

        with pytest.raises(InvalidStatusTransitionError):
            lifecycle.update_status(ApplicationStatus.REJECTED, ApplicationStatus.SUBMITTED)

        transition = lifecycle.update_status(ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW)
        assert transition.status == ApplicationStatus.UNDER_REVIEW

    def test_terminal_statuses_have_no_exits(self):
        for status in TERMINAL_STATUSES:
            assert ALLOWED_TRANSITIONS[status] == frozenset()


class TestWithdraw:

    def test_withdraw_from_open_status(self):
        transition = lifecycle.withdraw(ApplicationStatus.SHORTLISTED, reason='Accepted another offer')

        assert transition.status == ApplicationStatus.WITHDRAWN
        assert transition.event.previous_status == ApplicationStatus.SHORTLISTED
        assert transition.event.notes == 'Accepted another offer'

    @pytest.mark.parametrize('status', sorted(TERMINAL_STATUSES))
    def test_withdraw_from_terminal_status_refused(self, status):
        with pytest.raises(InvalidStatusTransitionError):
            lifecycle.withdraw(status)


class TestScheduleInterview:

    scheduled_at = datetime(2026, 11, 2, 14, 30, tzinfo=dt_timezone.utc)

    @pytest.mark.parametrize('current', [ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW])
    def test_promotes_early_statuses(self, current):
        transition = lifecycle.schedule_interview(current, self.scheduled_at, actor=RECRUITER)

        assert transition.status == ApplicationStatus.INTERVIEW_SCHEDULED
        assert transition.event.previous_status == current
        assert transition.event.new_status == ApplicationStatus.INTERVIEW_SCHEDULED

    @pytest.mark.parametrize('current', [
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEWED,
        ApplicationStatus.ON_HOLD,
    ])
    def test_keeps_other_statuses(self, current):
        transition = lifecycle.schedule_interview(current, self.scheduled_at)

        assert transition.status == current
        assert transition.event.previous_status == ''
        assert transition.event.new_status == ''

    def test_event_names_the_slot(self):
        transition = lifecycle.schedule_interview(ApplicationStatus.SUBMITTED, self.scheduled_at)

        assert len(transition.events) == 1
        assert transition.event.action == 'Interview scheduled for 2026-11-02T14:30:00+00:00'


class TestCompleteInterview:

    def test_promotes_scheduled_application(self):
        transition = lifecycle.complete_interview(ApplicationStatus.INTERVIEW_SCHEDULED, rating=4)

        assert transition.status == ApplicationStatus.INTERVIEWED
        assert transition.event.action == 'Interview feedback submitted (rating 4/5)'

    def test_without_promotion_status_is_kept(self):
        transition = lifecycle.complete_interview(
            ApplicationStatus.INTERVIEW_SCHEDULED, rating=2, promote=False
        )

        assert transition.status == ApplicationStatus.INTERVIEW_SCHEDULED
        assert len(transition.events) == 1


class TestCommunicationAndScreening:

    def test_communication_keeps_status(self):
        transition = lifecycle.add_communication(
            ApplicationStatus.UNDER_REVIEW, 'email', 'Next steps', actor=RECRUITER
        )

        assert transition.status == ApplicationStatus.UNDER_REVIEW
        assert transition.event.action == 'email sent: Next steps'

    def test_screening_keeps_status(self):
        transition = lifecycle.record_screening(ApplicationStatus.SUBMITTED, 85, notes='Strong')

        assert transition.status == ApplicationStatus.SUBMITTED
        assert transition.event.action == 'Screening completed with score 85'
        assert transition.event.notes == 'Strong'

    @pytest.mark.parametrize('score', [-1, 101, None])
    def test_screening_score_out_of_range(self, score):
        with pytest.raises(InvalidInputError):
            lifecycle.record_screening(ApplicationStatus.SUBMITTED, score)

    def test_feedback_keeps_status(self):
        transition = lifecycle.record_feedback(ApplicationStatus.SHORTLISTED, 4, notes='Great communicator')

        assert transition.status == ApplicationStatus.SHORTLISTED
        assert transition.event.action == 'Recruiter feedback recorded (rating 4/5)'
        assert transition.event.notes == 'Great communicator'

    def test_feedback_without_rating(self):
        transition = lifecycle.record_feedback(ApplicationStatus.SUBMITTED)

        assert transition.event.action == 'Recruiter feedback recorded'

    @pytest.mark.parametrize('rating', [0, 6])
    def test_feedback_rating_out_of_range(self, rating):
        with pytest.raises(InvalidInputError):
            lifecycle.record_feedback(ApplicationStatus.SUBMITTED, rating)

    def test_submission_event(self):
        transition = lifecycle.record_submission(Actor(actor_type='candidate', actor_id='c-1'))

        assert transition.status == ApplicationStatus.SUBMITTED
        assert transition.event.action == 'Application submitted'
        assert transition.event.actor.actor_type == 'candidate'
