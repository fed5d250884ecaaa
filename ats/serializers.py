"""
ATS Serializers - REST API serialization for the recruiting endpoints

This module provides DRF serializers for:
- Candidates (registration, profile, summaries)
- Applying to a job (candidate block + application content)
- Job descriptions (staff list/detail/create)
- Applications (candidate view, staff list/detail)
- Lifecycle actions (status, interviews, feedback, communications, screening)

Serializers never expose password hashes, and ``internal_notes`` only
appear in staff-facing application serializers.
"""

import logging

from rest_framework import serializers

from .lifecycle import ApplicationStatus
from .models import (
    Application,
    ApplicationTimelineEntry,
    Candidate,
    Communication,
    Interview,
    JobDescription,
)

logger = logging.getLogger(__name__)


# ==================== CANDIDATES ====================

class CandidateSummarySerializer(serializers.ModelSerializer):
    """Candidate block returned by register, login and apply."""

    name = serializers.CharField(source='full_name', read_only=True)
    is_email_verified = serializers.SerializerMethodField()
    last_login = serializers.SerializerMethodField()

    class Meta:
        model = Candidate
        fields = ['id', 'name', 'email', 'is_email_verified', 'last_login']
        read_only_fields = fields

    def _account(self, obj):
        return getattr(obj, 'account', None)

    def get_is_email_verified(self, obj):
        account = self._account(obj)
        return account.is_email_verified if account else False

    def get_last_login(self, obj):
        account = self._account(obj)
        if account and account.last_login:
            return account.last_login.isoformat()
        return None


class CandidateProfileSerializer(serializers.ModelSerializer):
    """
    Candidate profile for ``GET/PUT /candidates/profile``.

    Email, account and documents are read-only here.
    """

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Candidate
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'email', 'phone',
            'contact_info', 'professional_info', 'education', 'experience',
            'preferences', 'documents', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'email', 'documents', 'created_at', 'updated_at']


class CandidateRegistrationSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    contact_info = serializers.JSONField(required=False, default=dict)
    professional_info = serializers.JSONField(required=False, default=dict)
    education = serializers.JSONField(required=False, default=list)
    experience = serializers.JSONField(required=False, default=list)
    preferences = serializers.JSONField(required=False, default=dict)


# ==================== APPLYING ====================

class ApplicantSerializer(serializers.Serializer):
    """Candidate details sent with a public application."""

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    password = serializers.CharField(write_only=True, required=False, min_length=8, trim_whitespace=False)
    contact_info = serializers.JSONField(required=False, default=dict)
    professional_info = serializers.JSONField(required=False, default=dict)
    education = serializers.JSONField(required=False, default=list)
    experience = serializers.JSONField(required=False, default=list)
    preferences = serializers.JSONField(required=False, default=dict)


class CustomAnswerSerializer(serializers.Serializer):
    question_id = serializers.CharField(max_length=64)
    question = serializers.CharField()
    answer = serializers.JSONField()


class ApplySerializer(serializers.Serializer):
    candidate = ApplicantSerializer()
    cover_letter = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    resume_url = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    skills = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    current_ctc = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    expected_ctc = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    current_location = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notice_period_days = serializers.IntegerField(min_value=0, required=False)
    willing_to_relocate = serializers.BooleanField(required=False)
    custom_answers = CustomAnswerSerializer(many=True, required=False)
    documents = serializers.JSONField(required=False)


# ==================== JOB DESCRIPTIONS ====================

class JobSummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = JobDescription
        fields = ['id', 'title', 'status', 'location', 'employment_type']
        read_only_fields = fields


class JobDescriptionSerializer(serializers.ModelSerializer):
    is_deadline_passed = serializers.ReadOnlyField()
    created_by = serializers.CharField(source='created_by_id', read_only=True)

    class Meta:
        model = JobDescription
        fields = [
            'id', 'title', 'description', 'location', 'employment_type',
            'status', 'is_active', 'application_deadline', 'is_deadline_passed',
            'shareable_link', 'allow_multiple_applications', 'applications_count',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'shareable_link', 'applications_count', 'created_by',
            'created_at', 'updated_at',
        ]


# ==================== APPLICATIONS ====================

class TimelineEntrySerializer(serializers.ModelSerializer):

    class Meta:
        model = ApplicationTimelineEntry
        fields = [
            'sequence', 'action', 'actor_type', 'actor_id', 'performed_at',
            'notes', 'previous_status', 'new_status',
        ]
        read_only_fields = fields


class InterviewSerializer(serializers.ModelSerializer):
    interviewer = serializers.CharField(source='interviewer_id', read_only=True)

    class Meta:
        model = Interview
        fields = [
            'id', 'sequence', 'interview_type', 'scheduled_at', 'duration_minutes',
            'interviewer', 'status', 'rating', 'strengths', 'weaknesses',
            'feedback_notes', 'recommendation', 'meeting_link', 'location',
        ]
        read_only_fields = fields


class CommunicationSerializer(serializers.ModelSerializer):
    sent_by = serializers.CharField(source='sent_by_id', read_only=True)

    class Meta:
        model = Communication
        fields = ['id', 'communication_type', 'subject', 'content', 'sent_by', 'sent_at', 'is_read']
        read_only_fields = fields


class CandidateApplicationSerializer(serializers.ModelSerializer):
    """An application as its candidate sees it."""

    job = JobSummarySerializer(read_only=True)
    days_since_application = serializers.ReadOnlyField()

    class Meta:
        model = Application
        fields = [
            'id', 'job', 'status', 'applied_at', 'days_since_application',
            'cover_letter', 'resume_url', 'rejection_feedback', 'updated_at',
        ]
        read_only_fields = fields


class ApplicationListSerializer(serializers.ModelSerializer):
    job = JobSummarySerializer(read_only=True)
    candidate = serializers.SerializerMethodField()

    class Meta:
        model = Application
        fields = [
            'id', 'job', 'candidate', 'status', 'applied_at',
            'screening_score', 'feedback_rating', 'updated_at',
        ]
        read_only_fields = fields

    def get_candidate(self, obj):
        return {
            'id': str(obj.candidate_id),
            'name': obj.candidate.full_name,
            'email': obj.candidate.email,
        }


class ApplicationDetailSerializer(ApplicationListSerializer):
    """Staff view with the timeline and all sub-records."""

    timeline = TimelineEntrySerializer(many=True, read_only=True)
    interviews = InterviewSerializer(many=True, read_only=True)
    communications = CommunicationSerializer(many=True, read_only=True)
    screened_by = serializers.CharField(source='screened_by_id', read_only=True)
    days_since_application = serializers.ReadOnlyField()

    class Meta(ApplicationListSerializer.Meta):
        fields = ApplicationListSerializer.Meta.fields + [
            'days_since_application',
            'cover_letter', 'resume_url', 'skills', 'current_ctc', 'expected_ctc',
            'current_location', 'notice_period_days', 'willing_to_relocate',
            'custom_answers', 'documents',
            'screening_notes', 'screened_by', 'screened_at', 'screening_criteria',
            'recruiter_notes', 'internal_notes', 'feedback_tags',
            'rejection_category', 'rejection_details', 'rejection_feedback',
            'timeline', 'interviews', 'communications',
        ]
        read_only_fields = fields


# ==================== LIFECYCLE ACTIONS ====================

class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ApplicationStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    rejection_category = serializers.ChoiceField(
        choices=Application.RejectionCategory.choices,
        required=False,
        allow_blank=True,
        default=''
    )
    rejection_details = serializers.CharField(required=False, allow_blank=True, default='')
    rejection_feedback = serializers.CharField(required=False, allow_blank=True, default='')


class WithdrawSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class ScheduleInterviewSerializer(serializers.Serializer):
    interview_type = serializers.ChoiceField(choices=Interview.InterviewType.choices)
    scheduled_at = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(min_value=1, required=False, default=60)
    interviewer_id = serializers.UUIDField(required=False, allow_null=True)
    meeting_link = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class InterviewFeedbackSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    strengths = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    weaknesses = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    recommendation = serializers.ChoiceField(
        choices=Interview.Recommendation.choices,
        required=False,
        allow_blank=True,
        default=''
    )
    mark_completed = serializers.BooleanField(required=False, default=True)


class CommunicationCreateSerializer(serializers.Serializer):
    communication_type = serializers.ChoiceField(choices=Communication.CommunicationType.choices)
    subject = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    content = serializers.CharField(required=False, allow_blank=True, default='')


class ScreeningCriterionSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    score = serializers.IntegerField(min_value=0, max_value=10)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ScreeningSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=0, max_value=100)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    criteria = ScreeningCriterionSerializer(many=True, required=False, default=list)


class ApplicationFeedbackSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    internal_notes = serializers.CharField(required=False, allow_blank=True, default='')
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
        default=list
    )
