"""
ATS Views - REST API endpoints for the recruiting workflow

Candidate endpoints (public, tenant from ``X-Tenant-ID`` or subdomain):
- POST /api/candidates/register
- POST /api/candidates/login
- POST /api/candidates/apply/<job_ref>

Candidate endpoints (candidate token):
- GET/PUT /api/candidates/profile
- GET  /api/candidates/applications
- POST /api/candidates/applications/<id>/withdraw
- POST /api/candidates/upload-document

Staff endpoints (staff token):
- JobViewSet: job descriptions with per-status statistics
- ApplicationViewSet: applications with lifecycle actions
  (status, interviews, feedback, communications, screening)

Security:
- Every query goes through the repositories of the request's tenant database
- Candidates only ever see their own applications
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from api.base import APIResponse, StandardPagination, build_pagination
from api.exceptions import InvalidInputError, ResourceNotFoundError
from core_identity.credentials import authenticate_credentials
from core_identity.models import IdentityType
from core_identity.permissions import IsCandidate, IsStaffUser
from core_identity.serializers import LoginSerializer
from core_identity.tokens import issue_identity_token
from core_identity.views import client_ip
from tenants.mixins import IdentityBindingMixin, PublicTenantMixin

from . import services
from .filters import ApplicationFilter, JobDescriptionFilter
from .lifecycle import ApplicationStatus
from .models import Interview
from .serializers import (
    ApplicationDetailSerializer,
    ApplicationFeedbackSerializer,
    ApplicationListSerializer,
    ApplySerializer,
    CandidateApplicationSerializer,
    CandidateProfileSerializer,
    CandidateRegistrationSerializer,
    CandidateSummarySerializer,
    CommunicationCreateSerializer,
    CommunicationSerializer,
    InterviewFeedbackSerializer,
    InterviewSerializer,
    JobDescriptionSerializer,
    ScheduleInterviewSerializer,
    ScreeningSerializer,
    StatusUpdateSerializer,
    TimelineEntrySerializer,
    WithdrawSerializer,
)

logger = logging.getLogger(__name__)


CANDIDATE_APPLICATION_SORT_FIELDS = ('applied_at', 'status', 'updated_at')
CANDIDATE_APPLICATIONS_MAX_LIMIT = 100


def _positive_int(value, default: int, name: str, maximum: int = None) -> int:
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(detail=f"'{name}' must be a positive integer")
    if number < 1:
        raise InvalidInputError(detail=f"'{name}' must be a positive integer")
    if maximum is not None:
        number = min(number, maximum)
    return number


# ==================== PUBLIC CANDIDATE ENDPOINTS ====================

class CandidateRegisterView(PublicTenantMixin, APIView):
    """Self-service registration; answers with a candidate token."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CandidateRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = dict(serializer.validated_data)
        password = profile.pop('password')

        tenant = self.get_tenant()
        candidate = services.register_candidate(self.get_repositories(), profile, password)
        token = issue_identity_token(candidate, tenant.key, IdentityType.CANDIDATE)

        return APIResponse.created(
            data={
                'candidate': CandidateSummarySerializer(candidate).data,
                'token': token,
                'tenant': tenant.public_profile(),
            },
            message='Candidate registered successfully',
        )


class CandidateLoginView(PublicTenantMixin, APIView):
    """Candidate login with lockout after repeated failures."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tenant = self.get_tenant()
        candidate = authenticate_credentials(
            self.get_repositories().candidates,
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            ip_address=client_ip(request),
        )
        token = issue_identity_token(candidate, tenant.key, IdentityType.CANDIDATE)

        logger.info(f"Candidate {candidate.pk} logged in")
        return APIResponse.success(
            data={
                'candidate': CandidateSummarySerializer(candidate).data,
                'token': token,
                'tenant': tenant.public_profile(),
            },
            message='Login successful',
        )


class ApplyToJobView(PublicTenantMixin, APIView):
    """
    Apply to a job by id or shareable link.

    The candidate is found by email or created on the fly.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, job_ref):
        serializer = ApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application_data = dict(serializer.validated_data)
        candidate_data = application_data.pop('candidate')

        result = services.apply_to_job(
            self.get_repositories(),
            job_ref,
            candidate_data,
            application_data,
        )
        application = result.application

        return APIResponse.created(
            data={
                'application': {
                    'id': str(application.pk),
                    'status': application.status,
                    'applied_at': application.applied_at.isoformat(),
                    'job': {'id': str(result.job.pk), 'title': result.job.title},
                },
                'candidate': CandidateSummarySerializer(result.candidate).data,
                'candidate_created': result.candidate_created,
            },
            message='Application submitted successfully',
        )


# ==================== CANDIDATE SELF-SERVICE ====================

class CandidateProfileView(IdentityBindingMixin, APIView):
    permission_classes = [IsCandidate]

    def get_candidate(self):
        candidate = self.get_repositories().candidates.get_or_none(pk=self.get_identity().pk)
        if candidate is None:
            raise ResourceNotFoundError(resource_type='Candidate', resource_id=self.get_identity().pk)
        return candidate

    def get(self, request):
        candidate = self.get_candidate()
        return APIResponse.success(data=CandidateProfileSerializer(candidate).data)

    def put(self, request):
        candidate = self.get_candidate()
        serializer = CandidateProfileSerializer(candidate, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        candidate = services.update_candidate_profile(candidate, serializer.validated_data)
        return APIResponse.updated(
            data=CandidateProfileSerializer(candidate).data,
            message='Profile updated successfully',
        )


class CandidateApplicationsView(IdentityBindingMixin, APIView):
    """
    The candidate's own applications.

    Query params: page, limit, status, sortBy (applied_at, status,
    updated_at), sortOrder (asc, desc).
    """

    permission_classes = [IsCandidate]

    def get(self, request):
        params = request.query_params
        page = _positive_int(params.get('page'), 1, 'page')
        limit = _positive_int(params.get('limit'), 10, 'limit', maximum=CANDIDATE_APPLICATIONS_MAX_LIMIT)

        sort_by = params.get('sortBy') or 'applied_at'
        if sort_by not in CANDIDATE_APPLICATION_SORT_FIELDS:
            sort_by = 'applied_at'
        sort_order = '' if params.get('sortOrder') == 'asc' else '-'

        queryset = (
            self.get_repositories().applications.all()
            .for_candidate(self.get_identity())
            .select_related('job')
        )
        status_filter = params.get('status')
        if status_filter:
            if status_filter not in ApplicationStatus.values:
                raise InvalidInputError(detail=f"Unknown application status '{status_filter}'")
            queryset = queryset.by_status(status_filter)

        total = queryset.count()
        offset = (page - 1) * limit
        applications = queryset.order_by(f'{sort_order}{sort_by}', '-pk')[offset:offset + limit]

        return APIResponse.success(data={
            'applications': CandidateApplicationSerializer(applications, many=True).data,
            'pagination': build_pagination(page=page, limit=limit, total=total),
        })


class WithdrawApplicationView(IdentityBindingMixin, APIView):
    permission_classes = [IsCandidate]

    def post(self, request, application_id):
        serializer = WithdrawSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        candidate = self.get_identity()
        application = self.get_repositories().applications.get_or_none(
            pk=application_id, candidate_id=candidate.pk
        )
        if application is None:
            raise ResourceNotFoundError(resource_type='Application', resource_id=application_id)

        application.withdraw(performed_by=candidate, reason=serializer.validated_data['reason'])
        logger.info(f"Candidate {candidate.pk} withdrew application {application.pk}")

        return APIResponse.success(
            data={'id': str(application.pk), 'status': application.status},
            message='Application withdrawn successfully',
        )


class UploadDocumentView(IdentityBindingMixin, APIView):
    """Multipart upload: file field ``resume``, form field ``documentType``."""

    permission_classes = [IsCandidate]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        document = services.upload_candidate_document(
            self.get_repositories(),
            self.get_identity().pk,
            request.FILES.get('resume'),
            request.data.get('documentType'),
        )
        return APIResponse.success(data=document, message='Document uploaded successfully')


# ==================== JOB DESCRIPTION VIEWSET ====================

class JobViewSet(IdentityBindingMixin,
                 mixins.ListModelMixin,
                 mixins.CreateModelMixin,
                 mixins.RetrieveModelMixin,
                 mixins.UpdateModelMixin,
                 viewsets.GenericViewSet):
    """
    ViewSet for job descriptions.

    list: Get all jobs of the tenant (filterable)
    retrieve: Get a job
    create: Create a job; the shareable link is generated
    partial_update: Update a job

    Actions:
    - statistics: Application counts per status
    """
    serializer_class = JobDescriptionSerializer
    permission_classes = [IsStaffUser]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = JobDescriptionFilter
    search_fields = ['title', 'description', 'location']
    ordering_fields = ['created_at', 'title', 'application_deadline', 'applications_count']
    ordering = ['-created_at']
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_queryset(self):
        return self.get_repositories().jobs.all()

    def retrieve(self, request, *args, **kwargs):
        job = self.get_object()
        return APIResponse.success(data=self.get_serializer(job).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        job = self.get_repositories().jobs.create(
            **serializer.validated_data,
            created_by=self.get_identity(),
        )
        logger.info(f"Job {job.pk} created by staff user {job.created_by_id}")
        return APIResponse.created(data=self.get_serializer(job).data, message='Job created successfully')

    def update(self, request, *args, **kwargs):
        job = self.get_object()
        serializer = self.get_serializer(job, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        job = serializer.save()
        return APIResponse.updated(data=self.get_serializer(job).data, message='Job updated successfully')

    @action(detail=True, methods=['get'])
    def statistics(self, request, pk=None):
        """Application counts per status."""
        job = self.get_object()
        by_status = self.get_repositories().applications.all().status_statistics(job)
        return APIResponse.success(data={
            'job': {'id': str(job.pk), 'title': job.title},
            'total_applications': sum(row['count'] for row in by_status),
            'applications_count': job.applications_count,
            'by_status': by_status,
        })


# ==================== APPLICATION VIEWSET ====================

class ApplicationViewSet(IdentityBindingMixin, viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for applications.

    list: Get all applications (filterable by job, candidate, status)
    retrieve: Get application with timeline, interviews and communications

    Actions:
    - status: Move the application to another status
    - interviews: Schedule an interview
    - interview_feedback: Submit feedback for an interview
    - communications: Log a communication with the candidate
    - screening: Record the screening result
    - feedback: Record the recruiter feedback

    Applications are never deleted.
    """
    permission_classes = [IsStaffUser]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = ApplicationFilter
    search_fields = ['candidate__first_name', 'candidate__last_name', 'candidate__email', 'job__title']
    ordering_fields = ['applied_at', 'updated_at', 'status', 'screening_score']
    ordering = ['-applied_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return ApplicationListSerializer
        if self.action == 'status':
            return StatusUpdateSerializer
        if self.action == 'interviews':
            return ScheduleInterviewSerializer
        if self.action == 'interview_feedback':
            return InterviewFeedbackSerializer
        if self.action == 'communications':
            return CommunicationCreateSerializer
        if self.action == 'screening':
            return ScreeningSerializer
        if self.action == 'feedback':
            return ApplicationFeedbackSerializer
        return ApplicationDetailSerializer

    def get_queryset(self):
        queryset = self.get_repositories().applications.all().select_related('job', 'candidate')
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('timeline', 'interviews', 'communications')
        return queryset

    def retrieve(self, request, *args, **kwargs):
        application = self.get_object()
        return APIResponse.success(data=ApplicationDetailSerializer(application).data)

    def _detail(self, application, message):
        application = self.get_queryset().prefetch_related(
            'timeline', 'interviews', 'communications'
        ).get(pk=application.pk)
        return APIResponse.success(data=ApplicationDetailSerializer(application).data, message=message)

    def _validated(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @action(detail=True, methods=['post'])
    def status(self, request, pk=None):
        """Move the application to another status."""
        application = self.get_object()
        data = self._validated(request)

        application.update_status(
            data['status'],
            performed_by=self.get_identity(),
            notes=data['notes'],
            rejection_category=data['rejection_category'],
            rejection_details=data['rejection_details'],
            rejection_feedback=data['rejection_feedback'],
        )
        return self._detail(application, 'Application status updated')

    @action(detail=True, methods=['post'])
    def interviews(self, request, pk=None):
        """Schedule an interview."""
        application = self.get_object()
        data = self._validated(request)

        interviewer = None
        interviewer_id = data.get('interviewer_id')
        if interviewer_id:
            interviewer = self.get_repositories().staff_users.get_or_none(pk=interviewer_id)
            if interviewer is None:
                raise ResourceNotFoundError(resource_type='Interviewer', resource_id=interviewer_id)

        interview = application.schedule_interview(
            interview_type=data['interview_type'],
            scheduled_at=data['scheduled_at'],
            interviewer=interviewer,
            duration_minutes=data['duration_minutes'],
            meeting_link=data['meeting_link'],
            location=data['location'],
            performed_by=self.get_identity(),
        )
        application.refresh_from_db(fields=['status'])

        return APIResponse.created(
            data={
                'interview': InterviewSerializer(interview).data,
                'application_status': application.status,
            },
            message='Interview scheduled successfully',
        )

    @action(detail=True, methods=['post'], url_path=r'interviews/(?P<interview_id>[0-9a-fA-F-]{36})/feedback')
    def interview_feedback(self, request, pk=None, interview_id=None):
        """Submit feedback for one interview of the application."""
        application = self.get_object()
        data = self._validated(request)

        interview = (
            Interview.objects.using(application.db_alias)
            .filter(application=application, pk=interview_id)
            .first()
        )
        if interview is None:
            raise ResourceNotFoundError(resource_type='Interview', resource_id=interview_id)

        interview.submit_feedback(
            rating=data['rating'],
            strengths=data['strengths'],
            weaknesses=data['weaknesses'],
            notes=data['notes'],
            recommendation=data['recommendation'],
            mark_completed=data['mark_completed'],
            performed_by=self.get_identity(),
        )
        application.refresh_from_db(fields=['status'])

        return APIResponse.success(
            data={
                'interview': InterviewSerializer(interview).data,
                'application_status': application.status,
            },
            message='Interview feedback submitted',
        )

    @action(detail=True, methods=['post'])
    def communications(self, request, pk=None):
        """Log a communication with the candidate."""
        application = self.get_object()
        data = self._validated(request)

        communication = application.add_communication(
            communication_type=data['communication_type'],
            subject=data['subject'],
            content=data['content'],
            sent_by=self.get_identity(),
        )
        return APIResponse.created(
            data=CommunicationSerializer(communication).data,
            message='Communication recorded',
        )

    @action(detail=True, methods=['post'])
    def screening(self, request, pk=None):
        """Record the screening score and criteria."""
        application = self.get_object()
        data = self._validated(request)

        application.record_screening(
            score=data['score'],
            screened_by=self.get_identity(),
            notes=data['notes'],
            criteria=[dict(criterion) for criterion in data['criteria']],
        )
        return self._detail(application, 'Screening recorded')

    @action(detail=True, methods=['post'])
    def feedback(self, request, pk=None):
        """Record the recruiter feedback: rating, notes, internal notes and tags."""
        application = self.get_object()
        data = self._validated(request)

        application.record_feedback(
            rating=data['rating'],
            notes=data['notes'],
            internal_notes=data['internal_notes'],
            tags=data['tags'],
            performed_by=self.get_identity(),
        )
        return self._detail(application, 'Feedback recorded')

    @action(detail=True, methods=['get'])
    def timeline(self, request, pk=None):
        application = self.get_object()
        entries = application.timeline.all()
        return APIResponse.success(data=TimelineEntrySerializer(entries, many=True).data)
