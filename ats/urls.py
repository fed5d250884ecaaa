"""
ATS URLs - REST API routing for the recruiting endpoints

Candidate routes are plain paths under ``candidates/``. Staff routes come
from a DefaultRouter; lifecycle operations are ``@action`` routes on
``ApplicationViewSet``:
- POST /api/applications/{id}/status/
- POST /api/applications/{id}/interviews/
- POST /api/applications/{id}/interviews/{interview_id}/feedback/
- POST /api/applications/{id}/communications/
- POST /api/applications/{id}/screening/
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    ApplicationViewSet,
    ApplyToJobView,
    CandidateApplicationsView,
    CandidateLoginView,
    CandidateProfileView,
    CandidateRegisterView,
    JobViewSet,
    UploadDocumentView,
    WithdrawApplicationView,
)

app_name = 'ats'

router = DefaultRouter()
router.include_root_view = False
router.register(r'jobs', JobViewSet, basename='job')
router.register(r'applications', ApplicationViewSet, basename='application')

urlpatterns = [
    path('candidates/register', CandidateRegisterView.as_view(), name='candidate-register'),
    path('candidates/login', CandidateLoginView.as_view(), name='candidate-login'),
    path('candidates/apply/<str:job_ref>', ApplyToJobView.as_view(), name='candidate-apply'),
    path('candidates/profile', CandidateProfileView.as_view(), name='candidate-profile'),
    path('candidates/applications', CandidateApplicationsView.as_view(), name='candidate-applications'),
    path(
        'candidates/applications/<uuid:application_id>/withdraw',
        WithdrawApplicationView.as_view(),
        name='candidate-application-withdraw',
    ),
    path('candidates/upload-document', UploadDocumentView.as_view(), name='candidate-upload-document'),
]

urlpatterns += router.urls
