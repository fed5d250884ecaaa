"""
ATS Filters - Django Filter classes for REST API filtering

This module provides filtering for:
- Job descriptions (status, employment type, open for applications)
- Applications (job, candidate, status, date range, screening score)
"""

import django_filters
from django.utils import timezone

from .lifecycle import ApplicationStatus
from .models import Application, JobDescription


# ==================== JOB DESCRIPTION FILTERS ====================

class JobDescriptionFilter(django_filters.FilterSet):
    """Filter for job descriptions."""
    title = django_filters.CharFilter(lookup_expr='icontains')
    location = django_filters.CharFilter(lookup_expr='icontains')
    status = django_filters.ChoiceFilter(choices=JobDescription.JobStatus.choices)
    employment_type = django_filters.ChoiceFilter(choices=JobDescription.EmploymentType.choices)
    accepting_applications = django_filters.BooleanFilter(method='filter_accepting_applications')

    class Meta:
        model = JobDescription
        fields = ['title', 'location', 'status', 'employment_type', 'is_active', 'accepting_applications']

    def filter_accepting_applications(self, queryset, name, value):
        open_jobs = queryset.open_for_applications()
        now = timezone.now()
        if value:
            return open_jobs.exclude(application_deadline__lt=now)
        return queryset.exclude(pk__in=open_jobs.exclude(application_deadline__lt=now).values('pk'))


# ==================== APPLICATION FILTERS ====================

class ApplicationFilter(django_filters.FilterSet):
    """
    Filter for applications.

    Supports:
    - Job and candidate filtering
    - Status filtering (single or comma-separated)
    - Date range filtering
    - Screening score range
    """

    # Relationship filters
    job = django_filters.UUIDFilter(field_name='job_id')
    candidate = django_filters.UUIDFilter(field_name='candidate_id')

    # Status filter
    status = django_filters.ChoiceFilter(choices=ApplicationStatus.choices)
    statuses = django_filters.CharFilter(method='filter_statuses')

    # Date filters
    applied_after = django_filters.DateTimeFilter(
        field_name='applied_at',
        lookup_expr='gte'
    )
    applied_before = django_filters.DateTimeFilter(
        field_name='applied_at',
        lookup_expr='lte'
    )

    # Screening filters
    min_screening_score = django_filters.NumberFilter(
        field_name='screening_score',
        lookup_expr='gte'
    )
    max_screening_score = django_filters.NumberFilter(
        field_name='screening_score',
        lookup_expr='lte'
    )

    class Meta:
        model = Application
        fields = [
            'job', 'candidate', 'status', 'statuses',
            'applied_after', 'applied_before',
            'min_screening_score', 'max_screening_score',
        ]

    def filter_statuses(self, queryset, name, value):
        statuses = [s.strip() for s in value.split(',') if s.strip()]
        if statuses:
            return queryset.filter(status__in=statuses)
        return queryset
