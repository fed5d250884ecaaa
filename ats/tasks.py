"""
Celery Tasks for ATS (Applicant Tracking System) App

This module contains async tasks for ATS operations:
- Application received confirmation email

Tasks receive the tenant key and record ids only; they resolve the tenant
database themselves and run inside ``tenant_context`` so that log records
carry the tenant.
"""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

from tenants.connections import resolve_tenant
from tenants.context import tenant_context
from tenants.repositories import RepositoryFactory

logger = logging.getLogger(__name__)


# ==================== APPLICATION EMAILS ====================

def build_application_received_context(application, company_name: str) -> dict:
    candidate = application.candidate
    return {
        'candidate_name': candidate.full_name or candidate.email,
        'job_title': application.job.title,
        'company_name': company_name,
        'applied_date': application.applied_at.date().isoformat(),
        'application_id': str(application.pk),
    }


@shared_task(
    bind=True,
    name='ats.tasks.send_application_received_email',
)
def send_application_received_email(self, tenant_key, application_id):
    """
    Confirm a new application to the candidate.

    Returns:
        dict: The recipient and the application id.
    """
    tenant = resolve_tenant(tenant_key)
    repositories = RepositoryFactory.for_tenant_instance(tenant)

    with tenant_context(tenant.key, repositories.db_alias):
        application = (
            repositories.applications.all()
            .select_related('candidate', 'job')
            .get(pk=application_id)
        )

        context = build_application_received_context(application, tenant.company_name)
        subject = f"Application received - {context['job_title']}"
        text_content = render_to_string('emails/application_received.txt', context)
        html_content = render_to_string('emails/application_received.html', context)

        try:
            send_mail(
                subject=subject,
                message=text_content,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[application.candidate.email],
                html_message=html_content,
            )
        except Exception as e:
            logger.exception(f"Failed to send application received email for {application_id}: {e}")
            raise

        logger.info(f"Application received email sent for {application_id}")
        return {'recipient': application.candidate.email, 'application_id': str(application_id)}
