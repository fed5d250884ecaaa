import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core_identity', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Candidate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(blank=True, max_length=100)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('contact_info', models.JSONField(blank=True, default=dict)),
                ('professional_info', models.JSONField(blank=True, default=dict)),
                ('education', models.JSONField(blank=True, default=list)),
                ('experience', models.JSONField(blank=True, default=list)),
                ('preferences', models.JSONField(blank=True, default=dict)),
                ('documents', models.JSONField(blank=True, default=dict)),
            ],
            options={
                'verbose_name': 'Candidate',
                'verbose_name_plural': 'Candidates',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='CandidateAccount',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('login_attempts', models.PositiveIntegerField(default=0)),
                ('lock_until', models.DateTimeField(blank=True, null=True)),
                ('last_login', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('is_email_verified', models.BooleanField(default=False)),
                ('candidate', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='account', to='ats.candidate')),
            ],
            options={
                'verbose_name': 'Candidate account',
                'verbose_name_plural': 'Candidate accounts',
            },
        ),
        migrations.CreateModel(
            name='JobDescription',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('employment_type', models.CharField(choices=[('full_time', 'Full-time'), ('part_time', 'Part-time'), ('contract', 'Contract'), ('internship', 'Internship'), ('temporary', 'Temporary')], default='full_time', max_length=20)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published'), ('closed', 'Closed'), ('archived', 'Archived')], db_index=True, default='draft', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('application_deadline', models.DateTimeField(blank=True, null=True)),
                ('shareable_link', models.SlugField(blank=True, max_length=80, unique=True)),
                ('allow_multiple_applications', models.BooleanField(default=False)),
                ('applications_count', models.PositiveIntegerField(default=0)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='job_descriptions', to='core_identity.staffuser')),
            ],
            options={
                'verbose_name': 'Job description',
                'verbose_name_plural': 'Job descriptions',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'is_active'], name='ats_jobdesc_status_2b1f0c_idx')],
            },
        ),
        migrations.CreateModel(
            name='Application',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('status', models.CharField(choices=[('submitted', 'Submitted'), ('under_review', 'Under review'), ('shortlisted', 'Shortlisted'), ('interview_scheduled', 'Interview scheduled'), ('interviewed', 'Interviewed'), ('selected', 'Selected'), ('rejected', 'Rejected'), ('withdrawn', 'Withdrawn'), ('on_hold', 'On hold')], db_index=True, default='submitted', max_length=30)),
                ('applied_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('cover_letter', models.TextField(blank=True, validators=[django.core.validators.MaxLengthValidator(2000)])),
                ('resume_url', models.CharField(blank=True, max_length=1000)),
                ('skills', models.JSONField(blank=True, default=list)),
                ('current_ctc', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('expected_ctc', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('current_location', models.CharField(blank=True, max_length=100)),
                ('notice_period_days', models.PositiveIntegerField(blank=True, null=True)),
                ('willing_to_relocate', models.BooleanField(default=False)),
                ('custom_answers', models.JSONField(blank=True, default=list)),
                ('documents', models.JSONField(blank=True, default=dict)),
                ('screening_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(100)])),
                ('screening_notes', models.TextField(blank=True)),
                ('screened_at', models.DateTimeField(blank=True, null=True)),
                ('screening_criteria', models.JSONField(blank=True, default=list)),
                ('recruiter_notes', models.TextField(blank=True)),
                ('internal_notes', models.TextField(blank=True, help_text='Never shown to candidates')),
                ('feedback_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('feedback_tags', models.JSONField(blank=True, default=list)),
                ('rejection_category', models.CharField(blank=True, choices=[('qualifications', 'Qualifications'), ('experience', 'Experience'), ('skills', 'Skills'), ('cultural_fit', 'Cultural fit'), ('salary_expectations', 'Salary expectations'), ('availability', 'Availability'), ('interview_performance', 'Interview performance'), ('other', 'Other')], max_length=30)),
                ('rejection_details', models.TextField(blank=True)),
                ('rejection_feedback', models.TextField(blank=True, help_text='Shared with the candidate')),
                ('candidate', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='applications', to='ats.candidate')),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='applications', to='ats.jobdescription')),
                ('screened_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='screened_applications', to='core_identity.staffuser')),
            ],
            options={
                'verbose_name': 'Application',
                'verbose_name_plural': 'Applications',
                'ordering': ['-applied_at'],
                'indexes': [
                    models.Index(fields=['job', 'status'], name='ats_applica_job_id_5d0a41_idx'),
                    models.Index(fields=['candidate', 'applied_at'], name='ats_applica_candida_8e3c27_idx'),
                    models.Index(fields=['status', 'applied_at'], name='ats_applica_status_c94b1e_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ApplicationTimelineEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sequence', models.PositiveIntegerField()),
                ('action', models.CharField(max_length=255)),
                ('actor_type', models.CharField(default='system', max_length=20)),
                ('actor_id', models.CharField(blank=True, max_length=64)),
                ('performed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('previous_status', models.CharField(blank=True, max_length=30)),
                ('new_status', models.CharField(blank=True, max_length=30)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='timeline', to='ats.application')),
            ],
            options={
                'verbose_name': 'Application timeline entry',
                'verbose_name_plural': 'Application timeline entries',
                'ordering': ['sequence'],
                'constraints': [models.UniqueConstraint(fields=('application', 'sequence'), name='ats_timeline_unique_application_sequence')],
            },
        ),
        migrations.CreateModel(
            name='Interview',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('sequence', models.PositiveIntegerField()),
                ('interview_type', models.CharField(choices=[('phone', 'Phone'), ('video', 'Video'), ('in-person', 'In person'), ('technical', 'Technical'), ('hr', 'HR'), ('final', 'Final')], max_length=20)),
                ('scheduled_at', models.DateTimeField()),
                ('duration_minutes', models.PositiveIntegerField(default=60)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('rescheduled', 'Rescheduled')], default='scheduled', max_length=20)),
                ('rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('strengths', models.JSONField(blank=True, default=list)),
                ('weaknesses', models.JSONField(blank=True, default=list)),
                ('feedback_notes', models.TextField(blank=True)),
                ('recommendation', models.CharField(blank=True, choices=[('strongly_recommend', 'Strongly recommend'), ('recommend', 'Recommend'), ('neutral', 'Neutral'), ('not_recommend', 'Not recommend'), ('strongly_not_recommend', 'Strongly not recommend')], max_length=30)),
                ('meeting_link', models.URLField(blank=True, max_length=500)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='interviews', to='ats.application')),
                ('interviewer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='interviews', to='core_identity.staffuser')),
            ],
            options={
                'verbose_name': 'Interview',
                'verbose_name_plural': 'Interviews',
                'ordering': ['sequence'],
                'constraints': [models.UniqueConstraint(fields=('application', 'sequence'), name='ats_interview_unique_application_sequence')],
            },
        ),
        migrations.CreateModel(
            name='Communication',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('communication_type', models.CharField(choices=[('email', 'Email'), ('phone', 'Phone'), ('message', 'Message'), ('interview_invite', 'Interview invite')], max_length=20)),
                ('subject', models.CharField(blank=True, max_length=255)),
                ('content', models.TextField(blank=True)),
                ('sent_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('is_read', models.BooleanField(default=False)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='communications', to='ats.application')),
                ('sent_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='communications', to='core_identity.staffuser')),
            ],
            options={
                'verbose_name': 'Communication',
                'verbose_name_plural': 'Communications',
                'ordering': ['sent_at'],
            },
        ),
    ]
