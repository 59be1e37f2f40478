import django.db.models.deletion
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('journals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=500)),
                ('abstract', models.TextField(help_text='Manuscript abstract')),
                ('keywords', models.JSONField(blank=True, default=list)),
                ('manuscript_type', models.CharField(help_text='e.g. Research Article, Review, Case Study', max_length=100)),
                ('is_double_blind', models.BooleanField(default=False, help_text='Hide author identities from reviewers')),
                ('suggested_reviewers', models.JSONField(blank=True, default=list)),
                ('excluded_reviewers', models.JSONField(blank=True, default=list)),
                ('comments', models.TextField(blank=True, help_text='Cover letter / comments to the editor')),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('SUBMITTED', 'Submitted'), ('INITIAL_REVIEW', 'Initial Review'), ('UNDER_REVIEW', 'Under Review'), ('REVISION_REQUIRED', 'Revision Required'), ('ACCEPTED', 'Accepted'), ('REJECTED', 'Rejected'), ('PUBLISHED', 'Published'), ('WITHDRAWN', 'Withdrawn')], default='DRAFT', max_length=20)),
                ('version', models.PositiveIntegerField(default=0, help_text='Optimistic concurrency counter')),
                ('scope_check', models.BooleanField(blank=True, null=True)),
                ('format_check', models.BooleanField(blank=True, null=True)),
                ('screening_comments', models.TextField(blank=True)),
                ('decision_type', models.CharField(blank=True, max_length=20)),
                ('decision_comments', models.TextField(blank=True)),
                ('proof_approved_at', models.DateTimeField(blank=True, null=True)),
                ('proof_corrections', models.TextField(blank=True)),
                ('doi', models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ('volume', models.PositiveIntegerField(blank=True, null=True)),
                ('issue_number', models.PositiveIntegerField(blank=True, null=True)),
                ('pages', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='submissions', to=settings.AUTH_USER_MODEL)),
                ('issue', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='articles', to='journals.issue')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'submitted_at'], name='sub_status_submitted_idx'),
                    models.Index(fields=['author', 'status'], name='sub_author_status_idx'),
                    models.Index(fields=['published_at'], name='sub_published_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CoAuthor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=150)),
                ('last_name', models.CharField(max_length=150)),
                ('email', models.EmailField(max_length=254)),
                ('affiliation', models.CharField(blank=True, max_length=255)),
                ('orcid', models.CharField(blank=True, max_length=19)),
                ('is_corresponding', models.BooleanField(default=False)),
                ('order', models.PositiveIntegerField(default=0, help_text='Author order in the publication')),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='co_authors', to='submissions.submission')),
            ],
            options={
                'ordering': ['order'],
            },
        ),
        migrations.CreateModel(
            name='SubmissionFile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('file', models.FileField(upload_to='submissions/%Y/%m/%d/')),
                ('original_name', models.CharField(max_length=255)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('size', models.PositiveIntegerField(default=0, help_text='File size in bytes')),
                ('file_hash', models.CharField(blank=True, help_text='SHA-256 of the content', max_length=64)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('is_main_file', models.BooleanField(default=False)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to='submissions.submission')),
                ('uploaded_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='uploaded_files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-is_main_file', 'uploaded_at'],
            },
        ),
        migrations.CreateModel(
            name='Revision',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('revision_number', models.PositiveIntegerField()),
                ('revision_letter', models.TextField(blank=True, help_text='Cover letter for this revision')),
                ('response_to_reviewers', models.TextField()),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='revisions', to='submissions.submission')),
                ('submitted_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_revisions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['revision_number'],
                'unique_together': {('submission', 'revision_number')},
            },
        ),
        migrations.CreateModel(
            name='RevisionFile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('file', models.FileField(upload_to='revisions/%Y/%m/%d/')),
                ('original_name', models.CharField(max_length=255)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('size', models.PositiveIntegerField(default=0)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('revision', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to='submissions.revision')),
            ],
        ),
        migrations.CreateModel(
            name='EditorAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_chief', models.BooleanField(default=False)),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('assigned_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('editor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='editor_assignments', to=settings.AUTH_USER_MODEL)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='editor_assignments', to='submissions.submission')),
            ],
            options={
                'ordering': ['assigned_at'],
                'unique_together': {('submission', 'editor')},
            },
        ),
        migrations.CreateModel(
            name='SubmissionTimeline',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event', models.CharField(max_length=50)),
                ('from_status', models.CharField(blank=True, max_length=20)),
                ('to_status', models.CharField(blank=True, max_length=20)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='timeline', to='submissions.submission')),
            ],
            options={
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['submission', 'created_at'], name='timeline_sub_created_idx')],
            },
        ),
    ]
