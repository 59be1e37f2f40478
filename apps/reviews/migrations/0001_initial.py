import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('submissions', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('IN_PROGRESS', 'In Progress'), ('DECLINED', 'Declined'), ('COMPLETED', 'Completed')], default='PENDING', max_length=20)),
                ('recommendation', models.CharField(blank=True, choices=[('ACCEPT', 'Accept'), ('MINOR_REVISION', 'Minor Revision'), ('MAJOR_REVISION', 'Major Revision'), ('REJECT', 'Reject')], max_length=20)),
                ('rating', models.PositiveSmallIntegerField(blank=True, help_text='Overall quality rating (1-5)', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('author_comments', models.TextField(blank=True, help_text='Comments shared with the author')),
                ('confidential_comments', models.TextField(blank=True, help_text='Comments for the editor only')),
                ('invitation_message', models.TextField(blank=True)),
                ('due_date', models.DateTimeField()),
                ('invited_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('declined_at', models.DateTimeField(blank=True, null=True)),
                ('decline_reason', models.TextField(blank=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('reminders_sent', models.PositiveIntegerField(default=0)),
                ('last_reminded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('invited_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('reviewer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reviews', to=settings.AUTH_USER_MODEL)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='submissions.submission')),
            ],
            options={
                'ordering': ['-invited_at'],
                'indexes': [
                    models.Index(fields=['reviewer', 'status'], name='review_reviewer_status_idx'),
                    models.Index(fields=['status', 'due_date'], name='review_status_due_idx'),
                ],
                'unique_together': {('submission', 'reviewer')},
            },
        ),
    ]
