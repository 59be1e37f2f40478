import django.db.models.deletion
import uuid
from django.conf import settings
from django.db import migrations, models


NOTIFICATION_TYPE_CHOICES = [
    ('SUBMISSION_RECEIVED', 'Submission Received'),
    ('NEW_SUBMISSION', 'New Submission'),
    ('FORMATTING_REQUESTED', 'Formatting Changes Requested'),
    ('SUBMISSION_REJECTED', 'Submission Rejected'),
    ('REVISION_REQUESTED', 'Revision Requested'),
    ('SUBMISSION_ACCEPTED', 'Submission Accepted'),
    ('REVISION_SUBMITTED', 'Revision Submitted'),
    ('ARTICLE_PUBLISHED', 'Article Published'),
    ('PROOF_CORRECTIONS', 'Proof Corrections Requested'),
    ('EDITOR_ASSIGNED', 'Editor Assigned'),
    ('REVIEW_INVITATION', 'Review Invitation'),
    ('REVIEW_RESPONSE', 'Review Invitation Response'),
    ('REVIEW_REMINDER', 'Review Reminder'),
    ('REVIEW_ESCALATION', 'Overdue Review Escalation'),
    ('REVIEW_THANK_YOU', 'Review Thank You'),
    ('REVIEW_COMPLETED', 'Review Completed'),
    ('REVIEW_DEADLINE_EXTENDED', 'Review Deadline Extended'),
    ('PAYMENT_REQUESTED', 'Payment Requested'),
    ('PAYMENT_PROOF_SUBMITTED', 'Payment Proof Submitted'),
    ('PAYMENT_RECEIVED', 'Payment Received'),
    ('PAYMENT_REFUNDED', 'Payment Refunded'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('submissions', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('notification_type', models.CharField(choices=NOTIFICATION_TYPE_CHOICES, max_length=50)),
                ('title', models.CharField(max_length=255)),
                ('message', models.TextField()),
                ('is_read', models.BooleanField(default=False)),
                ('read_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('submission', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='notifications', to='submissions.submission')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
                    models.Index(fields=['created_at'], name='notif_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EmailLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('recipient', models.EmailField(help_text='Recipient email address', max_length=254)),
                ('notification_type', models.CharField(choices=NOTIFICATION_TYPE_CHOICES, max_length=50)),
                ('subject', models.CharField(max_length=255)),
                ('body_html', models.TextField(blank=True)),
                ('body_text', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('SENT', 'Sent'), ('FAILED', 'Failed')], default='PENDING', max_length=20)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('error_message', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, help_text='User this email was sent to', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_emails', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['recipient', 'status'], name='email_recipient_status_idx'),
                    models.Index(fields=['status', 'created_at'], name='email_status_created_idx'),
                ],
            },
        ),
    ]
