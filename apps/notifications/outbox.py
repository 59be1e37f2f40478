"""
Notification outbox.

The only side-effect interface used by the submission, review and
payment services. Each notice becomes an in-app ``Notification`` plus a
PENDING ``EmailLog`` row; the e-mail is handed to Celery once the
surrounding transaction commits.

Nothing raised here reaches the caller. A notice that cannot be written
or delivered is logged and dropped, and the state change that triggered
it stands.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.submissions.lifecycle import EDITOR_CAPABILITY
from .emails import render_email
from .models import EmailLog, Notification
from .tasks import send_email_task

logger = logging.getLogger(__name__)


class NotificationOutbox:
    """Write notices for users and schedule their e-mail delivery."""

    def notify(self, user, notification_type, title, message, submission=None):
        """
        Record one notice for ``user``.

        Returns the ``Notification`` or ``None`` when it could not be written.
        """
        if user is None:
            return None

        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user=user,
                    notification_type=notification_type,
                    title=title,
                    message=message,
                    submission=submission,
                )
                subject, text_body, html_body = render_email(user.get_full_name(), title, message, submission)
                email_log = EmailLog.objects.create(
                    recipient=user.email,
                    user=user,
                    notification_type=notification_type,
                    subject=subject,
                    body_text=text_body,
                    body_html=html_body,
                )
        except Exception as exc:
            logger.error(f"Could not record {notification_type} notice for {user.email}: {exc}")
            return None

        email_log_id = str(email_log.id)
        transaction.on_commit(lambda: self.deliver(email_log_id))
        logger.debug(f"Queued {notification_type} notice for {user.email}")
        return notification

    def email(self, recipient, recipient_name, notification_type, title, message, submission=None):
        """
        Record an e-mail only, for recipients without an account such as
        co-authors.
        """
        try:
            with transaction.atomic():
                subject, text_body, html_body = render_email(recipient_name, title, message, submission)
                email_log = EmailLog.objects.create(
                    recipient=recipient,
                    notification_type=notification_type,
                    subject=subject,
                    body_text=text_body,
                    body_html=html_body,
                )
        except Exception as exc:
            logger.error(f"Could not record {notification_type} e-mail for {recipient}: {exc}")
            return None

        email_log_id = str(email_log.id)
        transaction.on_commit(lambda: self.deliver(email_log_id))
        return email_log

    def notify_many(self, users, notification_type, title, message, submission=None):
        """Record the same notice for several users, once per distinct user."""
        seen = set()
        notifications = []
        for user in users:
            if user is None or user.pk in seen:
                continue
            seen.add(user.pk)
            notification = self.notify(user, notification_type, title, message, submission)
            if notification is not None:
                notifications.append(notification)
        return notifications

    def deliver(self, email_log_id):
        """Hand an EmailLog row to the delivery task."""
        try:
            send_email_task.delay(email_log_id)
        except Exception as exc:
            logger.error(f"Could not dispatch email {email_log_id}: {exc}")

    def editors(self):
        """Every active account holding editor capability."""
        User = get_user_model()
        return User.objects.filter(role__in=EDITOR_CAPABILITY, account_status='ACTIVE')

    def assigned_editors(self, submission):
        """
        Editors assigned to ``submission``; all active editors when nobody
        has been assigned yet.
        """
        assigned = [
            assignment.editor
            for assignment in submission.editor_assignments.select_related('editor')
            if assignment.editor.account_status == 'ACTIVE'
        ]
        return assigned or list(self.editors())


outbox = NotificationOutbox()
