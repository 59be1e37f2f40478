"""
Celery tasks for email notifications.
"""
from celery import shared_task
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


@shared_task
def send_email_task(email_log_id):
    """
    Deliver the e-mail recorded in an EmailLog row.

    One attempt only: a failure marks the row FAILED and is logged, the
    task itself never raises.
    """
    from apps.notifications.models import EmailLog

    try:
        email_log = EmailLog.objects.get(id=email_log_id)
    except EmailLog.DoesNotExist:
        logger.error(f"EmailLog {email_log_id} not found")
        return {'status': 'error', 'message': 'EmailLog not found'}

    if email_log.status != 'PENDING':
        logger.info(f"EmailLog {email_log_id} already {email_log.status}, skipping")
        return {'status': 'skipped', 'email_log_id': str(email_log_id)}

    try:
        email = EmailMultiAlternatives(
            subject=email_log.subject,
            body=email_log.body_text or '',
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[email_log.recipient],
        )
        if email_log.body_html:
            email.attach_alternative(email_log.body_html, "text/html")
        email.send(fail_silently=False)
    except Exception as exc:
        logger.error(f"Failed to send email {email_log_id} to {email_log.recipient}: {exc}")
        email_log.status = 'FAILED'
        email_log.error_message = str(exc)
        email_log.save(update_fields=['status', 'error_message', 'updated_at'])
        return {'status': 'failed', 'email_log_id': str(email_log_id)}

    email_log.status = 'SENT'
    email_log.sent_at = timezone.now()
    email_log.save(update_fields=['status', 'sent_at', 'updated_at'])

    logger.info(f"Email sent successfully to {email_log.recipient} ({email_log.notification_type})")
    return {
        'status': 'success',
        'email_log_id': str(email_log_id),
        'recipient': email_log.recipient
    }
