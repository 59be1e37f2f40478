"""
E-mail rendering for outbox notifications.

Every notice uses the same three templates under ``templates/emails/``.
"""
from django.conf import settings
from django.template.loader import render_to_string

SUBJECT_TEMPLATE = 'emails/notification_subject.txt'
TEXT_TEMPLATE = 'emails/notification.txt'
HTML_TEMPLATE = 'emails/notification.html'


def render_email(recipient_name, title, message, submission=None):
    """Return ``(subject, text_body, html_body)`` for one notification."""
    context = {
        'recipient_name': recipient_name,
        'title': title,
        'message': message,
        'submission': submission,
        'journal_name': settings.JOURNAL_DESK['JOURNAL_NAME'],
        'frontend_url': settings.FRONTEND_URL,
    }
    # Subjects must be a single line
    subject = ' '.join(render_to_string(SUBJECT_TEMPLATE, context).split())
    text_body = render_to_string(TEXT_TEMPLATE, context).strip()
    html_body = render_to_string(HTML_TEMPLATE, context)
    return subject[:255], text_body, html_body
