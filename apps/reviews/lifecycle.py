"""
Review status lifecycle.

    PENDING -> IN_PROGRESS -> COMPLETED
    PENDING -> DECLINED

Pure rules only; ``apps.reviews.services`` persists and notifies.
"""
from apps.common.exceptions import TransitionRejected
from apps.submissions.lifecycle import MissingRequiredFields, PreconditionNotMet

PENDING = 'PENDING'
IN_PROGRESS = 'IN_PROGRESS'
DECLINED = 'DECLINED'
COMPLETED = 'COMPLETED'

STATUS_CHOICES = [
    (PENDING, 'Pending'),
    (IN_PROGRESS, 'In Progress'),
    (DECLINED, 'Declined'),
    (COMPLETED, 'Completed'),
]

CLOSED_STATES = frozenset({DECLINED, COMPLETED})

RECOMMENDATION_CHOICES = [
    ('ACCEPT', 'Accept'),
    ('MINOR_REVISION', 'Minor Revision'),
    ('MAJOR_REVISION', 'Major Revision'),
    ('REJECT', 'Reject'),
]
RECOMMENDATIONS = frozenset(code for code, _ in RECOMMENDATION_CHOICES)


class AlreadyResponded(TransitionRejected):
    reason = 'already responded'


class ReviewNotInProgress(TransitionRejected):
    reason = 'review not in progress'


class ReviewClosed(TransitionRejected):
    reason = 'review closed'


def respond(current_status, accept):
    """Status after the reviewer answers the invitation."""
    if current_status != PENDING:
        raise AlreadyResponded(detail=f"review is {current_status}")
    return IN_PROGRESS if accept else DECLINED


def check_editable(current_status):
    """Drafts can be saved only between acceptance and submission."""
    if current_status in CLOSED_STATES:
        raise ReviewClosed(detail=f"a {current_status} review cannot be edited")
    if current_status != IN_PROGRESS:
        raise ReviewNotInProgress(detail="accept the invitation before drafting the review")


def submit(current_status, author_comments, recommendation):
    """Status after final submission; requires comments and a known recommendation."""
    if current_status != IN_PROGRESS:
        raise ReviewNotInProgress(detail=f"review is {current_status}")

    missing = []
    if not (author_comments or '').strip():
        missing.append('author_comments')
    if recommendation not in RECOMMENDATIONS:
        missing.append('recommendation')
    if missing:
        raise MissingRequiredFields(detail=', '.join(missing))

    return COMPLETED


def remind(current_status, reminders_sent, limit):
    """
    Validate one more reminder.

    Returns ``(new_count, escalate)``; ``escalate`` is True for the
    reminder that reaches ``limit``. Reminders beyond the limit are refused.
    """
    if current_status != IN_PROGRESS:
        raise ReviewNotInProgress(detail=f"review is {current_status}")
    if reminders_sent >= limit:
        raise PreconditionNotMet(detail=f"reminder limit of {limit} reached")

    new_count = reminders_sent + 1
    return new_count, new_count == limit


def check_extendable(current_status):
    if current_status in CLOSED_STATES:
        raise ReviewClosed(detail=f"a {current_status} review has no deadline")
