"""
Review sub-lifecycle manager.

Invitations, responses, reminders, drafts and final submission of peer
reviews. Completing a review never moves the submission; the editor
issues the decision.
"""
import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from apps.common.utils import journal_setting
from apps.notifications.outbox import outbox as default_outbox
from apps.submissions import lifecycle as submission_lifecycle
from apps.submissions.lifecycle import (
    EDITOR_CAPABILITY,
    REVIEWER_CAPABILITY,
    InsufficientRole,
    PreconditionNotMet,
    StaleTransition,
)
from apps.submissions.services import record_event
from . import lifecycle
from .models import Review

logger = logging.getLogger(__name__)

# Fields a reviewer may save while drafting
DRAFT_FIELDS = ('recommendation', 'rating', 'author_comments', 'confidential_comments')


class ReviewManager:

    def __init__(self, outbox=None):
        self.outbox = outbox or default_outbox

    def _require_active(self, actor):
        if actor is None or getattr(actor, 'account_status', None) != 'ACTIVE':
            raise PermissionDenied('Only active accounts can act on reviews.')

    def _require_editor(self, actor):
        self._require_active(actor)
        if actor.role not in EDITOR_CAPABILITY:
            raise InsufficientRole(detail=f"{actor.role} cannot manage reviews")

    def _require_reviewer(self, review, actor):
        self._require_active(actor)
        if review.reviewer_id != actor.id:
            raise PermissionDenied('Only the invited reviewer can perform this action.')

    def _set_status(self, review, new_status, **fields):
        """Conditional write keyed on the status the caller validated against."""
        updated = Review.objects.filter(pk=review.pk, status=review.status).update(
            status=new_status,
            updated_at=timezone.now(),
            **fields
        )
        if not updated:
            raise StaleTransition(detail='the review was changed by another request')
        previous = review.status
        review.refresh_from_db()
        logger.info(f"Review {review.pk}: {previous} -> {new_status}")
        return review

    def invite(self, submission, actor, reviewer, due_date=None, message=''):
        """
        Invite ``reviewer`` to review ``submission``.

        The submission must be under review, the invitee must hold a
        reviewing role and must not be the author, and each reviewer is
        invited at most once per submission.
        """
        self._require_editor(actor)
        if submission.status != submission_lifecycle.UNDER_REVIEW:
            raise PreconditionNotMet(detail='reviewers can only be invited while the submission is under review')
        if reviewer.role not in REVIEWER_CAPABILITY or reviewer.account_status != 'ACTIVE':
            raise InsufficientRole(detail=f"{reviewer.email} cannot act as a reviewer")
        if reviewer.id == submission.author_id:
            raise PreconditionNotMet(detail='authors cannot review their own submission')
        if Review.objects.filter(submission=submission, reviewer=reviewer).exists():
            raise PreconditionNotMet(detail='reviewer has already been invited')

        if due_date is None:
            due_date = timezone.now() + timedelta(days=journal_setting('REVIEW_DEADLINE_DAYS'))

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    submission=submission,
                    reviewer=reviewer,
                    invited_by=actor,
                    due_date=due_date,
                    invited_at=timezone.now(),
                    invitation_message=message or '',
                    reminders_sent=0,
                )
                record_event(submission, 'REVIEWER_INVITED', actor, f"{reviewer.get_full_name()} invited to review")
        except IntegrityError:
            raise PreconditionNotMet(detail='reviewer has already been invited')

        self.outbox.notify(
            reviewer,
            'REVIEW_INVITATION',
            'Invitation to review',
            f"You are invited to review \"{submission.title}\". "
            f"Please respond and submit your review by {due_date:%d %B %Y}.\n{message}".strip(),
            submission,
        )
        logger.info(f"Reviewer {reviewer.email} invited to submission {submission.pk} by {actor.email}")
        return review

    def respond(self, review, actor, accept, decline_reason=''):
        """PENDING -> IN_PROGRESS on accept, PENDING -> DECLINED otherwise."""
        self._require_reviewer(review, actor)
        new_status = lifecycle.respond(review.status, accept)
        now = timezone.now()
        fields = {'accepted_at': now}
        if not accept:
            # A declined review keeps no assessment
            fields = {
                'declined_at': now,
                'decline_reason': decline_reason or '',
                'recommendation': '',
                'rating': None,
                'author_comments': '',
                'confidential_comments': '',
            }

        with transaction.atomic():
            self._set_status(review, new_status, **fields)
            verb = 'accepted' if accept else 'declined'
            record_event(review.submission, f"REVIEW_{verb.upper()}", actor, f"{actor.get_full_name()} {verb} the invitation")
            self.outbox.notify_many(
                self.outbox.assigned_editors(review.submission),
                'REVIEW_RESPONSE',
                f"Review invitation {verb}",
                f"{actor.get_full_name()} {verb} the invitation to review \"{review.submission.title}\".",
                review.submission,
            )
        return review

    def save_draft(self, review, actor, data):
        """Save work in progress on an accepted review. Closed reviews are immutable."""
        self._require_reviewer(review, actor)
        lifecycle.check_editable(review.status)

        values = {name: data[name] for name in DRAFT_FIELDS if name in data}
        if values:
            updated = Review.objects.filter(pk=review.pk, status=lifecycle.IN_PROGRESS).update(
                updated_at=timezone.now(), **values
            )
            if not updated:
                raise StaleTransition(detail='the review was changed by another request')
            review.refresh_from_db()
        return review

    def submit(self, review, actor, data=None):
        """
        IN_PROGRESS -> COMPLETED. ``data`` may carry the final values of
        the draft fields; the stored draft is used for anything omitted.
        """
        self._require_reviewer(review, actor)
        data = data or {}
        values = {name: data.get(name, getattr(review, name)) for name in DRAFT_FIELDS}
        new_status = lifecycle.submit(review.status, values['author_comments'], values['recommendation'])

        with transaction.atomic():
            self._set_status(review, new_status, submitted_at=timezone.now(), **values)
            record_event(review.submission, 'REVIEW_COMPLETED', actor, f"Recommendation: {review.recommendation}")

        submission = review.submission
        self.outbox.notify(
            actor,
            'REVIEW_THANK_YOU',
            'Thank you for your review',
            f"Thank you for reviewing \"{submission.title}\". Your contribution is appreciated.",
            submission,
        )
        self.outbox.notify_many(
            self.outbox.assigned_editors(submission),
            'REVIEW_COMPLETED',
            'Review completed',
            f"{actor.get_full_name()} completed a review of \"{submission.title}\" "
            f"recommending {review.get_recommendation_display()}.",
            submission,
        )
        return review

    def remind(self, review, actor):
        """
        Send the reviewer a reminder. The reminder that reaches the
        configured limit also alerts the assigned editors; later
        reminders are refused.
        """
        self._require_editor(actor)
        limit = journal_setting('REVIEW_REMINDER_LIMIT')
        new_count, escalate = lifecycle.remind(review.status, review.reminders_sent, limit)

        with transaction.atomic():
            updated = Review.objects.filter(
                pk=review.pk, status=review.status, reminders_sent=review.reminders_sent
            ).update(reminders_sent=new_count, last_reminded_at=timezone.now(), updated_at=timezone.now())
            if not updated:
                raise StaleTransition(detail='the review was changed by another request')
            review.refresh_from_db()

        submission = review.submission
        self.outbox.notify(
            review.reviewer,
            'REVIEW_REMINDER',
            'Reminder: review due',
            f"This is a reminder that your review of \"{submission.title}\" is due on {review.due_date:%d %B %Y}.",
            submission,
        )
        if escalate:
            self.outbox.notify_many(
                self.outbox.assigned_editors(submission),
                'REVIEW_ESCALATION',
                'Review needs attention',
                f"{review.reviewer.get_full_name()} has received {new_count} reminders for \"{submission.title}\" "
                "without submitting. Consider extending the deadline or inviting another reviewer.",
                submission,
            )
            logger.warning(f"Review {review.pk} escalated after {new_count} reminders")
        logger.info(f"Reminder {new_count}/{limit} sent for review {review.pk}")
        return review, escalate

    def extend_deadline(self, review, actor, due_date):
        self._require_editor(actor)
        lifecycle.check_extendable(review.status)
        if due_date <= timezone.now():
            raise PreconditionNotMet(detail='the new deadline must be in the future')

        previous = review.due_date
        review.due_date = due_date
        review.save(update_fields=['due_date', 'updated_at'])
        self.outbox.notify(
            review.reviewer,
            'REVIEW_DEADLINE_EXTENDED',
            'Review deadline extended',
            f"The deadline for your review of \"{review.submission.title}\" is now {due_date:%d %B %Y}.",
            review.submission,
        )
        logger.info(f"Review {review.pk} deadline moved from {previous} to {due_date}")
        return review


review_manager = ReviewManager()
