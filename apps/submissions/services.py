"""
Submission lifecycle manager.

Every status change goes through ``SubmissionLifecycleManager``: the move
is validated with ``apps.submissions.lifecycle`` before anything is
written, persisted with a version-guarded conditional update together
with its timeline entry, and only then are side effects (notices,
payment records) dispatched through the notification outbox.
"""
import logging

from django.db import transaction
from django.db.models import F, Max
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from apps.common.utils import journal_setting
from apps.notifications.outbox import outbox as default_outbox
from apps.payments import services as payment_services
from . import lifecycle
from .lifecycle import (
    EDITOR_CAPABILITY,
    InsufficientRole,
    MissingRequiredFields,
    PreconditionNotMet,
    StaleTransition,
)
from .models import EditorAssignment, Revision, RevisionFile, Submission, SubmissionTimeline

logger = logging.getLogger(__name__)


def build_doi(submission, year=None):
    """``<DOI_PREFIX>/<journal slug>.<year>.<first 8 chars of id>``"""
    year = year or timezone.now().year
    prefix = journal_setting('DOI_PREFIX')
    slug = journal_setting('JOURNAL_SLUG')
    return f"{prefix}/{slug}.{year}.{str(submission.id)[:8]}"


def record_event(submission, event, actor=None, description='', from_status='', to_status=''):
    """Append a timeline entry that does not change status."""
    return SubmissionTimeline.objects.create(
        submission=submission,
        event=event,
        from_status=from_status or submission.status,
        to_status=to_status or submission.status,
        description=description,
        performed_by=actor,
    )


class SubmissionLifecycleManager:
    """
    Owns ``Submission.status``.

    The acting user is always passed explicitly; nothing is read from
    request-global state.
    """

    def __init__(self, outbox=None):
        self.outbox = outbox or default_outbox

    # Guards

    def _require_active(self, actor):
        if actor is None or getattr(actor, 'account_status', None) != 'ACTIVE':
            raise PermissionDenied('Only active accounts can change a submission.')

    def _require_author(self, submission, actor):
        self._require_active(actor)
        if submission.author_id != actor.id:
            raise PermissionDenied('Only the submitting author can perform this action.')

    def _require_editor(self, actor):
        self._require_active(actor)
        if actor.role not in EDITOR_CAPABILITY:
            raise InsufficientRole(detail=f"{actor.role} cannot perform editorial actions")

    # Persistence

    def _persist(self, submission, transition, new_status, actor, description='', **fields):
        """
        Write one validated transition.

        The update only matches the row if nobody changed status or
        version since ``submission`` was read; otherwise the transition is
        stale and nothing is written.
        """
        from_status = submission.status
        updated = Submission.objects.filter(
            pk=submission.pk,
            status=from_status,
            version=submission.version,
        ).update(
            status=new_status,
            version=F('version') + 1,
            updated_at=timezone.now(),
            **fields
        )
        if not updated:
            logger.warning(
                f"Stale {transition} on submission {submission.pk}: expected {from_status} v{submission.version}"
            )
            raise StaleTransition(detail='the submission was changed by another request, reload and retry')

        SubmissionTimeline.objects.create(
            submission=submission,
            event=transition,
            from_status=from_status,
            to_status=new_status,
            description=description,
            performed_by=actor,
        )
        submission.refresh_from_db()
        logger.info(
            f"Submission {submission.pk}: {transition} {from_status} -> {new_status} by {actor.email}"
        )
        return submission

    def _transition(self, submission, transition, actor, description='', fields=None, **preconditions):
        new_status = lifecycle.apply_transition(submission.status, transition, actor.role, **preconditions)
        return self._persist(submission, transition, new_status, actor, description, **(fields or {}))

    # Author actions

    def submit(self, submission, actor):
        """DRAFT -> SUBMITTED."""
        self._require_author(submission, actor)
        with transaction.atomic():
            self._transition(
                submission, 'SUBMIT', actor,
                description='Manuscript submitted for review',
                fields={'submitted_at': timezone.now()},
                has_files=submission.files.exists(),
            )
            self._notify_submitted(submission)
        return submission

    def withdraw(self, submission, actor, reason=''):
        """Any pre-acceptance status -> WITHDRAWN."""
        self._require_author(submission, actor)
        with transaction.atomic():
            self._transition(submission, 'WITHDRAW', actor, description=reason or 'Withdrawn by author')
        return submission

    def submit_revision(self, submission, actor, response_to_reviewers, revision_letter='', files=()):
        """
        Record the next revision and move REVISION_REQUIRED -> UNDER_REVIEW.

        Revision numbers start at 1 and increase by one per submission.
        """
        self._require_author(submission, actor)
        new_status = lifecycle.apply_transition(submission.status, 'SUBMIT_REVISION', actor.role)
        if not (response_to_reviewers or '').strip():
            raise MissingRequiredFields(detail='response_to_reviewers')

        with transaction.atomic():
            last_number = submission.revisions.aggregate(last=Max('revision_number'))['last'] or 0
            revision = Revision.objects.create(
                submission=submission,
                revision_number=last_number + 1,
                revision_letter=revision_letter,
                response_to_reviewers=response_to_reviewers,
                submitted_by=actor,
            )
            for upload in files:
                RevisionFile.objects.create(
                    revision=revision,
                    file=upload,
                    original_name=upload.name,
                    content_type=getattr(upload, 'content_type', '') or '',
                    size=upload.size,
                )
            self._persist(
                submission, 'SUBMIT_REVISION', new_status, actor,
                description=f"Revision {revision.revision_number} submitted",
            )
            self.outbox.notify_many(
                self.outbox.assigned_editors(submission),
                'REVISION_SUBMITTED',
                'Revised manuscript submitted',
                f"The author has submitted revision {revision.revision_number} of \"{submission.title}\".",
                submission,
            )
        return revision

    def approve_proof(self, submission, actor, approved, comments=''):
        """
        Author signs off the final proof, or sends corrections back.
        Status is not changed.
        """
        self._require_author(submission, actor)
        if submission.status != lifecycle.ACCEPTED:
            raise PreconditionNotMet(detail='proofs can only be reviewed for accepted submissions')
        if not approved and not (comments or '').strip():
            raise MissingRequiredFields(detail='comments are required when requesting corrections')

        with transaction.atomic():
            if approved:
                Submission.objects.filter(pk=submission.pk).update(
                    proof_approved_at=timezone.now(), proof_corrections=''
                )
                record_event(submission, 'PROOF_APPROVED', actor, 'Author approved the final proof')
            else:
                Submission.objects.filter(pk=submission.pk).update(
                    proof_approved_at=None, proof_corrections=comments
                )
                record_event(submission, 'PROOF_CORRECTIONS_REQUESTED', actor, comments)
                self.outbox.notify_many(
                    self.outbox.assigned_editors(submission),
                    'PROOF_CORRECTIONS',
                    'Proof corrections requested',
                    f"The author requested corrections to the proof of \"{submission.title}\":\n{comments}",
                    submission,
                )
        submission.refresh_from_db()
        logger.info(f"Proof {'approved' if approved else 'returned'} for submission {submission.pk}")
        return submission

    # Editor actions

    def begin_screening(self, submission, actor):
        """SUBMITTED -> INITIAL_REVIEW."""
        self._require_active(actor)
        with transaction.atomic():
            self._transition(submission, 'BEGIN_SCREENING', actor, description='Initial screening started')
        return submission

    def screen(self, submission, actor, decision, scope_check=False, format_check=False, comments=''):
        """
        Apply a screening decision. A SUBMITTED manuscript first enters
        INITIAL_REVIEW so the timeline shows both steps.
        """
        self._require_active(actor)
        plan = lifecycle.screening_plan(submission.status, decision)
        preconditions = {
            'scope_check': scope_check,
            'format_check': format_check,
            'comments': comments,
        }

        # Validate every step before writing any of them
        status = submission.status
        targets = []
        for transition in plan:
            status = lifecycle.apply_transition(status, transition, actor.role, **preconditions)
            targets.append(status)

        with transaction.atomic():
            for transition, target in zip(plan, targets):
                fields = {}
                description = ''
                if transition != 'BEGIN_SCREENING':
                    fields = {
                        'scope_check': bool(scope_check),
                        'format_check': bool(format_check),
                        'screening_comments': comments or '',
                    }
                    description = comments or ''
                self._persist(submission, transition, target, actor, description, **fields)
            self._notify_screened(submission, plan[-1], comments)
        return submission

    def decide(self, submission, actor, decision, comments=''):
        """Apply an editorial decision on a submission under review."""
        self._require_active(actor)
        transition = lifecycle.editorial_transition(decision)
        fields = {'decision_type': decision, 'decision_comments': comments or ''}
        if transition == 'ACCEPT':
            fields['accepted_at'] = timezone.now()

        with transaction.atomic():
            self._transition(submission, transition, actor, description=comments or '', fields=fields)
            self._notify_decided(submission, transition, decision, comments)
        return submission

    def publish(self, submission, actor, issue, pages=''):
        """
        ACCEPTED -> PUBLISHED. Assigns DOI, volume, issue and pages.

        With APC enabled a PAID payment must exist first. A DOI already
        present on the record is kept.
        """
        self._require_active(actor)
        with transaction.atomic():
            self._transition(
                submission, 'PUBLISH', actor,
                description=f"Published in {issue}",
                fields={
                    'doi': submission.doi or build_doi(submission),
                    'issue': issue,
                    'volume': issue.volume,
                    'issue_number': issue.number,
                    'pages': pages or '',
                    'published_at': timezone.now(),
                },
                payment_settled=payment_services.is_payment_settled(submission),
            )
            # First article out dates the issue
            type(issue).objects.filter(pk=issue.pk, published_at__isnull=True).update(published_at=timezone.now())
            self._notify_published(submission)
        return submission

    def assign_editor(self, submission, actor, editor, is_chief=False):
        """Attach an editor to a submission; repeated calls are no-ops."""
        self._require_editor(actor)
        if editor.role not in EDITOR_CAPABILITY or editor.account_status != 'ACTIVE':
            raise ValidationError({'editor_id': 'User is not an active editor.'})

        with transaction.atomic():
            assignment, created = EditorAssignment.objects.get_or_create(
                submission=submission,
                editor=editor,
                defaults={'is_chief': is_chief, 'assigned_by': actor},
            )
            if created:
                record_event(submission, 'EDITOR_ASSIGNED', actor, f"{editor.get_full_name()} assigned as editor")
                self.outbox.notify(
                    editor,
                    'EDITOR_ASSIGNED',
                    'You have been assigned a manuscript',
                    f"You are now handling \"{submission.title}\".",
                    submission,
                )
                logger.info(f"Editor {editor.email} assigned to submission {submission.pk}")
        return assignment, created

    # Side effects

    def _notify_submitted(self, submission):
        self.outbox.notify(
            submission.author,
            'SUBMISSION_RECEIVED',
            'Submission received',
            f"Thank you for submitting \"{submission.title}\". "
            "Our editorial team will screen it and keep you informed.",
            submission,
        )
        self.outbox.notify_many(
            self.outbox.editors(),
            'NEW_SUBMISSION',
            'New submission',
            f"A new manuscript \"{submission.title}\" is waiting for screening.",
            submission,
        )

    def _notify_screened(self, submission, transition, comments):
        if transition == 'DESK_REJECT':
            self.outbox.notify(
                submission.author,
                'SUBMISSION_REJECTED',
                'Decision on your submission',
                f"After initial screening we are unable to send \"{submission.title}\" for peer review.\n{comments}",
                submission,
            )
        elif transition == 'RETURN_FOR_FORMATTING':
            self.outbox.notify(
                submission.author,
                'FORMATTING_REQUESTED',
                'Formatting changes requested',
                f"Please address the following before \"{submission.title}\" can be screened again:\n{comments}",
                submission,
            )

    def _notify_decided(self, submission, transition, decision, comments):
        author = submission.author
        if transition == 'ACCEPT':
            payment = None
            if payment_services.apc_required():
                payment = self._raise_apc_payment(submission)
            self.outbox.notify(
                author,
                'SUBMISSION_ACCEPTED',
                'Your manuscript has been accepted',
                f"Congratulations, \"{submission.title}\" has been accepted for publication.\n{comments}".strip(),
                submission,
            )
            if payment is not None:
                self.outbox.notify(
                    author,
                    'PAYMENT_REQUESTED',
                    'Article processing charge due',
                    f"Please pay {payment.amount} {payment.currency} against invoice "
                    f"{payment.invoice_number} so your article can be published.",
                    submission,
                )
        elif transition == 'REJECT':
            self.outbox.notify(
                author,
                'SUBMISSION_REJECTED',
                'Decision on your submission',
                f"We regret that \"{submission.title}\" has not been accepted for publication.\n{comments}".strip(),
                submission,
            )
        elif transition == 'REQUEST_REVISION':
            kind = decision.replace('_', ' ').lower()
            self.outbox.notify(
                author,
                'REVISION_REQUESTED',
                'Revision requested',
                f"The editor has requested a {kind} of \"{submission.title}\".\n{comments}".strip(),
                submission,
            )

    def _raise_apc_payment(self, submission):
        try:
            with transaction.atomic():
                return payment_services.create_apc_payment(submission)
        except Exception as exc:
            logger.error(f"Could not raise APC payment for submission {submission.pk}: {exc}")
            return None

    def _notify_published(self, submission):
        title = 'Your article has been published'
        message = (
            f"\"{submission.title}\" is now published in Volume {submission.volume}, "
            f"Issue {submission.issue_number}. DOI: {submission.doi}"
        )
        self.outbox.notify(submission.author, 'ARTICLE_PUBLISHED', title, message, submission)
        for co_author in submission.co_authors.all():
            if co_author.email.lower() == submission.author.email.lower():
                continue
            self.outbox.email(
                co_author.email, co_author.get_full_name(), 'ARTICLE_PUBLISHED', title, message, submission
            )


lifecycle_manager = SubmissionLifecycleManager()
