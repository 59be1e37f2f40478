"""
Submission status lifecycle.

Pure transition rules for a manuscript: which status changes exist, who
may trigger them and which caller-supplied checks must hold. Nothing in
this module touches the database; ``apps.submissions.services`` persists
the result and dispatches side effects.
"""
from collections import namedtuple

from rest_framework import status as http_status

from apps.common.exceptions import TransitionRejected


# Submission states
DRAFT = 'DRAFT'
SUBMITTED = 'SUBMITTED'
INITIAL_REVIEW = 'INITIAL_REVIEW'
UNDER_REVIEW = 'UNDER_REVIEW'
REVISION_REQUIRED = 'REVISION_REQUIRED'
ACCEPTED = 'ACCEPTED'
REJECTED = 'REJECTED'
PUBLISHED = 'PUBLISHED'
WITHDRAWN = 'WITHDRAWN'

STATUS_CHOICES = [
    (DRAFT, 'Draft'),
    (SUBMITTED, 'Submitted'),
    (INITIAL_REVIEW, 'Initial Review'),
    (UNDER_REVIEW, 'Under Review'),
    (REVISION_REQUIRED, 'Revision Required'),
    (ACCEPTED, 'Accepted'),
    (REJECTED, 'Rejected'),
    (PUBLISHED, 'Published'),
    (WITHDRAWN, 'Withdrawn'),
]

ALL_STATES = tuple(code for code, _ in STATUS_CHOICES)
TERMINAL_STATES = frozenset({REJECTED, PUBLISHED, WITHDRAWN})
PRE_ACCEPTANCE_STATES = (DRAFT, SUBMITTED, INITIAL_REVIEW, UNDER_REVIEW, REVISION_REQUIRED)
EDITABLE_STATES = frozenset({DRAFT, REVISION_REQUIRED})

# Roles and the capability sets built from them
AUTHOR = 'AUTHOR'
REVIEWER = 'REVIEWER'
EDITOR = 'EDITOR'
ADMIN = 'ADMIN'

ROLE_CHOICES = [
    (AUTHOR, 'Author'),
    (REVIEWER, 'Reviewer'),
    (EDITOR, 'Editor'),
    (ADMIN, 'Administrator'),
]

AUTHOR_CAPABILITY = frozenset({AUTHOR, REVIEWER, EDITOR, ADMIN})
EDITOR_CAPABILITY = frozenset({EDITOR, ADMIN})
REVIEWER_CAPABILITY = frozenset({REVIEWER, EDITOR, ADMIN})
ADMIN_CAPABILITY = frozenset({ADMIN})


class InvalidTransition(TransitionRejected):
    reason = 'invalid transition'


class InsufficientRole(TransitionRejected):
    reason = 'insufficient role'


class PreconditionNotMet(TransitionRejected):
    reason = 'precondition not met'


class UnknownDecision(TransitionRejected):
    reason = 'unknown decision'


class MissingRequiredFields(TransitionRejected):
    reason = 'missing required fields'


class StaleTransition(TransitionRejected):
    """Another request changed the submission between read and write."""
    reason = 'stale transition'
    status_code = http_status.HTTP_409_CONFLICT


Rule = namedtuple('Rule', ['sources', 'target', 'capability'])

TRANSITIONS = {
    'SUBMIT': Rule((DRAFT,), SUBMITTED, AUTHOR_CAPABILITY),
    'BEGIN_SCREENING': Rule((SUBMITTED,), INITIAL_REVIEW, EDITOR_CAPABILITY),
    'PROCEED_TO_REVIEW': Rule((INITIAL_REVIEW,), UNDER_REVIEW, EDITOR_CAPABILITY),
    'DESK_REJECT': Rule((INITIAL_REVIEW,), REJECTED, EDITOR_CAPABILITY),
    'RETURN_FOR_FORMATTING': Rule((INITIAL_REVIEW,), SUBMITTED, EDITOR_CAPABILITY),
    'REQUEST_REVISION': Rule((UNDER_REVIEW,), REVISION_REQUIRED, EDITOR_CAPABILITY),
    'ACCEPT': Rule((UNDER_REVIEW,), ACCEPTED, EDITOR_CAPABILITY),
    'REJECT': Rule((UNDER_REVIEW,), REJECTED, EDITOR_CAPABILITY),
    'SUBMIT_REVISION': Rule((REVISION_REQUIRED,), UNDER_REVIEW, AUTHOR_CAPABILITY),
    'PUBLISH': Rule((ACCEPTED,), PUBLISHED, EDITOR_CAPABILITY),
    'WITHDRAW': Rule(PRE_ACCEPTANCE_STATES, WITHDRAWN, AUTHOR_CAPABILITY),
}

SCREENING_DECISIONS = {
    'PROCEED_TO_REVIEW': 'PROCEED_TO_REVIEW',
    'DESK_REJECT': 'DESK_REJECT',
    'RETURN_FOR_FORMATTING': 'RETURN_FOR_FORMATTING',
}

EDITORIAL_DECISIONS = {
    'ACCEPT': 'ACCEPT',
    'REJECT': 'REJECT',
    'REVISION': 'REQUEST_REVISION',
    'MINOR_REVISION': 'REQUEST_REVISION',
    'MAJOR_REVISION': 'REQUEST_REVISION',
}

# Transitions whose caller must explain the outcome to the author
COMMENT_REQUIRED = frozenset({'DESK_REJECT', 'RETURN_FOR_FORMATTING'})


def _check_preconditions(transition, preconditions):
    if transition in COMMENT_REQUIRED:
        comments = preconditions.get('comments') or ''
        if not comments.strip():
            raise MissingRequiredFields(detail='comments are required for this decision')

    if transition == 'SUBMIT' and not preconditions.get('has_files'):
        raise PreconditionNotMet(detail='at least one manuscript file must be uploaded')

    if transition == 'PROCEED_TO_REVIEW':
        if not (preconditions.get('scope_check') and preconditions.get('format_check')):
            raise PreconditionNotMet(detail='scope and format checks must both pass')

    if transition == 'PUBLISH' and not preconditions.get('payment_settled'):
        raise PreconditionNotMet(detail='article processing charge has not been paid')


def apply_transition(current_status, transition, actor_role, **preconditions):
    """
    Validate ``transition`` from ``current_status`` for an actor holding
    ``actor_role`` and return the resulting status.

    Keyword preconditions understood:
        has_files        SUBMIT
        scope_check      PROCEED_TO_REVIEW
        format_check     PROCEED_TO_REVIEW
        comments         DESK_REJECT, RETURN_FOR_FORMATTING
        payment_settled  PUBLISH (True when no APC is due)

    Raises a ``TransitionRejected`` subclass instead of returning when the
    move is not allowed. Checks run in order: legality, role, required
    fields, preconditions.
    """
    rule = TRANSITIONS.get(transition)
    if rule is None:
        raise InvalidTransition(detail=f"unknown transition {transition!r}")

    if current_status not in rule.sources:
        raise InvalidTransition(detail=f"{transition} is not allowed from {current_status}")

    if actor_role not in rule.capability:
        raise InsufficientRole(detail=f"{transition} cannot be performed by {actor_role or 'anonymous'}")

    _check_preconditions(transition, preconditions)
    return rule.target


def is_terminal(status):
    return status in TERMINAL_STATES


def available_transitions(current_status, actor_role):
    """Transitions that are legal from ``current_status`` for ``actor_role``, ignoring preconditions."""
    return sorted(
        name for name, rule in TRANSITIONS.items()
        if current_status in rule.sources and actor_role in rule.capability
    )


def screening_transition(decision):
    """Map a screening decision to its transition name."""
    try:
        return SCREENING_DECISIONS[decision]
    except (KeyError, TypeError):
        raise UnknownDecision(detail=f"{decision!r} is not a screening decision")


def editorial_transition(decision):
    """Map an editorial decision to its transition name."""
    try:
        return EDITORIAL_DECISIONS[decision]
    except (KeyError, TypeError):
        raise UnknownDecision(detail=f"{decision!r} is not an editorial decision")


def screening_plan(current_status, decision):
    """
    Ordered transitions needed to carry out a screening decision.

    A submission still sitting in SUBMITTED is moved into INITIAL_REVIEW
    first so no state is skipped.
    """
    transition = screening_transition(decision)
    if current_status == SUBMITTED:
        return ['BEGIN_SCREENING', transition]
    return [transition]
