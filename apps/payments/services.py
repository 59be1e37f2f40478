"""
APC payment handling.

Payments are raised automatically when a submission is accepted and then
moved by administrators:

    PENDING -> PAID, FAILED -> PAID, PAID -> REFUNDED, PENDING -> FAILED
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from apps.common.utils import journal_setting
from apps.notifications.outbox import outbox
from apps.submissions.lifecycle import InvalidTransition, PreconditionNotMet, StaleTransition
from .models import Payment

logger = logging.getLogger(__name__)

PAYMENT_TRANSITIONS = {
    'PAID': ('PENDING', 'FAILED'),
    'REFUNDED': ('PAID',),
    'FAILED': ('PENDING',),
}

PROOF_ACCEPTED_STATUSES = ('PENDING', 'FAILED')


def apc_required():
    return journal_setting('APC_REQUIRED')


def build_invoice_number(submission, when=None):
    when = when or timezone.now()
    return f"INV-{when:%Y%m%d%H%M%S}-{str(submission.id)[:8]}"


def is_payment_settled(submission):
    """True when the submission may be published as far as APC is concerned."""
    if not apc_required():
        return True
    return submission.payments.filter(status='PAID').exists()


def create_apc_payment(submission):
    """
    Raise the APC invoice for an accepted submission.

    A submission carries exactly one APC payment; calling this again
    returns the existing one.
    """
    existing = submission.payments.order_by('created_at').first()
    if existing is not None:
        return existing

    payment = Payment.objects.create(
        submission=submission,
        user=submission.author,
        amount=Decimal(str(journal_setting('APC_AMOUNT'))),
        currency=journal_setting('APC_CURRENCY'),
        invoice_number=build_invoice_number(submission),
    )
    logger.info(f"APC payment {payment.invoice_number} raised for submission {submission.id}")
    return payment


def _move(payment, target, **fields):
    allowed_sources = PAYMENT_TRANSITIONS[target]
    if payment.status not in allowed_sources:
        raise InvalidTransition(detail=f"payment is {payment.status}, cannot mark {target}")

    with transaction.atomic():
        updated = Payment.objects.filter(pk=payment.pk, status=payment.status).update(
            status=target,
            updated_at=timezone.now(),
            **fields
        )
        if not updated:
            raise StaleTransition(detail='payment changed while processing the request')

    previous = payment.status
    payment.refresh_from_db()
    logger.info(f"Payment {payment.invoice_number}: {previous} -> {target}")
    return payment


def mark_paid(payment, actor, transaction_id='', notes=''):
    fields = {'paid_at': timezone.now()}
    if transaction_id:
        fields['transaction_id'] = transaction_id
    if notes:
        fields['notes'] = notes

    payment = _move(payment, 'PAID', **fields)
    outbox.notify(
        payment.user,
        'PAYMENT_RECEIVED',
        'Payment received',
        f"We have received your payment of {payment.amount} {payment.currency} "
        f"(invoice {payment.invoice_number}). Your article can now proceed to publication.",
        payment.submission,
    )
    logger.info(f"Payment {payment.invoice_number} confirmed by {actor.email}")
    return payment


def refund(payment, actor, notes=''):
    fields = {'refunded_at': timezone.now()}
    if notes:
        fields['notes'] = notes

    payment = _move(payment, 'REFUNDED', **fields)
    outbox.notify(
        payment.user,
        'PAYMENT_REFUNDED',
        'Payment refunded',
        f"Your payment for invoice {payment.invoice_number} has been refunded.",
        payment.submission,
    )
    logger.info(f"Payment {payment.invoice_number} refunded by {actor.email}")
    return payment


def mark_failed(payment, actor, notes=''):
    fields = {'notes': notes} if notes else {}
    payment = _move(payment, 'FAILED', **fields)
    logger.info(f"Payment {payment.invoice_number} marked failed by {actor.email}")
    return payment


def submit_proof(payment, actor, proof_url, payment_method='', transaction_id=''):
    """Author uploads evidence of an offline payment for admin verification."""
    if payment.status not in PROOF_ACCEPTED_STATUSES:
        raise PreconditionNotMet(detail=f"payment is already {payment.status}")

    payment.proof_url = proof_url
    payment.payment_method = payment_method or payment.payment_method
    payment.transaction_id = transaction_id or payment.transaction_id
    payment.proof_submitted_at = timezone.now()
    payment.save(update_fields=[
        'proof_url', 'payment_method', 'transaction_id', 'proof_submitted_at', 'updated_at'
    ])

    outbox.notify_many(
        outbox.editors(),
        'PAYMENT_PROOF_SUBMITTED',
        'Payment proof submitted',
        f"{actor.get_full_name()} submitted proof of payment for invoice {payment.invoice_number}.",
        payment.submission,
    )
    logger.info(f"Payment proof submitted for {payment.invoice_number} by {actor.email}")
    return payment
