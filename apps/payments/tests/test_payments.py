"""
APC payment services and endpoints.
"""
from django.urls import reverse
from rest_framework import status

from apps.notifications.models import Notification
from apps.payments import services
from apps.payments.models import Payment
from apps.submissions.lifecycle import InvalidTransition, PreconditionNotMet
from apps.submissions.tests.helpers import JournalDeskAPITestCase, make_submission, make_user


class PaymentServiceTest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.admin = make_user('ADMIN')
        self.submission = make_submission(self.author, status='ACCEPTED')
        self.payment = services.create_apc_payment(self.submission)

    def test_one_payment_per_submission(self):
        again = services.create_apc_payment(self.submission)
        self.assertEqual(again.pk, self.payment.pk)
        self.assertEqual(Payment.objects.count(), 1)

    def test_payment_moves(self):
        payment = services.mark_failed(self.payment, self.admin, notes='Card declined')
        self.assertEqual(payment.status, 'FAILED')

        payment = services.mark_paid(payment, self.admin, transaction_id='TX-9')
        self.assertEqual(payment.status, 'PAID')
        self.assertIsNotNone(payment.paid_at)
        self.assertEqual(payment.transaction_id, 'TX-9')
        self.assertTrue(services.is_payment_settled(self.submission))

        payment = services.refund(payment, self.admin)
        self.assertEqual(payment.status, 'REFUNDED')
        self.assertIsNotNone(payment.refunded_at)
        self.assertFalse(services.is_payment_settled(self.submission))

    def test_illegal_moves(self):
        with self.assertRaises(InvalidTransition):
            services.refund(self.payment, self.admin)

        services.mark_paid(self.payment, self.admin)
        with self.assertRaises(InvalidTransition):
            services.mark_failed(self.payment, self.admin)
        with self.assertRaises(InvalidTransition):
            services.mark_paid(self.payment, self.admin)

    def test_payments_are_never_deleted(self):
        with self.assertRaises(PermissionError):
            self.payment.delete()

    def test_proof_only_while_unpaid(self):
        services.submit_proof(self.payment, self.author, 'https://bank.example.com/receipt/1', 'BANK_TRANSFER')
        self.payment.refresh_from_db()
        self.assertIsNotNone(self.payment.proof_submitted_at)
        self.assertTrue(Notification.objects.filter(user=self.admin, notification_type='PAYMENT_PROOF_SUBMITTED').exists())

        services.mark_paid(self.payment, self.admin)
        with self.assertRaises(PreconditionNotMet):
            services.submit_proof(self.payment, self.author, 'https://bank.example.com/receipt/2')


class PaymentAPITest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.admin = make_user('ADMIN')
        self.payment = services.create_apc_payment(make_submission(self.author, status='ACCEPTED'))

    def admin_url(self, action):
        return reverse(f'payments:admin-payment-{action}', args=[self.payment.pk])

    def test_admin_marks_paid_with_put(self):
        self.authenticate(self.admin)
        response = self.client.put(self.admin_url('paid'), {'transaction_id': 'UPI-42'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.data(response)['status'], 'PAID')
        self.assertTrue(Notification.objects.filter(user=self.author, notification_type='PAYMENT_RECEIVED').exists())

    def test_refund_requires_paid(self):
        self.authenticate(self.admin)
        response = self.client.post(self.admin_url('refund'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'invalid transition')

    def test_fail_from_pending(self):
        self.authenticate(self.admin)
        response = self.client.post(self.admin_url('fail'), {'notes': 'Bounced'}, format='json')
        self.assertEqual(self.data(response)['status'], 'FAILED')

    def test_editors_are_not_payment_admins(self):
        self.authenticate(self.editor)
        response = self.client.post(self.admin_url('paid'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, 'PENDING')

    def test_payer_submits_proof_and_downloads_invoice(self):
        self.authenticate(self.author)
        response = self.client.post(
            reverse('payments:payment-proof', args=[self.payment.pk]),
            {'proof_url': 'https://bank.example.com/r/77', 'payment_method': 'BANK_TRANSFER', 'transaction_id': 'NEFT-77'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.data(response)['payment_method'], 'BANK_TRANSFER')

        response = self.client.get(reverse('payments:payment-invoice', args=[self.payment.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(self.payment.invoice_number, response['Content-Disposition'])

    def test_payers_only_see_their_own_payments(self):
        self.authenticate(make_user('AUTHOR'))
        response = self.client.get(reverse('payments:payment-list'))
        self.assertEqual(self.data(response), [])

        response = self.client.get(reverse('payments:payment-invoice', args=[self.payment.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
