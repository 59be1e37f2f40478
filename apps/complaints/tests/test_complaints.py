from django.urls import reverse
from rest_framework import status

from apps.complaints.models import Complaint
from apps.submissions.tests.helpers import JournalDeskAPITestCase, make_submission, make_user


class ComplaintAPITest(JournalDeskAPITestCase):

    def setUp(self):
        self.admin = make_user('ADMIN')
        self.authenticate(self.admin)
        self.submission = make_submission(make_user('AUTHOR'), status='PUBLISHED')

    def create_complaint(self, **overrides):
        payload = {
            'complaint_type': 'PLAGIARISM',
            'submission': str(self.submission.pk),
            'complainant_name': 'Dr. Watchful',
            'complainant_email': 'watchful@example.com',
            'subject': 'Copied figures',
            'description': 'Figures 2 and 3 appear in an earlier paper.',
        }
        payload.update(overrides)
        return self.client.post(reverse('complaints:complaint-list'), payload, format='json')

    def test_create_defaults(self):
        response = self.create_complaint()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = self.data(response)
        self.assertEqual((data['status'], data['priority']), ('OPEN', 'MEDIUM'))
        self.assertIsNone(data['resolved_at'])

    def test_manual_status_priority_and_assignment(self):
        complaint_id = self.data(self.create_complaint())['id']
        url = reverse('complaints:complaint-detail', args=[complaint_id])

        response = self.client.patch(url, {
            'status': 'INVESTIGATING', 'priority': 'HIGH', 'assigned_to_id': str(self.admin.pk),
        }, format='json')
        data = self.data(response)
        self.assertEqual((data['status'], data['priority']), ('INVESTIGATING', 'HIGH'))
        self.assertEqual(data['assigned_to']['id'], str(self.admin.pk))
        self.assertIsNone(data['resolved_at'])

    def test_resolution_is_stamped_and_cleared_on_reopen(self):
        complaint_id = self.data(self.create_complaint())['id']
        url = reverse('complaints:complaint-detail', args=[complaint_id])

        response = self.client.patch(url, {'status': 'RESOLVED', 'resolution': 'Figures were licensed.'}, format='json')
        self.assertIsNotNone(self.data(response)['resolved_at'])

        response = self.client.patch(url, {'status': 'OPEN'}, format='json')
        self.assertIsNone(self.data(response)['resolved_at'])

    def test_nothing_moves_on_its_own(self):
        complaint = Complaint.objects.create(
            complaint_type='ETHICS', complainant_name='A', complainant_email='a@example.com',
            subject='Consent', description='No ethics approval stated.'
        )
        complaint.refresh_from_db()
        self.assertEqual(complaint.status, 'OPEN')
        self.assertFalse(complaint.is_closed)

    def test_notes(self):
        complaint_id = self.data(self.create_complaint(complaint_type='RETRACTION'))['id']
        url = reverse('complaints:complaint-notes', args=[complaint_id])

        response = self.client.post(url, {'text': 'Contacted the authors.'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.data(response)['author']['email'], self.admin.email)

        response = self.client.get(url)
        self.assertEqual([note['text'] for note in self.data(response)], ['Contacted the authors.'])

    def test_editors_are_not_admins(self):
        self.authenticate(make_user('EDITOR'))
        response = self.client.get(reverse('complaints:complaint-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
