"""
Review invitations, drafts, submission and reminders.
"""
from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.notifications.models import Notification
from apps.reviews.models import Review
from apps.reviews.services import review_manager
from apps.submissions.lifecycle import InsufficientRole, PreconditionNotMet
from apps.submissions.tests.helpers import JournalDeskAPITestCase, make_submission, make_user


class ReviewInvitationTest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.reviewer = make_user('REVIEWER')
        self.submission = make_submission(self.author, status='UNDER_REVIEW')

    def test_invitation_defaults(self):
        review = review_manager.invite(self.submission, self.editor, self.reviewer)

        self.assertEqual(review.status, 'PENDING')
        self.assertEqual(review.reminders_sent, 0)
        self.assertGreater(review.due_date, timezone.now() + timedelta(days=29))
        self.assertTrue(Notification.objects.filter(user=self.reviewer, notification_type='REVIEW_INVITATION').exists())
        self.assertTrue(self.submission.timeline.filter(event='REVIEWER_INVITED').exists())

    def test_only_under_review_submissions_take_reviewers(self):
        submission = make_submission(self.author, status='SUBMITTED')
        with self.assertRaises(PreconditionNotMet):
            review_manager.invite(submission, self.editor, self.reviewer)

    def test_author_roles_cannot_review(self):
        with self.assertRaises(InsufficientRole):
            review_manager.invite(self.submission, self.editor, make_user('AUTHOR'))

    def test_authors_cannot_review_their_own_work(self):
        self.author.role = 'REVIEWER'
        self.author.save()
        with self.assertRaises(PreconditionNotMet):
            review_manager.invite(self.submission, self.editor, self.author)

    def test_one_review_per_reviewer(self):
        review_manager.invite(self.submission, self.editor, self.reviewer)
        with self.assertRaises(PreconditionNotMet):
            review_manager.invite(self.submission, self.editor, self.reviewer)
        self.assertEqual(Review.objects.count(), 1)

    def test_only_editors_invite(self):
        with self.assertRaises(InsufficientRole):
            review_manager.invite(self.submission, make_user('REVIEWER'), self.reviewer)


class ReviewAPITest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.reviewer = make_user('REVIEWER')
        self.submission = make_submission(self.author, status='UNDER_REVIEW', is_double_blind=True)
        self.review = review_manager.invite(self.submission, self.editor, self.reviewer)

    def url(self, name):
        return reverse(f'reviews:review-{name}', args=[self.review.pk])

    def accept(self):
        self.authenticate(self.reviewer)
        return self.client.post(self.url('respond'), {'accept': True}, format='json')

    def test_declined_review_cannot_be_submitted(self):
        self.authenticate(self.reviewer)
        response = self.client.post(self.url('respond'), {'accept': False, 'decline_reason': 'Conflict'}, format='json')
        self.assertEqual(self.data(response)['status'], 'DECLINED')

        response = self.client.post(self.url('submit'), {
            'recommendation': 'ACCEPT', 'author_comments': 'Looks good',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'review not in progress')

    def test_second_response_is_refused(self):
        self.accept()
        response = self.client.post(self.url('respond'), {'accept': False}, format='json')
        self.assertEqual(response.json()['error'], 'already responded')

    def test_draft_then_submit(self):
        self.accept()
        response = self.client.patch(self.url('detail'), {
            'recommendation': 'MINOR_REVISION', 'author_comments': 'Tighten section 3.', 'rating': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.data(response)['status'], 'IN_PROGRESS')

        response = self.client.post(self.url('submit'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = self.data(response)
        self.assertEqual(data['status'], 'COMPLETED')
        self.assertEqual(data['recommendation'], 'MINOR_REVISION')
        self.assertIsNotNone(data['submitted_at'])

        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, 'UNDER_REVIEW')
        self.assertTrue(Notification.objects.filter(user=self.reviewer, notification_type='REVIEW_THANK_YOU').exists())
        self.assertTrue(Notification.objects.filter(user=self.editor, notification_type='REVIEW_COMPLETED').exists())

        response = self.client.patch(self.url('detail'), {'author_comments': 'Changed my mind'}, format='json')
        self.assertEqual(response.json()['error'], 'review closed')

    def test_pending_review_cannot_be_drafted(self):
        self.authenticate(self.reviewer)
        response = self.client.patch(self.url('detail'), {
            'recommendation': 'REJECT', 'author_comments': 'Not convincing',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'review not in progress')
        self.review.refresh_from_db()
        self.assertEqual(self.review.recommendation, '')
        self.assertEqual(self.review.author_comments, '')

    def test_declined_review_keeps_no_assessment(self):
        Review.objects.filter(pk=self.review.pk).update(recommendation='REJECT', author_comments='Not convincing', rating=2)
        self.review.refresh_from_db()

        review = review_manager.respond(self.review, self.reviewer, accept=False, decline_reason='No time')

        self.assertEqual(review.status, 'DECLINED')
        self.assertEqual(review.recommendation, '')
        self.assertEqual(review.author_comments, '')
        self.assertIsNone(review.rating)
        self.assertEqual(review.decline_reason, 'No time')

    def test_submit_requires_comments(self):
        self.accept()
        response = self.client.post(self.url('submit'), {'recommendation': 'REJECT'}, format='json')
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'missing required fields',
            'message': 'author_comments',
        })

    def test_pending_review_cannot_jump_to_completed(self):
        self.authenticate(self.reviewer)
        response = self.client.post(self.url('submit'), {
            'recommendation': 'ACCEPT', 'author_comments': 'Great',
        }, format='json')
        self.assertEqual(response.json()['error'], 'review not in progress')
        self.review.refresh_from_db()
        self.assertEqual(self.review.status, 'PENDING')

    def test_editors_cannot_answer_for_reviewers(self):
        self.authenticate(self.editor)
        response = self.client.post(self.url('respond'), {'accept': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_double_blind_hides_the_author_from_reviewers(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.url('detail'))
        self.assertIsNone(self.data(response)['submission']['author'])

        self.authenticate(self.editor)
        response = self.client.get(self.url('detail'))
        self.assertEqual(self.data(response)['submission']['author']['email'], self.author.email)

    def test_reminder_cap_and_escalation(self):
        self.accept()
        self.authenticate(self.editor)

        for expected in (1, 2, 3):
            response = self.client.post(self.url('remind'))
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(self.data(response)['reminders_sent'], expected)

        self.assertEqual(response.json()['message'], 'Reminder sent; editors alerted.')
        self.assertTrue(Notification.objects.filter(user=self.editor, notification_type='REVIEW_ESCALATION').exists())
        self.assertEqual(Notification.objects.filter(user=self.reviewer, notification_type='REVIEW_REMINDER').count(), 3)

        response = self.client.post(self.url('remind'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'precondition not met')
        self.review.refresh_from_db()
        self.assertEqual(self.review.reminders_sent, 3)

    def test_reminders_need_an_accepted_invitation(self):
        self.authenticate(self.editor)
        response = self.client.post(self.url('remind'))
        self.assertEqual(response.json()['error'], 'review not in progress')

    def test_reviewers_cannot_send_reminders(self):
        self.accept()
        response = self.client.post(self.url('remind'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_extend_deadline(self):
        self.authenticate(self.editor)
        past = timezone.now() - timedelta(days=1)
        response = self.client.post(self.url('extend-deadline'), {'due_date': past.isoformat()}, format='json')
        self.assertEqual(response.json()['error'], 'precondition not met')

        future = timezone.now() + timedelta(days=60)
        response = self.client.post(self.url('extend-deadline'), {'due_date': future.isoformat()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(Notification.objects.filter(user=self.reviewer, notification_type='REVIEW_DEADLINE_EXTENDED').exists())

    def test_reviewers_only_list_their_own_reviews(self):
        other_reviewer = make_user('REVIEWER')
        review_manager.invite(self.submission, self.editor, other_reviewer)

        self.authenticate(self.reviewer)
        response = self.client.get(reverse('reviews:review-list'))
        self.assertEqual([item['id'] for item in self.data(response)], [str(self.review.pk)])

    def test_certificate_for_completed_review(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.url('certificate'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.accept()
        self.client.post(self.url('submit'), {'recommendation': 'ACCEPT', 'author_comments': 'Fine'}, format='json')
        response = self.client.get(self.url('certificate'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(b''.join(response.streaming_content).startswith(b'%PDF'))

    def file_url(self, submission_file):
        return reverse('reviews:review-download-file', args=[self.review.pk, submission_file.pk])

    def test_review_lists_the_manuscript_files(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.url('detail'))

        files = self.data(response)['submission']['files']
        main_file = self.submission.files.get()
        self.assertEqual([item['id'] for item in files], [str(main_file.pk)])
        self.assertEqual(files[0]['original_name'], 'manuscript.pdf')
        self.assertNotIn('file', files[0])

    def test_reviewer_downloads_manuscript_once_accepted(self):
        main_file = self.submission.files.get()
        self.authenticate(self.reviewer)
        response = self.client.get(self.file_url(main_file))
        self.assertEqual(response.json()['error'], 'review not in progress')

        self.accept()
        response = self.client.get(self.file_url(main_file))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(b''.join(response.streaming_content).startswith(b'%PDF'))
        response.close()

    def test_manuscript_download_is_for_the_reviewer_only(self):
        main_file = self.submission.files.get()
        self.accept()

        self.authenticate(make_user('REVIEWER'))
        self.assertEqual(self.client.get(self.file_url(main_file)).status_code, status.HTTP_404_NOT_FOUND)

        self.authenticate(self.editor)
        self.assertEqual(self.client.get(self.file_url(main_file)).status_code, status.HTTP_403_FORBIDDEN)

    def test_files_of_other_submissions_are_not_served(self):
        other_file = make_submission(self.author, status='UNDER_REVIEW').files.get()
        self.accept()
        response = self.client.get(self.file_url(other_file))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
