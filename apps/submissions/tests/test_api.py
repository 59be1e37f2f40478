"""
End-to-end workflow tests through the HTTP API.
"""
from django.urls import reverse
from rest_framework import status

from apps.journals.models import Issue
from apps.payments.models import Payment
from apps.submissions.models import Submission
from .helpers import JournalDeskAPITestCase, make_submission, make_user, manuscript


class AuthorSubmissionAPITest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.authenticate(self.author)

    def test_create_draft_with_co_authors(self):
        response = self.client.post(reverse('submissions:submission-list'), {
            'title': 'Graph Colouring for Timetables',
            'abstract': 'A heuristic approach.',
            'manuscript_type': 'Research Article',
            'keywords': ['graphs', 'scheduling'],
            'co_authors': [
                {'first_name': 'Grace', 'last_name': 'Hopper', 'email': 'grace@example.com'},
                {'first_name': 'Alan', 'last_name': 'Turing', 'email': 'alan@example.com'},
            ],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['status'], 'DRAFT')
        self.assertEqual([c['order'] for c in body['data']['co_authors']], [0, 1])
        self.assertEqual(Submission.objects.get().author, self.author)

    def test_upload_then_submit(self):
        submission = make_submission(self.author, with_file=False)

        response = self.client.post(
            reverse('submissions:submission-files', args=[submission.pk]),
            {'file': manuscript(), 'is_main_file': True},
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(self.data(response)['file_hash']), 64)

        response = self.client.post(reverse('submissions:submission-submit', args=[submission.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.data(response)['status'], 'SUBMITTED')
        self.assertIsNotNone(self.data(response)['submitted_at'])

    def test_disallowed_file_type(self):
        submission = make_submission(self.author, with_file=False)
        response = self.client.post(
            reverse('submissions:submission-files', args=[submission.pk]),
            {'file': manuscript('payload.exe', b'MZ')},
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])

    def test_submit_without_file_reports_precondition(self):
        submission = make_submission(self.author, with_file=False)
        response = self.client.post(reverse('submissions:submission-submit', args=[submission.pk]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'precondition not met',
            'message': 'at least one manuscript file must be uploaded',
        })

    def test_metadata_is_frozen_after_submission(self):
        submission = make_submission(self.author, status='SUBMITTED')
        response = self.client.patch(
            reverse('submissions:submission-detail', args=[submission.pk]),
            {'title': 'Sneaky edit'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        submission.refresh_from_db()
        self.assertNotEqual(submission.title, 'Sneaky edit')

    def test_only_drafts_can_be_deleted(self):
        submitted = make_submission(self.author, status='SUBMITTED')
        draft = make_submission(self.author)

        response = self.client.delete(reverse('submissions:submission-detail', args=[submitted.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(reverse('submissions:submission-detail', args=[draft.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Submission.objects.filter(pk=draft.pk).exists())

    def test_other_authors_cannot_see_the_submission(self):
        submission = make_submission(self.author)
        self.authenticate(make_user('AUTHOR'))

        response = self.client.get(reverse('submissions:submission-detail', args=[submission.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['error'], 'not found')

    def test_anonymous_requests_are_refused(self):
        self.logout()
        response = self.client.get(reverse('submissions:submission-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])

    def test_list_is_paginated_in_the_envelope(self):
        make_submission(self.author)
        make_submission(self.author)
        response = self.client.get(reverse('submissions:submission-list'))

        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(len(body['data']), 2)
        self.assertEqual(body['pagination']['count'], 2)

    def test_revision_round_trip(self):
        submission = make_submission(self.author, status='REVISION_REQUIRED')
        url = reverse('submissions:submission-revisions', args=[submission.pk])

        response = self.client.post(url, {'response_to_reviewers': 'All comments addressed.'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.data(response)['revision_number'], 1)

        submission.refresh_from_db()
        self.assertEqual(submission.status, 'UNDER_REVIEW')
        self.assertEqual(len(self.data(self.client.get(url))), 1)

    def test_withdraw_and_timeline(self):
        submission = make_submission(self.author, status='SUBMITTED')
        response = self.client.post(
            reverse('submissions:submission-withdraw', args=[submission.pk]),
            {'reason': 'Submitted elsewhere'},
            format='json'
        )
        self.assertEqual(self.data(response)['status'], 'WITHDRAWN')

        response = self.client.get(reverse('submissions:submission-timeline', args=[submission.pk]))
        events = self.data(response)
        self.assertEqual(events[-1]['event'], 'WITHDRAW')
        self.assertEqual(events[-1]['description'], 'Submitted elsewhere')

    def test_proof_approval(self):
        submission = make_submission(self.author, status='ACCEPTED')
        response = self.client.post(
            reverse('submissions:submission-proof-approval', args=[submission.pk]),
            {'approved': True},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(self.data(response)['proof_approved_at'])

    def test_authors_cannot_use_the_editor_queue(self):
        response = self.client.get(reverse('submissions:editor-submission-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class EditorialWorkflowAPITest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.admin = make_user('ADMIN')
        self.issue = Issue.objects.create(volume=5, number=2, title='Spring', is_current=True)

    def post_as(self, user, name, pk, payload=None):
        self.authenticate(user)
        return self.client.post(reverse(name, args=[pk]), payload or {}, format='json')

    def test_full_path_from_draft_to_publication(self):
        submission = make_submission(self.author)

        response = self.post_as(self.author, 'submissions:submission-submit', submission.pk)
        self.assertEqual(self.data(response)['status'], 'SUBMITTED')

        response = self.post_as(self.editor, 'submissions:editor-submission-screen', submission.pk, {
            'decision': 'PROCEED_TO_REVIEW', 'scope_check': True, 'format_check': True,
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.data(response)['status'], 'UNDER_REVIEW')

        response = self.post_as(self.editor, 'submissions:editor-submission-decision', submission.pk, {
            'decision': 'ACCEPT', 'comments': 'Ready to go',
        })
        self.assertEqual(self.data(response)['status'], 'ACCEPTED')
        payment = Payment.objects.get(submission=submission)
        self.assertEqual(payment.status, 'PENDING')

        response = self.post_as(self.editor, 'submissions:editor-submission-publish', submission.pk, {
            'issue_id': self.issue.pk,
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'precondition not met')

        response = self.post_as(self.admin, 'payments:admin-payment-paid', payment.pk, {'transaction_id': 'BANK-77'})
        self.assertEqual(self.data(response)['status'], 'PAID')

        response = self.post_as(self.editor, 'submissions:editor-submission-publish', submission.pk, {
            'issue_id': self.issue.pk, 'pages': '1-12',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = self.data(response)
        self.assertEqual(data['status'], 'PUBLISHED')
        self.assertTrue(data['doi'])
        self.assertEqual((data['volume'], data['issue_number']), (5, 2))

    def test_desk_rejection_is_final(self):
        submission = make_submission(self.author, status='SUBMITTED')

        response = self.post_as(self.editor, 'submissions:editor-submission-screen', submission.pk, {
            'decision': 'DESK_REJECT', 'comments': 'out of scope',
        })
        self.assertEqual(self.data(response)['status'], 'REJECTED')

        response = self.post_as(self.author, 'submissions:submission-withdraw', submission.pk)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'invalid transition')

        response = self.post_as(self.editor, 'submissions:editor-submission-decision', submission.pk, {'decision': 'ACCEPT'})
        self.assertEqual(response.json()['error'], 'invalid transition')

        submission.refresh_from_db()
        self.assertEqual(submission.status, 'REJECTED')

    def test_desk_reject_without_comments(self):
        submission = make_submission(self.author, status='INITIAL_REVIEW')
        response = self.post_as(self.editor, 'submissions:editor-submission-screen', submission.pk, {'decision': 'DESK_REJECT'})
        self.assertEqual(response.json()['error'], 'missing required fields')

    def test_unknown_decision(self):
        submission = make_submission(self.author, status='UNDER_REVIEW')
        response = self.post_as(self.editor, 'submissions:editor-submission-decision', submission.pk, {'decision': 'PERHAPS'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'unknown decision')

    def test_missing_decision_is_a_validation_error(self):
        submission = make_submission(self.author, status='UNDER_REVIEW')
        response = self.post_as(self.editor, 'submissions:editor-submission-decision', submission.pk, {})
        body = response.json()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(body['success'])
        self.assertIn('decision', body['error'])

    def test_queue_hides_drafts(self):
        make_submission(self.author)
        queued = make_submission(self.author, status='SUBMITTED')
        self.authenticate(self.editor)

        response = self.client.get(reverse('submissions:editor-submission-list'))
        self.assertEqual([item['id'] for item in self.data(response)], [str(queued.pk)])

    def test_assign_editor_and_invite_reviewer(self):
        submission = make_submission(self.author, status='UNDER_REVIEW')
        reviewer = make_user('REVIEWER')

        response = self.post_as(self.admin, 'submissions:editor-submission-assign-editor', submission.pk, {
            'editor_id': str(self.editor.pk), 'is_chief': True,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.post_as(self.editor, 'submissions:editor-submission-invite-reviewer', submission.pk, {
            'reviewer_id': str(reviewer.pk),
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.data(response)['status'], 'PENDING')

        response = self.post_as(self.editor, 'submissions:editor-submission-invite-reviewer', submission.pk, {
            'reviewer_id': str(reviewer.pk),
        })
        self.assertEqual(response.json()['error'], 'precondition not met')

    def test_assigning_a_non_editor_fails_validation(self):
        submission = make_submission(self.author, status='SUBMITTED')
        response = self.post_as(self.editor, 'submissions:editor-submission-assign-editor', submission.pk, {
            'editor_id': str(self.author.pk),
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
