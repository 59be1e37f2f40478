"""
Issue management and public browsing.
"""
from django.conf import settings
from django.test import override_settings
from django.urls import reverse
from rest_framework import status

from apps.journals.models import Issue
from apps.submissions.services import lifecycle_manager
from apps.submissions.tests.helpers import JournalDeskAPITestCase, make_submission, make_user

NO_APC = {**settings.JOURNAL_DESK, 'APC_REQUIRED': False}


@override_settings(JOURNAL_DESK=NO_APC)
class IssueManagementTest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.authenticate(self.editor)

    def test_create_issue_and_keep_one_current(self):
        first = Issue.objects.create(volume=1, number=1, is_current=True)
        response = self.client.post(reverse('journals:issue-list'), {
            'volume': 1, 'number': 2, 'title': 'Winter', 'is_current': True,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        first.refresh_from_db()
        self.assertFalse(first.is_current)
        self.assertEqual(Issue.objects.filter(is_current=True).count(), 1)

    def test_authors_cannot_manage_issues(self):
        self.authenticate(self.author)
        response = self.client.post(reverse('journals:issue-list'), {'volume': 1, 'number': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_publish_article_into_issue(self):
        issue = Issue.objects.create(volume=4, number=1)
        submission = make_submission(self.author, status='ACCEPTED')

        response = self.client.post(
            reverse('journals:issue-article-publish', args=[issue.pk]),
            {'submission_id': str(submission.pk), 'pages': '33-41'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = self.data(response)
        self.assertEqual(data['status'], 'PUBLISHED')
        self.assertEqual(data['pages'], '33-41')
        self.assertEqual(data['volume'], 4)

    def test_publishing_an_unaccepted_submission_fails(self):
        issue = Issue.objects.create(volume=4, number=1)
        submission = make_submission(self.author, status='UNDER_REVIEW')

        response = self.client.post(
            reverse('journals:issue-article-publish', args=[issue.pk]),
            {'submission_id': str(submission.pk)},
            format='json'
        )
        self.assertEqual(response.json()['error'], 'invalid transition')

    def test_issue_with_articles_cannot_be_deleted(self):
        issue = Issue.objects.create(volume=4, number=1)
        lifecycle_manager.publish(make_submission(self.author, status='ACCEPTED'), self.editor, issue)

        response = self.client.delete(reverse('journals:issue-detail', args=[issue.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Issue.objects.filter(pk=issue.pk).exists())


@override_settings(JOURNAL_DESK=NO_APC)
class PublicBrowsingTest(JournalDeskAPITestCase):

    def setUp(self):
        self.author = make_user('AUTHOR')
        self.editor = make_user('EDITOR')
        self.issue = Issue.objects.create(volume=7, number=3, title='Autumn', is_current=True)
        self.published = make_submission(
            self.author, status='ACCEPTED', title='Quantum Gardening', keywords=['quantum', 'botany']
        )
        self.published.co_authors.create(first_name='Marie', last_name='Curie', email='marie@example.com')
        lifecycle_manager.publish(self.published, self.editor, self.issue, pages='1-9')
        self.hidden = make_submission(self.author, status='UNDER_REVIEW', title='Quantum Secrets')
        Issue.objects.create(volume=8, number=1, title='Unpublished')

    def test_only_published_articles_are_listed(self):
        response = self.client.get(reverse('journals:public-article-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        items = self.data(response)
        self.assertEqual([item['id'] for item in items], [str(self.published.pk)])
        self.assertIn('Marie Curie', items[0]['authors'])

    def test_search_matches_title_abstract_and_keywords(self):
        url = reverse('journals:public-article-list')
        for term in ('quantum', 'botany', 'developer rest'):
            with self.subTest(term=term):
                response = self.client.get(url, {'search': term})
                self.assertEqual([item['id'] for item in self.data(response)], [str(self.published.pk)])

        response = self.client.get(url, {'search': 'secrets'})
        self.assertEqual(self.data(response), [])

    def test_unpublished_article_detail_is_not_found(self):
        response = self.client.get(reverse('journals:public-article-detail', args=[self.hidden.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_article_detail_hides_workflow_fields(self):
        response = self.client.get(reverse('journals:public-article-detail', args=[self.published.pk]))
        data = self.data(response)

        self.assertEqual(data['doi'], self.published.doi)
        self.assertEqual(data['issue']['volume'], 7)
        for private in ('status', 'decision_comments', 'screening_comments', 'version', 'comments'):
            self.assertNotIn(private, data)

    def test_issue_listing_and_current_issue(self):
        response = self.client.get(reverse('journals:public-issue-list'))
        self.assertEqual([item['volume'] for item in self.data(response)], [7])

        response = self.client.get(reverse('journals:public-issue-current'))
        data = self.data(response)
        self.assertEqual(data['id'], self.issue.pk)
        self.assertEqual([article['title'] for article in data['articles']], ['Quantum Gardening'])

    def test_issue_detail_excludes_unpublished_articles(self):
        self.hidden.issue = self.issue
        self.hidden.save()

        response = self.client.get(reverse('journals:public-issue-detail', args=[self.issue.pk]))
        self.assertEqual(len(self.data(response)['articles']), 1)

    def test_download_published_article(self):
        response = self.client.get(reverse('journals:public-article-download', args=[self.published.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('manuscript.pdf', response['Content-Disposition'])
        self.assertTrue(b''.join(response.streaming_content).startswith(b'%PDF'))
        response.close()

    def test_unpublished_article_cannot_be_downloaded(self):
        response = self.client.get(reverse('journals:public-article-download', args=[self.hidden.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_article_without_files_has_nothing_to_download(self):
        self.published.files.all().delete()
        response = self.client.get(reverse('journals:public-article-download', args=[self.published.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_lookup_and_download_by_doi(self):
        response = self.client.get(reverse('journals:public-article-by-doi', kwargs={'doi': self.published.doi}))
        self.assertEqual(self.data(response)['id'], str(self.published.pk))

        response = self.client.get(reverse('journals:public-article-download-by-doi', kwargs={'doi': self.published.doi}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(b''.join(response.streaming_content).startswith(b'%PDF'))
        response.close()

    def test_unknown_doi_is_not_found(self):
        response = self.client.get(reverse('journals:public-article-by-doi', kwargs={'doi': '10.1234/jar.1999.deadbeef'}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
