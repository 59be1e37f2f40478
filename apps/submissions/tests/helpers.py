"""
Shared fixtures for Journal Desk tests.
"""
import shutil
import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.submissions.models import Submission, SubmissionFile

User = get_user_model()

TEST_MEDIA_ROOT = tempfile.mkdtemp(prefix='journal-desk-tests-')


def make_user(role='AUTHOR', email=None, **extra):
    email = email or f"{role.lower()}-{User.objects.count() + 1}@example.com"
    extra.setdefault('first_name', role.title())
    extra.setdefault('last_name', 'User')
    return User.objects.create_user(email=email, password='testpass123', role=role, **extra)


def manuscript(name='manuscript.pdf', content=b'%PDF-1.4 test manuscript'):
    return SimpleUploadedFile(name, content, content_type='application/pdf')


def make_submission(author, status='DRAFT', with_file=True, **extra):
    extra.setdefault('title', 'Effects of Test Coverage on Sleep')
    extra.setdefault('abstract', 'We measure how test suites influence developer rest.')
    extra.setdefault('manuscript_type', 'Research Article')
    extra.setdefault('keywords', ['testing', 'sleep'])
    submission = Submission.objects.create(author=author, status=status, **extra)
    if with_file:
        upload = manuscript()
        SubmissionFile.objects.create(
            submission=submission,
            file=upload,
            original_name=upload.name,
            content_type='application/pdf',
            size=upload.size,
            is_main_file=True,
            uploaded_by=author,
        )
    return submission


@override_settings(MEDIA_ROOT=TEST_MEDIA_ROOT)
class JournalDeskAPITestCase(APITestCase):
    """APITestCase with JWT helpers and a throwaway media directory."""

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(TEST_MEDIA_ROOT, ignore_errors=True)

    def authenticate(self, user):
        refresh = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')

    def logout(self):
        self.client.credentials()

    def data(self, response):
        return response.json()['data']
