"""
Tests for registration, login and account management.
"""
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from apps.submissions.tests.helpers import JournalDeskAPITestCase, make_user

User = get_user_model()

STRONG_PASSWORD = 'Quiet-harbour-42'


class RegistrationTest(JournalDeskAPITestCase):

    def payload(self, **overrides):
        payload = {
            'email': 'new.author@example.com',
            'first_name': 'Ada',
            'last_name': 'Lovelace',
            'affiliation': 'Analytical Engines Ltd',
            'password': STRONG_PASSWORD,
            'password_confirm': STRONG_PASSWORD,
        }
        payload.update(overrides)
        return payload

    def test_register_creates_author(self):
        response = self.client.post(reverse('register'), self.payload())

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='new.author@example.com')
        self.assertEqual(user.role, 'AUTHOR')
        self.assertEqual(user.account_status, 'ACTIVE')
        self.assertTrue(user.check_password(STRONG_PASSWORD))
        self.assertNotIn('password', self.data(response))

    def test_register_cannot_choose_role(self):
        self.client.post(reverse('register'), self.payload(role='ADMIN'))
        self.assertEqual(User.objects.get(email='new.author@example.com').role, 'AUTHOR')

    def test_password_mismatch(self):
        response = self.client.post(reverse('register'), self.payload(password_confirm='something-else-99'))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])
        self.assertIn('password_confirm', response.json()['details'])

    def test_duplicate_email(self):
        make_user('AUTHOR', email='taken@example.com')
        response = self.client.post(reverse('register'), self.payload(email='TAKEN@example.com'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AuthenticationTest(JournalDeskAPITestCase):

    def setUp(self):
        self.user = make_user('REVIEWER', email='reviewer@example.com')

    def test_token_carries_role(self):
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'reviewer@example.com', 'password': 'testpass123'},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = self.data(response)
        self.assertEqual(data['user']['role'], 'REVIEWER')
        self.assertEqual(AccessToken(data['access'])['role'], 'REVIEWER')

    def test_wrong_password(self):
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'reviewer@example.com', 'password': 'nope'},
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])

    def test_inactive_account_cannot_log_in(self):
        self.user.deactivate()
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'reviewer@example.com', 'password': 'testpass123'},
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.authenticate(self.user)
        response = self.client.get(reverse('user-me'))
        self.assertEqual(self.data(response)['email'], 'reviewer@example.com')

        response = self.client.patch(reverse('user-me'), {'affiliation': 'Uni', 'role': 'ADMIN'})
        self.assertEqual(self.data(response)['affiliation'], 'Uni')
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, 'REVIEWER')

    def test_change_password(self):
        self.authenticate(self.user)
        response = self.client.post(reverse('password_change'), {
            'current_password': 'testpass123',
            'new_password': STRONG_PASSWORD,
            'confirm_password': STRONG_PASSWORD,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(STRONG_PASSWORD))

    def test_health_is_public(self):
        response = self.client.get(reverse('health_check'))
        self.assertEqual(self.data(response)['status'], 'healthy')


class UserManagementTest(JournalDeskAPITestCase):

    def setUp(self):
        self.admin = make_user('ADMIN')
        self.author = make_user('AUTHOR')
        self.authenticate(self.admin)

    def test_non_admin_forbidden(self):
        self.authenticate(make_user('EDITOR'))
        response = self.client.get(reverse('user-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_changes_role(self):
        response = self.client.patch(reverse('user-detail', args=[self.author.pk]), {'role': 'REVIEWER'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.author.refresh_from_db()
        self.assertEqual(self.author.role, 'REVIEWER')

    def test_delete_deactivates(self):
        response = self.client.delete(reverse('user-detail', args=[self.author.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.author.refresh_from_db()
        self.assertEqual(self.author.account_status, 'INACTIVE')
        self.assertFalse(self.author.is_active)

    def test_cannot_deactivate_self(self):
        response = self.client.delete(reverse('user-detail', args=[self.admin.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.account_status, 'ACTIVE')

    def test_filter_by_role(self):
        make_user('REVIEWER')
        response = self.client.get(reverse('user-list'), {'role': 'REVIEWER'})
        self.assertEqual([item['role'] for item in self.data(response)], ['REVIEWER'])
