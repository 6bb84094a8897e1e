"""Tests for registration, login, logout and the profile page."""

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from farm.models import ActivityLog, Profile


class RegistrationViewTests(TestCase):
    def test_register_creates_user_profile_and_session(self) -> None:
        response = self.client.post(reverse('register'), {
            'username': 'shepherd',
            'email': 'Shepherd@Example.com',
            'password': 'secret1',
            'confirm_password': 'secret1',
        })

        self.assertRedirects(response, reverse('dashboard'))
        user = User.objects.get(username='shepherd')
        self.assertEqual(user.email, 'shepherd@example.com')
        self.assertEqual(user.profile.role, Profile.Role.USER)
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)
        self.assertTrue(ActivityLog.objects.filter(user=user, category='system').exists())

    def test_register_rejects_mismatched_passwords(self) -> None:
        response = self.client.post(reverse('register'), {
            'username': 'shepherd',
            'email': 'shepherd@example.com',
            'password': 'secret1',
            'confirm_password': 'secret2',
        })
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Passwords do not match.')
        self.assertFalse(User.objects.filter(username='shepherd').exists())


class LoginViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', email='shepherd@example.com', password='secret1')

    def test_login_with_email(self) -> None:
        response = self.client.post(reverse('login'), {'email': 'SHEPHERD@example.com', 'password': 'secret1'})
        self.assertRedirects(response, reverse('dashboard'))

    def test_login_with_username(self) -> None:
        response = self.client.post(reverse('login'), {'email': 'shepherd', 'password': 'secret1'})
        self.assertRedirects(response, reverse('dashboard'))

    def test_invalid_credentials(self) -> None:
        response = self.client.post(reverse('login'), {'email': 'shepherd@example.com', 'password': 'wrong'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid email or password.')
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_logout_ends_session(self) -> None:
        self.client.force_login(self.user)
        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, reverse('login'))
        self.assertNotIn('_auth_user_id', self.client.session)


class ProfileViewTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user('shepherd', email='shepherd@example.com', password='secret1')
        Profile.objects.create(user=self.user, full_name='Old Name')
        self.client.force_login(self.user)

    def test_update_username_and_full_name(self) -> None:
        response = self.client.post(reverse('profile'), {
            'action': 'profile',
            'username': 'mumbi',
            'full_name': 'Mumbi Wanjiku',
        })
        self.assertRedirects(response, reverse('profile'))
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, 'mumbi')
        self.assertEqual(self.user.profile.full_name, 'Mumbi Wanjiku')

    def test_username_must_be_unique(self) -> None:
        User.objects.create_user('taken', password='secret1')
        response = self.client.post(reverse('profile'), {'action': 'profile', 'username': 'TAKEN', 'full_name': ''})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'This username is already taken.')

    def test_change_password_keeps_session(self) -> None:
        response = self.client.post(reverse('profile'), {
            'action': 'password',
            'current_password': 'secret1',
            'new_password': 'newsecret',
            'confirm_password': 'newsecret',
        })
        self.assertRedirects(response, reverse('profile'))
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newsecret'))
        # Still signed in after the password hash changed.
        self.assertEqual(self.client.get(reverse('dashboard')).status_code, 200)

    def test_change_password_with_wrong_current(self) -> None:
        response = self.client.post(reverse('profile'), {
            'action': 'password',
            'current_password': 'nope',
            'new_password': 'newsecret',
            'confirm_password': 'newsecret',
        })
        self.assertContains(response, 'Current password is incorrect.')

    def test_profile_created_on_demand(self) -> None:
        other = User.objects.create_user('admin', password='secret1')
        self.client.force_login(other)
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(Profile.objects.filter(user=other).exists())
