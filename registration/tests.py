from io import StringIO
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth import authenticate
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.urls import reverse

from constants import ADMIN_ROLE, USER_ROLE
from registration.backends import OAuthBackend, get_user_by_open_id, upsert_user
from registration.models import CustomUser

OAUTH_CONFIGURADO = {
    'BASE_URL': 'https://auth.example.com/',
    'APP_ID': 'app-transportadora',
    'OWNER_OPEN_ID': 'owner-123',
    'TIMEOUT_SECONDS': 5,
}
OAUTH_DESLIGADO = dict(OAUTH_CONFIGURADO, BASE_URL='')


def resposta(status_code=200, json_data=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError('invalid json')
    else:
        response.json.return_value = json_data
    return response


class CustomUserModelTest(TestCase):
    def test_default_role_is_user(self):
        user = CustomUser.objects.create_user(username='maria', password='senha123')
        self.assertEqual(user.role, USER_ROLE)
        self.assertFalse(user.is_admin)

    def test_superuser_is_admin(self):
        user = CustomUser.objects.create_superuser(username='root', email='root@example.com', password='senha123')
        self.assertEqual(user.role, ADMIN_ROLE)
        self.assertTrue(user.is_admin)

    def test_as_dict(self):
        user = CustomUser.objects.create_user(username='maria', email='maria@example.com', name='Maria Souza')
        data = user.as_dict()
        self.assertEqual(data['name'], 'Maria Souza')
        self.assertEqual(data['email'], 'maria@example.com')
        self.assertEqual(data['role'], USER_ROLE)
        self.assertIsNone(data['last_signed_in'])


@override_settings(OAUTH_API=OAUTH_CONFIGURADO)
class UpsertUserTest(TestCase):
    def test_open_id_is_required(self):
        with self.assertRaisesMessage(ValueError, 'User openId is required for upsert'):
            upsert_user('')

    def test_creates_user(self):
        user = upsert_user('abc-1', name='Carlos', email='carlos@example.com', login_method='google')
        self.assertEqual(user.role, USER_ROLE)
        self.assertEqual(user.username, 'abc-1')
        self.assertFalse(user.has_usable_password())
        self.assertIsNotNone(user.last_signed_in)
        self.assertEqual(get_user_by_open_id('abc-1'), user)

    def test_owner_becomes_admin(self):
        user = upsert_user('owner-123', name='Dono')
        self.assertEqual(user.role, ADMIN_ROLE)

    def test_updates_only_provided_fields(self):
        upsert_user('abc-1', name='Carlos', email='carlos@example.com', login_method='google')
        user = upsert_user('abc-1', name='Carlos Alberto')
        self.assertEqual(user.name, 'Carlos Alberto')
        self.assertEqual(user.email, 'carlos@example.com')
        self.assertEqual(user.login_method, 'google')
        self.assertEqual(CustomUser.objects.filter(open_id='abc-1').count(), 1)

    def test_existing_role_is_preserved(self):
        upsert_user('abc-1', role=ADMIN_ROLE)
        user = upsert_user('abc-1', name='Carlos')
        self.assertEqual(user.role, ADMIN_ROLE)

    def test_open_id_clashing_with_local_username(self):
        local = CustomUser.objects.create_user(username='abc-1', password='senha123')
        user = upsert_user('abc-1', name='Carlos')
        self.assertNotEqual(user.pk, local.pk)
        self.assertEqual(user.username, 'abc-1-2')
        self.assertEqual(user.open_id, 'abc-1')
        local.refresh_from_db()
        self.assertIsNone(local.open_id)

        outro = upsert_user('abc-1', name='Carlos Alberto')
        self.assertEqual(outro.pk, user.pk)

    def test_get_user_by_open_id_missing(self):
        self.assertIsNone(get_user_by_open_id('nao-existe'))
        self.assertIsNone(get_user_by_open_id(None))


@override_settings(OAUTH_API=OAUTH_CONFIGURADO)
class OAuthBackendTest(TestCase):
    def setUp(self):
        self.backend = OAuthBackend()

    @patch('registration.backends.requests.post')
    def test_successful_login(self, mock_post):
        mock_post.return_value = resposta(json_data={
            'openId': 'abc-1', 'name': 'Carlos', 'email': 'carlos@example.com', 'loginMethod': 'email',
        })
        user = self.backend.authenticate(None, username='carlos', password='segredo')

        self.assertIsNotNone(user)
        self.assertEqual(user.open_id, 'abc-1')
        self.assertEqual(user.login_method, 'email')
        mock_post.assert_called_once_with(
            'https://auth.example.com/api/login',
            json={'login': 'carlos', 'password': 'segredo', 'appId': 'app-transportadora'},
            timeout=5,
        )

    @patch('registration.backends.requests.post')
    def test_numeric_open_id(self, mock_post):
        mock_post.return_value = resposta(json_data={'openId': 12345, 'name': 'Carlos'})
        user = self.backend.authenticate(None, username='carlos', password='segredo')
        self.assertEqual(user.open_id, '12345')
        self.assertEqual(user.username, '12345')

    @patch('registration.backends.requests.post')
    def test_rejected_credentials(self, mock_post):
        mock_post.return_value = resposta(status_code=401)
        self.assertIsNone(self.backend.authenticate(None, username='carlos', password='errada'))
        self.assertEqual(CustomUser.objects.count(), 0)

    @patch('registration.backends.requests.post', side_effect=requests.ConnectionError('offline'))
    def test_provider_offline(self, mock_post):
        with self.assertLogs('registration.backends', level='WARNING'):
            self.assertIsNone(self.backend.authenticate(None, username='carlos', password='segredo'))

    @patch('registration.backends.requests.post')
    def test_invalid_json(self, mock_post):
        mock_post.return_value = resposta(json_error=True)
        self.assertIsNone(self.backend.authenticate(None, username='carlos', password='segredo'))

    @patch('registration.backends.requests.post')
    def test_missing_open_id(self, mock_post):
        mock_post.return_value = resposta(json_data={'name': 'Carlos'})
        self.assertIsNone(self.backend.authenticate(None, username='carlos', password='segredo'))

    @patch('registration.backends.requests.post')
    def test_inactive_user(self, mock_post):
        CustomUser.objects.create_user(username='abc-1', open_id='abc-1', is_active=False)
        mock_post.return_value = resposta(json_data={'openId': 'abc-1'})
        self.assertIsNone(self.backend.authenticate(None, username='carlos', password='segredo'))

    @override_settings(OAUTH_API=OAUTH_DESLIGADO)
    @patch('registration.backends.requests.post')
    def test_not_configured_falls_back_to_local_accounts(self, mock_post):
        CustomUser.objects.create_user(username='local', password='senha123')
        self.assertIsNone(self.backend.authenticate(None, username='local', password='senha123'))
        user = authenticate(username='local', password='senha123')
        self.assertEqual(user.username, 'local')
        mock_post.assert_not_called()


@override_settings(OAUTH_API=OAUTH_DESLIGADO)
class AuthViewsTest(TestCase):
    def setUp(self):
        self.admin = CustomUser.objects.create_user(username='gestora', password='senha123', role=ADMIN_ROLE)

    def test_login_page(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Área Administrativa')

    def test_login_redirects_to_painel(self):
        response = self.client.post(reverse('login'), {'username': 'gestora', 'password': 'senha123'})
        self.assertRedirects(response, reverse('painel'))

    def test_login_keeps_safe_next(self):
        response = self.client.post(
            reverse('login') + '?next=/painel/exportar/',
            {'username': 'gestora', 'password': 'senha123', 'next': '/painel/exportar/'},
        )
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/painel/exportar/')

    def test_login_ignores_external_next(self):
        response = self.client.post(
            reverse('login'),
            {'username': 'gestora', 'password': 'senha123', 'next': 'https://malicioso.example.com/'},
        )
        self.assertRedirects(response, reverse('painel'))

    def test_invalid_login(self):
        response = self.client.post(reverse('login'), {'username': 'gestora', 'password': 'errada'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Credenciais inválidas')

    def test_api_me_anonymous(self):
        response = self.client.get(reverse('api_auth_me'))
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json())

    def test_api_me_authenticated(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_auth_me'))
        self.assertEqual(response.json()['role'], ADMIN_ROLE)

    def test_api_logout(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('api_auth_logout'))
        self.assertEqual(response.json(), {'success': True})
        self.assertIsNone(self.client.get(reverse('api_auth_me')).json())

    def test_logout_redirects_home(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, reverse('home'))


class PromoverAdminCommandTest(TestCase):
    def setUp(self):
        self.user = CustomUser.objects.create_user(username='carlos', email='carlos@example.com', open_id='abc-1')

    def test_promote_by_username(self):
        out = StringIO()
        call_command('promover_admin', 'carlos', stdout=out)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, ADMIN_ROLE)
        self.assertIn('Administrador', out.getvalue())

    def test_promote_by_email_and_open_id(self):
        call_command('promover_admin', 'CARLOS@example.com', stdout=StringIO())
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, ADMIN_ROLE)

        call_command('promover_admin', 'abc-1', '--revogar', stdout=StringIO())
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, USER_ROLE)

    def test_unknown_user(self):
        with self.assertRaises(CommandError):
            call_command('promover_admin', 'ninguem', stdout=StringIO())
