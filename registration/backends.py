import logging

import requests
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.utils import timezone

from constants import ADMIN_ROLE, USER_ROLE

logger = logging.getLogger(__name__)

User = get_user_model()

LOGIN_PATH = '/api/login'


def get_user_by_open_id(open_id):
    if not open_id:
        return None
    return User.objects.filter(open_id=open_id).first()


def _username_disponivel(open_id):
    """Local username for a new external user; never clashes with an existing account."""
    base = open_id[:140]
    username = base
    suffix = 1
    while User.objects.filter(username=username).exists():
        suffix += 1
        username = f"{base}-{suffix}"
    return username


def upsert_user(open_id, name=None, email=None, login_method=None, role=None):
    """
    Create or refresh the local user bound to an external identity.

    Only the fields that were provided are updated on an existing user;
    ``last_signed_in`` is always refreshed. New users get the ``user`` role
    unless they are the configured owner, who becomes ``admin``.
    """
    if not open_id:
        raise ValueError("User openId is required for upsert")
    open_id = str(open_id)

    user = get_user_by_open_id(open_id)
    now = timezone.now()

    if user is not None:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if login_method is not None:
            user.login_method = login_method
        if role is not None:
            user.role = role
        user.last_signed_in = now
        user.save()
        return user

    if role is None:
        owner_open_id = settings.OAUTH_API.get('OWNER_OPEN_ID')
        role = ADMIN_ROLE if owner_open_id and open_id == owner_open_id else USER_ROLE

    user = User(
        username=_username_disponivel(open_id),
        open_id=open_id,
        name=name,
        email=email or '',
        login_method=login_method,
        role=role,
        last_signed_in=now,
        is_active=True,
    )
    user.set_unusable_password()
    user.save()
    logger.info("Novo usuário registrado via provedor externo: %s", open_id)
    return user


class OAuthBackend(ModelBackend):
    """
    Authenticate against the external identity provider.

    Returns ``None`` when the provider is not configured or rejects the
    credentials, so Django falls through to the local ``ModelBackend``.
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None

        base_url = settings.OAUTH_API.get('BASE_URL')
        if not base_url:
            return None

        identity = self._fetch_identity(base_url, username, password)
        if not identity:
            return None

        user = upsert_user(
            str(identity['openId']),
            name=identity.get('name'),
            email=identity.get('email'),
            login_method=identity.get('loginMethod'),
        )
        if not self.user_can_authenticate(user):
            return None
        return user

    def _fetch_identity(self, base_url, username, password):
        login_url = f"{base_url.rstrip('/')}{LOGIN_PATH}"
        login_data = {
            "login": username,
            "password": password,
            "appId": settings.OAUTH_API.get('APP_ID'),
        }

        try:
            response = requests.post(
                login_url,
                json=login_data,
                timeout=settings.OAUTH_API.get('TIMEOUT_SECONDS', 10),
            )
        except requests.RequestException as e:
            logger.warning("Falha ao contatar o provedor de identidade: %s", e)
            return None

        if response.status_code != 200:
            logger.info("Provedor de identidade recusou o login de %s (HTTP %s)", username, response.status_code)
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("Resposta inválida do provedor de identidade para %s", username)
            return None

        if not isinstance(data, dict) or not data.get('openId'):
            logger.info("Resposta do provedor de identidade sem openId para %s", username)
            return None
        return data
