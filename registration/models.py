from django.db import models
from django.contrib.auth.models import AbstractUser, UserManager

from constants import ADMIN_ROLE, ROLE_CHOICES, USER_ROLE


class CustomUserManager(UserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', ADMIN_ROLE)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    open_id = models.CharField(max_length=64, unique=True, null=True, blank=True, verbose_name='ID Externo (OpenID)')
    name = models.CharField(max_length=255, null=True, blank=True, verbose_name='Nome')
    login_method = models.CharField(max_length=64, null=True, blank=True, verbose_name='Método de Login')
    role = models.CharField(
        max_length=20,
        default=USER_ROLE,
        choices=ROLE_CHOICES,
        verbose_name='Perfil',
    )
    last_signed_in = models.DateTimeField(null=True, blank=True, verbose_name='Último Acesso')

    objects = CustomUserManager()

    class Meta:
        verbose_name = "Usuário"
        verbose_name_plural = "Usuários"

    @property
    def is_admin(self):
        return self.role == ADMIN_ROLE

    def get_display_name(self):
        return self.name or self.get_full_name() or self.username

    def as_dict(self):
        return {
            'id': self.id,
            'open_id': self.open_id,
            'name': self.get_display_name(),
            'email': self.email or None,
            'login_method': self.login_method,
            'role': self.role,
            'last_signed_in': self.last_signed_in.isoformat() if self.last_signed_in else None,
        }

    def __str__(self):
        return self.email or self.username
