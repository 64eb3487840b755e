from django import forms
from django.contrib.auth.forms import AuthenticationForm

from registration.models import CustomUser


class CustomUserLoginForm(AuthenticationForm):
    """
    Login form for the administrative area. Credentials are checked against
    the external identity provider first and then against local accounts.
    """
    username = forms.CharField(
        label='Login',
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Digite seu login'})
    )
    password = forms.CharField(
        label='Senha',
        widget=forms.PasswordInput(attrs={'class': 'form-control', 'placeholder': 'Digite sua senha'})
    )

    error_messages = {
        'invalid_login': 'Credenciais inválidas. Verifique seu login e senha.',
        'inactive': 'Esta conta está inativa.',
    }

    class Meta:
        model = CustomUser
        fields = ('username', 'password')
        labels = {
            'username': 'Login',
            'password': 'Senha',
        }
