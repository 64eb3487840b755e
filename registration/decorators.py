from functools import wraps

from django.contrib.auth.views import redirect_to_login
from django.http import JsonResponse
from django.shortcuts import render

ADMIN_ONLY_MESSAGE = 'Acesso restrito a administradores'
LOGIN_REQUIRED_MESSAGE = 'Faça login para continuar'


def admin_required(view_func):
    """HTML views: anonymous users go to the login page, non-admins get a 403 page."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect_to_login(request.get_full_path())
        if not request.user.is_admin:
            return render(request, 'acesso_negado.html', {'message': ADMIN_ONLY_MESSAGE}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped


def api_admin_required(view_func):
    """JSON views: 401 for anonymous users, 403 for non-admins."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'success': False, 'error': LOGIN_REQUIRED_MESSAGE}, status=401)
        if not request.user.is_admin:
            return JsonResponse({'success': False, 'error': ADMIN_ONLY_MESSAGE}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped
