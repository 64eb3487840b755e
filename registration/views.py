import logging

from django.contrib.auth import login, logout
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_GET, require_POST

from .forms import CustomUserLoginForm

logger = logging.getLogger(__name__)


def login_view(request):
    next_url = request.POST.get('next') or request.GET.get('next') or ''
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()):
        next_url = ''

    if request.user.is_authenticated and request.method != 'POST':
        return redirect(next_url or 'painel')

    if request.method == 'POST':
        login_form = CustomUserLoginForm(request, data=request.POST)
        if login_form.is_valid():
            user = login_form.get_user()
            login(request, user)
            logger.info("Login efetuado: %s (%s)", user.username, user.role)
            return redirect(next_url or 'painel')
    else:
        login_form = CustomUserLoginForm(request)

    return render(request, 'login.html', {
        'login_form': login_form,
        'next': next_url,
    })


@require_GET
def api_me(request):
    if not request.user.is_authenticated:
        return JsonResponse(None, safe=False)
    return JsonResponse(request.user.as_dict())


@require_POST
def api_logout(request):
    logout(request)
    return JsonResponse({'success': True})
