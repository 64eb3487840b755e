import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


def _send_email(subject: str, html_body: str, recipients: list[str]) -> None:
    email = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
    )
    email.attach_alternative(html_body, "text/html")
    email.send(fail_silently=False)


def notificar_nova_candidatura(candidatura, painel_url=None) -> bool:
    """
    E-mail the recruiting team about a new application.

    Returns False when no recipient is configured or the message could not be
    sent; the application itself is already stored at this point.
    """
    recipients = list(getattr(settings, 'NOTIFICACAO_CANDIDATURA_EMAILS', []) or [])
    if not recipients:
        return False

    html_body = render_to_string('email_templates/nova_candidatura.html', {
        'candidatura': candidatura,
        'painel_url': painel_url,
    })
    subject = f"Nova candidatura: {candidatura.full_name} - {candidatura.city}/{candidatura.state}"

    try:
        _send_email(subject, html_body, recipients)
    except Exception:
        logger.exception("Falha ao enviar notificação da candidatura %s", candidatura.pk)
        return False
    return True
