from constants import STATUS_PENDENTE

from .models import Candidatura


def candidaturas_counts(request):
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated or not getattr(user, 'is_admin', False):
        return {}
    return {
        'candidaturas_pendentes': Candidatura.objects.filter(status=STATUS_PENDENTE).count(),
    }
