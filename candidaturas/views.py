import json
import logging
from io import BytesIO

import xlsxwriter
from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from constants import (
    AVAILABILITY_CHOICES,
    SCHEDULE_CHOICES,
    STATUS_APROVADO,
    STATUS_CHOICES,
    STATUS_EM_ANALISE,
    STATUS_REJEITADO,
    VEHICLE_TYPE_CHOICES,
)
from registration.decorators import admin_required, api_admin_required

from .forms import CandidaturaForm, FiltroCandidaturaForm
from .models import Candidatura
from .notifications import notificar_nova_candidatura
from .utils import SAO_PAULO_TZ

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Candidatura não encontrada'
SUBMIT_ERROR_MESSAGE = 'Erro ao enviar candidatura.'
STATUS_VALIDOS = dict(STATUS_CHOICES)


def _form_errors(form):
    return {
        field: [error['message'] for error in errors]
        for field, errors in form.errors.get_json_data().items()
    }


def _json_body(request):
    """Decoded JSON object from the request body; raises ValueError otherwise."""
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValueError('Corpo da requisição não é um JSON válido.')
    if not isinstance(data, dict):
        raise ValueError('Corpo da requisição deve ser um objeto JSON.')
    return data


def _status_valido(status):
    return isinstance(status, str) and status in STATUS_VALIDOS


def _registrar_candidatura(request, form):
    candidatura = form.save()
    logger.info("Nova candidatura recebida: %s - %s/%s", candidatura.full_name, candidatura.city, candidatura.state)
    painel_url = request.build_absolute_uri(reverse('candidatura_detalhe', args=[candidatura.id]))
    notificar_nova_candidatura(candidatura, painel_url=painel_url)
    return candidatura


def _filtrar(request):
    """Apply the GET filters; returns (form, candidaturas). Invalid filters yield no filtering."""
    form = FiltroCandidaturaForm(request.GET or None)
    if form.is_bound and not form.is_valid():
        return form, None
    filtros = form.filtros() if form.is_bound else {}
    return form, Candidatura.objects.filtrar(**filtros)


# --- Public form ---

@require_http_methods(["GET", "POST"])
def home(request):
    if request.method == 'POST':
        form = CandidaturaForm(request.POST)
        if form.is_valid():
            candidatura = _registrar_candidatura(request, form)
            return render(request, 'candidatura_enviada.html', {'candidatura': candidatura})
        messages.error(request, 'Verifique os campos destacados e tente novamente.')
    else:
        form = CandidaturaForm()

    return render(request, 'home.html', {'form': form})


# --- JSON API ---

@require_POST
def api_enviar(request):
    try:
        data = _json_body(request)
    except ValueError as e:
        return JsonResponse({'success': False, 'errors': {}, 'message': str(e)}, status=400)

    form = CandidaturaForm(data)
    if not form.is_valid():
        return JsonResponse({
            'success': False,
            'errors': _form_errors(form),
            'message': SUBMIT_ERROR_MESSAGE,
        }, status=400)

    candidatura = _registrar_candidatura(request, form)
    return JsonResponse({'success': True, 'id': candidatura.id})


@api_admin_required
@require_GET
def api_list(request):
    form, candidaturas = _filtrar(request)
    if candidaturas is None:
        return JsonResponse({
            'success': False,
            'errors': _form_errors(form),
            'message': 'Filtros inválidos.',
        }, status=400)
    return JsonResponse({
        'count': len(candidaturas),
        'candidaturas': [c.as_dict() for c in candidaturas],
    })


@api_admin_required
@require_GET
def api_detail(request, candidatura_id):
    candidatura = Candidatura.objects.filter(id=candidatura_id).first()
    if candidatura is None:
        return JsonResponse({'success': False, 'error': NOT_FOUND_MESSAGE}, status=404)
    return JsonResponse(candidatura.as_dict())


@api_admin_required
@require_POST
def api_update_status(request, candidatura_id):
    if request.content_type == 'application/json':
        try:
            status = _json_body(request).get('status')
        except ValueError as e:
            return JsonResponse({'success': False, 'error': str(e)}, status=400)
    else:
        status = request.POST.get('status')

    if not _status_valido(status):
        return JsonResponse({'success': False, 'error': 'Status inválido.'}, status=400)

    candidatura = Candidatura.objects.filter(id=candidatura_id).first()
    if candidatura is None:
        return JsonResponse({'success': False, 'error': NOT_FOUND_MESSAGE}, status=404)

    _atualizar_status(request, candidatura, status)
    return JsonResponse({'success': True})


@api_admin_required
@require_GET
def api_stats(request):
    return JsonResponse(Candidatura.objects.estatisticas())


def _atualizar_status(request, candidatura, status):
    anterior = candidatura.status
    candidatura.status = status
    candidatura.save(update_fields=['status', 'updated_at'])
    logger.info(
        "Candidatura %s: status %s -> %s por %s",
        candidatura.id, anterior, status, request.user.username,
    )


# --- Admin panel ---

@admin_required
@require_GET
def painel(request):
    filtro_form, candidaturas = _filtrar(request)
    if candidaturas is None:
        messages.error(request, 'Filtros inválidos. Exibindo todas as candidaturas.')
        candidaturas = Candidatura.objects.filtrar()

    return render(request, 'painel.html', {
        'filtro_form': filtro_form,
        'candidaturas': candidaturas,
        'stats': Candidatura.objects.estatisticas(),
        'export_query': request.GET.urlencode(),
    })


@admin_required
@require_GET
def candidatura_detalhe(request, candidatura_id):
    candidatura = get_object_or_404(Candidatura, id=candidatura_id)
    return render(request, 'candidatura_detalhe.html', {
        'candidatura': candidatura,
        'acoes_status': [
            (STATUS_EM_ANALISE, 'Em Análise', 'btn-outline-secondary'),
            (STATUS_APROVADO, 'Aprovar', 'btn-success'),
            (STATUS_REJEITADO, 'Rejeitar', 'btn-danger'),
        ],
    })


@admin_required
@require_POST
def atualizar_status(request, candidatura_id):
    candidatura = get_object_or_404(Candidatura, id=candidatura_id)
    status = request.POST.get('status')
    if not _status_valido(status):
        messages.error(request, 'Erro ao atualizar status: status inválido.')
    else:
        _atualizar_status(request, candidatura, status)
        messages.success(request, 'Status atualizado com sucesso!')
    return redirect('candidatura_detalhe', candidatura_id=candidatura.id)


@admin_required
@require_GET
def exportar_excel(request):
    _, candidaturas = _filtrar(request)
    if candidaturas is None:
        candidaturas = Candidatura.objects.filtrar()

    output = BytesIO()
    workbook = xlsxwriter.Workbook(output, {'in_memory': True})
    worksheet = workbook.add_worksheet('Candidaturas')

    header_format = workbook.add_format({
        'bold': True,
        'bg_color': '#0D6EFD',
        'color': 'white',
        'align': 'center',
        'valign': 'vcenter'
    })
    date_format = workbook.add_format({'num_format': 'dd/mm/yyyy hh:mm'})

    headers = [
        'ID', 'Nome', 'Telefone', 'E-mail', 'CPF', 'Cidade', 'UF',
        'Veículos', 'Anos de Experiência', 'Disponibilidade', 'Horário Preferido',
        'Multas Pendentes', 'Viagens Longas', 'Exp. Cargas', 'Exp. Passageiros',
        'Observações', 'Status', 'Recebida em',
    ]
    for col, header in enumerate(headers):
        worksheet.write(0, col, header, header_format)
        worksheet.set_column(col, col, 20)

    availability_labels = dict(AVAILABILITY_CHOICES)
    schedule_labels = dict(SCHEDULE_CHOICES)
    vehicle_labels = dict(VEHICLE_TYPE_CHOICES)

    def sim_nao(value):
        return 'Sim' if value else 'Não'

    for row, c in enumerate(candidaturas, start=1):
        worksheet.write(row, 0, c.id)
        worksheet.write(row, 1, c.full_name)
        worksheet.write(row, 2, c.phone)
        worksheet.write(row, 3, c.email or '')
        worksheet.write(row, 4, c.cpf)
        worksheet.write(row, 5, c.city)
        worksheet.write(row, 6, c.state)
        worksheet.write(row, 7, ', '.join(vehicle_labels.get(v, v) for v in c.vehicle_types or []))
        worksheet.write(row, 8, c.experience_years)
        worksheet.write(row, 9, availability_labels.get(c.availability, c.availability))
        worksheet.write(row, 10, schedule_labels.get(c.preferred_schedule, c.preferred_schedule))
        worksheet.write(row, 11, sim_nao(c.has_pending_fines))
        worksheet.write(row, 12, sim_nao(c.accepts_long_trips))
        worksheet.write(row, 13, sim_nao(c.has_experience_with_cargo))
        worksheet.write(row, 14, sim_nao(c.has_experience_with_passengers))
        worksheet.write(row, 15, c.notes or '')
        worksheet.write(row, 16, STATUS_VALIDOS.get(c.status, c.status))
        # xlsxwriter only accepts naive datetimes
        worksheet.write_datetime(row, 17, c.created_at.astimezone(SAO_PAULO_TZ).replace(tzinfo=None), date_format)

    workbook.close()
    output.seek(0)

    filename = f"candidaturas_{timezone.localdate().strftime('%Y%m%d')}.xlsx"
    response = HttpResponse(
        output.read(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
