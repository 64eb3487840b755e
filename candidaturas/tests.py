import json
from datetime import datetime
from smtplib import SMTPException
from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse

from constants import (
    ADMIN_ROLE,
    STATUS_APROVADO,
    STATUS_EM_ANALISE,
    STATUS_PENDENTE,
    STATUS_REJEITADO,
    USER_ROLE,
)
from registration.models import CustomUser

from .forms import CandidaturaForm, FiltroCandidaturaForm
from .models import Candidatura
from .templatetags.candidaturas_filters import status_badge, status_label, vehicle_summary
from .utils import SAO_PAULO_TZ, format_cpf, format_phone, is_valid_cpf, only_digits, parse_filter_datetime

CPF_VALIDO = '529.982.247-25'
OUTRO_CPF_VALIDO = '11144477735'


def payload(**overrides):
    data = {
        'full_name': 'João da Silva',
        'phone': '(11) 98765-4321',
        'email': 'joao@example.com',
        'cpf': CPF_VALIDO,
        'city': 'Campinas',
        'state': 'SP',
        'vehicle_types': ['caminhao', 'van'],
        'experience_years': 8,
        'availability': 'imediata',
        'has_pending_fines': False,
        'accepts_long_trips': True,
        'preferred_schedule': 'integral',
        'has_experience_with_cargo': True,
        'has_experience_with_passengers': False,
        'notes': 'Possuo CNH categoria E.',
    }
    data.update(overrides)
    return data


def criar_candidatura(**overrides):
    data = payload(**overrides)
    data.setdefault('status', STATUS_PENDENTE)
    return Candidatura.objects.create(**data)


def set_created_at(candidatura, *args):
    created_at = SAO_PAULO_TZ.localize(datetime(*args))
    Candidatura.objects.filter(id=candidatura.id).update(created_at=created_at)
    candidatura.refresh_from_db()
    return candidatura


class CpfUtilsTest(TestCase):
    def test_only_digits(self):
        self.assertEqual(only_digits('529.982.247-25'), '52998224725')
        self.assertEqual(only_digits(None), '')

    def test_valid_cpf_masked_and_unmasked(self):
        self.assertTrue(is_valid_cpf(CPF_VALIDO))
        self.assertTrue(is_valid_cpf('52998224725'))
        self.assertTrue(is_valid_cpf(OUTRO_CPF_VALIDO))

    def test_wrong_check_digits(self):
        self.assertFalse(is_valid_cpf('529.982.247-26'))
        self.assertFalse(is_valid_cpf('529.982.247-15'))

    def test_repeated_digits_are_rejected(self):
        """Sequências repetidas passam no cálculo mas não são CPFs válidos."""
        for digit in '0123456789':
            self.assertFalse(is_valid_cpf(digit * 11))

    def test_wrong_length(self):
        self.assertFalse(is_valid_cpf('5299822472'))
        self.assertFalse(is_valid_cpf('529982247251'))
        self.assertFalse(is_valid_cpf(''))


class MaskUtilsTest(TestCase):
    def test_format_cpf_progressive(self):
        self.assertEqual(format_cpf('123'), '123')
        self.assertEqual(format_cpf('1234'), '123.4')
        self.assertEqual(format_cpf('1234567'), '123.456.7')
        self.assertEqual(format_cpf('12345678901'), '123.456.789-01')

    def test_format_cpf_ignores_extra_digits(self):
        self.assertEqual(format_cpf('123456789012345'), '123.456.789-01')

    def test_format_phone_progressive(self):
        self.assertEqual(format_phone('11'), '11')
        self.assertEqual(format_phone('119'), '(11) 9')
        self.assertEqual(format_phone('1198765'), '(11) 98765')
        self.assertEqual(format_phone('11987654321'), '(11) 98765-4321')

    def test_format_phone_landline(self):
        """Telefone fixo com 10 dígitos mantém a máscara de 5 dígitos no meio."""
        self.assertEqual(format_phone('1133334444'), '(11) 33334-444')


class ParseFilterDatetimeTest(TestCase):
    def test_date_only_start(self):
        result = parse_filter_datetime('2026-03-10')
        self.assertEqual(result.tzinfo.zone, 'America/Sao_Paulo')
        self.assertEqual((result.hour, result.minute, result.second), (0, 0, 0))

    def test_date_only_end_covers_whole_day(self):
        result = parse_filter_datetime('2026-03-10', end_of_day=True)
        self.assertEqual((result.hour, result.minute, result.second), (23, 59, 59))
        self.assertEqual(result.microsecond, 999999)

    def test_full_timestamp_is_kept(self):
        result = parse_filter_datetime('2026-03-10T14:30:00-03:00', end_of_day=True)
        self.assertEqual((result.hour, result.minute), (14, 30))

    def test_empty_values(self):
        self.assertIsNone(parse_filter_datetime(None))
        self.assertIsNone(parse_filter_datetime('  '))

    def test_invalid_value(self):
        with self.assertRaises(ValueError):
            parse_filter_datetime('10/03/2026')


class CandidaturaFormTest(TestCase):
    def test_valid_json_payload(self):
        form = CandidaturaForm(data=payload())
        self.assertTrue(form.is_valid(), form.errors.as_json())
        candidatura = form.save()
        self.assertEqual(candidatura.status, STATUS_PENDENTE)
        self.assertEqual(candidatura.cpf, '529.982.247-25')
        self.assertEqual(candidatura.vehicle_types, ['caminhao', 'van'])
        self.assertTrue(candidatura.accepts_long_trips)
        self.assertFalse(candidatura.has_pending_fines)

    def test_normalizes_cpf_phone_and_state(self):
        form = CandidaturaForm(data=payload(cpf='52998224725', phone='11987654321', state='rj'))
        self.assertTrue(form.is_valid(), form.errors.as_json())
        self.assertEqual(form.cleaned_data['cpf'], '529.982.247-25')
        self.assertEqual(form.cleaned_data['phone'], '(11) 98765-4321')
        self.assertEqual(form.cleaned_data['state'], 'RJ')

    def test_html_radio_values(self):
        data = payload(has_pending_fines='sim', accepts_long_trips='nao',
                       has_experience_with_cargo='sim', has_experience_with_passengers='nao')
        form = CandidaturaForm(data=data)
        self.assertTrue(form.is_valid(), form.errors.as_json())
        self.assertTrue(form.cleaned_data['has_pending_fines'])
        self.assertFalse(form.cleaned_data['accepts_long_trips'])

    def test_empty_optional_fields_become_null(self):
        form = CandidaturaForm(data=payload(email='', notes='   '))
        self.assertTrue(form.is_valid(), form.errors.as_json())
        candidatura = form.save()
        self.assertIsNone(candidatura.email)
        self.assertIsNone(candidatura.notes)

    def test_duplicated_vehicle_types_are_removed(self):
        form = CandidaturaForm(data=payload(vehicle_types=['van', 'carro', 'van']))
        self.assertTrue(form.is_valid(), form.errors.as_json())
        self.assertEqual(form.cleaned_data['vehicle_types'], ['van', 'carro'])

    def test_invalid_fields(self):
        form = CandidaturaForm(data=payload(
            full_name='Jo',
            phone='1234',
            email='nao-e-email',
            cpf='111.111.111-11',
            city='X',
            state='ZZ',
            vehicle_types=[],
            experience_years=-1,
            availability='amanha',
        ))
        self.assertFalse(form.is_valid())
        for field in ['full_name', 'phone', 'email', 'cpf', 'city', 'state',
                      'vehicle_types', 'experience_years', 'availability']:
            self.assertIn(field, form.errors)

    def test_unknown_vehicle_type(self):
        form = CandidaturaForm(data=payload(vehicle_types=['aviao']))
        self.assertFalse(form.is_valid())
        self.assertIn('vehicle_types', form.errors)

    def test_booleans_are_required(self):
        data = payload()
        del data['accepts_long_trips']
        form = CandidaturaForm(data=data)
        self.assertFalse(form.is_valid())
        self.assertIn('accepts_long_trips', form.errors)


class FiltroCandidaturaFormTest(TestCase):
    def test_all_disables_filters(self):
        form = FiltroCandidaturaForm(data={'vehicle_type': 'all', 'availability': '', 'start_date': '', 'end_date': ''})
        self.assertTrue(form.is_valid())
        self.assertFalse(any(form.filtros().values()))
        self.assertFalse(form.has_active_filters())

    def test_invalid_values(self):
        form = FiltroCandidaturaForm(data={'vehicle_type': 'aviao', 'start_date': 'ontem'})
        self.assertFalse(form.is_valid())
        self.assertIn('vehicle_type', form.errors)
        self.assertIn('start_date', form.errors)


class CandidaturaQuerySetTest(TestCase):
    def setUp(self):
        self.antiga = set_created_at(
            criar_candidatura(full_name='Ana Antiga', vehicle_types=['moto'], availability='30_dias'),
            2026, 3, 1, 9, 0)
        self.meio = set_created_at(
            criar_candidatura(full_name='Bruno Meio', vehicle_types=['carro', 'van'], availability='imediata'),
            2026, 3, 10, 23, 30)
        self.nova = set_created_at(
            criar_candidatura(full_name='Carla Nova', vehicle_types=['caminhao', 'van'], availability='imediata'),
            2026, 3, 20, 8, 0)

    def test_ordered_newest_first(self):
        nomes = [c.full_name for c in Candidatura.objects.filtrar()]
        self.assertEqual(nomes, ['Carla Nova', 'Bruno Meio', 'Ana Antiga'])

    def test_filter_by_vehicle_type(self):
        result = Candidatura.objects.filtrar(vehicle_type='van')
        self.assertEqual([c.id for c in result], [self.nova.id, self.meio.id])

    def test_filter_by_availability(self):
        result = Candidatura.objects.filtrar(availability='30_dias')
        self.assertEqual([c.id for c in result], [self.antiga.id])

    def test_start_date_is_inclusive(self):
        meia_noite = set_created_at(
            criar_candidatura(full_name='Diego Meia-Noite', vehicle_types=['carro']),
            2026, 3, 20, 0, 0)
        result = Candidatura.objects.filtrar(start_date=parse_filter_datetime('2026-03-20'))
        self.assertEqual({c.id for c in result}, {meia_noite.id, self.nova.id})

    def test_end_date_includes_whole_day(self):
        result = Candidatura.objects.filtrar(
            start_date=parse_filter_datetime('2026-03-10'),
            end_date=parse_filter_datetime('2026-03-10', end_of_day=True),
        )
        self.assertEqual([c.id for c in result], [self.meio.id])

    def test_combined_filters(self):
        result = Candidatura.objects.filtrar(
            vehicle_type='van',
            availability='imediata',
            start_date=parse_filter_datetime('2026-03-11'),
        )
        self.assertEqual([c.id for c in result], [self.nova.id])

    def test_estatisticas(self):
        Candidatura.objects.filter(id=self.antiga.id).update(status=STATUS_APROVADO)
        Candidatura.objects.filter(id=self.meio.id).update(status=STATUS_REJEITADO)
        stats = Candidatura.objects.estatisticas()
        self.assertEqual(stats, {
            'total': 3,
            'pendente': 1,
            'em_analise': 0,
            'aprovado': 1,
            'rejeitado': 1,
        })

    def test_estatisticas_empty(self):
        Candidatura.objects.all().delete()
        stats = Candidatura.objects.estatisticas()
        self.assertEqual(sum(v for k, v in stats.items() if k != 'total'), stats['total'])
        self.assertEqual(stats['total'], 0)


class EnviarCandidaturaApiTest(TestCase):
    def post_json(self, data):
        return self.client.post(
            reverse('api_candidatura_enviar'),
            data=json.dumps(data),
            content_type='application/json',
        )

    def test_submit_is_public(self):
        with self.assertLogs('candidaturas.views', level='INFO') as logs:
            response = self.post_json(payload())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        candidatura = Candidatura.objects.get(id=body['id'])
        self.assertEqual(candidatura.status, STATUS_PENDENTE)
        self.assertIn('Nova candidatura recebida: João da Silva - Campinas/SP', logs.output[0])

    def test_invalid_submit(self):
        response = self.post_json(payload(cpf='123.456.789-00'))
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body['success'])
        self.assertEqual(body['message'], 'Erro ao enviar candidatura.')
        self.assertIn('cpf', body['errors'])
        self.assertEqual(Candidatura.objects.count(), 0)

    def test_malformed_json(self):
        response = self.client.post(
            reverse('api_candidatura_enviar'), data='{nao json', content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_get_not_allowed(self):
        response = self.client.get(reverse('api_candidatura_enviar'))
        self.assertEqual(response.status_code, 405)

    @override_settings(NOTIFICACAO_CANDIDATURA_EMAILS=['rh@transportadorabrasil.com.br'])
    def test_notification_email(self):
        response = self.post_json(payload())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('João da Silva', mail.outbox[0].subject)
        self.assertEqual(mail.outbox[0].to, ['rh@transportadorabrasil.com.br'])

    def test_no_notification_without_recipients(self):
        self.post_json(payload())
        self.assertEqual(len(mail.outbox), 0)

    @override_settings(NOTIFICACAO_CANDIDATURA_EMAILS=['rh@transportadorabrasil.com.br'])
    @patch('candidaturas.notifications._send_email', side_effect=SMTPException('offline'))
    def test_notification_failure_does_not_fail_submit(self, mock_send):
        with self.assertLogs('candidaturas.notifications', level='ERROR'):
            response = self.post_json(payload())
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        self.assertEqual(Candidatura.objects.count(), 1)
        mock_send.assert_called_once()


class AdminApiTest(TestCase):
    def setUp(self):
        self.admin = CustomUser.objects.create_user(username='gestora', password='senha123', role=ADMIN_ROLE)
        self.comum = CustomUser.objects.create_user(username='comum', password='senha123', role=USER_ROLE)
        self.candidatura = criar_candidatura()

    def test_anonymous_gets_401(self):
        for url in [
            reverse('api_candidaturas'),
            reverse('api_candidaturas_estatisticas'),
            reverse('api_candidatura_detalhe', args=[self.candidatura.id]),
        ]:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 401)

    def test_regular_user_gets_403(self):
        self.client.force_login(self.comum)
        response = self.client.get(reverse('api_candidaturas'))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error'], 'Acesso restrito a administradores')

        response = self.client.post(
            reverse('api_candidatura_status', args=[self.candidatura.id]),
            data=json.dumps({'status': STATUS_APROVADO}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)
        self.candidatura.refresh_from_db()
        self.assertEqual(self.candidatura.status, STATUS_PENDENTE)

    def test_list(self):
        criar_candidatura(full_name='Maria Souza', cpf=OUTRO_CPF_VALIDO, vehicle_types=['onibus'])
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidaturas'), {'vehicle_type': 'onibus'})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['count'], 1)
        self.assertEqual(body['candidaturas'][0]['full_name'], 'Maria Souza')

    def test_list_with_all_filter(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidaturas'), {'vehicle_type': 'all', 'availability': 'all'})
        self.assertEqual(response.json()['count'], 1)

    def test_list_invalid_filter(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidaturas'), {'end_date': '31/12/2026'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('end_date', response.json()['errors'])

    def test_detail(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidatura_detalhe', args=[self.candidatura.id]))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['cpf'], CPF_VALIDO)
        self.assertEqual(body['vehicle_types'], ['caminhao', 'van'])

    def test_detail_not_found(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidatura_detalhe', args=[9999]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'Candidatura não encontrada')

    def test_update_status_any_transition(self):
        self.client.force_login(self.admin)
        url = reverse('api_candidatura_status', args=[self.candidatura.id])
        for status in [STATUS_APROVADO, STATUS_PENDENTE, STATUS_REJEITADO, STATUS_EM_ANALISE]:
            response = self.client.post(url, data=json.dumps({'status': status}), content_type='application/json')
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {'success': True})
            self.candidatura.refresh_from_db()
            self.assertEqual(self.candidatura.status, status)

    def test_update_status_refreshes_updated_at(self):
        anterior = self.candidatura.updated_at
        self.client.force_login(self.admin)
        self.client.post(
            reverse('api_candidatura_status', args=[self.candidatura.id]),
            data=json.dumps({'status': STATUS_APROVADO}),
            content_type='application/json',
        )
        self.candidatura.refresh_from_db()
        self.assertGreaterEqual(self.candidatura.updated_at, anterior)

    def test_update_status_invalid(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('api_candidatura_status', args=[self.candidatura.id]),
            data=json.dumps({'status': 'contratado'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)

    def test_update_status_rejects_non_string_status(self):
        self.client.force_login(self.admin)
        url = reverse('api_candidatura_status', args=[self.candidatura.id])
        for status in [[STATUS_APROVADO], {'status': STATUS_APROVADO}, 1, None]:
            response = self.client.post(url, data=json.dumps({'status': status}), content_type='application/json')
            self.assertEqual(response.status_code, 400)
        self.candidatura.refresh_from_db()
        self.assertEqual(self.candidatura.status, STATUS_PENDENTE)

    def test_update_status_not_found(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('api_candidatura_status', args=[9999]),
            data=json.dumps({'status': STATUS_APROVADO}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 404)

    def test_stats(self):
        criar_candidatura(full_name='Maria Souza', status=STATUS_APROVADO)
        self.client.force_login(self.admin)
        response = self.client.get(reverse('api_candidaturas_estatisticas'))
        self.assertEqual(response.json(), {
            'total': 2,
            'pendente': 1,
            'em_analise': 0,
            'aprovado': 1,
            'rejeitado': 0,
        })


class PublicFormViewTest(TestCase):
    def test_get_form(self):
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Trabalhe Conosco')
        self.assertContains(response, 'cpf-mask')

    def test_post_form(self):
        data = payload(has_pending_fines='nao', accepts_long_trips='sim',
                       has_experience_with_cargo='sim', has_experience_with_passengers='nao')
        response = self.client.post(reverse('home'), data)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Candidatura Enviada!')
        self.assertEqual(Candidatura.objects.count(), 1)

    def test_post_invalid_form(self):
        response = self.client.post(reverse('home'), payload(cpf='000.000.000-00', has_pending_fines='nao'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'CPF inválido.')
        self.assertEqual(Candidatura.objects.count(), 0)


class PainelViewTest(TestCase):
    def setUp(self):
        self.admin = CustomUser.objects.create_user(username='gestora', password='senha123', role=ADMIN_ROLE)
        self.comum = CustomUser.objects.create_user(username='comum', password='senha123', role=USER_ROLE)
        self.candidatura = set_created_at(criar_candidatura(), 2026, 3, 10, 14, 5)

    def test_anonymous_redirects_to_login(self):
        response = self.client.get(reverse('painel'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response.url)

    def test_regular_user_sees_access_denied(self):
        self.client.force_login(self.comum)
        response = self.client.get(reverse('painel'))
        self.assertEqual(response.status_code, 403)
        self.assertContains(response, 'Acesso Negado', status_code=403)

    def test_painel_lists_candidaturas(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('painel'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'João da Silva')
        self.assertContains(response, '10/03/2026')
        self.assertContains(response, 'Caminhão, Van')
        self.assertEqual(response.context['stats']['total'], 1)
        self.assertEqual(response.context['candidaturas_pendentes'], 1)

    def test_painel_empty_filter_result(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('painel'), {'vehicle_type': 'moto'})
        self.assertContains(response, 'Nenhuma candidatura encontrada')

    def test_detail_page(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('candidatura_detalhe', args=[self.candidatura.id]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '10/03/2026 às 14:05')
        self.assertContains(response, 'Aprovar')
        self.assertContains(response, 'Rejeitar')

    def test_detail_page_not_found(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('candidatura_detalhe', args=[9999]))
        self.assertEqual(response.status_code, 404)

    def test_atualizar_status(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('atualizar_status', args=[self.candidatura.id]),
            {'status': STATUS_APROVADO},
            follow=True,
        )
        self.assertRedirects(response, reverse('candidatura_detalhe', args=[self.candidatura.id]))
        self.assertContains(response, 'Status atualizado com sucesso!')
        self.candidatura.refresh_from_db()
        self.assertEqual(self.candidatura.status, STATUS_APROVADO)

    def test_atualizar_status_regular_user(self):
        self.client.force_login(self.comum)
        response = self.client.post(reverse('atualizar_status', args=[self.candidatura.id]), {'status': STATUS_APROVADO})
        self.assertEqual(response.status_code, 403)
        self.candidatura.refresh_from_db()
        self.assertEqual(self.candidatura.status, STATUS_PENDENTE)

    def test_exportar_excel(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('exportar_candidaturas'), {'vehicle_type': 'van'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        self.assertIn('attachment; filename="candidaturas_', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'PK'))


class CandidaturasFiltersTest(TestCase):
    def test_vehicle_summary(self):
        self.assertEqual(vehicle_summary(['carro']), 'Carro')
        self.assertEqual(vehicle_summary(['carro', 'van', 'onibus', 'moto']), 'Carro, Van +2')
        self.assertEqual(vehicle_summary([]), '')

    def test_status_helpers(self):
        self.assertEqual(status_label(STATUS_EM_ANALISE), 'Em Análise')
        self.assertEqual(status_badge(STATUS_APROVADO), 'bg-success')
        self.assertEqual(status_badge('desconhecido'), 'bg-secondary')
