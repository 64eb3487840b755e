from django.db import models
from django.db.models import Count, Q

from constants import (
    AVAILABILITY_CHOICES,
    SCHEDULE_CHOICES,
    STATE_CHOICES,
    STATUS_APROVADO,
    STATUS_CHOICES,
    STATUS_EM_ANALISE,
    STATUS_PENDENTE,
    STATUS_REJEITADO,
    VEHICLE_TYPE_CHOICES,
)


class CandidaturaQuerySet(models.QuerySet):
    def filtrar(self, vehicle_type=None, availability=None, start_date=None, end_date=None):
        """
        Apply the panel filters and return a list ordered from newest to oldest.

        The vehicle filter runs in Python because the JSON lookup needed for
        list membership is not available on every database backend.
        """
        queryset = self
        if availability:
            queryset = queryset.filter(availability=availability)
        if start_date:
            queryset = queryset.filter(created_at__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__lte=end_date)

        candidaturas = list(queryset.order_by('-created_at', '-id'))
        if vehicle_type:
            candidaturas = [c for c in candidaturas if vehicle_type in (c.vehicle_types or [])]
        return candidaturas

    def estatisticas(self):
        totals = self.aggregate(
            total=Count('id'),
            pendente=Count('id', filter=Q(status=STATUS_PENDENTE)),
            em_analise=Count('id', filter=Q(status=STATUS_EM_ANALISE)),
            aprovado=Count('id', filter=Q(status=STATUS_APROVADO)),
            rejeitado=Count('id', filter=Q(status=STATUS_REJEITADO)),
        )
        return {key: value or 0 for key, value in totals.items()}


class Candidatura(models.Model):
    full_name = models.CharField(max_length=255, verbose_name='Nome Completo')
    phone = models.CharField(max_length=20, verbose_name='Telefone')
    email = models.EmailField(max_length=320, null=True, blank=True, verbose_name='E-mail')
    cpf = models.CharField(max_length=14, verbose_name='CPF')
    city = models.CharField(max_length=100, verbose_name='Cidade')
    state = models.CharField(max_length=2, choices=STATE_CHOICES, verbose_name='Estado')
    vehicle_types = models.JSONField(default=list, verbose_name='Tipos de Veículos')
    experience_years = models.PositiveIntegerField(default=0, verbose_name='Anos de Experiência')
    availability = models.CharField(max_length=20, choices=AVAILABILITY_CHOICES, verbose_name='Disponibilidade')
    has_pending_fines = models.BooleanField(default=False, verbose_name='Possui Multas Pendentes')
    accepts_long_trips = models.BooleanField(default=False, verbose_name='Aceita Viagens Longas')
    preferred_schedule = models.CharField(max_length=20, choices=SCHEDULE_CHOICES, verbose_name='Horário Preferido')
    has_experience_with_cargo = models.BooleanField(default=False, verbose_name='Experiência com Cargas')
    has_experience_with_passengers = models.BooleanField(default=False, verbose_name='Experiência com Passageiros')
    notes = models.TextField(null=True, blank=True, verbose_name='Observações')
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDENTE,
        db_index=True,
        verbose_name='Status',
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Recebida em')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Atualizada em')

    objects = CandidaturaQuerySet.as_manager()

    class Meta:
        verbose_name = 'Candidatura'
        verbose_name_plural = 'Candidaturas'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} - {self.city}/{self.state}"

    def get_vehicle_types_display(self):
        labels = dict(VEHICLE_TYPE_CHOICES)
        return [labels.get(tag, tag) for tag in (self.vehicle_types or [])]

    def as_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'phone': self.phone,
            'email': self.email,
            'cpf': self.cpf,
            'city': self.city,
            'state': self.state,
            'vehicle_types': list(self.vehicle_types or []),
            'experience_years': self.experience_years,
            'availability': self.availability,
            'has_pending_fines': self.has_pending_fines,
            'accepts_long_trips': self.accepts_long_trips,
            'preferred_schedule': self.preferred_schedule,
            'has_experience_with_cargo': self.has_experience_with_cargo,
            'has_experience_with_passengers': self.has_experience_with_passengers,
            'notes': self.notes,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
