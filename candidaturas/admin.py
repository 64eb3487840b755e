from django.contrib import admin
from import_export import resources
from import_export.admin import ImportExportModelAdmin

from candidaturas.models import Candidatura
from constants import STATUS_APROVADO, STATUS_EM_ANALISE, STATUS_REJEITADO


class CandidaturaResource(resources.ModelResource):
    class Meta:
        model = Candidatura
        fields = (
            'id', 'full_name', 'phone', 'email', 'cpf', 'city', 'state',
            'vehicle_types', 'experience_years', 'availability', 'preferred_schedule',
            'has_pending_fines', 'accepts_long_trips',
            'has_experience_with_cargo', 'has_experience_with_passengers',
            'notes', 'status', 'created_at',
        )
        export_order = fields
        skip_unchanged = True
        report_skipped = True


@admin.register(Candidatura)
class CandidaturaAdmin(ImportExportModelAdmin):
    resource_class = CandidaturaResource
    list_display = ('full_name', 'phone', 'city', 'state', 'availability', 'status', 'created_at')
    list_filter = ('status', 'availability', 'state', 'preferred_schedule', 'created_at')
    search_fields = ('full_name', 'cpf', 'email', 'phone', 'city')
    readonly_fields = ('created_at', 'updated_at')
    actions = ['marcar_em_analise', 'marcar_aprovado', 'marcar_rejeitado']

    fieldsets = (
        ('Dados Pessoais', {
            'fields': ('full_name', 'phone', 'email', 'cpf')
        }),
        ('Localização', {
            'fields': ('city', 'state')
        }),
        ('Experiência e Disponibilidade', {
            'fields': ('vehicle_types', 'experience_years', 'availability', 'preferred_schedule')
        }),
        ('Informações Adicionais', {
            'fields': ('has_pending_fines', 'accepts_long_trips', 'has_experience_with_cargo', 'has_experience_with_passengers', 'notes')
        }),
        ('Análise', {
            'fields': ('status', 'created_at', 'updated_at')
        }),
    )

    def _marcar(self, request, queryset, status):
        for candidatura in queryset:
            candidatura.status = status
            candidatura.save(update_fields=['status', 'updated_at'])
        self.message_user(request, f"{queryset.count()} candidatura(s) atualizada(s).")

    @admin.action(description='Marcar como Em Análise')
    def marcar_em_analise(self, request, queryset):
        self._marcar(request, queryset, STATUS_EM_ANALISE)

    @admin.action(description='Marcar como Aprovado')
    def marcar_aprovado(self, request, queryset):
        self._marcar(request, queryset, STATUS_APROVADO)

    @admin.action(description='Marcar como Rejeitado')
    def marcar_rejeitado(self, request, queryset):
        self._marcar(request, queryset, STATUS_REJEITADO)
