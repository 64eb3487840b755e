from django import forms

from constants import (
    AVAILABILITY_CHOICES,
    BRAZILIAN_STATES,
    FILTRO_TODOS,
    STATE_CHOICES,
    VEHICLE_TYPE_CHOICES,
)
from .models import Candidatura
from .utils import format_cpf, format_phone, is_valid_cpf, only_digits, parse_filter_datetime

SIM_NAO_CHOICES = [('sim', 'Sim'), ('nao', 'Não')]


class SimNaoField(forms.TypedChoiceField):
    """Yes/no radio that also accepts JSON booleans."""

    ALIASES = {
        'true': 'sim', '1': 'sim', 's': 'sim',
        'false': 'nao', '0': 'nao', 'n': 'nao', 'não': 'nao',
    }

    def __init__(self, **kwargs):
        kwargs.setdefault('choices', SIM_NAO_CHOICES)
        kwargs.setdefault('coerce', lambda value: value == 'sim')
        kwargs.setdefault('widget', forms.RadioSelect(attrs={'class': 'form-check-input'}))
        kwargs.setdefault('error_messages', {'required': 'Selecione uma opção.'})
        super().__init__(**kwargs)

    def to_python(self, value):
        if isinstance(value, bool):
            return 'sim' if value else 'nao'
        value = super().to_python(value).strip().lower()
        return self.ALIASES.get(value, value)


class CandidaturaForm(forms.ModelForm):
    state = forms.CharField(
        max_length=2,
        label='Estado',
        widget=forms.Select(choices=[('', 'UF')] + STATE_CHOICES, attrs={'class': 'form-select'}),
        error_messages={'required': 'Selecione o estado.'},
    )
    vehicle_types = forms.MultipleChoiceField(
        choices=VEHICLE_TYPE_CHOICES,
        label='Tipos de Veículos',
        widget=forms.CheckboxSelectMultiple(attrs={'class': 'form-check-input'}),
        error_messages={'required': 'Selecione pelo menos um tipo de veículo.'},
    )
    experience_years = forms.IntegerField(
        min_value=0,
        label='Anos de Experiência',
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': 0}),
        error_messages={'min_value': 'Informe um número de anos válido.'},
    )
    has_pending_fines = SimNaoField(label='Possui multas pendentes?')
    accepts_long_trips = SimNaoField(label='Aceita viagens longas?')
    has_experience_with_cargo = SimNaoField(label='Tem experiência com transporte de cargas?')
    has_experience_with_passengers = SimNaoField(label='Tem experiência com transporte de passageiros?')

    class Meta:
        model = Candidatura
        fields = [
            'full_name', 'phone', 'email', 'cpf',
            'city', 'state',
            'vehicle_types',
            'experience_years', 'availability', 'preferred_schedule',
            'has_pending_fines', 'accepts_long_trips',
            'has_experience_with_cargo', 'has_experience_with_passengers',
            'notes',
        ]
        widgets = {
            'full_name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Seu nome completo'}),
            'phone': forms.TextInput(attrs={'class': 'form-control phone-mask', 'placeholder': '(00) 00000-0000'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'seu@email.com'}),
            'cpf': forms.TextInput(attrs={'class': 'form-control cpf-mask', 'placeholder': '000.000.000-00'}),
            'city': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Sua cidade'}),
            'availability': forms.Select(attrs={'class': 'form-select'}),
            'preferred_schedule': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={
                'class': 'form-control',
                'rows': 4,
                'placeholder': 'Conte-nos mais sobre você, sua experiência ou qualquer informação adicional...',
            }),
        }
        error_messages = {
            'full_name': {'required': 'Informe seu nome completo.'},
            'phone': {'required': 'Informe seu telefone.'},
            'cpf': {'required': 'Informe seu CPF.'},
            'city': {'required': 'Informe sua cidade.'},
            'email': {'invalid': 'Informe um e-mail válido.'},
            'availability': {'required': 'Selecione sua disponibilidade.'},
            'preferred_schedule': {'required': 'Selecione o horário preferido.'},
        }

    def clean_full_name(self):
        full_name = self.cleaned_data['full_name'].strip()
        if len(full_name) < 3:
            raise forms.ValidationError('O nome deve ter pelo menos 3 caracteres.')
        return full_name

    def clean_phone(self):
        digits = only_digits(self.cleaned_data['phone'])
        if len(digits) not in (10, 11):
            raise forms.ValidationError('Telefone inválido. Informe DDD e número.')
        return format_phone(digits)

    def clean_email(self):
        return self.cleaned_data.get('email') or None

    def clean_cpf(self):
        cpf = self.cleaned_data['cpf']
        if not is_valid_cpf(cpf):
            raise forms.ValidationError('CPF inválido.')
        return format_cpf(cpf)

    def clean_city(self):
        city = self.cleaned_data['city'].strip()
        if len(city) < 2:
            raise forms.ValidationError('Informe uma cidade válida.')
        return city

    def clean_state(self):
        state = self.cleaned_data['state'].strip().upper()
        if state not in BRAZILIAN_STATES:
            raise forms.ValidationError('Selecione um estado válido.')
        return state

    def clean_vehicle_types(self):
        # Keeps the order the candidate picked
        return list(dict.fromkeys(self.cleaned_data['vehicle_types']))

    def clean_notes(self):
        notes = (self.cleaned_data.get('notes') or '').strip()
        return notes or None


class FiltroCandidaturaForm(forms.Form):
    vehicle_type = forms.ChoiceField(
        choices=[(FILTRO_TODOS, 'Todos os veículos')] + VEHICLE_TYPE_CHOICES,
        required=False,
        label='Tipo de Veículo',
        widget=forms.Select(attrs={'class': 'form-select'}),
    )
    availability = forms.ChoiceField(
        choices=[(FILTRO_TODOS, 'Todas')] + AVAILABILITY_CHOICES,
        required=False,
        label='Disponibilidade',
        widget=forms.Select(attrs={'class': 'form-select'}),
    )
    start_date = forms.CharField(
        required=False,
        label='Data Início',
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )
    end_date = forms.CharField(
        required=False,
        label='Data Fim',
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )

    def _clean_choice(self, name):
        value = self.cleaned_data.get(name)
        if not value or value == FILTRO_TODOS:
            return None
        return value

    def clean_vehicle_type(self):
        return self._clean_choice('vehicle_type')

    def clean_availability(self):
        return self._clean_choice('availability')

    def _clean_date(self, name, end_of_day=False):
        try:
            return parse_filter_datetime(self.cleaned_data.get(name), end_of_day=end_of_day)
        except (ValueError, OverflowError):
            raise forms.ValidationError('Data inválida. Use o formato AAAA-MM-DD.')

    def clean_start_date(self):
        return self._clean_date('start_date')

    def clean_end_date(self):
        return self._clean_date('end_date', end_of_day=True)

    def filtros(self):
        """Keyword arguments for ``Candidatura.objects.filtrar``."""
        return {
            'vehicle_type': self.cleaned_data.get('vehicle_type'),
            'availability': self.cleaned_data.get('availability'),
            'start_date': self.cleaned_data.get('start_date'),
            'end_date': self.cleaned_data.get('end_date'),
        }

    def has_active_filters(self):
        return self.is_valid() and any(self.filtros().values())
