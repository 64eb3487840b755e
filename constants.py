USER_ROLE = 'user'
ADMIN_ROLE = 'admin'

ROLE_CHOICES = [
    (USER_ROLE, 'Usuário'),
    (ADMIN_ROLE, 'Administrador'),
]

STATUS_PENDENTE = 'pendente'
STATUS_EM_ANALISE = 'em_analise'
STATUS_APROVADO = 'aprovado'
STATUS_REJEITADO = 'rejeitado'

STATUS_CHOICES = [
    (STATUS_PENDENTE, 'Pendente'),
    (STATUS_EM_ANALISE, 'Em Análise'),
    (STATUS_APROVADO, 'Aprovado'),
    (STATUS_REJEITADO, 'Rejeitado'),
]

# Bootstrap badge classes used by the admin panel
STATUS_BADGE_CLASSES = {
    STATUS_PENDENTE: 'bg-light text-dark border',
    STATUS_EM_ANALISE: 'bg-secondary',
    STATUS_APROVADO: 'bg-success',
    STATUS_REJEITADO: 'bg-danger',
}

DISPONIBILIDADE_IMEDIATA = 'imediata'
DISPONIBILIDADE_15_DIAS = '15_dias'
DISPONIBILIDADE_30_DIAS = '30_dias'

AVAILABILITY_CHOICES = [
    (DISPONIBILIDADE_IMEDIATA, 'Imediata'),
    (DISPONIBILIDADE_15_DIAS, '15 dias'),
    (DISPONIBILIDADE_30_DIAS, '30 dias'),
]

SCHEDULE_CHOICES = [
    ('manha', 'Manhã'),
    ('tarde', 'Tarde'),
    ('noite', 'Noite'),
    ('integral', 'Integral'),
    ('flexivel', 'Flexível'),
]

VEHICLE_TYPE_CHOICES = [
    ('moto', 'Moto'),
    ('carro', 'Carro'),
    ('van', 'Van'),
    ('caminhao', 'Caminhão'),
    ('onibus', 'Ônibus'),
]

BRAZILIAN_STATES = [
    'AC', 'AL', 'AP', 'AM', 'BA', 'CE', 'DF', 'ES', 'GO', 'MA',
    'MT', 'MS', 'MG', 'PA', 'PB', 'PR', 'PE', 'PI', 'RJ', 'RN',
    'RS', 'RO', 'RR', 'SC', 'SP', 'SE', 'TO',
]

STATE_CHOICES = [(uf, uf) for uf in BRAZILIAN_STATES]

# Value used by the panel filters to mean "no filter"
FILTRO_TODOS = 'all'
