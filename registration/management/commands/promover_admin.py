from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q

from constants import ADMIN_ROLE, USER_ROLE
from registration.models import CustomUser


class Command(BaseCommand):
    help = 'Concede (ou revoga) o perfil de administrador do painel de candidaturas'

    def add_arguments(self, parser):
        parser.add_argument(
            'identificador',
            type=str,
            help='Login, e-mail ou OpenID do usuário'
        )
        parser.add_argument(
            '--revogar',
            action='store_true',
            help='Retorna o usuário ao perfil comum'
        )

    def handle(self, *args, **options):
        identificador = options['identificador'].strip()
        revogar = options.get('revogar', False)

        users = CustomUser.objects.filter(
            Q(username=identificador) | Q(email__iexact=identificador) | Q(open_id=identificador)
        )
        count = users.count()
        if count == 0:
            raise CommandError(f'Usuário "{identificador}" não encontrado')
        if count > 1:
            raise CommandError(f'Mais de um usuário corresponde a "{identificador}"; use o login')

        user = users.get()
        novo_perfil = USER_ROLE if revogar else ADMIN_ROLE

        if user.role == novo_perfil:
            self.stdout.write(self.style.WARNING(f'{user} já possui o perfil "{user.get_role_display()}"'))
            return

        user.role = novo_perfil
        user.save(update_fields=['role'])
        self.stdout.write(self.style.SUCCESS(f'{user} agora possui o perfil "{user.get_role_display()}"'))
