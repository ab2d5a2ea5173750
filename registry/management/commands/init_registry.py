"""
Management command to initialize the registry state.

Usage:
    python manage.py init_registry
    python manage.py init_registry --admin <actor>
"""

from django.core.management.base import BaseCommand, CommandError

from registry.errors import RegistryError
from registry.models import RegistryState
from registry.services import RegistryService


class Command(BaseCommand):
    help = 'Creates the registry state and optionally hands admin authority to an actor'

    def add_arguments(self, parser):
        parser.add_argument(
            '--admin',
            help='Actor handle to transfer admin authority to (performed as the current admin)',
        )

    def handle(self, *args, **options):
        state = RegistryState.get_state()
        new_admin = options.get('admin')

        if new_admin and new_admin != state.admin:
            try:
                state = RegistryService().transfer_admin(state.admin, new_admin)
            except RegistryError as e:
                raise CommandError(f'Could not transfer admin: {e.message}')
            self.stdout.write(self.style.SUCCESS(f'✓ Admin transferred to {new_admin}'))

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(self.style.SUCCESS('REGISTRY STATE'))
        self.stdout.write('=' * 60)
        self.stdout.write(f'Admin:          {state.admin}')
        self.stdout.write(f'Paused:         {state.paused}')
        self.stdout.write(f'Farms issued:   {state.farm_counter}')
        self.stdout.write('=' * 60)
