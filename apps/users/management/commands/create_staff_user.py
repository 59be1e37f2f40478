"""
Create or update an editorial staff account.

Usage: python manage.py create_staff_user --email editor@example.org --role EDITOR
"""

from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model
from decouple import config

from apps.submissions.lifecycle import ROLE_CHOICES, ADMIN

User = get_user_model()


class Command(BaseCommand):
    help = 'Create an editor, reviewer or administrator account for Journal Desk'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            type=str,
            default=config('STAFF_EMAIL', default='admin@journal-desk.org'),
        )
        parser.add_argument(
            '--password',
            type=str,
            default=config('STAFF_PASSWORD', default=''),
        )
        parser.add_argument(
            '--role',
            type=str,
            default=ADMIN,
            choices=[code for code, _ in ROLE_CHOICES],
        )
        parser.add_argument('--first-name', type=str, default='')
        parser.add_argument('--last-name', type=str, default='')
        parser.add_argument(
            '--force',
            action='store_true',
            help='Update the account when it already exists'
        )

    def handle(self, *args, **options):
        email = options['email']
        password = options['password']
        role = options['role']

        if not password:
            raise CommandError('A password is required (--password or STAFF_PASSWORD).')

        user = User.objects.filter(email=email).first()
        if user and not options['force']:
            raise CommandError(f'User with email {email} already exists. Use --force to update it.')

        if user is None:
            user = User(email=email)

        user.first_name = options['first_name'] or user.first_name
        user.last_name = options['last_name'] or user.last_name
        user.role = role
        user.account_status = 'ACTIVE'
        user.is_staff = role == ADMIN
        user.is_superuser = role == ADMIN
        user.set_password(password)
        user.save()

        self.stdout.write(self.style.SUCCESS(f'{role} account ready: {user.email} ({user.id})'))
