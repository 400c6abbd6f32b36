import os

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Create the admin user from ADMIN_USERNAME / ADMIN_PASSWORD, or reset its password'

    def add_arguments(self, parser):
        parser.add_argument('--username', default=os.environ.get('ADMIN_USERNAME'))
        parser.add_argument('--password', default=os.environ.get('ADMIN_PASSWORD'))
        parser.add_argument('--email', default=os.environ.get('ADMIN_EMAIL', ''))

    def handle(self, *args, **options):
        username = options['username']
        password = options['password']
        if not username or not password:
            raise CommandError('Admin credentials are not set (ADMIN_USERNAME / ADMIN_PASSWORD).')

        user, created = User.objects.get_or_create(
            username=username,
            defaults={'email': options['email']},
        )
        user.set_password(password)
        user.is_staff = True
        user.is_superuser = True
        user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'Admin user "{username}" created.'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Admin user "{username}" already exists, password reset.'))
