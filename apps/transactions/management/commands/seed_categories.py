from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from apps.transactions.categories import ensure_defaults, DEFAULT_CATEGORIES

User = get_user_model()


class Command(BaseCommand):
    help = 'Insert any missing default categories for every user (or one user)'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, default=None, help='Only seed this user')

    def handle(self, *args, **options):
        users = User.objects.all()
        if options['email']:
            users = users.filter(email__iexact=options['email'])

        seeded = 0
        for user in users.iterator():
            before = user.categories.count()
            ensure_defaults(user)
            if user.categories.count() > before:
                seeded += 1

        self.stdout.write(
            self.style.SUCCESS(f'Default categories ({len(DEFAULT_CATEGORIES)}) checked for {users.count()} users, {seeded} updated')
        )
