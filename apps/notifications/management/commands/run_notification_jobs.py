from django.core.management.base import BaseCommand

from apps.notifications.services import JOBS


class Command(BaseCommand):
    help = 'Run periodic notification jobs (rating requests, attendance requests, expiry reminders)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--job',
            choices=sorted(JOBS),
            action='append',
            help='Job to run; repeat for several. Runs every job when omitted.',
        )

    def handle(self, *args, **options):
        for name in options['job'] or JOBS:
            count = JOBS[name]()
            self.stdout.write(self.style.SUCCESS(f'{name}: sent {count} notifications'))
