"""
Management command to recompute stock counters from batch quantities.

Usage:
    python manage.py sync_stock_counters
    python manage.py sync_stock_counters --dry-run
"""

from django.core.management.base import BaseCommand

from stockledger import ledger


class Command(BaseCommand):
    """Sync product/variant current_stock with batch remaining quantities."""

    help = 'Recompute product and variant stock counters from batch remaining quantities'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the drift without fixing it'
        )

    def handle(self, *args, **options):
        drift = ledger.sync_counters(dry_run=options['dry_run'])

        for item in drift:
            self.stdout.write(
                f'{item.kind} {item.pk}: stored {item.stored}, expected {item.expected}'
            )

        if options['dry_run']:
            self.stdout.write(f'{len(drift)} counter(s) would be corrected')
        else:
            self.stdout.write(self.style.SUCCESS(f'{len(drift)} counter(s) corrected'))
