"""
Management command to verify the ledger.

Replays the movements of every batch and compares them with the stored
quantities, for each (item, location) pair that has batches.

Usage:
    python manage.py verify_ledger
    python manage.py verify_ledger --item ACUCAR-1KG
"""

from django.core.management.base import BaseCommand, CommandError

from ledgerman.exceptions import ConsistencyViolation
from ledgerman.location import Location
from ledgerman.models import HolderKind, Item, StockBatch
from ledgerman.services.queries import LedgerQueries


class Command(BaseCommand):
    """Verify ledger command."""

    help = 'Confere os lotes contra o histórico de movimentos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--item',
            help='Código do item (padrão: todos)'
        )

    def handle(self, *args, **options):
        items = Item.objects.all()
        if options['item']:
            items = items.filter(code=options['item'])
            if not items.exists():
                raise CommandError(f"Item não encontrado: {options['item']}")

        pairs = (
            StockBatch.objects.filter(item__in=items)
            .values_list('item_id', 'holder_type', 'holder_id')
            .order_by('item_id', 'holder_type', 'holder_id')
            .distinct()
        )
        by_id = {item.pk: item for item in items}

        checked = 0
        failures = []
        for item_id, holder_type, holder_id in pairs:
            item = by_id[item_id]
            location = Location(HolderKind(holder_type), holder_id)
            try:
                total = LedgerQueries.verify(item, location)
            except ConsistencyViolation as e:
                failures.append(e)
                self.stderr.write(f'{item.code} @ {location}: {e}')
                continue
            checked += 1
            if options['verbosity'] > 1:
                self.stdout.write(f'{item.code} @ {location}: {total}')

        if failures:
            raise CommandError(f'{len(failures)} inconsistência(s) encontrada(s)')

        self.stdout.write(
            self.style.SUCCESS(f'{checked} saldo(s) conferido(s)')
        )
