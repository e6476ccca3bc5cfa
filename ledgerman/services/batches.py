"""
Batch store — per (item, location) cost layers.

Plain functions over StockBatch. Mutations of quantity belong to the
allocator; this module only creates, lists, sums and locks batches.
"""

from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from ledgerman.exceptions import NotFound
from ledgerman.models.batch import StockBatch
from ledgerman.models.item import Item


def current_stock(item, location) -> Decimal:
    """Sum of batch quantities for (item, location)."""
    return StockBatch.objects.for_item(item).at(location).aggregate(
        t=Coalesce(Sum('quantity'), Decimal('0'))
    )['t']


def list_batches(item, location, include_empty: bool = True):
    """Batches for (item, location), oldest first."""
    qs = StockBatch.objects.for_item(item).at(location)
    if not include_empty:
        qs = qs.with_stock()
    return qs.fifo()


def lock_batches(item, location) -> list[StockBatch]:
    """
    Lock every batch with stock for (item, location), oldest first.

    Must run inside a transaction. Quantities are read after the lock,
    so a concurrent issue waits instead of allocating the same stock.
    """
    return list(
        StockBatch.objects.select_for_update()
        .for_item(item)
        .at(location)
        .with_stock()
        .fifo()
    )


def generate_sku(item, holder, location) -> str:
    """
    SKU for a new batch.

    Format: {item code}-{holder initial}-{YYYYMMDD}-{NNNN}, numbered per
    day within (item, location). The caller must hold the holder row lock
    taken by create_batch(), or two writers can read the same last number.
    """
    prefix = f"{item.code}-{holder.initial}-{timezone.localdate():%Y%m%d}-"
    last = (
        StockBatch.objects.for_item(item)
        .at(location)
        .filter(sku__startswith=prefix)
        .order_by('-id')
        .first()
    )
    number = int(last.sku[len(prefix):]) + 1 if last else 1
    return f"{prefix}{number:04d}"


def create_batch(item, location, quantity: Decimal, unit_cost: Decimal) -> StockBatch:
    """
    Create a new batch. Never merges with existing batches.

    Must run inside a transaction. The holder row is locked so SKU
    numbering at one location is serialised; stock_batch_sku_unique
    rejects a duplicate if it is not.

    Raises:
        NotFound: If the location does not exist
    """
    holder = location.resolve()
    holder = type(holder).objects.select_for_update().get(pk=holder.pk)
    return StockBatch.objects.create(
        sku=generate_sku(item, holder, location),
        item=item,
        holder_type=location.kind.value,
        holder_id=location.id,
        quantity=quantity,
        unit_cost=unit_cost,
    )


def require_item(item) -> Item:
    """
    Ensure the item exists.

    Raises:
        NotFound: If the item is unsaved or was removed
    """
    if item is None or item.pk is None or not Item.objects.filter(pk=item.pk).exists():
        raise NotFound(item=str(item))
    return item


def last_known_cost(item, location) -> Decimal:
    """
    Unit cost of the newest batch of item at location.

    Falls back to the newest batch of the item anywhere, then to zero.
    """
    newest = StockBatch.objects.for_item(item).order_by('-created_at', '-id')
    batch = newest.at(location).first() or newest.first()
    return batch.unit_cost if batch else Decimal('0')
