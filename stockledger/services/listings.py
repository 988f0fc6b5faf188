"""
Stock listings — paginated, searchable, read-only views.

list_stock_outs() presents manual stock-outs and sale line items as one
stream. Manual rows come first in the offset space, transaction rows
after them, and each source is fetched by slice so neither is ever
loaded in full.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from math import ceil

from django.core.paginator import EmptyPage, Paginator
from django.db.models import Q

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.batch import ProductBatch
from stockledger.models.enums import SortDirection, StockOutSource
from stockledger.models.movement import StockIn, StockOut
from stockledger.models.sales import TransactionItem
from stockledger.quantities import to_decimal


# ══════════════════════════════════════════════════════════════
# PARAMS & PAGES
# ══════════════════════════════════════════════════════════════


@dataclass
class SearchParams:
    """
    Listing query.

    page is 1-based. page_size None means DEFAULT_PAGE_SIZE.
    sort_field is checked against each listing's whitelist.
    """

    search: str = ''
    page: int = 1
    page_size: int | None = None
    sort_field: str = 'date'
    sort_direction: str = SortDirection.DESC

    def __post_init__(self):
        if self.page_size is None:
            self.page_size = stockledger_settings.DEFAULT_PAGE_SIZE
        self.search = (self.search or '').strip()

        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise StockError('INVALID_SEARCH_PARAMS', field='page', value=self.page)

        max_size = stockledger_settings.MAX_PAGE_SIZE
        if (
            isinstance(self.page_size, bool)
            or not isinstance(self.page_size, int)
            or not 1 <= self.page_size <= max_size
        ):
            raise StockError('INVALID_SEARCH_PARAMS', field='page_size', value=self.page_size)

        if self.sort_direction not in SortDirection.values:
            raise StockError(
                'INVALID_SEARCH_PARAMS', field='sort_direction', value=self.sort_direction,
            )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def descending(self) -> bool:
        return self.sort_direction == SortDirection.DESC


@dataclass
class Page:
    rows: list
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total_count / self.page_size) if self.total_count else 0


@dataclass
class StockOutPage(Page):
    manual_count: int = 0
    transaction_count: int = 0


@dataclass(frozen=True)
class StockOutRow:
    """
    One row of the unified stock-out view.

    source tells manual stock-outs from sale line items. Transaction rows
    have id '<prefix><item pk>' and carry transaction_id.
    """

    source: StockOutSource
    id: str
    batch_id: int
    batch_code: str
    product_name: str
    quantity: Decimal
    unit_id: int
    date: datetime
    reason: str
    transaction_id: int | None = None
    transaction_item_id: int | None = None
    stock_out_id: int | None = field(default=None, compare=False)


# Public sort key -> (StockOut lookup, TransactionItem lookup)
STOCK_OUT_SORT_FIELDS = {
    'date': ('date', 'transaction__created_at'),
    'quantity': ('quantity', 'quantity'),
    'batch_code': ('batch__batch_code', 'batch__batch_code'),
    'product_name': ('batch__product__name', 'batch__product__name'),
}

STOCK_IN_SORT_FIELDS = {
    'date': 'date',
    'quantity': 'quantity',
    'batch_code': 'batch__batch_code',
    'product_name': 'batch__product__name',
}

BATCH_SORT_FIELDS = {
    'date': 'created_at',
    'expiry_date': 'expiry_date',
    'remaining_quantity': 'remaining_quantity',
    'batch_code': 'batch_code',
    'product_name': 'product__name',
}


def _ordering(lookup: str, descending: bool) -> list[str]:
    prefix = '-' if descending else ''
    return [f"{prefix}{lookup}", f"{prefix}pk"]


def _sort_lookup(whitelist: dict, params: SearchParams):
    try:
        return whitelist[params.sort_field]
    except KeyError:
        raise StockError(
            'INVALID_SEARCH_PARAMS', field='sort_field', value=params.sort_field,
        )


def _paginate(queryset, params: SearchParams) -> Page:
    """Single-source page; a page past the end is empty rather than an error."""
    paginator = Paginator(queryset, params.page_size)
    try:
        rows = list(paginator.page(params.page).object_list)
    except EmptyPage:
        rows = []
    return Page(rows=rows, page=params.page, page_size=params.page_size, total_count=paginator.count)


def _text_filter(search: str, product_path: str, code_path: str) -> Q:
    if not search:
        return Q()
    return Q(**{f"{product_path}__icontains": search}) | Q(**{f"{code_path}__icontains": search})


class StockListings:
    """Paginated read-only listings."""

    @classmethod
    def list_stock_outs(cls, params: SearchParams | None = None) -> StockOutPage:
        """
        Manual stock-outs and sale line items as one paginated list.

        The text filter (product name or batch code) applies to both
        sources. Counts are taken independently; rows are fetched by
        slice. A page that straddles the boundary between manual and
        transaction rows is re-sorted by the sort key.
        """
        params = params or SearchParams()
        manual_lookup, item_lookup = _sort_lookup(STOCK_OUT_SORT_FIELDS, params)

        manual_qs = StockOut.objects.filter(
            _text_filter(params.search, 'batch__product__name', 'batch__batch_code')
        ).order_by(*_ordering(manual_lookup, params.descending))
        item_qs = TransactionItem.objects.filter(
            _text_filter(params.search, 'batch__product__name', 'batch__batch_code')
        ).order_by(*_ordering(item_lookup, params.descending))

        manual_count = manual_qs.count()
        transaction_count = item_qs.count()
        skip = params.offset
        size = params.page_size

        if skip < manual_count:
            manual_rows = [
                cls._manual_row(stock_out)
                for stock_out in manual_qs.select_related('batch__product')[
                    skip:skip + min(size, manual_count - skip)
                ]
            ]
            item_rows = []
            if len(manual_rows) < size:
                item_rows = [
                    cls._transaction_row(item)
                    for item in item_qs.select_related('batch__product', 'transaction')[
                        :size - len(manual_rows)
                    ]
                ]
            rows = manual_rows + item_rows
            if manual_rows and item_rows:
                rows.sort(
                    key=lambda row: getattr(row, params.sort_field),
                    reverse=params.descending,
                )
        else:
            start = skip - manual_count
            rows = [
                cls._transaction_row(item)
                for item in item_qs.select_related('batch__product', 'transaction')[
                    start:start + size
                ]
            ]

        return StockOutPage(
            rows=rows,
            page=params.page,
            page_size=size,
            total_count=manual_count + transaction_count,
            manual_count=manual_count,
            transaction_count=transaction_count,
        )

    @classmethod
    def list_stock_ins(cls, params: SearchParams | None = None) -> Page:
        """StockIn rows filtered by product name or batch code."""
        params = params or SearchParams()
        lookup = _sort_lookup(STOCK_IN_SORT_FIELDS, params)

        qs = StockIn.objects.filter(
            _text_filter(params.search, 'batch__product__name', 'batch__batch_code')
        ).order_by(*_ordering(lookup, params.descending))

        return _paginate(qs.select_related('batch__product', 'unit', 'supplier'), params)

    @classmethod
    def list_batches(cls, params: SearchParams | None = None, variant=None, product=None,
                     expiry_from=None, expiry_to=None, min_remaining=None,
                     max_remaining=None) -> Page:
        """
        Batches filtered by owner, expiry window and remaining quantity.

        Raises:
            StockError('INVALID_SEARCH_PARAMS'): Bad sort field or bounds
        """
        params = params or SearchParams(sort_field='expiry_date', sort_direction=SortDirection.ASC)
        lookup = _sort_lookup(BATCH_SORT_FIELDS, params)

        qs = ProductBatch.objects.all()
        if params.search:
            qs = qs.search(params.search)
        if variant is not None:
            qs = qs.for_variant(variant)
        if product is not None:
            qs = qs.for_product(product)
        if expiry_from is not None:
            qs = qs.filter(expiry_date__gte=expiry_from)
        if expiry_to is not None:
            qs = qs.filter(expiry_date__lte=expiry_to)
        if min_remaining is not None:
            qs = qs.filter(remaining_quantity__gte=to_decimal(min_remaining, 'INVALID_SEARCH_PARAMS'))
        if max_remaining is not None:
            qs = qs.filter(remaining_quantity__lte=to_decimal(max_remaining, 'INVALID_SEARCH_PARAMS'))

        qs = qs.order_by(*_ordering(lookup, params.descending))
        return _paginate(qs.select_related('product', 'variant'), params)

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _manual_row(cls, stock_out: StockOut) -> StockOutRow:
        return StockOutRow(
            source=StockOutSource.MANUAL,
            id=str(stock_out.pk),
            batch_id=stock_out.batch_id,
            batch_code=stock_out.batch.batch_code,
            product_name=stock_out.batch.product.name,
            quantity=stock_out.quantity,
            unit_id=stock_out.unit_id,
            date=stock_out.date,
            reason=stock_out.reason,
            stock_out_id=stock_out.pk,
        )

    @classmethod
    def _transaction_row(cls, item: TransactionItem) -> StockOutRow:
        return StockOutRow(
            source=StockOutSource.TRANSACTION,
            id=f"{stockledger_settings.TRANSACTION_ROW_PREFIX}{item.pk}",
            batch_id=item.batch_id,
            batch_code=item.batch.batch_code,
            product_name=item.batch.product.name,
            quantity=item.quantity,
            unit_id=item.unit_id,
            date=item.transaction.created_at,
            reason=stockledger_settings.TRANSACTION_REASON,
            transaction_id=item.transaction_id,
            transaction_item_id=item.pk,
        )
