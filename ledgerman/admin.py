"""
Ledgerman Admin.

- Branch, Warehouse, Item: list + edit
- StockBatch: read-only (location, quantity, unit cost, value)
- StockMovement: read-only audit trail
- Documents: read-only lists with their lines inline

Stock and documents only change through ledgerman.service and
ledgerman.documents, never through the admin.
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from ledgerman.models import (
    Branch,
    GoodsReceipt,
    GoodsReceiptLine,
    Item,
    PurchaseInvoice,
    PurchaseInvoicePayment,
    PurchaseOrder,
    PurchaseOrderLine,
    SalesInvoice,
    SalesInvoicePayment,
    SalesOrder,
    SalesOrderLine,
    StockAdjustment,
    StockAdjustmentLine,
    StockAudit,
    StockAuditLine,
    StockBatch,
    StockMovement,
    StockTransfer,
    StockTransferLine,
    Warehouse,
    Waybill,
    WaybillLine,
)


class ReadOnlyAdminMixin:
    """No add, change or delete from the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ReadOnlyInline(ReadOnlyAdminMixin, admin.TabularInline):
    extra = 0
    can_delete = False


# =========================================================================
# MASTER DATA (editable)
# =========================================================================


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'initial']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'initial']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'category', 'unit', 'wholesale_unit', 'wholesale_factor']
    list_filter = ['category']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# LEDGER (read-only)
# =========================================================================


@admin.register(StockBatch)
class StockBatchAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockBatch admin — read-only. Batches only change via the ledger service."""

    list_display = ['sku', 'item', 'location_display', 'quantity', 'unit_cost', 'value_display', 'created_at']
    list_filter = ['holder_type', 'created_at']
    search_fields = ['sku', 'item__code', 'item__name']
    list_select_related = ['item']
    date_hierarchy = 'created_at'
    ordering = ['item', 'created_at', 'id']

    @admin.display(description=_('Local'))
    def location_display(self, obj):
        return str(obj.location)

    @admin.display(description=_('Valor'))
    def value_display(self, obj):
        return obj.value


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockMovement admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'batch', 'kind', 'previous_quantity', 'movement_quantity',
                    'after_quantity', 'reference_display']
    list_filter = ['kind', 'holder_type', 'reference_type']
    search_fields = ['batch__sku', 'batch__item__code']
    list_select_related = ['batch']
    date_hierarchy = 'created_at'

    @admin.display(description=_('Origem'))
    def reference_display(self, obj):
        return str(obj.reference)


# =========================================================================
# DOCUMENTS (read-only)
# =========================================================================


class PurchaseOrderLineInline(ReadOnlyInline):
    model = PurchaseOrderLine


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'branch', 'supplier', 'grand_total', 'status']
    list_filter = ['status', 'branch']
    search_fields = ['code', 'supplier']
    inlines = [PurchaseOrderLineInline]


class GoodsReceiptLineInline(ReadOnlyInline):
    model = GoodsReceiptLine


@admin.register(GoodsReceipt)
class GoodsReceiptAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'supplier', 'status']
    list_filter = ['status', 'holder_type']
    search_fields = ['code', 'supplier']
    inlines = [GoodsReceiptLineInline]


class PurchaseInvoicePaymentInline(ReadOnlyInline):
    model = PurchaseInvoicePayment
    fields = ['code', 'date', 'amount', 'method']


@admin.register(PurchaseInvoice)
class PurchaseInvoiceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'supplier', 'grand_total', 'remaining_amount', 'status']
    list_filter = ['status']
    search_fields = ['code', 'supplier']
    inlines = [PurchaseInvoicePaymentInline]


class SalesOrderLineInline(ReadOnlyInline):
    model = SalesOrderLine


@admin.register(SalesOrder)
class SalesOrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'branch', 'customer_name', 'grand_total', 'status']
    list_filter = ['status', 'branch']
    search_fields = ['code', 'customer_name']
    inlines = [SalesOrderLineInline]


class WaybillLineInline(ReadOnlyInline):
    model = WaybillLine


@admin.register(Waybill)
class WaybillAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'sales_order', 'status']
    list_filter = ['status', 'holder_type']
    search_fields = ['code', 'sales_order__code']
    inlines = [WaybillLineInline]


class SalesInvoicePaymentInline(ReadOnlyInline):
    model = SalesInvoicePayment
    fields = ['code', 'date', 'amount', 'method', 'note']


@admin.register(SalesInvoice)
class SalesInvoiceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'customer_name', 'grand_total', 'paid_amount',
                    'remaining_amount', 'paid_status']
    list_filter = ['paid_status', 'branch']
    search_fields = ['code', 'customer_name']
    inlines = [SalesInvoicePaymentInline]


class StockAdjustmentLineInline(ReadOnlyInline):
    model = StockAdjustmentLine


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'holder_type', 'holder_id', 'user']
    list_filter = ['holder_type']
    search_fields = ['code']
    inlines = [StockAdjustmentLineInline]


class StockTransferLineInline(ReadOnlyInline):
    model = StockTransferLine


@admin.register(StockTransfer)
class StockTransferAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'source_display', 'destination_display', 'user']
    search_fields = ['code']
    inlines = [StockTransferLineInline]

    @admin.display(description=_('Origem'))
    def source_display(self, obj):
        return str(obj.source)

    @admin.display(description=_('Destino'))
    def destination_display(self, obj):
        return str(obj.destination)


class StockAuditLineInline(ReadOnlyInline):
    model = StockAuditLine


@admin.register(StockAudit)
class StockAuditAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['code', 'date', 'holder_type', 'holder_id', 'is_locked', 'locked_at']
    list_filter = ['is_locked', 'holder_type']
    search_fields = ['code']
    inlines = [StockAuditLineInline]
