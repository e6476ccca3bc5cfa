"""
Ledgerman Models.

Core models for the batch stock ledger:
- Branch, Warehouse: Where stock exists
- Item: What is stocked
- StockBatch: Cost layer of on-hand quantity
- StockMovement: Immutable ledger of batch changes

Documents that drive the ledger:
- PurchaseOrder, GoodsReceipt, PurchaseInvoice (+ payments)
- SalesOrder, Waybill, SalesInvoice (+ payments)
- StockAdjustment, StockTransfer, StockAudit
"""

from ledgerman.models.batch import StockBatch
from ledgerman.models.enums import (
    DocumentKind,
    HolderKind,
    InvoicingStatus,
    MovementKind,
    PaymentStatus,
    PurchaseOrderStatus,
    ReferenceKind,
    SalesOrderStatus,
)
from ledgerman.models.holder import Branch, Warehouse
from ledgerman.models.item import Item
from ledgerman.models.movement import StockMovement
from ledgerman.models.procurement import (
    GoodsReceipt,
    GoodsReceiptLine,
    PurchaseInvoice,
    PurchaseInvoicePayment,
    PurchaseOrder,
    PurchaseOrderLine,
)
from ledgerman.models.sales import (
    SalesInvoice,
    SalesInvoicePayment,
    SalesOrder,
    SalesOrderLine,
    Waybill,
    WaybillLine,
)
from ledgerman.models.stock import (
    StockAdjustment,
    StockAdjustmentLine,
    StockAudit,
    StockAuditLine,
    StockTransfer,
    StockTransferLine,
)

__all__ = [
    'HolderKind',
    'MovementKind',
    'ReferenceKind',
    'PurchaseOrderStatus',
    'SalesOrderStatus',
    'InvoicingStatus',
    'PaymentStatus',
    'DocumentKind',
    'Branch',
    'Warehouse',
    'Item',
    'StockBatch',
    'StockMovement',
    'PurchaseOrder',
    'PurchaseOrderLine',
    'GoodsReceipt',
    'GoodsReceiptLine',
    'PurchaseInvoice',
    'PurchaseInvoicePayment',
    'SalesOrder',
    'SalesOrderLine',
    'Waybill',
    'WaybillLine',
    'SalesInvoice',
    'SalesInvoicePayment',
    'StockAdjustment',
    'StockAdjustmentLine',
    'StockTransfer',
    'StockTransferLine',
    'StockAudit',
    'StockAuditLine',
]
