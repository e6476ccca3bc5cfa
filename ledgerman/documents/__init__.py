"""
Ledgerman document services.

Each operation is one transaction: the document rows, every ledger write
its lines cause, and the status of the documents it touches commit or
roll back together.

Usage:
    from ledgerman.documents import GoodsReceipts, ReceiptOrderInput, ReceiptLineInput

    GoodsReceipts.create(
        ActingContext(user=request.user),
        "REC-0001", date.today(), Location.of(warehouse), "Fornecedor",
        [ReceiptOrderInput(order, [ReceiptLineInput(order_line, Decimal('5'))])],
    )
"""

from ledgerman.documents.procurement import (
    GoodsReceipts,
    OrderLineInput,
    PurchaseInvoicePayments,
    PurchaseInvoices,
    PurchaseOrders,
    ReceiptLineInput,
    ReceiptOrderInput,
)
from ledgerman.documents.sales import (
    SalesInvoicePayments,
    SalesInvoices,
    SalesOrders,
    WaybillLineInput,
    Waybills,
)
from ledgerman.documents.stock import (
    AdjustmentLineInput,
    AuditLineInput,
    StockAdjustments,
    StockAudits,
    StockTransfers,
    TransferLineInput,
)

__all__ = [
    "OrderLineInput",
    "ReceiptLineInput",
    "ReceiptOrderInput",
    "WaybillLineInput",
    "AdjustmentLineInput",
    "TransferLineInput",
    "AuditLineInput",
    "PurchaseOrders",
    "GoodsReceipts",
    "PurchaseInvoices",
    "PurchaseInvoicePayments",
    "SalesOrders",
    "Waybills",
    "SalesInvoices",
    "SalesInvoicePayments",
    "StockAdjustments",
    "StockTransfers",
    "StockAudits",
]
