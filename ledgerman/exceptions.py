"""
Exceptions for Ledgerman.

All errors are LedgerError with a structured code for programmatic handling.
The subclasses pin the code, so callers may catch either the family or a
specific failure.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.issue(Decimal('10'), item, loja, reference)
        except LedgerError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Só tem {e.available} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    default_code = 'LEDGER_ERROR'

    _default_messages = {
        'LEDGER_ERROR': 'Erro no livro de estoque',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'INSUFFICIENT_STOCK': 'Quantidade insuficiente no estoque',
        'NOT_FOUND': 'Registro não encontrado',
        'CONSISTENCY_VIOLATION': 'Inconsistência detectada no livro de estoque',
        'INVALID_STATUS': 'Status inválido para esta operação',
        'INVALID_DOCUMENT': 'Documento inválido',
        'SAME_LOCATION': 'Origem e destino devem ser diferentes',
        'IMPROPERLY_CONFIGURED': 'Configuração inválida',
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.data:
            return f"[{self.code}] {self.message}"
        details = ', '.join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.code}] {self.message} ({details})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class InvalidQuantity(LedgerError):
    """Quantity, cost or amount outside its valid range."""

    default_code = 'INVALID_QUANTITY'


class InsufficientStock(LedgerError):
    """Requested reduction exceeds the stock of (item, location)."""

    default_code = 'INSUFFICIENT_STOCK'

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))


class NotFound(LedgerError):
    """Unknown item, location or document."""

    default_code = 'NOT_FOUND'


class ConsistencyViolation(LedgerError):
    """
    An internal ledger invariant does not hold.

    Fatal: the enclosing transaction must abort. Never auto-corrected.
    """

    default_code = 'CONSISTENCY_VIOLATION'


class InvalidStatus(LedgerError):
    """Document is in a status that forbids the operation."""

    default_code = 'INVALID_STATUS'


class DocumentError(LedgerError):
    """Document input is inconsistent with the documents it references."""

    default_code = 'INVALID_DOCUMENT'
