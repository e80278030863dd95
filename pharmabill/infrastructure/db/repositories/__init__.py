from .counterparty_repository import CounterpartyRepository
from .document_repository import DocumentRepository
from .product_repository import ProductRepository
from .stock_repository import StockRepository

__all__ = [
    "CounterpartyRepository",
    "DocumentRepository",
    "ProductRepository",
    "StockRepository",
]
