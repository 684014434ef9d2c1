"""Loading and preparation of the transactions dataset"""

from .csv_data_loader import (
    TransactionDataLoader,
    load_transactions,
    prepare_transactions,
    normalize_columns,
    validate_transactions,
)

__all__ = [
    'TransactionDataLoader',
    'load_transactions',
    'prepare_transactions',
    'normalize_columns',
    'validate_transactions',
]
