"""Dataset access for the analysis run - one cached load per dataset path."""

from functools import lru_cache
from typing import Optional, Dict, Any
import pandas as pd
from card_insights.loaders.csv_data_loader import TransactionDataLoader
from card_insights.constants import DEFAULT_DATE_FORMAT
from card_insights.utils.config_loader import get_dataset_config
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def _load_cached(data_path: Optional[str], date_format: Optional[str], aliases: tuple) -> pd.DataFrame:
    loader = TransactionDataLoader(data_path, date_format, dict(aliases))
    return loader.transactions


def get_dataset(config: Optional[Dict[str, Any]] = None, data_path: Optional[str] = None) -> pd.DataFrame:
    """
    Return the prepared transactions table.

    The table is read-only for the lifetime of the analysis; a copy is
    returned so callers can never alter the cached frame.

    Args:
        config: Full configuration (uses its dataset section)
        data_path: Explicit CSV path, overrides the configured one

    Returns:
        Prepared transactions DataFrame

    Raises:
        DatasetLoadError: If the file cannot be read
        DatasetValidationError: If the file does not match the schema
    """
    dataset_config = get_dataset_config(config or {})
    path = data_path or dataset_config.get('path')
    date_format = dataset_config.get('date_format', DEFAULT_DATE_FORMAT)
    aliases = tuple(sorted((dataset_config.get('column_aliases') or {}).items()))

    df = _load_cached(path, date_format, aliases)
    logger.debug(f"Serving dataset with {len(df)} transactions", path=path)
    return df.copy()


def clear_dataset_cache() -> None:
    """Drop cached datasets (for testing)"""
    _load_cached.cache_clear()
