"""Data models for card spend analysis"""

from .transaction import Transaction, transactions_to_frame
from .results import DatasetProfile, ProblemResult

__all__ = ["Transaction", "transactions_to_frame", "DatasetProfile", "ProblemResult"]
