"""Transaction data model"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Iterable
import pandas as pd

from card_insights.constants import TRANSACTION_COLUMNS, TRANSACTION_DATE


class Transaction(BaseModel):
    """Credit card transaction record"""

    transaction_id: int = Field(..., description="Unique transaction ID")
    city: str = Field(..., description="City where the card was used")
    transaction_date: date = Field(..., description="Transaction date")
    card_type: str = Field(..., description="Card tier (Gold, Silver, Platinum, Signature)")
    exp_type: str = Field(..., description="Expense category")
    gender: str = Field(..., description="Cardholder gender marker (F/M)")
    amount: float = Field(..., ge=0, description="Transaction amount")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "transaction_id": 0,
                "city": "Delhi, India",
                "transaction_date": "2014-10-29",
                "card_type": "Gold",
                "exp_type": "Bills",
                "gender": "F",
                "amount": 82475.0
            }
        }


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Build a transactions DataFrame from validated records

    Args:
        transactions: Transaction models

    Returns:
        DataFrame with the canonical column order and a datetime date column
    """
    records = [t.model_dump() for t in transactions]
    df = pd.DataFrame(records, columns=TRANSACTION_COLUMNS)
    df[TRANSACTION_DATE] = pd.to_datetime(df[TRANSACTION_DATE])
    return df
