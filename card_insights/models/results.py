"""Result models for exploration and problem statement runs"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Optional, List


class DatasetProfile(BaseModel):
    """Summary of the loaded transactions table"""

    row_count: int = Field(..., ge=0, description="Number of transactions")
    first_transaction_date: Optional[date] = Field(None, description="Earliest transaction date")
    last_transaction_date: Optional[date] = Field(None, description="Latest transaction date")
    total_spend: float = Field(0.0, description="Sum of all amounts")
    city_count: int = Field(0, ge=0, description="Distinct cities")
    card_types: List[str] = Field(default_factory=list, description="Distinct card types")
    exp_types: List[str] = Field(default_factory=list, description="Distinct expense types")
    genders: List[str] = Field(default_factory=list, description="Distinct gender markers")


class ProblemResult(BaseModel):
    """Outcome of one problem statement execution"""

    problem_id: str = Field(..., description="Problem statement id")
    title: str = Field(..., description="Question answered by the query")
    row_count: int = Field(..., ge=0, description="Rows in the result set")
    duration_seconds: float = Field(..., ge=0, description="Execution time")
    columns: List[str] = Field(default_factory=list, description="Result columns")

    class Config:
        json_schema_extra = {
            "example": {
                "problem_id": "q1_top_cities",
                "title": "Top 5 cities by spend and their percentage contribution",
                "row_count": 5,
                "duration_seconds": 0.012,
                "columns": ["city", "total_spend", "percentage_contribution"]
            }
        }
