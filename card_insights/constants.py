"""Constants and enums for card spend analysis"""

from enum import Enum


class Gender(str, Enum):
    """Cardholder gender markers as they appear in the dataset"""
    FEMALE = "F"
    MALE = "M"


class CardType(str, Enum):
    """Card tiers present in the public dataset"""
    GOLD = "Gold"
    SILVER = "Silver"
    PLATINUM = "Platinum"
    SIGNATURE = "Signature"


class ExpenseType(str, Enum):
    """Expense categories present in the public dataset"""
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    FOOD = "Food"
    FUEL = "Fuel"
    GROCERY = "Grocery"
    TRAVEL = "Travel"


class Extreme(str, Enum):
    """Direction for extremum queries"""
    MIN = "min"
    MAX = "max"


# Canonical column names of the transactions table
TRANSACTION_ID = "transaction_id"
TRANSACTION_DATE = "transaction_date"
AMOUNT = "amount"
CITY = "city"
EXP_TYPE = "exp_type"
GENDER = "gender"
CARD_TYPE = "card_type"

TRANSACTION_COLUMNS = [TRANSACTION_ID, CITY, TRANSACTION_DATE, CARD_TYPE, EXP_TYPE, GENDER, AMOUNT]
CATEGORICAL_COLUMNS = [CITY, CARD_TYPE, EXP_TYPE, GENDER]

# Raw header (after lower-casing, spaces -> underscores) -> canonical name
DEFAULT_COLUMN_ALIASES = {
    "index": TRANSACTION_ID,
    "date": TRANSACTION_DATE,
}

# Derived columns
TRANSACTION_YEAR = "transaction_year"
TRANSACTION_MONTH = "transaction_month"
TOTAL_SPEND = "total_spend"
CUMULATIVE_SPEND = "cumulative_spend"
PERCENTAGE_CONTRIBUTION = "percentage_contribution"

# Default problem parameters
DEFAULT_DATE_FORMAT = "%d-%b-%y"  # 29-Oct-14
DEFAULT_TOP_N = 5
DEFAULT_CUMULATIVE_THRESHOLD = 1_000_000
DEFAULT_NTH_TRANSACTION = 500
DEFAULT_GROWTH_YEAR = 2014
DEFAULT_GROWTH_MONTH = 1
WEEKEND_DAYS = [5, 6]  # Saturday, Sunday (Monday=0)

PERCENT_DECIMALS = 2
