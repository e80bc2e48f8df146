"""Data models for the net worth tracker."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    """Currency role. The ISO codes behind each role come from AppConfig."""
    HOME = "home"
    PRIMARY = "primary"
    SECONDARY = "secondary"


class QuoteCurrency(str, Enum):
    """Currency a holding's market price is literally expressed in."""
    PRIMARY_QUOTED = "primary"
    SECONDARY_QUOTED = "secondary"

    @classmethod
    def for_declared(cls, currency: Currency) -> "QuoteCurrency":
        # Secondary-listed tickers quote natively; everything else arrives in primary
        if currency == Currency.SECONDARY:
            return cls.SECONDARY_QUOTED
        return cls.PRIMARY_QUOTED


class InstrumentKind(str, Enum):
    EQUITY = "Stock"
    FUND = "ETF"
    CASH_SLEEVE = "Cash"
    CRYPTO = "Crypto"


class AssetClass(str, Enum):
    CURRENT = "current"
    FIXED = "fixed"


class IncomeFrequency(str, Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONE_TIME = "one-time"


DEFAULT_ASSET_CATEGORIES = [
    "Cash", "Savings Account", "Checking Account", "Investment",
    "Retirement Account", "Real Estate", "Vehicle", "Other",
]
DEFAULT_LIABILITY_CATEGORIES = [
    "Credit Card", "Personal Loan", "Mortgage", "Auto Loan",
    "Student Loan", "Medical Debt", "Other",
]
DEFAULT_EXPENSE_CATEGORIES = [
    "Housing", "Food", "Transportation", "Utilities", "Healthcare",
    "Entertainment", "Shopping", "Education", "Insurance", "Other",
]


def new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class RateSet:
    """Live exchange rates. All three are quoted as 1 unit of the left side."""
    primary_to_home: Decimal
    secondary_to_home: Decimal
    primary_to_secondary: Decimal
    fetched_at: Optional[datetime] = None

    def to_home(self, currency: Currency) -> Decimal:
        if currency == Currency.PRIMARY:
            return self.primary_to_home
        if currency == Currency.SECONDARY:
            return self.secondary_to_home
        return Decimal("1")


# Last-resort rates (MYR per USD, MYR per HKD, HKD per USD)
FALLBACK_RATES = RateSet(
    primary_to_home=Decimal("4.7"),
    secondary_to_home=Decimal("0.6"),
    primary_to_secondary=Decimal("7.8"),
)


@dataclass(frozen=True)
class MonetaryEntry:
    """Base record for assets, liabilities, income and expenses.

    rate_at_entry is the FOREIGN -> HOME rate captured when the entry was
    created. It is only set for non-home currencies.
    """
    id: str
    amount: Decimal
    date: date
    currency: Currency = Currency.HOME
    rate_at_entry: Optional[Decimal] = None


@dataclass(frozen=True)
class Asset(MonetaryEntry):
    name: str = ""
    category: str = "Other"
    asset_class: AssetClass = AssetClass.CURRENT


@dataclass(frozen=True)
class Liability(MonetaryEntry):
    name: str = ""
    category: str = "Other"
    interest_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class Income(MonetaryEntry):
    source: str = ""
    frequency: IncomeFrequency = IncomeFrequency.MONTHLY


@dataclass(frozen=True)
class Expense(MonetaryEntry):
    category: str = "Other"
    description: str = ""


@dataclass(frozen=True)
class Holding:
    """A position in one account.

    avg_cost is denominated in declared_currency. market_price is
    denominated per quote_currency, except for cash sleeves whose price is
    the declared-currency balance itself. rate_at_entry is the
    primary -> home rate when the holding was recorded.
    """
    id: str
    instrument_code: str
    quantity: Decimal
    avg_cost: Decimal
    account: str = ""
    declared_currency: Currency = Currency.PRIMARY
    quote_currency: QuoteCurrency = QuoteCurrency.PRIMARY_QUOTED
    kind: InstrumentKind = InstrumentKind.EQUITY
    market_price: Optional[Decimal] = None
    rate_at_entry: Optional[Decimal] = None
    name: str = ""
    last_updated: Optional[datetime] = None

    @property
    def is_priced(self) -> bool:
        return self.market_price is not None

    @property
    def cost_basis(self) -> Decimal:
        """Quantity x average cost, in declared_currency."""
        return self.quantity * self.avg_cost

    @classmethod
    def cash_sleeve(
        cls,
        id: str,
        amount: Decimal,
        account: str,
        currency: Currency = Currency.HOME,
        rate_at_entry: Optional[Decimal] = None,
    ) -> "Holding":
        return cls(
            id=id,
            instrument_code="CASH",
            quantity=Decimal("1"),
            avg_cost=amount,
            market_price=amount,
            account=account,
            declared_currency=currency,
            quote_currency=QuoteCurrency.for_declared(currency),
            kind=InstrumentKind.CASH_SLEEVE,
            rate_at_entry=rate_at_entry,
            name="Cash",
        )


@dataclass(frozen=True)
class Account:
    """Brokerage account or crypto wallet."""
    id: str
    name: str
    initial_value_home: Decimal = Decimal("0")
    initial_value_foreign: Decimal = Decimal("0")


@dataclass(frozen=True)
class Deposit:
    """Cash moved into an account. amount is in home currency."""
    id: str
    account: str
    date: date
    amount: Decimal
    foreign_amounts: dict[str, Decimal] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Derived values (never persisted)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HoldingValue:
    primary: Decimal = Decimal("0")
    home: Decimal = Decimal("0")

    def __add__(self, other: "HoldingValue") -> "HoldingValue":
        return HoldingValue(self.primary + other.primary, self.home + other.home)


@dataclass(frozen=True)
class HoldingPnL:
    primary: Decimal = Decimal("0")
    home: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class AccountView:
    account: Account
    current_value_home: Decimal
    current_value_primary: Decimal
    pnl_home: Decimal
    pnl_percentage: Decimal

    @property
    def name(self) -> str:
        return self.account.name


@dataclass(frozen=True)
class AllocationSlice:
    name: str
    value: Decimal
    percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class GroupedPosition:
    """All holdings sharing one instrument code, viewed as one position."""
    code: str
    name: str
    kind: InstrumentKind
    currency: Currency  # first member's declared currency
    holdings: tuple[Holding, ...]
    total_quantity: Decimal
    total_market_value: HoldingValue
    total_pnl: HoldingPnL
    portion: Decimal
    accounts: tuple[str, ...]
    weighted_avg_market_price: Optional[Decimal] = None  # primary currency
    weighted_avg_cost: Optional[Decimal] = None  # declared currency


@dataclass(frozen=True)
class NetWorthPoint:
    date: date
    net_worth: Decimal


@dataclass(frozen=True)
class CashFlowPoint:
    month: str  # YYYY-MM
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass
class FinancialDocument:
    """The whole persisted data blob."""
    assets: list[Asset] = field(default_factory=list)
    liabilities: list[Liability] = field(default_factory=list)
    income: list[Income] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    stock_holdings: list[Holding] = field(default_factory=list)
    crypto_holdings: list[Holding] = field(default_factory=list)
    trading_accounts: list[Account] = field(default_factory=list)
    crypto_accounts: list[Account] = field(default_factory=list)
    deposits: list[Deposit] = field(default_factory=list)
    asset_categories: list[str] = field(default_factory=lambda: list(DEFAULT_ASSET_CATEGORIES))
    liability_categories: list[str] = field(default_factory=lambda: list(DEFAULT_LIABILITY_CATEGORIES))
    expense_categories: list[str] = field(default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES))
