"""Enumeration types for the partner ledger."""

from enum import Enum


class ClientAppStatus(str, Enum):
    """Lifecycle of a client's engagement with one promotional app."""

    REQUESTED = "requested"
    REGISTERED = "registered"
    DEPOSITED = "deposited"
    COMPLETED = "completed"
    PAID = "paid"
    CANCELLED = "cancelled"


class SplitSource(str, Enum):
    """Where an effective split came from."""

    DEFAULT = "default"
    OVERRIDE = "override"
    APP = "app"


class BalanceStatus(str, Enum):
    """Sign of a partner balance as shown to operators."""

    DUE = "due"
    SETTLED = "settled"
    ADVANCE = "advance"


class StatusFilter(str, Enum):
    """Partner list filter on balance sign."""

    ALL = "all"
    DUE = "due"
    SETTLED = "settled"
    NEGATIVE = "negative"
    ADVANCE = "advance"  # alias of NEGATIVE


class SortColumn(str, Enum):
    """Sortable columns of the partner ledger view."""

    NAME = "name"
    CLIENTS_COUNT = "clients_count"
    TOTAL_PROFIT = "total_profit"
    PARTNER_SHARE = "partner_share"
    TOTAL_PAID = "total_paid"
    BALANCE = "balance"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
