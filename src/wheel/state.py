"""State machine enums for option trades in the wheel."""

from enum import Enum

from .exceptions import InvalidTransitionError


class TradeType(str, Enum):
    """Kind of option sold."""

    CSP = "CSP"  # Cash-secured put: may buy 100 shares per contract
    CC = "CC"  # Covered call: may sell 100 shares per contract


class TradeStatus(str, Enum):
    """
    Lifecycle status of a single option trade.

    Every trade starts Open. The other statuses are terminal for the trade
    itself; Rolled always comes with a child trade that continues the chain.
    """

    OPEN = "Open"
    EXPIRED = "Expired"  # Expired worthless - KEEP PREMIUM
    ASSIGNED = "Assigned"  # Exercised against us - shares delivered or sold
    CLOSED = "Closed"  # Bought back before expiration
    ROLLED = "Rolled"  # Bought back and replaced by a child trade


class FundTransactionType(str, Enum):
    """Cash-flow journal entry types. Amounts are stored as magnitudes."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DIVIDEND = "dividend"
    INTEREST = "interest"
    FEE = "fee"


class AssignmentEffect(Enum):
    """Position side effect triggered when a trade becomes Assigned."""

    OPEN_POSITION = "open_position"  # CSP: shares delivered
    CLOSE_POSITION = "close_position"  # CC: shares called away


# Valid status transitions for a trade
VALID_TRANSITIONS: dict[TradeStatus, frozenset[TradeStatus]] = {
    TradeStatus.OPEN: frozenset(
        {
            TradeStatus.EXPIRED,
            TradeStatus.ASSIGNED,
            TradeStatus.CLOSED,
            TradeStatus.ROLLED,
        }
    ),
    TradeStatus.EXPIRED: frozenset(),
    TradeStatus.ASSIGNED: frozenset(),
    TradeStatus.CLOSED: frozenset(),
    TradeStatus.ROLLED: frozenset(),
}

# A chain ending in one of these has not reached a real outcome yet
UNRESOLVED_STATUSES = frozenset({TradeStatus.OPEN, TradeStatus.ROLLED})


def get_valid_transitions(status: TradeStatus) -> list[TradeStatus]:
    """Get the statuses reachable from a given status, in declaration order."""
    reachable = VALID_TRANSITIONS[status]
    return [s for s in TradeStatus if s in reachable]


def can_transition(from_status: TradeStatus, to_status: TradeStatus) -> bool:
    """Check if a forward transition is valid from the current status."""
    return to_status in VALID_TRANSITIONS[from_status]


def get_next_status(from_status: TradeStatus, to_status: TradeStatus) -> TradeStatus:
    """
    Validate a transition and return the new status.

    Raises:
        InvalidTransitionError: If the transition is not valid.
    """
    if not can_transition(from_status, to_status):
        valid = [s.value for s in get_valid_transitions(from_status)]
        raise InvalidTransitionError(
            f"Invalid transition '{from_status.value}' -> '{to_status.value}'. "
            f"Valid: {valid}"
        )
    return to_status


def is_resolved(status: TradeStatus) -> bool:
    """True once a chain ending in this status has a real outcome."""
    return TradeStatus(status) not in UNRESOLVED_STATUSES


def is_realized(status: TradeStatus) -> bool:
    """True when a trade's P/L counts as realized (anything but Open)."""
    return TradeStatus(status) is not TradeStatus.OPEN


def assignment_effect(trade_type: TradeType) -> AssignmentEffect:
    """
    Map a trade type to the position side effect of its assignment.

    Raises:
        ValueError: If the trade type has no assignment rule.
    """
    trade_type = TradeType(trade_type)
    if trade_type is TradeType.CSP:
        return AssignmentEffect.OPEN_POSITION
    if trade_type is TradeType.CC:
        return AssignmentEffect.CLOSE_POSITION
    raise ValueError(f"No assignment rule for trade type {trade_type!r}")
