"""Tests for the trade status machine."""

import pytest

from src.wheel.exceptions import InvalidTransitionError
from src.wheel.state import (
    VALID_TRANSITIONS,
    AssignmentEffect,
    TradeStatus,
    TradeType,
    assignment_effect,
    can_transition,
    get_next_status,
    get_valid_transitions,
    is_realized,
    is_resolved,
)


class TestTradeStatus:
    """Tests for TradeStatus enum."""

    def test_statuses_exist(self) -> None:
        assert [s.value for s in TradeStatus] == [
            "Open",
            "Expired",
            "Assigned",
            "Closed",
            "Rolled",
        ]

    def test_trade_types_exist(self) -> None:
        assert TradeType.CSP.value == "CSP"
        assert TradeType.CC.value == "CC"


class TestStatusTransitions:
    """Tests for status transition logic."""

    def test_open_reaches_every_outcome(self) -> None:
        assert get_valid_transitions(TradeStatus.OPEN) == [
            TradeStatus.EXPIRED,
            TradeStatus.ASSIGNED,
            TradeStatus.CLOSED,
            TradeStatus.ROLLED,
        ]

    @pytest.mark.parametrize(
        "status",
        [TradeStatus.EXPIRED, TradeStatus.ASSIGNED, TradeStatus.CLOSED, TradeStatus.ROLLED],
    )
    def test_outcomes_are_terminal(self, status: TradeStatus) -> None:
        assert VALID_TRANSITIONS[status] == frozenset()
        assert not can_transition(status, TradeStatus.OPEN)

    def test_get_next_status(self) -> None:
        assert get_next_status(TradeStatus.OPEN, TradeStatus.ROLLED) is TradeStatus.ROLLED

    def test_invalid_transition_raises(self) -> None:
        with pytest.raises(InvalidTransitionError, match="Invalid transition 'Expired' -> 'Rolled'"):
            get_next_status(TradeStatus.EXPIRED, TradeStatus.ROLLED)


class TestClassification:
    """Tests for resolved/realized helpers and assignment effects."""

    def test_open_and_rolled_are_unresolved(self) -> None:
        assert not is_resolved(TradeStatus.OPEN)
        assert not is_resolved(TradeStatus.ROLLED)
        assert is_resolved(TradeStatus.EXPIRED)
        assert is_resolved("Assigned")

    def test_only_open_is_unrealized(self) -> None:
        assert not is_realized(TradeStatus.OPEN)
        assert is_realized(TradeStatus.ROLLED)
        assert is_realized(TradeStatus.CLOSED)

    def test_assignment_effects(self) -> None:
        assert assignment_effect(TradeType.CSP) is AssignmentEffect.OPEN_POSITION
        assert assignment_effect("CC") is AssignmentEffect.CLOSE_POSITION
