from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationError
from app.services.approval.rank_order import (
    APPROVAL_REQUIRED, RANK_NOT_UNIQUE, RANK_ORDER_INVALID,
    ensure_rank_order, is_rank_order_valid, normalize_rank,
)


def ranks(*values):
    return [{"rank": v} for v in values]


def test_contiguous_ranks_are_valid():
    assert is_rank_order_valid(ranks(1, 2, 3)) is True


def test_gap_is_invalid():
    assert is_rank_order_valid(ranks(1, 3)) is False


def test_input_order_is_irrelevant():
    assert is_rank_order_valid(ranks(2, 1)) is True
    assert is_rank_order_valid(ranks(3, 1, 2)) is True


def test_duplicates_are_invalid():
    assert is_rank_order_valid(ranks(1, 1, 2)) is False


def test_must_start_at_one():
    assert is_rank_order_valid(ranks(2, 3)) is False


def test_empty_is_invalid():
    assert is_rank_order_valid([]) is False


def test_numeric_strings_sort_numerically():
    # "10" sorts before "2" as text
    values = [str(n) for n in range(1, 11)]
    assert is_rank_order_valid(ranks(*reversed(values))) is True


def test_mixed_int_and_string_ranks():
    assert is_rank_order_valid(ranks("1", 2, " 3 ")) is True
    assert is_rank_order_valid(ranks("1", 1)) is False


def test_non_numeric_rank_is_invalid():
    assert is_rank_order_valid(ranks(1, "two")) is False
    assert is_rank_order_valid(ranks(1, None)) is False


def test_objects_with_rank_attribute():
    approvals = [SimpleNamespace(rank=2), SimpleNamespace(rank=1)]
    assert is_rank_order_valid(approvals) is True


def test_normalize_rank():
    assert normalize_rank(" 2 ") == Decimal(2)
    assert normalize_rank("1.0") == 1
    assert normalize_rank(True) is None
    assert normalize_rank("NaN") is None
    assert normalize_rank("") is None


@pytest.mark.parametrize(
    "approvals, message",
    [
        ([], APPROVAL_REQUIRED),
        (ranks(1, 1), RANK_NOT_UNIQUE),
        (ranks(1, 2, 2, 3), RANK_NOT_UNIQUE),
        (ranks(1, 3), RANK_ORDER_INVALID),
        (ranks(2), RANK_ORDER_INVALID),
    ],
)
def test_ensure_rank_order_rejects(approvals, message):
    with pytest.raises(ValidationError) as exc_info:
        ensure_rank_order(approvals)
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == message


def test_ensure_rank_order_accepts_valid_chain():
    ensure_rank_order(ranks(3, 1, 2))
