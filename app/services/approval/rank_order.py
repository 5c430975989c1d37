from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from app.core.exceptions import ValidationError

APPROVAL_REQUIRED = "At least one approval level is required"
RANK_NOT_UNIQUE = "Approval level ranks must be unique"
RANK_ORDER_INVALID = "Approval level ranks must be in order starting from 1"


def _rank_of(approval: Any) -> Any:
    if isinstance(approval, Mapping):
        return approval.get("rank")
    return getattr(approval, "rank", None)


def normalize_rank(value: Any) -> Optional[Decimal]:
    """Numeric value of a rank given as int or string, ``None`` when not numeric"""
    if value is None or isinstance(value, bool):
        return None
    try:
        rank = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return rank if rank.is_finite() else None


def has_duplicate_ranks(approvals: Iterable[Any]) -> bool:
    ranks = [normalize_rank(_rank_of(a)) for a in approvals]
    numeric = [r for r in ranks if r is not None]
    return len(set(numeric)) != len(numeric)


def is_rank_order_valid(approvals: Iterable[Any]) -> bool:
    """True only when the ranks are exactly 1..N, in any input order"""
    ranks = [normalize_rank(_rank_of(a)) for a in approvals]
    if not ranks or any(r is None for r in ranks):
        return False

    distinct = sorted(set(ranks))
    if len(distinct) != len(ranks):
        return False

    return all(rank == expected for expected, rank in enumerate(distinct, start=1))


def ensure_rank_order(approvals: Iterable[Any]) -> None:
    approvals = list(approvals)
    if not approvals:
        raise ValidationError(APPROVAL_REQUIRED)
    if has_duplicate_ranks(approvals):
        raise ValidationError(RANK_NOT_UNIQUE)
    if not is_rank_order_valid(approvals):
        raise ValidationError(RANK_ORDER_INVALID)
