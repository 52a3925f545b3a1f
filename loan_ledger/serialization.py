"""JSON snapshot serialization.

Snapshots use camelCase keys, ISO-8601 dates, integers for every minor-unit
amount and strings for Decimals. Legacy field names for the outstanding
principal are normalized here and nowhere else.
"""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from loan_ledger.exceptions import SnapshotFormatError, ValidationError
from loan_ledger.models import (
    CollateralItem,
    Customer,
    Direction,
    Loan,
    LoanKind,
    LoanStatus,
    Metal,
    Payment,
    PaymentKind,
    PaymentMethod,
)

# Older endpoints reported the outstanding principal under several names.
OUTSTANDING_ALIASES = (
    "outstandingPrincipalMinorUnits",
    "outstandingPrincipal",
    "outstandingAmount",
    "currentPrincipal",
)


def camel_case(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_dict(obj: Any, camel: bool = True) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj, camel)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any, camel: bool = True) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[camel_case(key) if camel else key] = serialize_value(value, camel)
    return result


def serialize_value(value: Any, camel: bool = True) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {
            _serialize_key(k, camel): serialize_value(v, camel) for k, v in value.items()
        }
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v, camel) for v in value]
    elif isinstance(value, (set, frozenset)):
        return sorted(serialize_value(v, camel) for v in value)
    return value


def _serialize_key(key: Any, camel: bool) -> Any:
    if isinstance(key, Enum):
        return key.value
    if isinstance(key, str) and camel:
        return camel_case(key)
    return key


# --------------------------------------------------------------------------- #
# Loan snapshots
# --------------------------------------------------------------------------- #


def item_to_dict(item: CollateralItem) -> dict[str, Any]:
    purity_key = "purityKarat" if item.metal == Metal.GOLD else "purityFineness"
    return {
        "itemId": item.item_id,
        "metal": item.metal.value,
        "weightGrams": str(item.weight_grams),
        purity_key: str(item.purity),
        "pledgedValueMinorUnits": item.pledged_value_minor_units,
        "returnDate": item.return_date.isoformat() if item.return_date else None,
        "name": item.name,
        "category": item.category,
    }


def payment_to_dict(payment: Payment) -> dict[str, Any]:
    return to_dict(payment)


def loan_to_dict(loan: Loan) -> dict[str, Any]:
    """Serialize a loan snapshot, including collateral and payment history."""
    return {
        "loanId": loan.loan_id,
        "customerId": loan.customer_id,
        "kind": loan.kind.value,
        "principalMinorUnits": loan.principal_minor_units,
        "outstandingPrincipalMinorUnits": loan.outstanding_principal_minor_units,
        "monthlyInterestRatePct": str(loan.monthly_interest_rate_pct),
        "startDate": loan.start_date.isoformat(),
        "dueDate": loan.due_date.isoformat() if loan.due_date else None,
        "direction": loan.direction.value,
        "status": loan.status.value,
        "collateralItems": [item_to_dict(item) for item in loan.collateral_items],
        "paymentHistory": [payment_to_dict(p) for p in loan.payment_history],
        "note": loan.note,
    }


def customer_to_dict(customer: Customer) -> dict[str, Any]:
    return to_dict(customer)


def _require(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    raise SnapshotFormatError(f"Missing required field: {' / '.join(keys)}")


def _parse_minor_units(value: Any, key: str) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise SnapshotFormatError(f"{key} must be an integer number of minor units, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SnapshotFormatError(f"{key} is not an integer: {value!r}") from e


def _parse_decimal(value: Any, key: str) -> Decimal:
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as e:
        raise SnapshotFormatError(f"{key} is not a decimal: {value!r}") from e
    if not parsed.is_finite():
        raise SnapshotFormatError(f"{key} must be a finite decimal, got {value!r}")
    return parsed


def _parse_date(value: Any, key: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError as e:
        raise SnapshotFormatError(f"{key} is not an ISO-8601 date: {value!r}") from e


def _parse_optional_date(value: Any, key: str) -> date | None:
    return None if value in (None, "") else _parse_date(value, key)


def _parse_enum(enum_type: type[Enum], value: Any, key: str) -> Any:
    try:
        return enum_type(str(value).upper())
    except ValueError as e:
        raise SnapshotFormatError(f"{key} has unknown value {value!r}") from e


def item_from_dict(data: dict[str, Any]) -> CollateralItem:
    """Parse a collateral item; the purity key decides the metal when none is given."""
    if "metal" in data:
        metal = _parse_enum(Metal, data["metal"], "metal")
    else:
        metal = Metal.GOLD if "purityKarat" in data else Metal.SILVER
    purity_key = "purityKarat" if metal == Metal.GOLD else "purityFineness"

    try:
        return CollateralItem(
            item_id=str(_require(data, "itemId", "id")),
            metal=metal,
            weight_grams=_parse_decimal(_require(data, "weightGrams"), "weightGrams"),
            purity=_parse_decimal(_require(data, purity_key, "purity"), purity_key),
            pledged_value_minor_units=_parse_minor_units(data.get("pledgedValueMinorUnits", 0), "pledgedValueMinorUnits"),
            return_date=_parse_optional_date(data.get("returnDate"), "returnDate"),
            name=data.get("name") or "",
            category=data.get("category") or "jewelry",
        )
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid collateral item: {e}") from e


def payment_from_dict(data: dict[str, Any]) -> Payment:
    try:
        return Payment(
            payment_id=str(_require(data, "paymentId", "id")),
            date=_parse_date(_require(data, "date"), "date"),
            principal_paid_minor_units=_parse_minor_units(data.get("principalPaidMinorUnits", 0), "principalPaidMinorUnits"),
            interest_paid_minor_units=_parse_minor_units(data.get("interestPaidMinorUnits", 0), "interestPaidMinorUnits"),
            items_returned_ids=frozenset(str(i) for i in data.get("itemsReturnedIds") or ()),
            method=_parse_enum(PaymentMethod, data.get("method", "CASH"), "method"),
            note=data.get("note") or "",
            kind=_parse_enum(PaymentKind, data.get("kind", "PARTIAL_PRINCIPAL"), "kind"),
            overpayment_minor_units=_parse_minor_units(data.get("overpaymentMinorUnits", 0), "overpaymentMinorUnits"),
            cash_minor_units=_parse_minor_units(data.get("cashMinorUnits", 0), "cashMinorUnits"),
            items_value_minor_units=_parse_minor_units(data.get("itemsValueMinorUnits", 0), "itemsValueMinorUnits"),
        )
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid payment: {e}") from e


def loan_from_dict(data: dict[str, Any]) -> Loan:
    """Parse a loan snapshot.

    Parameters
    ----------
    data : dict[str, Any]
        Decoded JSON snapshot.

    Returns
    -------
    Loan
        Loan with collateral and payment history.

    Raises
    ------
    SnapshotFormatError
        If a required field is missing or malformed.
    """
    principal = _parse_minor_units(_require(data, "principalMinorUnits"), "principalMinorUnits")
    outstanding = principal
    for alias in OUTSTANDING_ALIASES:
        if data.get(alias) is not None:
            outstanding = _parse_minor_units(data[alias], alias)
            break

    try:
        return Loan(
            loan_id=str(_require(data, "loanId", "id")),
            principal_minor_units=principal,
            outstanding_principal_minor_units=outstanding,
            monthly_interest_rate_pct=_parse_decimal(
                _require(data, "monthlyInterestRatePct"), "monthlyInterestRatePct"
            ),
            start_date=_parse_date(_require(data, "startDate"), "startDate"),
            direction=_parse_enum(Direction, _require(data, "direction"), "direction"),
            kind=_parse_enum(LoanKind, data.get("kind", "PERSONAL"), "kind"),
            status=_parse_enum(LoanStatus, data.get("status", "ACTIVE"), "status"),
            collateral_items=[item_from_dict(i) for i in data.get("collateralItems") or []],
            payment_history=[payment_from_dict(p) for p in data.get("paymentHistory") or []],
            due_date=_parse_optional_date(data.get("dueDate"), "dueDate"),
            customer_id=data.get("customerId"),
            note=data.get("note") or "",
        )
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid loan snapshot: {e}") from e
