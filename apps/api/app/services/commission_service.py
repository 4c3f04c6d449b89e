"""Commission store: persistence helpers for commission records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db.enums import CommissionStatus, DEFAULT_CLIENT_NAME
from app.db.models import Commission


class CommissionServiceError(Exception):
    """Base exception for commission service errors."""

    pass


class CommissionNotFoundError(CommissionServiceError):
    """Commission not found."""

    pass


UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "price",
        "rejection_reason",
        "accepted_at",
        "completion_date",
        "scheduled_at",
        "paid_amount",
        "payment_reference",
        "final_result_images",
    }
)


def _status_value(status: CommissionStatus | str) -> str:
    return status.value if isinstance(status, CommissionStatus) else status


# =============================================================================
# Reads
# =============================================================================


def get_commission(db: Session, commission_id: int) -> Commission | None:
    """Get a single commission by ID."""
    return db.get(Commission, commission_id)


def list_commissions(
    db: Session,
    status: CommissionStatus | str | None = None,
) -> list[Commission]:
    """List commissions oldest first, optionally filtered by status."""
    query = select(Commission)
    if status is not None:
        query = query.where(Commission.status == _status_value(status))
    query = query.order_by(Commission.created_at, Commission.id)
    return list(db.execute(query).scalars().all())


def list_commissions_by_status(
    db: Session,
    status: CommissionStatus | str,
    newest_first: bool = False,
) -> list[Commission]:
    """List commissions in a given status."""
    query = select(Commission).where(Commission.status == _status_value(status))
    if newest_first:
        query = query.order_by(Commission.created_at.desc(), Commission.id.desc())
    else:
        query = query.order_by(Commission.created_at, Commission.id)
    return list(db.execute(query).scalars().all())


def count_commissions_by_status(db: Session, status: CommissionStatus | str) -> int:
    """Count commissions in a given status."""
    count = db.execute(
        select(func.count())
        .select_from(Commission)
        .where(Commission.status == _status_value(status))
    ).scalar_one()
    return int(count or 0)


# =============================================================================
# Writes (flush only; callers own the transaction)
# =============================================================================


def create_commission(
    db: Session,
    email: str,
    description: str,
    client_name: str | None = None,
    reference_images: list[str] | None = None,
) -> Commission:
    """Insert a new pending commission."""
    commission = Commission(
        client_name=client_name or DEFAULT_CLIENT_NAME,
        email=email,
        description=description,
        status=CommissionStatus.PENDING.value,
        reference_images=list(reference_images or []),
        final_result_images=[],
    )
    db.add(commission)
    db.flush()
    return commission


def update_commission(db: Session, commission_id: int, fields: dict[str, Any]) -> Commission:
    """Apply a partial update. Values are written as given."""
    commission = get_commission(db, commission_id)
    if not commission:
        raise CommissionNotFoundError(f"Commission {commission_id} not found")

    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    for key, value in fields.items():
        if key == "status":
            value = _status_value(value)
        setattr(commission, key, value)

    db.flush()
    return commission


def delete_commission(db: Session, commission_id: int) -> None:
    """Hard-delete a commission (explicit admin action)."""
    commission = get_commission(db, commission_id)
    if not commission:
        raise CommissionNotFoundError(f"Commission {commission_id} not found")
    db.delete(commission)
    db.flush()


# =============================================================================
# Result images (URLs only; file storage lives elsewhere)
# =============================================================================


def append_result_images(db: Session, commission_id: int, urls: list[str]) -> Commission:
    """Append artist result image URLs, keeping existing order."""
    commission = get_commission(db, commission_id)
    if not commission:
        raise CommissionNotFoundError(f"Commission {commission_id} not found")
    # Reassign so SQLAlchemy sees the JSON column change
    commission.final_result_images = [*(commission.final_result_images or []), *urls]
    db.flush()
    return commission


def remove_result_image(db: Session, commission_id: int, image_url: str) -> Commission:
    """Remove every occurrence of ``image_url`` from the result images."""
    commission = get_commission(db, commission_id)
    if not commission:
        raise CommissionNotFoundError(f"Commission {commission_id} not found")
    commission.final_result_images = [
        url for url in (commission.final_result_images or []) if url != image_url
    ]
    db.flush()
    return commission
