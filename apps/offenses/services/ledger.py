"""
Offense ledger service.

Reported offenses, their status lifecycle and the payments recorded
against them. Membership of reporter and offender is checked by the
request layer, not here.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.offenses.models import Offense, OffenseStatus, Payment

from .exceptions import (
    OffenseNotFoundError,
    PaymentNotFoundError,
    InvalidStatusTransitionError,
)

logger = logging.getLogger(__name__)

# paid and forgiven are terminal
ALLOWED_TRANSITIONS = {
    OffenseStatus.PENDING: {OffenseStatus.PAID, OffenseStatus.DISPUTED, OffenseStatus.FORGIVEN},
    OffenseStatus.DISPUTED: {OffenseStatus.PENDING, OffenseStatus.PAID, OffenseStatus.FORGIVEN},
    OffenseStatus.PAID: set(),
    OffenseStatus.FORGIVEN: set(),
}


def report_offense(
    *,
    jar_id: UUID,
    offense_type_id: UUID,
    reporter: User,
    offender_id: UUID,
    notes: str = '',
    cost_override_cents: Optional[int] = None
) -> Offense:
    """
    Record a new pending offense.

    Args:
        jar_id: UUID of the jar
        offense_type_id: UUID of the offense type
        reporter: User reporting the offense
        offender_id: UUID of the member who committed it
        notes: Optional free text
        cost_override_cents: Cost replacing the type's default (optional)

    Returns:
        Created Offense instance
    """
    offense = Offense.objects.create(
        jar_id=jar_id,
        offense_type_id=offense_type_id,
        reporter=reporter,
        offender_id=offender_id,
        notes=notes,
        cost_override_cents=cost_override_cents,
        status=OffenseStatus.PENDING,
    )
    logger.info(
        "Offense %s reported in jar %s by %s against %s",
        offense.id, jar_id, reporter.id, offender_id
    )
    return offense


def get_offense(*, offense_id: UUID) -> Offense:
    """
    Raises:
        OffenseNotFoundError: If offense doesn't exist
    """
    try:
        return (
            Offense.objects
            .select_related('jar', 'offense_type', 'reporter', 'offender')
            .get(id=offense_id)
        )
    except Offense.DoesNotExist:
        raise OffenseNotFoundError("Offense not found")


@transaction.atomic
def update_offense_status(*, offense_id: UUID, new_status: str) -> Offense:
    """
    Move an offense to a new status.

    Allowed moves: pending -> paid/disputed/forgiven and
    disputed -> pending/paid/forgiven. Paid and forgiven are final.

    Raises:
        OffenseNotFoundError: If offense doesn't exist
        InvalidStatusTransitionError: If the move is not allowed
    """
    try:
        offense = Offense.objects.select_for_update().get(id=offense_id)
    except Offense.DoesNotExist:
        raise OffenseNotFoundError("Offense not found")

    if new_status not in OffenseStatus.values:
        raise InvalidStatusTransitionError(f"Unknown status '{new_status}'")

    allowed = ALLOWED_TRANSITIONS[offense.status]
    if new_status not in allowed:
        raise InvalidStatusTransitionError(
            f"Cannot change status from '{offense.status}' to '{new_status}'"
        )

    old_status = offense.status
    offense.status = new_status
    offense.save(update_fields=['status', 'updated_at'])
    logger.info("Offense %s status changed %s -> %s", offense.id, old_status, new_status)

    return offense


def resolve_offense_detail(*, offense_id: UUID) -> Dict[str, Any]:
    """
    Collect everything needed to display one offense.

    The offense type is included even when deactivated.

    Returns:
        Dict with keys: offense, offense_type, reporter, offender, payments,
        amount_cents (override, else type default, else 0) and unit
        (type unit, else "items")

    Raises:
        OffenseNotFoundError: If offense doesn't exist
    """
    offense = get_offense(offense_id=offense_id)
    payments = list(
        offense.payments
        .select_related('payer', 'verified_by')
        .order_by('created_at')
    )

    return {
        'offense': offense,
        'offense_type': offense.offense_type,
        'reporter': offense.reporter,
        'offender': offense.offender,
        'payments': payments,
        'amount_cents': offense.get_amount_cents(),
        'unit': offense.get_unit(),
    }


def record_payment(
    *,
    offense_id: UUID,
    payer: User,
    amount_cents: Optional[int] = None,
    proof_url: str = '',
    proof_type: Optional[str] = None,
    notes: str = ''
) -> Payment:
    """
    Attach an unverified payment to an offense.

    The offense status is left unchanged; settling it is a separate
    status update.

    Raises:
        OffenseNotFoundError: If offense doesn't exist
    """
    if not Offense.objects.filter(id=offense_id).exists():
        raise OffenseNotFoundError("Offense not found")

    payment = Payment.objects.create(
        offense_id=offense_id,
        payer=payer,
        amount_cents=amount_cents,
        proof_url=proof_url,
        proof_type=proof_type,
        notes=notes,
    )
    logger.info("Payment %s recorded for offense %s by %s", payment.id, offense_id, payer.id)
    return payment


def get_payment(*, payment_id: UUID) -> Payment:
    """
    Raises:
        PaymentNotFoundError: If payment doesn't exist
    """
    try:
        return (
            Payment.objects
            .select_related('offense', 'offense__jar', 'payer', 'verified_by')
            .get(id=payment_id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Payment not found")


@transaction.atomic
def verify_payment(*, payment_id: UUID, verified_by: User) -> Payment:
    """
    Mark a payment as verified. The offense status is left unchanged.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
    """
    try:
        payment = Payment.objects.select_for_update().get(id=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Payment not found")

    payment.verified = True
    payment.verified_by = verified_by
    payment.verified_at = timezone.now()
    payment.save(update_fields=['verified', 'verified_by', 'verified_at', 'updated_at'])
    logger.info("Payment %s verified by %s", payment.id, verified_by.id)

    return payment


def list_offenses_for_jar(*, jar_id: UUID, status: Optional[str] = None) -> QuerySet[Offense]:
    queryset = (
        Offense.objects
        .filter(jar_id=jar_id)
        .select_related('offense_type', 'reporter', 'offender')
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at')


def list_pending_offenses_for_user(*, user: User) -> QuerySet[Offense]:
    """Pending offenses committed by user across all jars."""
    return (
        Offense.objects
        .filter(offender=user, status=OffenseStatus.PENDING)
        .select_related('jar', 'offense_type', 'reporter', 'offender')
        .order_by('-created_at')
    )
