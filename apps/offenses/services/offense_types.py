"""
Offense type catalog service.

Each jar keeps its own catalog. Types referenced by offenses are never
deleted, only deactivated.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.offenses.models import OffenseType, CostType

from .exceptions import OffenseTypeNotFoundError

logger = logging.getLogger(__name__)


def create_offense_type(
    *,
    jar_id: UUID,
    name: str,
    description: str = '',
    cost_type: str = CostType.MONETARY,
    cost_amount_cents: Optional[int] = None,
    cost_unit: Optional[str] = None,
    cost_action: Optional[str] = None
) -> OffenseType:
    """
    Add an active offense type to a jar's catalog.

    Args:
        jar_id: UUID of the jar
        name: Display name of the offense
        description: Optional description
        cost_type: One of monetary, action, item, service
        cost_amount_cents: Default cost in cents (optional)
        cost_unit: Unit of the cost, e.g. "USD" or "beers" (optional)
        cost_action: Action owed instead of money (optional)

    Returns:
        Created OffenseType instance
    """
    offense_type = OffenseType.objects.create(
        jar_id=jar_id,
        name=name,
        description=description,
        cost_type=cost_type,
        cost_amount_cents=cost_amount_cents,
        cost_unit=cost_unit,
        cost_action=cost_action,
    )
    logger.info("Offense type %s (%s) added to jar %s", offense_type.id, name, jar_id)
    return offense_type


def get_offense_type(*, offense_type_id: UUID) -> OffenseType:
    """
    Get an offense type regardless of its active flag.

    Raises:
        OffenseTypeNotFoundError: If offense type doesn't exist
    """
    try:
        return OffenseType.objects.select_related('jar').get(id=offense_type_id)
    except OffenseType.DoesNotExist:
        raise OffenseTypeNotFoundError("Offense type not found")


@transaction.atomic
def update_offense_type(
    *,
    offense_type_id: UUID,
    name: str,
    description: str,
    cost_type: str,
    cost_amount_cents: Optional[int],
    cost_unit: Optional[str],
    cost_action: Optional[str]
) -> OffenseType:
    """
    Replace all mutable fields of an offense type.

    Raises:
        OffenseTypeNotFoundError: If offense type doesn't exist
    """
    try:
        offense_type = OffenseType.objects.select_for_update().get(id=offense_type_id)
    except OffenseType.DoesNotExist:
        raise OffenseTypeNotFoundError("Offense type not found")

    offense_type.name = name
    offense_type.description = description
    offense_type.cost_type = cost_type
    offense_type.cost_amount_cents = cost_amount_cents
    offense_type.cost_unit = cost_unit
    offense_type.cost_action = cost_action
    offense_type.save()

    return offense_type


@transaction.atomic
def set_offense_type_active(*, offense_type_id: UUID, is_active: bool) -> OffenseType:
    """
    Activate or deactivate an offense type.

    Raises:
        OffenseTypeNotFoundError: If offense type doesn't exist
    """
    try:
        offense_type = OffenseType.objects.select_for_update().get(id=offense_type_id)
    except OffenseType.DoesNotExist:
        raise OffenseTypeNotFoundError("Offense type not found")

    offense_type.is_active = is_active
    offense_type.save(update_fields=['is_active', 'updated_at'])
    logger.info(
        "Offense type %s %s",
        offense_type.id,
        'activated' if is_active else 'deactivated'
    )
    return offense_type


def list_active_offense_types(*, jar_id: UUID) -> QuerySet[OffenseType]:
    """Offense types offered when reporting."""
    return OffenseType.objects.filter(jar_id=jar_id, is_active=True).order_by('name')


def list_offense_types(*, jar_id: UUID) -> QuerySet[OffenseType]:
    """All offense types of a jar, including deactivated ones."""
    return OffenseType.objects.filter(jar_id=jar_id).order_by('-is_active', 'name')
