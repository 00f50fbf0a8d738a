"""
Balance aggregation.

Balances are derived from the ledger on every read and never stored.
"""

from typing import Any, Dict, List
from uuid import UUID

from django.db.models import Count, IntegerField, Q, Sum, Value
from django.db.models.functions import Coalesce

from apps.jars.models import JarMembership
from apps.offenses.models import Offense, OffenseStatus, OUTSTANDING_STATUSES


def get_member_balances(*, jar_id: UUID) -> List[Dict[str, Any]]:
    """
    Outstanding totals for every member of a jar, in join order.

    A member's total is the sum of the resolved cost (override, else the
    type's default, else 0) of their pending and disputed offenses. Costs
    are summed as stored cents regardless of unit.

    Runs one grouped aggregate over the ledger plus the member listing.

    Returns:
        List of dicts with keys: user, role, total_owed_cents, pending_count
    """
    resolved_cost = Coalesce(
        'cost_override_cents',
        'offense_type__cost_amount_cents',
        Value(0),
        output_field=IntegerField(),
    )

    totals = (
        Offense.objects
        .filter(jar_id=jar_id, status__in=OUTSTANDING_STATUSES)
        .values('offender_id')
        .annotate(
            total_owed_cents=Sum(resolved_cost),
            pending_count=Count('id', filter=Q(status=OffenseStatus.PENDING)),
        )
        .order_by()
    )
    totals_by_user = {row['offender_id']: row for row in totals}

    memberships = (
        JarMembership.objects
        .filter(jar_id=jar_id)
        .select_related('user')
        .order_by('joined_at')
    )

    balances = []
    for membership in memberships:
        row = totals_by_user.get(membership.user_id, {})
        balances.append({
            'user': membership.user,
            'role': membership.role,
            'total_owed_cents': row.get('total_owed_cents') or 0,
            'pending_count': row.get('pending_count') or 0,
        })

    return balances
