"""Recent activity feed for a jar."""

from typing import List
from uuid import UUID

from apps.offenses.models import Offense


def get_jar_activity(*, jar_id: UUID, limit: int = 10) -> List[Offense]:
    """
    Get the most recently reported offenses in a jar.

    Offense type, reporter and offender are loaded in the same query.
    """
    return list(
        Offense.objects
        .filter(jar_id=jar_id)
        .select_related('offense_type', 'reporter', 'offender')
        .order_by('-created_at')[:limit]
    )
