"""Services for offense catalog, ledger and balances."""

from .exceptions import (
    OffensesServiceError,
    OffenseTypeNotFoundError,
    OffenseNotFoundError,
    PaymentNotFoundError,
    InvalidStatusTransitionError,
)
from .offense_types import (
    create_offense_type,
    update_offense_type,
    set_offense_type_active,
    get_offense_type,
    list_active_offense_types,
    list_offense_types,
)
from .ledger import (
    ALLOWED_TRANSITIONS,
    report_offense,
    get_offense,
    update_offense_status,
    resolve_offense_detail,
    record_payment,
    get_payment,
    verify_payment,
    list_offenses_for_jar,
    list_pending_offenses_for_user,
)
from .balances import get_member_balances

__all__ = [
    # Exceptions
    'OffensesServiceError',
    'OffenseTypeNotFoundError',
    'OffenseNotFoundError',
    'PaymentNotFoundError',
    'InvalidStatusTransitionError',
    # Offense type catalog
    'create_offense_type',
    'update_offense_type',
    'set_offense_type_active',
    'get_offense_type',
    'list_active_offense_types',
    'list_offense_types',
    # Ledger
    'ALLOWED_TRANSITIONS',
    'report_offense',
    'get_offense',
    'update_offense_status',
    'resolve_offense_detail',
    'record_payment',
    'get_payment',
    'verify_payment',
    'list_offenses_for_jar',
    'list_pending_offenses_for_user',
    # Balances
    'get_member_balances',
]
