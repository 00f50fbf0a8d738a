"""Services for jars business logic."""

from .exceptions import (
    JarsServiceError,
    JarNotFoundError,
    InviteCodeConflictError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)
from .jar_management import (
    generate_invite_code,
    create_jar,
    get_jar,
    get_jar_by_invite_code,
    list_jars_for_user,
)
from .membership_management import (
    join_jar,
    is_member,
    is_admin,
    require_member,
    require_admin,
    list_members,
)
from .activity import get_jar_activity

__all__ = [
    # Exceptions
    'JarsServiceError',
    'JarNotFoundError',
    'InviteCodeConflictError',
    'AlreadyMemberError',
    'NotMemberError',
    'InsufficientPermissionsError',
    # Jar management
    'generate_invite_code',
    'create_jar',
    'get_jar',
    'get_jar_by_invite_code',
    'list_jars_for_user',
    # Membership management
    'join_jar',
    'is_member',
    'is_admin',
    'require_member',
    'require_admin',
    'list_members',
    # Activity
    'get_jar_activity',
]
