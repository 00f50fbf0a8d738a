"""
Membership management service.

Handles jar membership operations with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.jars.models import TipJar, JarMembership, JarRole

from .exceptions import (
    JarNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def join_jar(*, invite_code: str, user: User) -> JarMembership:
    """
    Join a jar using its invite code.

    Uses row-level locking to prevent race conditions when checking
    and creating memberships. Codes are compared exactly.

    Args:
        invite_code: Invite code of the jar
        user: User joining the jar

    Returns:
        Created JarMembership instance

    Raises:
        JarNotFoundError: If no jar uses this invite code
        AlreadyMemberError: If user is already a member (also caught from IntegrityError)
    """
    # Lock the jar to prevent concurrent joins
    try:
        jar = (
            TipJar.objects
            .select_for_update()
            .get(invite_code=invite_code)
        )
    except TipJar.DoesNotExist:
        raise JarNotFoundError("Jar not found. Please check your invite code.")

    if jar.has_member(user):
        raise AlreadyMemberError("You are already a member of this jar")

    try:
        membership = JarMembership.objects.create(
            jar=jar,
            user=user,
            role=JarRole.MEMBER
        )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError("You are already a member of this jar")

    logger.info("User %s joined jar %s (%s)", user.id, jar.id, jar.name)
    return membership


def is_member(*, jar_id: UUID, user_id: UUID) -> bool:
    return JarMembership.objects.filter(jar_id=jar_id, user_id=user_id).exists()


def is_admin(*, jar_id: UUID, user_id: UUID) -> bool:
    return JarMembership.objects.filter(
        jar_id=jar_id,
        user_id=user_id,
        role=JarRole.ADMIN
    ).exists()


def require_member(*, jar_id: UUID, user: User) -> None:
    """
    Raises:
        NotMemberError: If user is not a member of the jar
    """
    if not is_member(jar_id=jar_id, user_id=user.id):
        raise NotMemberError("You are not a member of this jar")


def require_admin(*, jar_id: UUID, user: User) -> None:
    """
    Raises:
        InsufficientPermissionsError: If user is not an admin of the jar
    """
    if not is_admin(jar_id=jar_id, user_id=user.id):
        raise InsufficientPermissionsError("Only jar admins can perform this action")


def list_members(*, jar_id: UUID) -> QuerySet[JarMembership]:
    """
    Get all members of a jar ordered by join time.

    Raises:
        JarNotFoundError: If jar doesn't exist
    """
    if not TipJar.objects.filter(id=jar_id).exists():
        raise JarNotFoundError("Jar not found")

    return (
        JarMembership.objects
        .filter(jar_id=jar_id)
        .select_related('user')
        .order_by('joined_at')
    )
