"""
Jar management service.

Handles jar creation and lookup with proper transaction safety.
"""

import logging
import secrets
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Count, OuterRef, QuerySet, Subquery

from apps.accounts.models import User
from apps.jars.models import TipJar, JarMembership, JarRole
from apps.offenses.services.offense_types import create_offense_type

from .exceptions import InviteCodeConflictError, JarNotFoundError

logger = logging.getLogger(__name__)


def generate_invite_code() -> str:
    """Return a random 8-character URL-safe invite code (6 random bytes)."""
    return secrets.token_urlsafe(6)


def create_jar(
    *,
    name: str,
    creator: User,
    description: str = '',
    invite_code: Optional[str] = None,
    max_retries: int = 5
) -> TipJar:
    """
    Create a new jar with the creator as admin and a default offense type.

    This is a multi-step operation wrapped in one transaction:
    1. Create the jar with the given or a generated invite code
    2. Create the admin membership for the creator
    3. Seed the default offense type

    Any failure rolls back all three.

    Args:
        name: Jar name
        creator: User creating the jar
        description: Optional jar description
        invite_code: Explicit invite code; generated when omitted
        max_retries: Maximum attempts to generate a unique invite code

    Returns:
        Created TipJar instance

    Raises:
        InviteCodeConflictError: If an explicit invite code is already taken
        RuntimeError: If cannot generate unique invite code after retries
    """
    for attempt in range(max_retries):
        code = invite_code or generate_invite_code()

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                jar = TipJar.objects.create(
                    name=name,
                    description=description,
                    invite_code=code,
                    created_by=creator,
                )

                JarMembership.objects.create(
                    jar=jar,
                    user=creator,
                    role=JarRole.ADMIN,
                )

                default_type = settings.TIPJAR_DEFAULT_OFFENSE_TYPE
                create_offense_type(
                    jar_id=jar.id,
                    name=default_type['name'],
                    description=default_type['description'],
                    cost_type=default_type['cost_type'],
                    cost_amount_cents=default_type['cost_amount_cents'],
                    cost_unit=settings.TIPJAR_DEFAULT_CURRENCY,
                )

        except IntegrityError:
            if invite_code:
                raise InviteCodeConflictError(
                    "Invite code already exists. Please generate a new one."
                )
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

        logger.info("Jar %s (%s) created by user %s", jar.id, jar.name, creator.id)
        return jar

    # Should never reach here
    raise RuntimeError("Unexpected error in jar creation")


def get_jar(*, jar_id: UUID) -> TipJar:
    """
    Get a jar by ID.

    Raises:
        JarNotFoundError: If jar doesn't exist
    """
    try:
        return TipJar.objects.select_related('created_by').get(id=jar_id)
    except TipJar.DoesNotExist:
        raise JarNotFoundError("Jar not found")


def get_jar_by_invite_code(*, invite_code: str) -> TipJar:
    """
    Look up a jar by its exact invite code.

    Raises:
        JarNotFoundError: If no jar uses this code
    """
    try:
        return (
            TipJar.objects
            .annotate(member_count=Count('memberships'))
            .select_related('created_by')
            .get(invite_code=invite_code)
        )
    except TipJar.DoesNotExist:
        raise JarNotFoundError("Jar not found. Please check your invite code.")


def list_jars_for_user(*, user: User) -> QuerySet[TipJar]:
    """
    Get the jars a user belongs to, ordered by when the user joined.

    Each jar is annotated with the user's `user_role` and `user_joined_at`,
    and with its `member_count`.
    """
    own_membership = JarMembership.objects.filter(jar=OuterRef('pk'), user=user)
    return (
        TipJar.objects
        .filter(id__in=JarMembership.objects.filter(user=user).values('jar_id'))
        .annotate(
            user_role=Subquery(own_membership.values('role')[:1]),
            user_joined_at=Subquery(own_membership.values('joined_at')[:1]),
            member_count=Count('memberships'),
        )
        .select_related('created_by')
        .order_by('user_joined_at')
    )
