"""Sign-in service: map a verified Google identity onto a local user."""

from typing import Tuple
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import AccountLinkError, InactiveAccountError
from .google_identity import GoogleIdentity

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def sign_in_with_identity(*, identity: GoogleIdentity) -> Tuple[User, bool]:
    """
    Find or create the user for a verified Google identity.

    Lookup order is Google subject id, then email (linking the existing
    account to the Google id), else a new account is created.

    Args:
        identity: Verified identity claims

    Returns:
        Tuple of (user, created)

    Raises:
        AccountLinkError: If the email belongs to an account bound to another Google id,
            or Google has not verified the email
        InactiveAccountError: If the account is deactivated
    """
    created = False
    user = User.objects.select_for_update().filter(google_id=identity.google_id).first()

    if user is None and not identity.email_verified:
        raise AccountLinkError("Google account email is not verified")

    if user is None:
        user = User.objects.select_for_update().filter(email__iexact=identity.email).first()
        if user is not None:
            if user.google_id:
                raise AccountLinkError(
                    "This email is already linked to a different Google account"
                )
            user.google_id = identity.google_id
            if not user.avatar and identity.picture:
                user.avatar = identity.picture
            if not user.name and identity.name:
                user.name = identity.name
            user.save(update_fields=['google_id', 'avatar', 'name', 'updated_at'])
            logger.info("Linked Google account to existing user %s (%s)", user.id, user.email)

    if user is None:
        user = User.objects.create_user(
            email=identity.email,
            name=identity.name,
            avatar=identity.picture,
            google_id=identity.google_id,
        )
        created = True
        logger.info("Created user %s (%s) from Google sign-in", user.id, user.email)

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user, created
