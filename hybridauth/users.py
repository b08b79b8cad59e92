# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Look up and create local users for social profiles."""

import logging
from typing import Any, TYPE_CHECKING

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.hashers import make_password
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import models

from hybridauth.utils import split_full_name

if TYPE_CHECKING:
    from django.contrib.sessions.backends.base import SessionBase

    from hybridauth.conf import UserFinder
    from hybridauth.models import SocialProfile

log = logging.getLogger("hybridauth")


def find_user(
    user_model: type[models.Model], pk: Any, finder: "str | UserFinder"
) -> models.Model | None:
    """
    Look up a user by primary key, filtered by a finder.

    :param finder: name of a method of the default manager of the user
                   model returning a QuerySet, or a callable filtering a
                   QuerySet of users
    :return: the user, or None if the finder did not match it
    """
    manager = user_model._default_manager
    if callable(finder):
        queryset = finder(manager.all())
    else:
        try:
            method = getattr(manager, finder)
        except AttributeError:
            raise ImproperlyConfigured(
                f"user finder {finder!r} is not a method of"
                f" {user_model.__name__}.{manager.name}"
            )
        queryset = method()
    if not isinstance(queryset, models.QuerySet):
        raise ImproperlyConfigured(
            f"user finder {finder!r} did not return a QuerySet"
        )
    return queryset.filter(pk=pk).first()


def _lookup_user_by_email(
    user_model: type[AbstractBaseUser], email: str
) -> AbstractBaseUser | None:
    """Look up an existing user from an email address."""
    email_field = user_model.get_email_field_name()
    try:
        return user_model._default_manager.get(
            **{f"{email_field}__iexact": email}
        )
    except (user_model.DoesNotExist, user_model.MultipleObjectsReturned):
        return None


def _make_username(
    user_model: type[AbstractBaseUser], profile: "SocialProfile"
) -> str:
    """Pick a username that is not already taken."""
    candidates = [
        profile.email,
        profile.display_name,
        f"{profile.provider}-{profile.identifier}",
    ]
    username_field = user_model.USERNAME_FIELD
    field = user_model._meta.get_field(username_field)
    manager = user_model._default_manager
    for candidate in candidates:
        if not candidate:
            continue
        username = user_model.normalize_username(candidate)
        try:
            field.clean(username, None)
        except ValidationError:
            continue
        if not manager.filter(**{username_field: username}).exists():
            return username
    # The provider-identifier form is unique per profile, so this only
    # happens if it was taken by someone else
    return user_model.normalize_username(
        f"{profile.provider}-{profile.identifier}-{profile.pk or 0}"
    )


def create_user_from_profile(
    profile: "SocialProfile",
    session: "SessionBase",  # noqa: U100
    user_model: type[AbstractBaseUser] | None = None,
) -> AbstractBaseUser:
    """
    Get a local user for a profile that is not bound to one.

    This is the default ``get_user_callback``. An existing user is reused if
    its email matches the verified email of the profile. Otherwise a new
    user is created, with an unusable password.

    :raises ValidationError: if the profile data cannot make a valid user
    """
    if user_model is None:
        from django.contrib.auth import get_user_model

        user_model = get_user_model()

    if profile.email and profile.email_verified:
        user = _lookup_user_by_email(user_model, profile.email)
        if user is not None:
            log.info("%s: user matched to profile %s", user, profile)
            return user

    first_name = profile.first_name or ""
    last_name = profile.last_name or ""
    if not (first_name or last_name) and profile.full_name:
        first_name, last_name = split_full_name(profile.full_name)

    # Django does not run validators on create_user, so garbage in the
    # profile can either create garbage users, or cause database transaction
    # errors that will invalidate the current transaction.
    #
    # Instead of calling create_user, replicate what it does and call
    # validation explicitly before save.
    fields: dict[str, Any] = {
        user_model.USERNAME_FIELD: _make_username(user_model, profile),
    }
    model_fields = {f.name for f in user_model._meta.get_fields()}
    email_field = user_model.get_email_field_name()
    if email_field in model_fields:
        fields[email_field] = BaseUserManager.normalize_email(
            profile.email or ""
        )
    if "first_name" in model_fields:
        fields["first_name"] = first_name
    if "last_name" in model_fields:
        fields["last_name"] = last_name

    user = user_model(**fields)
    user.password = make_password(None)

    try:
        user.clean_fields()
    except ValidationError as e:
        log.warning("%s: cannot create a local user", profile, exc_info=e)
        raise

    user.save()
    log.info("%s: auto created from profile %s", user, profile)
    return user
