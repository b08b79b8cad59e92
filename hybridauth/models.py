# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Database models for social profiles."""

import datetime
import logging
from collections.abc import Mapping
from typing import Any, TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import UniqueConstraint
from django.utils.dateparse import parse_date

if TYPE_CHECKING:
    from django_stubs_ext.db.models import TypedModelMeta
else:
    TypedModelMeta = object

log = logging.getLogger("hybridauth")

#: Profile attributes stored in their own column. Anything else that comes
#: from a provider is kept in SocialProfile.extra
PROFILE_FIELDS = frozenset(
    (
        "identifier",
        "first_name",
        "last_name",
        "full_name",
        "display_name",
        "email",
        "email_verified",
        "picture_url",
        "profile_url",
        "website_url",
        "birth_date",
        "gender",
        "language",
        "description",
    )
)

#: Aliases for passthrough provider fields that have a column
PASSTHROUGH_ALIASES = {
    "displayName": "display_name",
    "profileURL": "profile_url",
    "webSiteURL": "website_url",
}


def parse_birth_date(value: Any) -> datetime.date | None:
    """
    Parse a birth date as sent by providers.

    :raises ValueError: if the value cannot be understood as a date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid birth date: {value!r}")
    if (parsed := parse_date(value)) is not None:
        return parsed
    # Facebook-style MM/DD/YYYY
    return datetime.datetime.strptime(value, "%m/%d/%Y").date()


class SocialProfileQuerySet(models.QuerySet["SocialProfile"]):
    """Custom QuerySet for SocialProfile."""

    def lookup(self, provider: str, identifier: str) -> "SocialProfile | None":
        """Return the profile for an identity at a provider, if stored."""
        return self.filter(provider=provider, identifier=identifier).first()


class SocialProfile(models.Model):
    """
    Profile of a user at an external identity provider.

    A profile is bound if it's associated with a local user, or unbound if
    no local user is known for it yet.
    """

    class Meta(TypedModelMeta):
        constraints = [
            UniqueConstraint(
                fields=["provider", "identifier"],
                name="%(app_label)s_%(class)s_unique_provider_identifier",
            ),
        ]

    objects = SocialProfileQuerySet.as_manager()

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="social_profiles",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    provider = models.CharField(
        max_length=255, help_text="name of the identity provider"
    )
    identifier = models.CharField(
        max_length=512, help_text="identifier of the user in the provider"
    )
    first_name = models.CharField(max_length=255, null=True, blank=True)
    last_name = models.CharField(max_length=255, null=True, blank=True)
    full_name = models.CharField(max_length=512, null=True, blank=True)
    display_name = models.CharField(max_length=255, null=True, blank=True)
    email = models.EmailField(max_length=254, null=True, blank=True)
    email_verified = models.BooleanField(null=True, blank=True)
    picture_url = models.URLField(max_length=1024, null=True, blank=True)
    profile_url = models.URLField(max_length=1024, null=True, blank=True)
    website_url = models.URLField(max_length=1024, null=True, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=64, null=True, blank=True)
    language = models.CharField(max_length=64, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    extra = models.JSONField(
        default=dict,
        blank=True,
        help_text="provider fields without a dedicated column",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize change tracking."""
        super().__init__(*args, **kwargs)
        self._changed: set[str] = set()

    def __str__(self) -> str:
        """Return str for the object."""
        return f"{self.provider}:{self.identifier}"

    @property
    def is_dirty(self) -> bool:
        """Check if the profile needs saving."""
        return self._state.adding or bool(self._changed)

    def _set(self, name: str, value: Any) -> None:
        """Set an attribute, tracking whether it changed."""
        if getattr(self, name) != value:
            setattr(self, name, value)
            self._changed.add(name)

    def patch(self, data: Mapping[str, Any]) -> None:
        """
        Update the profile with fields from an identity provider.

        ``data`` uses SocialProfile attribute names, as returned by
        :py:func:`hybridauth.profile.map_profile_fields`. Values overwrite
        what was previously stored, and ``extra`` is rebuilt from ``data``.
        """
        extra: dict[str, Any] = {}
        for key, value in data.items():
            name = PASSTHROUGH_ALIASES.get(key, key)
            if name not in PROFILE_FIELDS:
                extra[key] = value
                continue

            if name == "birth_date":
                try:
                    value = parse_birth_date(value)
                except ValueError:
                    log.debug("%s: cannot parse birth date %r", self, value)
                    extra["birthday"] = value
                    value = None
            elif name == "email_verified":
                value = None if value is None else bool(value)
            elif value is not None:
                field = self._meta.get_field(name)
                try:
                    value = field.to_python(value)
                except ValidationError:
                    extra[key] = value
                    continue
            self._set(name, value)
        self._set("extra", extra)

    def link_user(self, user: models.Model) -> None:
        """Bind the profile to a local user."""
        if self.user_id != user.pk:
            self.user = user  # type: ignore[assignment]
            self._changed.add("user")

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Save the profile and reset change tracking."""
        super().save(*args, **kwargs)
        self._changed.clear()
