# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
User profiles as returned by external identity providers.

Providers normalize whatever they receive from the remote service into an
:py:class:`ExternalProfile`, using the field names below. Fields that only
make sense for a specific provider can be added freely: they are kept as
they are when stored.

* ``id``: identifier of the user in the provider (required)
* ``firstname``, ``lastname``, ``fullname``, ``displayName``
* ``email``, ``emailVerified``
* ``pictureURL``, ``profileURL``, ``webSiteURL``
* ``birthday``, ``sex``, ``language``, ``description``
"""

from collections.abc import Iterator, Mapping
from typing import Any

#: Rename external profile fields to SocialProfile attributes
FIELD_MAP: dict[str, str] = {
    "id": "identifier",
    "lastname": "last_name",
    "firstname": "first_name",
    "birthday": "birth_date",
    "emailVerified": "email_verified",
    "fullname": "full_name",
    "sex": "gender",
    "pictureURL": "picture_url",
}


class ExternalProfile(Mapping[str, Any]):
    """Read-only view of a user profile returned by a provider."""

    def __init__(self, fields: Mapping[str, Any]) -> None:
        """Build a profile from normalized provider fields."""
        if fields.get("id") in (None, ""):
            raise ValueError("external profile has no 'id' field")
        self._fields = dict(fields)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"ExternalProfile({self._fields!r})"

    @property
    def identifier(self) -> str:
        """Return the identifier of the user in the provider."""
        return str(self._fields["id"])

    @property
    def email(self) -> str | None:
        """Return the email address, if the provider gave one."""
        return self._fields.get("email") or None

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of the profile fields."""
        return dict(self._fields)


def map_profile_fields(profile: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert external profile field names to SocialProfile attribute names.

    Fields not listed in :py:data:`FIELD_MAP` are passed through unchanged.
    """
    return {FIELD_MAP.get(key, key): value for key, value in profile.items()}
