# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
Configuration of the hybridauth workflow.

Options are read from the ``HYBRIDAUTH`` dict in django settings. All keys
are optional::

    HYBRIDAUTH = {
        # HTTP method accepted by the login view
        "request_method": "POST",
        # Where to send users when authentication failed. An "error" query
        # string parameter is added with a short error code
        "login_url": "/users/login",
        # Where to send users after authentication, unless a "redirect"
        # query string parameter was given to the login view
        "login_redirect": "/",
        # Store the user as a serialized model record ("model", "pk",
        # "fields") instead of a plain dict of field values
        "user_entity": False,
        # Models to use, as "app_label.ModelName"
        "user_model": AUTH_USER_MODEL,
        "profile_model": "hybridauth.SocialProfile",
        # Manager method name, or callable filtering a user QuerySet
        "finder": "all",
        # Field removed from the user data stored in session
        "fields": {"password": "password"},
        # Session key to write user data to
        "session_key": "Auth",
        # Callable, or dotted path to it, returning a user for a profile
        # without one
        "get_user_callback": "hybridauth.users.create_user_from_profile",
        # Log provider failures
        "log_errors": True,
        # Provider error codes that are raised instead of redirecting to
        # login_url
        "fatal_error_codes": {0, 1, 2, 3, 4},
        # Also log in the user with django.contrib.auth
        "login": True,
    }

Identity providers are configured separately in ``HYBRIDAUTH_PROVIDERS``:
see :py:mod:`hybridauth.providers`.
"""

import dataclasses
import functools
from collections.abc import Callable, Collection, Mapping
from typing import Any, TYPE_CHECKING

from django.apps import apps
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ImproperlyConfigured
from django.db import models
from django.utils.module_loading import import_string

from hybridauth.providers import ProviderErrorCode

if TYPE_CHECKING:
    from hybridauth.models import SocialProfile

#: Provider errors caused by configuration problems rather than by the user
DEFAULT_FATAL_ERROR_CODES = frozenset(
    (
        ProviderErrorCode.UNSPECIFIED,
        ProviderErrorCode.CONFIGURATION_ERROR,
        ProviderErrorCode.PROVIDER_NOT_CONFIGURED,
        ProviderErrorCode.UNKNOWN_OR_DISABLED_PROVIDER,
        ProviderErrorCode.MISSING_CREDENTIALS,
    )
)

ALLOWED_REQUEST_METHODS = frozenset(("GET", "POST", "PUT", "PATCH"))

#: Signature of the function used to get a user for an unbound profile
UserCallback = Callable[[models.Model, Any], models.Model]

#: Signature of a user finder: filter the QuerySet of candidate users
UserFinder = Callable[[models.QuerySet[Any]], models.QuerySet[Any]]


def _default_fields() -> dict[str, str]:
    return {"password": "password"}


@dataclasses.dataclass(frozen=True)
class HybridAuthConfig:
    """Validated hybridauth configuration."""

    request_method: str = "POST"
    login_url: str = "/users/login"
    login_redirect: str = "/"
    user_entity: bool = False
    user_model: str | None = None
    profile_model: str = "hybridauth.SocialProfile"
    finder: str | UserFinder = "all"
    fields: Mapping[str, str] = dataclasses.field(
        default_factory=_default_fields
    )
    session_key: str = "Auth"
    get_user_callback: str | UserCallback = (
        "hybridauth.users.create_user_from_profile"
    )
    log_errors: bool = True
    fatal_error_codes: Collection[int] = DEFAULT_FATAL_ERROR_CODES
    login: bool = True

    def __post_init__(self) -> None:
        """Validate and normalize options."""
        if not isinstance(self.request_method, str):
            raise ImproperlyConfigured(
                "HYBRIDAUTH request_method must be a string"
            )
        method = self.request_method.upper()
        if method not in ALLOWED_REQUEST_METHODS:
            raise ImproperlyConfigured(
                f"HYBRIDAUTH request_method {self.request_method!r}"
                " is not supported"
            )
        object.__setattr__(self, "request_method", method)

        for name in ("login_url", "login_redirect", "session_key"):
            if not isinstance(value := getattr(self, name), str) or not value:
                raise ImproperlyConfigured(
                    f"HYBRIDAUTH {name} must be a non-empty string"
                )

        if not isinstance(self.fields, Mapping):
            raise ImproperlyConfigured("HYBRIDAUTH fields must be a dict")
        object.__setattr__(
            self, "fields", {**_default_fields(), **self.fields}
        )

        if not isinstance(self.finder, str) and not callable(self.finder):
            raise ImproperlyConfigured(
                "HYBRIDAUTH finder must be a method name or a callable"
            )

        try:
            codes = frozenset(int(code) for code in self.fatal_error_codes)
        except (TypeError, ValueError):
            raise ImproperlyConfigured(
                "HYBRIDAUTH fatal_error_codes must be a collection of integers"
            )
        object.__setattr__(self, "fatal_error_codes", codes)

    @classmethod
    def from_settings(cls) -> "HybridAuthConfig":
        """Build the configuration from django settings."""
        options = getattr(settings, "HYBRIDAUTH", None) or {}
        if not isinstance(options, Mapping):
            raise ImproperlyConfigured("HYBRIDAUTH setting must be a dict")
        known = {field.name for field in dataclasses.fields(cls)}
        if unknown := sorted(options.keys() - known):
            raise ImproperlyConfigured(
                f"unknown HYBRIDAUTH options: {', '.join(unknown)}"
            )
        return cls(**options)

    @property
    def password_field(self) -> str:
        """Return the name of the password field of the user model."""
        return self.fields["password"]

    @functools.cached_property
    def user_model_class(self) -> type[models.Model]:
        """Return the user model."""
        if self.user_model is None:
            return get_user_model()
        return self._get_model("user_model", self.user_model)

    @functools.cached_property
    def profile_model_class(self) -> type["SocialProfile"]:
        """Return the social profile model."""
        from hybridauth.models import SocialProfile

        model = self._get_model("profile_model", self.profile_model)
        if not issubclass(model, SocialProfile):
            raise ImproperlyConfigured(
                f"HYBRIDAUTH profile_model {self.profile_model!r}"
                " is not a subclass of SocialProfile"
            )
        return model

    @functools.cached_property
    def user_callback(self) -> UserCallback:
        """Return the function used to get a user for an unbound profile."""
        callback = self.get_user_callback
        if isinstance(callback, str):
            try:
                callback = import_string(callback)
            except ImportError as exc:
                raise ImproperlyConfigured(
                    f"HYBRIDAUTH get_user_callback {callback!r}"
                    f" cannot be imported: {exc}"
                )
        if not callable(callback):
            raise ImproperlyConfigured(
                "HYBRIDAUTH get_user_callback is not callable"
            )
        return callback

    def _get_model(self, option: str, label: str) -> type[models.Model]:
        try:
            return apps.get_model(label, require_ready=False)
        except (ValueError, LookupError) as exc:
            raise ImproperlyConfigured(
                f"HYBRIDAUTH {option} {label!r} is not an installed model:"
                f" {exc}"
            )
