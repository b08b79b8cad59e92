# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
Middleware that sets up social login.

It adds a `request.hybridauth` member that is a HybridAuth object, providing
an entry point for logging in with external identity providers.
"""
from collections.abc import Callable
from typing import Protocol, cast, runtime_checkable

import django.http
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, MiddlewareNotUsed
from django.utils.module_loading import import_string

from hybridauth.hybridauth import HybridAuth
from hybridauth.providers import get_providers


@runtime_checkable
class RequestHybridAuthProtocol(Protocol):
    """A Django request processed by :py:class:`HybridAuthMiddleware`."""

    hybridauth: HybridAuth


def get_hybridauth_class() -> type[HybridAuth]:
    """
    Find the HybridAuth class to use.

    This allows customizing behaviour by subclassing HybridAuth, and setting
    ``HYBRIDAUTH_CLASS`` to its dotted path.
    """
    if (class_path := getattr(settings, "HYBRIDAUTH_CLASS", None)) is None:
        return HybridAuth
    hybridauth_class = import_string(class_path)
    if not isinstance(hybridauth_class, type) or not issubclass(
        hybridauth_class, HybridAuth
    ):
        raise ImproperlyConfigured(
            f"{class_path} is not a subclass of HybridAuth"
        )
    return hybridauth_class


class HybridAuthMiddleware:
    """Set up login via external identity providers."""

    hybridauth_class: type[HybridAuth]

    def __init__(
        self,
        get_response: Callable[
            [django.http.HttpRequest], django.http.HttpResponse
        ],
    ) -> None:
        """Middleware API entry point."""
        if not get_providers():
            raise MiddlewareNotUsed()

        self.hybridauth_class = get_hybridauth_class()
        self.get_response = get_response

    def __call__(
        self, request: django.http.HttpRequest
    ) -> django.http.HttpResponse:
        """Middleware API entry point."""
        # SessionMiddleware is required so that request.session exists.
        if not hasattr(request, "session"):
            raise ImproperlyConfigured(
                "The hybridauth middleware requires the session middleware"
                " to be installed.  Edit your MIDDLEWARE setting to insert"
                " 'django.contrib.sessions.middleware.SessionMiddleware'"
                " before the HybridAuthMiddleware class."
            )

        # Add request.hybridauth
        cast(RequestHybridAuthProtocol, request).hybridauth = (
            self.hybridauth_class(request)
        )

        return self.get_response(request)
