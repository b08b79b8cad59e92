# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Views starting and completing login with external identity providers."""

import enum
from collections.abc import Callable
from typing import Any, ClassVar

from django.http import (
    HttpRequest,
    HttpResponseBase,
    HttpResponseNotAllowed,
)
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from django.views.generic import View

from hybridauth.hybridauth import HybridAuth
from hybridauth.middleware import get_hybridauth_class


class Action(enum.StrEnum):
    """Entry points of the login workflow."""

    LOGIN = "login"
    CALLBACK = "callback"


def _login(
    hybridauth: HybridAuth, provider: str | None
) -> HttpResponseBase:
    assert provider is not None
    return hybridauth.login(provider)


def _callback(
    hybridauth: HybridAuth, provider: str | None
) -> HttpResponseBase:
    return hybridauth.callback(provider)


@method_decorator(never_cache, name="dispatch")
class HybridAuthView(View):
    """
    Dispatch a request to the login workflow.

    ``action`` selects the workflow entry point, and is set in the URL
    configuration via ``as_view(action=...)``.
    """

    action: Action = Action.CALLBACK

    handlers: ClassVar[
        dict[Action, Callable[[HybridAuth, str | None], HttpResponseBase]]
    ] = {
        Action.LOGIN: _login,
        Action.CALLBACK: _callback,
    }

    def get_hybridauth(self, request: HttpRequest) -> HybridAuth:
        """Return the HybridAuth object for the request."""
        if (hybridauth := getattr(request, "hybridauth", None)) is None:
            hybridauth = get_hybridauth_class()(request)
        assert isinstance(hybridauth, HybridAuth)
        return hybridauth

    def allowed_methods(self, hybridauth: HybridAuth) -> list[str]:
        """Return the HTTP methods accepted for the current action."""
        if self.action == Action.LOGIN:
            return [hybridauth.config.request_method]
        return ["GET"]

    def dispatch(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponseBase:
        """Run the workflow entry point for the action."""
        hybridauth = self.get_hybridauth(request)
        allowed = self.allowed_methods(hybridauth)
        if request.method not in allowed:
            return HttpResponseNotAllowed(allowed)
        return self.handlers[self.action](
            hybridauth, self.kwargs.get("provider")
        )


login = HybridAuthView.as_view(action=Action.LOGIN)
callback = HybridAuthView.as_view(action=Action.CALLBACK)
