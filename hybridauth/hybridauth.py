# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Logic to log in a request using external identity providers."""

import functools
import json
import logging
from typing import Any, NoReturn

import django.http
from django.contrib import auth
from django.contrib.auth import backends
from django.core import serializers
from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, models, transaction
from django.http import HttpResponseRedirect
from django.shortcuts import resolve_url
from django.urls import reverse

from hybridauth import providers
from hybridauth.conf import HybridAuthConfig
from hybridauth.models import SocialProfile
from hybridauth.profile import ExternalProfile, map_profile_fields
from hybridauth.providers import ProviderError
from hybridauth.signals import apply_after_identify
from hybridauth.users import find_user
from hybridauth.utils import append_query, is_local_path

log = logging.getLogger("hybridauth")

#: Query string parameter with the page to go back to after login
QUERY_STRING_REDIRECT = "redirect"

#: Session key with the page to go back to after login
SESSION_REDIRECT_URL = "hybridauth_redirect_url"

#: Session key with the provider of an authentication in progress
SESSION_PROVIDER = "hybridauth_provider"

#: Authentication backend used to log in users
AUTH_BACKEND = "hybridauth.auth.HybridAuthBackend"

#: Error code: the provider could not authenticate the user
PROVIDER_FAILURE = "provider_failure"
#: Error code: the user bound to the profile was not found
FINDER_FAILURE = "finder_failure"
#: Error code: the callback did not say which provider it is for
UNKNOWN_PROVIDER = "unknown_provider"


class HybridAuthError(RuntimeError):
    """Fatal error caused by an inconsistent setup of the host project."""


class InvalidUserCallbackResult(HybridAuthError):
    """Exception raised when get_user_callback does not return a user."""


class ProfileSaveFailed(HybridAuthError):
    """Exception raised when a social profile cannot be saved."""


class IdentifyFailed(Exception):
    """Exception raised when a user cannot be identified."""

    def __init__(self, code: str) -> None:
        """Store the error code reported to the login page."""
        super().__init__(code)
        self.code = code


class HybridAuth:
    """
    Identify users using external authentication providers.

    This is setup by HybridAuthMiddleware as request.hybridauth.

    The constructor needs to be as lightweight as possible, as it is called on
    every request. Everything else is loaded only when needed.
    """

    def __init__(self, request: django.http.HttpRequest) -> None:
        """Create a HybridAuth object for a request."""
        self.request = request
        #: Error code of the last failed identification
        self.error: str | None = None

    @functools.cached_property
    def config(self) -> HybridAuthConfig:
        """Lazily load configuration."""
        return HybridAuthConfig.from_settings()

    def login(self, provider_name: str) -> django.http.HttpResponseBase:
        """Start authentication with a provider."""
        self.set_redirect_url()
        try:
            bound = providers.get(provider_name).bind(self.request)
            url = bound.get_authorization_url(
                self.get_callback_url(provider_name)
            )
        except ProviderError as exc:
            try:
                self.handle_provider_error(exc)
            except IdentifyFailed as failure:
                return self.login_failure(failure.code)

        self.request.session[SESSION_PROVIDER] = provider_name
        log.debug("%s: redirecting to provider %s", self.request, provider_name)
        return HttpResponseRedirect(url)

    def callback(
        self, provider_name: str | None = None
    ) -> django.http.HttpResponseBase:
        """Complete authentication with a provider and log the user in."""
        pending_provider = self.request.session.pop(SESSION_PROVIDER, None)
        if provider_name is None:
            provider_name = pending_provider
        if not provider_name:
            return self.login_failure(UNKNOWN_PROVIDER)

        try:
            external = self.authenticate(provider_name)
            with transaction.atomic():
                profile = self.get_profile(provider_name, external)
                user = self.get_user(profile)
            if self.config.login:
                self.check_can_login(user)
        except IdentifyFailed as failure:
            return self.login_failure(failure.code)

        user_data = apply_after_identify(
            sender=self.__class__,
            user=self.make_user_data(user, profile),
            request=self.request,
            provider=provider_name,
        )

        redirect_url = self.get_redirect_url()
        if self.config.login:
            auth.login(self.request, user, backend=AUTH_BACKEND)
        self.request.session[self.config.session_key] = user_data

        return HttpResponseRedirect(self.absolute_url(redirect_url))

    def authenticate(self, provider_name: str) -> ExternalProfile:
        """Authenticate with the provider and return the remote profile."""
        try:
            bound = providers.get(provider_name).bind(self.request)
            return bound.authenticate()
        except ProviderError as exc:
            self.handle_provider_error(exc)

    def handle_provider_error(self, exc: ProviderError) -> NoReturn:
        """
        Handle a provider failure.

        Errors whose code is in ``fatal_error_codes`` are raised again.
        Others are logged, and reported as a failed identification.
        """
        if exc.code in self.config.fatal_error_codes:
            raise exc
        if self.config.log_errors:
            log.error("%s", self.get_log_message(exc), exc_info=exc)
        raise IdentifyFailed(PROVIDER_FAILURE) from exc

    def get_profile(
        self, provider_name: str, external: ExternalProfile
    ) -> SocialProfile:
        """Find or create the social profile and update it."""
        model = self.config.profile_model_class
        profile = model.objects.lookup(provider_name, external.identifier)
        if profile is None:
            log.debug(
                "%s:%s: new social profile", provider_name, external.identifier
            )
            profile = model(provider=provider_name)
        profile.patch(map_profile_fields(external))
        return profile

    def get_user(self, profile: SocialProfile) -> models.Model:
        """Find the user bound to the profile, or get one for it."""
        if profile.user_id is not None:
            user = find_user(
                self.config.user_model_class,
                profile.user_id,
                self.config.finder,
            )
            if user is None:
                log.warning(
                    "%s: bound user %s not matched by finder %r",
                    profile,
                    profile.user_id,
                    self.config.finder,
                )
                raise IdentifyFailed(FINDER_FAILURE)
        else:
            user = self.get_user_entity(profile)
            profile.link_user(user)
            log.info("%s: bound to profile %s", user, profile)

        if profile.is_dirty:
            self.save_profile(profile)

        return user

    def get_user_entity(self, profile: SocialProfile) -> models.Model:
        """
        Get a user for a profile not bound to one.

        This calls ``get_user_callback`` with the profile and the session. It
        should return a saved user.
        """
        user = self.config.user_callback(profile, self.request.session)
        if not isinstance(user, self.config.user_model_class):
            raise InvalidUserCallbackResult(
                '"get_user_callback" must return a'
                f" {self.config.user_model_class.__name__} instance,"
                f" not {type(user).__name__}"
            )
        if user.pk is None:
            raise InvalidUserCallbackResult(
                '"get_user_callback" must return a saved user'
            )
        return user

    def save_profile(self, profile: SocialProfile) -> None:
        """Save the social profile."""
        try:
            with transaction.atomic():
                profile.save()
        except DatabaseError as exc:
            raise ProfileSaveFailed(
                f"Unable to save social profile {profile}: {exc}"
            ) from exc

    def check_can_login(self, user: models.Model) -> None:
        """Check that the user is allowed to log in."""
        backend = auth.load_backend(AUTH_BACKEND)
        assert isinstance(backend, backends.ModelBackend)
        if not backend.user_can_authenticate(user):
            log.warning("%s: user is not allowed to log in", user)
            raise IdentifyFailed(FINDER_FAILURE)

    def make_user_data(
        self, user: models.Model, profile: SocialProfile
    ) -> dict[str, Any]:
        """
        Build the JSON-serializable user data to store in the session.

        If ``user_entity`` is set, the user is stored as a structured record
        in the format of Django's ``python`` serializer (``model``, ``pk``
        and ``fields``), with the social profile as the
        ``social_profile`` field. Otherwise it is a plain dict of field
        values, with the social profile under ``social_profile``. In both
        cases the password field is left out.
        """
        password_field = self.config.password_field
        if self.config.user_entity:
            result = self._model_record(user, exclude=(password_field,))
            result["fields"]["social_profile"] = self._model_record(profile)
        else:
            result = self._model_data(user, exclude=(password_field,))
            result["social_profile"] = self._model_data(profile)
        return json.loads(json.dumps(result, cls=DjangoJSONEncoder))

    @staticmethod
    def _model_data(
        instance: models.Model, exclude: tuple[str, ...] = ()
    ) -> dict[str, Any]:
        """Return the values of the concrete fields of a model instance."""
        return {
            field.attname: field.value_from_object(instance)
            for field in instance._meta.concrete_fields
            if field.name not in exclude and field.attname not in exclude
        }

    @staticmethod
    def _model_record(
        instance: models.Model, exclude: tuple[str, ...] = ()
    ) -> dict[str, Any]:
        """Serialize a model instance with Django's python serializer."""
        fields = [
            field.name
            for field in instance._meta.concrete_fields
            if not field.primary_key
            and field.name not in exclude
            and field.attname not in exclude
        ]
        [record] = serializers.serialize("python", [instance], fields=fields)
        assert isinstance(record, dict)
        return record

    def login_failure(self, code: str) -> HttpResponseRedirect:
        """Redirect to the login page, reporting an error code."""
        self.error = code
        url = self.absolute_url(self.config.login_url)
        return HttpResponseRedirect(append_query(url, "error", code))

    def absolute_url(self, url: str) -> str:
        """Resolve a URL, path or URL name to an absolute URL."""
        return self.request.build_absolute_uri(resolve_url(url))

    def get_callback_url(self, provider_name: str) -> str:
        """Return the absolute URL of the callback view for a provider."""
        return self.request.build_absolute_uri(
            reverse("hybridauth:callback", args=(provider_name,))
        )

    def set_redirect_url(self) -> None:
        """Remember in session the page to go back to after login."""
        self.request.session.pop(SESSION_REDIRECT_URL, None)

        redirect_url = self.request.GET.get(QUERY_STRING_REDIRECT)
        if not is_local_path(redirect_url):
            return

        self.request.session[SESSION_REDIRECT_URL] = redirect_url

    def get_redirect_url(self) -> str:
        """Return the page to go to after login, forgetting it from session."""
        if redirect_url := self.request.session.pop(SESSION_REDIRECT_URL, None):
            assert isinstance(redirect_url, str)
            return redirect_url
        return self.config.login_redirect

    def get_log_message(self, exc: Exception) -> str:
        """Generate the error log message for a failed authentication."""
        message = f"[{exc.__class__.__name__}] {exc}"
        message += f"\nRequest URL: {self.request.get_full_path()}"

        if referer := self.request.headers.get("Referer"):
            message += f"\nReferer URL: {referer}"

        response = getattr(exc, "response", None)
        if response is not None:
            message += f"\nProvider Response: {response.text}"

        return message
