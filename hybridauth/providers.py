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
Support for external identity providers.

This is configured by the HYBRIDAUTH_PROVIDERS variable in django settings.

HYBRIDAUTH_PROVIDERS is expected to be a sequence of `Provider` instances,
one for each supported identity provider.

Example::

    HYBRIDAUTH_PROVIDERS = [
        providers.GitlabProvider(
            name="salsa",
            label="Salsa",
            icon="hybridauth/gitlab.svg",
            client_id="123client_id",
            client_secret="123client_secret",
            url="https://salsa.debian.org",
        ),
        providers.GitHubProvider(
            name="github",
            label="GitHub",
            client_id="123client_id",
            client_secret="123client_secret",
        ),
    ]

Providers perform the OAuth2 / OpenID Connect handshake and return the
authenticated user as an :py:class:`hybridauth.profile.ExternalProfile`.
Failures are reported as :py:class:`ProviderError`, whose ``code`` tells
configuration problems apart from failed authentications.
"""

import enum
import functools
import json
from collections.abc import Collection, Mapping, Sequence
from typing import Any, TYPE_CHECKING

from hybridauth.profile import ExternalProfile
from hybridauth.utils import split_full_name

if TYPE_CHECKING:  # pragma: no cover
    import django.http
    import jwcrypto.jwk
    import requests
    from requests_oauthlib import OAuth2Session

# Note: this module is supposed to be imported from settings.py
#
# Its module-level import list for the case of defining providers should be
# kept accordingly minimal


class ProviderErrorCode(enum.IntEnum):
    """Reasons for a provider failure."""

    UNSPECIFIED = 0
    CONFIGURATION_ERROR = 1
    PROVIDER_NOT_CONFIGURED = 2
    UNKNOWN_OR_DISABLED_PROVIDER = 3
    MISSING_CREDENTIALS = 4
    AUTHENTICATION_FAILED = 5
    USER_PROFILE_REQUEST_FAILED = 6
    USER_NOT_CONNECTED = 7
    UNSUPPORTED_FEATURE = 8


class ProviderError(Exception):
    """Exception raised when a provider fails to authenticate a user."""

    def __init__(
        self,
        message: str,
        code: ProviderErrorCode = ProviderErrorCode.UNSPECIFIED,
        response: "requests.Response | None" = None,
    ) -> None:
        """
        Describe a provider failure.

        :param message: description of the failure
        :param code: classification of the failure
        :param response: response from the provider, if the failure came
                         from a remote call
        """
        super().__init__(message)
        self.code = code
        self.response = response


def get_providers() -> Sequence["Provider"]:
    """Return the configured providers."""
    from django.conf import settings

    return getattr(settings, "HYBRIDAUTH_PROVIDERS", ())


def get(name: str) -> "Provider":
    """
    Look up a provider by name.

    :param name: name of the provider to look up, matching Provider.name
    :raises ProviderError: if no provider with that name has been defined in
                           settings
    :return: the Provider instance
    """
    for p in get_providers():
        if p.name == name:
            if not isinstance(p, Provider):
                raise ProviderError(
                    f"provider {name} requested,"
                    " but its entry in HYBRIDAUTH_PROVIDERS setting is not a"
                    " Provider",
                    ProviderErrorCode.CONFIGURATION_ERROR,
                )
            return p

    raise ProviderError(
        f"provider {name} requested,"
        " but not found in HYBRIDAUTH_PROVIDERS setting",
        ProviderErrorCode.UNKNOWN_OR_DISABLED_PROVIDER,
    )


class BoundProvider:
    """
    Request-aware proxy for Provider.

    This class provides provider-specific functionality based on the current
    Django request object.
    """

    def __init__(
        self, provider: "Provider", request: "django.http.HttpRequest"
    ) -> None:
        """
        Construct a BoundProvider from a Provider and a HttpRequest.

        :param provider: provider to bind to a request
        :param request: current Django request
        """
        self.provider = provider
        self.request = request

    def __getattr__(self, name: str) -> Any:
        """Proxy attribute access to the provider definition."""
        return getattr(self.provider, name)

    def get_authorization_url(self, redirect_uri: str) -> str:
        """
        Start authentication.

        :param redirect_uri: absolute URL the provider sends the user back to
        :return: the URL to send the user to
        """
        raise ProviderError(
            f"provider {self.provider.name} does not support authentication",
            ProviderErrorCode.UNSUPPORTED_FEATURE,
        )

    def authenticate(self) -> ExternalProfile:
        """Complete authentication, returning the remote user profile."""
        raise ProviderError(
            f"provider {self.provider.name} does not support authentication",
            ProviderErrorCode.UNSUPPORTED_FEATURE,
        )


class Provider:
    """Information about an identity provider."""

    #: Identifier to reference the provider in code, configuration and URLs
    name: str
    #: User-visible description
    label: str
    #: Optional user-visible icon, resolved via ``{% static %}`` in templates
    icon: str | None
    #: Freeform options used to configure behaviour of HybridAuth subclasses
    options: dict[str, Any]
    #: Class used to create a request-bound version
    bound_class: type["BoundProvider"] = BoundProvider

    def __init__(
        self,
        name: str,
        label: str,
        *,
        icon: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """
        Define an external authentication provider.

        Provider implementation subclasses can definer further keyword
        arguments.
        """
        self.name = name
        self.label = label
        self.icon = icon
        self.options: dict[str, Any] = options or {}

    def bind(self, request: "django.http.HttpRequest") -> "BoundProvider":
        """Create a BoundProvider for this session."""
        return self.bound_class(self, request)

    def normalize(self, claims: Mapping[str, Any]) -> ExternalProfile:
        """Convert provider user information to an ExternalProfile."""
        return ExternalProfile(claims)


class BoundOAuth2Provider(BoundProvider):
    """Bound version of the OAuth2 provider."""

    provider: "OAuth2Provider"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Construct a BoundProvider for OAuth2."""
        super().__init__(*args, **kwargs)
        if not self.provider.client_id or not self.provider.client_secret:
            raise ProviderError(
                f"provider {self.provider.name} has no client_id"
                " or client_secret",
                ProviderErrorCode.MISSING_CREDENTIALS,
            )
        self.tokens: dict[str, Any] | None = None

    @property
    def state_session_key(self) -> str:
        """Session key storing the state of an authentication in progress."""
        return f"hybridauth_state_{self.provider.name}"

    @property
    def redirect_uri_session_key(self) -> str:
        """Session key storing the redirect URI sent to the provider."""
        return f"hybridauth_redirect_uri_{self.provider.name}"

    def make_session(
        self, redirect_uri: str | None, state: str | None = None
    ) -> "OAuth2Session":
        """Create the requests-oauthlib session to talk to the provider."""
        from requests_oauthlib import OAuth2Session

        return OAuth2Session(
            self.provider.client_id,
            scope=self.provider.scope,
            redirect_uri=redirect_uri,
            state=state,
        )

    def get_authorization_url(self, redirect_uri: str) -> str:
        """Return an authorization URL for this provider."""
        oauth = self.make_session(redirect_uri)
        url, state = oauth.authorization_url(
            self.provider.url_authorize, **self.provider.authorization_params
        )
        self.request.session[self.state_session_key] = state
        self.request.session[self.redirect_uri_session_key] = redirect_uri
        assert isinstance(url, str)
        return url

    def validate_state(self) -> tuple[str, str | None]:
        """
        Check the state returned by the provider.

        :return: the state and the redirect URI used to start authentication
        """
        from django.utils.crypto import constant_time_compare

        expected_state = self.request.session.pop(self.state_session_key, None)
        redirect_uri = self.request.session.pop(
            self.redirect_uri_session_key, None
        )

        if expected_state is None:
            raise ProviderError(
                "Request state mismatch: expected state not found in session",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        remote_state = self.request.GET.get("state")
        if remote_state is None:
            raise ProviderError(
                "Request state mismatch: state not found in remote response",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        if not constant_time_compare(remote_state, expected_state):
            raise ProviderError(
                "Request state mismatch:"
                f" remote: {remote_state!r},"
                f" expected: {expected_state!r}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        return expected_state, redirect_uri

    def fetch_tokens(self, oauth: "OAuth2Session") -> dict[str, Any]:
        """Exchange the authorization code for tokens."""
        from oauthlib.oauth2 import OAuth2Error
        from requests import RequestException

        if error := self.request.GET.get("error"):
            description = self.request.GET.get("error_description", "")
            raise ProviderError(
                f"Authentication refused by provider: {error} {description}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        try:
            tokens = oauth.fetch_token(
                self.provider.url_token,
                authorization_response=self.request.build_absolute_uri(),
                client_secret=self.provider.client_secret,
            )
        except (OAuth2Error, RequestException) as exc:
            raise ProviderError(
                f"Cannot fetch access token: {exc}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
                response=getattr(exc, "response", None),
            ) from exc
        return dict(tokens)

    def get_json(self, oauth: "OAuth2Session", url: str) -> Any:
        """Perform an authenticated GET to the provider API."""
        import requests
        from rest_framework import status

        try:
            response = oauth.get(url, headers={"Accept": "application/json"})
        except requests.RequestException as exc:
            raise ProviderError(
                f"{url}: request failed: {exc}",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            ) from exc

        match response.status_code:
            case status.HTTP_200_OK:
                try:
                    return response.json()
                except requests.exceptions.JSONDecodeError:
                    raise ProviderError(
                        f"{url}: invalid JSON in response",
                        ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
                        response=response,
                    )
            case status.HTTP_401_UNAUTHORIZED:
                raise ProviderError(
                    f"{url}: access token was not accepted",
                    ProviderErrorCode.USER_NOT_CONNECTED,
                    response=response,
                )
            case _:
                raise ProviderError(
                    f"{url}: cannot fetch user information:"
                    f" {response.status_code} ({response.reason})",
                    ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
                    response=response,
                )

    def fetch_claims(self, oauth: "OAuth2Session") -> dict[str, Any]:
        """Fetch information about the authenticated user."""
        claims = self.get_json(oauth, self.provider.url_userinfo)
        if not isinstance(claims, dict):
            raise ProviderError(
                f"{self.provider.url_userinfo}: user information is not an"
                " object",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )
        return claims

    def authenticate(self) -> ExternalProfile:
        """Fetch tokens and user information from the provider."""
        state, redirect_uri = self.validate_state()
        oauth = self.make_session(redirect_uri, state=state)
        self.tokens = self.fetch_tokens(oauth)
        claims = self.fetch_claims(oauth)
        try:
            return self.provider.normalize(claims)
        except ValueError as exc:
            raise ProviderError(
                f"Invalid user information from {self.provider.name}: {exc}",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            ) from exc


class OAuth2Provider(Provider):
    """Generic OAuth2 identity provider."""

    bound_class = BoundOAuth2Provider

    def __init__(
        self,
        *args: Any,
        client_id: str,
        client_secret: str,
        url_authorize: str,
        url_token: str,
        url_userinfo: str,
        scope: str | Collection[str] = (),
        authorization_params: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Define an OAuth2 provider.

        :param client_id: client identifier configured in the authentication
            server
        :param client_secret: client_secret provided by the authentication
            server
        :param url_authorize: OAuth2 authorization endpoint
        :param url_token: OAuth2 token endpoint
        :param url_userinfo: endpoint returning information about the
            authenticated user
        :param scope: scopes to request
        :param authorization_params: extra query string parameters for the
            authorization URL
        """
        super().__init__(*args, **kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.url_authorize = url_authorize
        self.url_token = url_token
        self.url_userinfo = url_userinfo
        self.scope: list[str]
        if isinstance(scope, str):
            self.scope = [scope]
        else:
            self.scope = list(scope)
        self.authorization_params: dict[str, str] = authorization_params or {}


#: Map standard OpenID Connect claims to ExternalProfile fields
OIDC_CLAIMS = {
    "sub": "id",
    "given_name": "firstname",
    "family_name": "lastname",
    "name": "fullname",
    "preferred_username": "displayName",
    "email": "email",
    "email_verified": "emailVerified",
    "picture": "pictureURL",
    "profile": "profileURL",
    "website": "webSiteURL",
    "birthdate": "birthday",
    "gender": "sex",
    "locale": "language",
}

#: ID token claims that only matter for token validation
OIDC_TOKEN_CLAIMS = frozenset(
    (
        "iss",
        "aud",
        "exp",
        "iat",
        "nbf",
        "auth_time",
        "nonce",
        "at_hash",
        "c_hash",
        "azp",
        "jti",
        "sid",
    )
)


class BoundOIDCProvider(BoundOAuth2Provider):
    """Bound version of the OpenID Connect provider."""

    provider: "OIDCProvider"

    @functools.cached_property
    def keyset(self) -> "jwcrypto.jwk.JWKSet":
        """Load the provider signing keys."""
        # TODO: this caches the server keys in memory for the lifetime of
        # the bound provider, that is, one request. Key caching across
        # requests can be added if usage scales up.
        import jwcrypto.jwk
        import requests

        try:
            key_response = requests.get(self.provider.url_jwks)
            key_response.raise_for_status()
        except requests.RequestException as exc:
            raise ProviderError(
                f"{self.provider.url_jwks}: cannot fetch signing keys: {exc}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
                response=getattr(exc, "response", None),
            ) from exc
        return jwcrypto.jwk.JWKSet.from_json(key_response.text)

    def validate_id_token(self, id_token: str) -> dict[str, Any]:
        """Validate the ID token and return its claims."""
        import jwcrypto.common
        import jwcrypto.jwt
        from django.utils.crypto import constant_time_compare

        # See https://openid.net/specs/openid-connect-core-1_0.html#IDTokenValidation  # noqa: E501
        try:
            tok = jwcrypto.jwt.JWT(key=self.keyset, jwt=id_token)
        except (jwcrypto.common.JWException, ValueError) as exc:
            raise ProviderError(
                f"Invalid ID token: {exc}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            ) from exc
        claims = json.loads(tok.claims)

        if not constant_time_compare(
            claims.get("iss", ""), self.provider.url_issuer
        ):
            raise ProviderError(
                f"Issuer mismatch: remote: {claims.get('iss')!r},"
                f" expected: {self.provider.url_issuer!r}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        audience = claims.get("aud", "")
        if isinstance(audience, list):
            valid_audience = self.provider.client_id in audience
        else:
            valid_audience = constant_time_compare(
                audience, self.provider.client_id
            )
        if not valid_audience:
            raise ProviderError(
                f"Audience mismatch: remote: {audience!r},"
                f" expected: {self.provider.client_id!r}",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        if not claims.get("sub"):
            raise ProviderError(
                "ID token has no subject",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )

        # Note: the 'exp' claim is checked by default by JWT
        return claims

    def fetch_claims(self, oauth: "OAuth2Session") -> dict[str, Any]:
        """Get user information from the ID token, and optionally userinfo."""
        assert self.tokens is not None
        if not (id_token := self.tokens.get("id_token")):
            raise ProviderError(
                "No ID token in provider response: is the openid scope"
                " requested?",
                ProviderErrorCode.AUTHENTICATION_FAILED,
            )
        claims = self.validate_id_token(id_token)
        if self.provider.fetch_userinfo:
            userinfo = super().fetch_claims(oauth)
            if userinfo.get("sub", claims["sub"]) != claims["sub"]:
                raise ProviderError(
                    "Subject mismatch between ID token and userinfo",
                    ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
                )
            claims.update(userinfo)
        return claims


class OIDCProvider(OAuth2Provider):
    """OpenID Connect identity provider."""

    bound_class = BoundOIDCProvider

    def __init__(
        self,
        *args: Any,
        url_issuer: str,
        url_jwks: str,
        scope: str | Collection[str] = ("openid", "profile", "email"),
        fetch_userinfo: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Define an OpenID Connect provider.

        :param url_issuer: URL identifying the authentication server
        :param url_jwks: OIDC jwks_uri to retrieve the authentication server
            signing keys
        :param fetch_userinfo: also query the userinfo endpoint, for
            providers that do not put all claims in the ID token

        See https://openid.net/specs/openid-connect-core-1_0.html for details
        """
        super().__init__(*args, scope=scope, **kwargs)
        self.url_issuer = url_issuer
        self.url_jwks = url_jwks
        self.fetch_userinfo = fetch_userinfo

    def normalize(self, claims: Mapping[str, Any]) -> ExternalProfile:
        """Convert OpenID Connect claims to an ExternalProfile."""
        fields: dict[str, Any] = {}
        for name, value in claims.items():
            if name in OIDC_TOKEN_CLAIMS:
                continue
            fields[OIDC_CLAIMS.get(name, name)] = value
        if fields.get("fullname") and not (
            fields.get("firstname") or fields.get("lastname")
        ):
            fields["firstname"], fields["lastname"] = split_full_name(
                fields["fullname"]
            )
        return ExternalProfile(fields)


class GitlabProvider(OIDCProvider):
    """Gitlab OIDC identity provider."""

    def __init__(self, *args: Any, url: str, **kwargs: Any) -> None:
        """
        Define a GitLab-based OIDC Connect provider.

        :param url: URL to the root of the GitLab server. It will be used to
            automatically generate all ``url_*`` arguments for OIDCProvider
        """
        kwargs.setdefault("scope", "openid")
        kwargs["url_issuer"] = url
        kwargs["url_authorize"] = f"{url}/oauth/authorize"
        kwargs["url_token"] = f"{url}/oauth/token"
        kwargs["url_userinfo"] = f"{url}/oauth/userinfo"
        kwargs["url_jwks"] = f"{url}/oauth/discovery/keys"
        super().__init__(*args, **kwargs)


class GoogleProvider(OIDCProvider):
    """Google OIDC identity provider."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Define a Google OpenID Connect provider."""
        kwargs.setdefault("url_issuer", "https://accounts.google.com")
        kwargs.setdefault(
            "url_authorize", "https://accounts.google.com/o/oauth2/v2/auth"
        )
        kwargs.setdefault("url_token", "https://oauth2.googleapis.com/token")
        kwargs.setdefault(
            "url_userinfo", "https://openidconnect.googleapis.com/v1/userinfo"
        )
        kwargs.setdefault(
            "url_jwks", "https://www.googleapis.com/oauth2/v3/certs"
        )
        super().__init__(*args, **kwargs)


class BoundGitHubProvider(BoundOAuth2Provider):
    """Bound version of the GitHub provider."""

    provider: "GitHubProvider"

    def fetch_claims(self, oauth: "OAuth2Session") -> dict[str, Any]:
        """Fetch the user, and their primary email if it is not public."""
        claims = super().fetch_claims(oauth)
        if claims.get("email"):
            return claims

        emails = self.get_json(oauth, self.provider.url_emails)
        for entry in emails if isinstance(emails, list) else ():
            if entry.get("primary"):
                claims["email"] = entry.get("email")
                claims["email_verified"] = bool(entry.get("verified"))
                break
        return claims


class GitHubProvider(OAuth2Provider):
    """GitHub OAuth2 identity provider."""

    bound_class = BoundGitHubProvider

    def __init__(
        self,
        *args: Any,
        url: str = "https://github.com",
        url_api: str = "https://api.github.com",
        **kwargs: Any,
    ) -> None:
        """
        Define a GitHub provider.

        :param url: URL to the GitHub server
        :param url_api: URL to the GitHub REST API
        """
        kwargs.setdefault("scope", ("read:user", "user:email"))
        kwargs.setdefault("url_authorize", f"{url}/login/oauth/authorize")
        kwargs.setdefault("url_token", f"{url}/login/oauth/access_token")
        kwargs.setdefault("url_userinfo", f"{url_api}/user")
        super().__init__(*args, **kwargs)
        self.url_emails = f"{url_api}/user/emails"

    def normalize(self, claims: Mapping[str, Any]) -> ExternalProfile:
        """Convert a GitHub user record to an ExternalProfile."""
        fields: dict[str, Any] = {
            "id": claims.get("id"),
            "displayName": claims.get("login"),
            "fullname": claims.get("name"),
            "email": claims.get("email"),
            "pictureURL": claims.get("avatar_url"),
            "profileURL": claims.get("html_url"),
            "webSiteURL": claims.get("blog") or None,
            "description": claims.get("bio"),
        }
        if "email_verified" in claims:
            fields["emailVerified"] = claims["email_verified"]
        if name := claims.get("name"):
            fields["firstname"], fields["lastname"] = split_full_name(name)
        return ExternalProfile(fields)
