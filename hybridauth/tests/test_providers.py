# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Tests for identity provider backends."""

import contextlib
import io
import json
from collections.abc import Generator
from types import SimpleNamespace
from typing import Any, ClassVar
from unittest import mock
from urllib.parse import parse_qs, urlparse

import django.http
import requests
import responses
from django.test import RequestFactory, TestCase, override_settings
from jwcrypto import jwk, jwt
from oauthlib.oauth2 import InvalidGrantError
from rest_framework import status

from hybridauth import providers
from hybridauth.providers import ProviderError, ProviderErrorCode
from hybridauth.test.base import MockSession

SALSA_PROVIDER = providers.GitlabProvider(
    name="salsa",
    label="Salsa",
    icon="hybridauth/gitlab.svg",
    client_id="123client_id",
    client_secret="123client_secret",
    url="https://salsa.debian.org",
    scope=("openid", "profile", "email"),
)

GITLAB_PROVIDER = providers.GitlabProvider(
    name="gitlab",
    label="GitLab",
    client_id="123client_id",
    client_secret="123client_secret",
    url="https://gitlab.com",
)

GITHUB_PROVIDER = providers.GitHubProvider(
    name="github",
    label="GitHub",
    client_id="123client_id",
    client_secret="123client_secret",
)

CALLBACK_URL = "http://testserver/hybrid-auth/callback/salsa/"
GITHUB_USER_URL = "https://api.github.com/user"
GITHUB_EMAILS_URL = "https://api.github.com/user/emails"


def make_response(
    url: str, status_code: int = 200, body: Any = None, reason: str = "OK"
) -> requests.Response:
    """Create a requests Response."""
    response = requests.Response()
    response.url = url
    response.status_code = status_code
    response.reason = reason
    if not isinstance(body, bytes):
        body = json.dumps(body).encode()
    response.raw = io.BytesIO(body)
    return response


def make_request(
    name: str = "salsa",
    session_state: str | None = "teststate",
    remote_state: str | None = "teststate",
    **query: str,
) -> django.http.HttpRequest:
    """Create a callback request."""
    data = dict(query)
    if remote_state is not None:
        data["state"] = remote_state
    data.setdefault("code", "testcode")
    request = RequestFactory().get(f"/hybrid-auth/callback/{name}/", data=data)
    request.session = MockSession()
    if session_state is not None:
        request.session[f"hybridauth_state_{name}"] = session_state
        request.session[f"hybridauth_redirect_uri_{name}"] = CALLBACK_URL
    return request


class ProviderTests(TestCase):
    """Test the base Provider class."""

    def test_defaults(self) -> None:
        """Test instantiating Provider with default arguments."""
        p = providers.Provider("name", "label")
        self.assertEqual(p.name, "name")
        self.assertEqual(p.label, "label")
        self.assertIsNone(p.icon)
        self.assertEqual(p.options, {})

    def test_all_set(self) -> None:
        """Test instantiating Provider."""
        p = providers.Provider(
            "name", "label", icon="icon", options={"answer": 42}
        )
        self.assertEqual(p.name, "name")
        self.assertEqual(p.label, "label")
        self.assertEqual(p.icon, "icon")
        self.assertEqual(p.options, {"answer": 42})

    def test_normalize(self) -> None:
        """The base provider takes fields as they are."""
        p = providers.Provider("name", "label")
        profile = p.normalize({"id": 1, "sex": "f"})
        self.assertEqual(profile.as_dict(), {"id": 1, "sex": "f"})

    def test_unsupported(self) -> None:
        """The base bound provider cannot authenticate."""
        bound = providers.Provider("name", "label").bind(make_request())
        for method, args in (
            (bound.get_authorization_url, (CALLBACK_URL,)),
            (bound.authenticate, ()),
        ):
            with self.subTest(method=method.__name__):
                with self.assertRaises(ProviderError) as exc:
                    method(*args)
                self.assertEqual(
                    exc.exception.code, ProviderErrorCode.UNSUPPORTED_FEATURE
                )

    def test_error_defaults(self) -> None:
        """Test ProviderError default arguments."""
        exc = ProviderError("message")
        self.assertEqual(str(exc), "message")
        self.assertEqual(exc.code, ProviderErrorCode.UNSPECIFIED)
        self.assertIsNone(exc.response)


class ProviderLookupTests(TestCase):
    """Test looking up providers from settings."""

    def assertLookupFails(self, code: ProviderErrorCode, message: str) -> None:
        """Check that looking up salsa fails."""
        with self.assertRaisesRegex(ProviderError, message) as exc:
            providers.get("salsa")
        self.assertEqual(exc.exception.code, code)

    @override_settings()
    def test_get_setting_undefined(self) -> None:
        """Lookup with no HYBRIDAUTH_PROVIDERS fails."""
        from django.conf import settings

        del settings.HYBRIDAUTH_PROVIDERS
        self.assertEqual(providers.get_providers(), ())
        self.assertLookupFails(
            ProviderErrorCode.UNKNOWN_OR_DISABLED_PROVIDER,
            "provider salsa requested, but not found",
        )

    @override_settings(HYBRIDAUTH_PROVIDERS=[GITLAB_PROVIDER])
    def test_get_not_found(self) -> None:
        """Lookup of a provider not configured fails."""
        self.assertLookupFails(
            ProviderErrorCode.UNKNOWN_OR_DISABLED_PROVIDER,
            "provider salsa requested, but not found in "
            "HYBRIDAUTH_PROVIDERS setting",
        )

    @override_settings(HYBRIDAUTH_PROVIDERS=[SimpleNamespace(name="salsa")])
    def test_get_wrong_type(self) -> None:
        """A provider of the wrong type is a configuration error."""
        self.assertLookupFails(
            ProviderErrorCode.CONFIGURATION_ERROR,
            "its entry in HYBRIDAUTH_PROVIDERS setting is not a Provider",
        )

    @override_settings(HYBRIDAUTH_PROVIDERS=[SALSA_PROVIDER, GITLAB_PROVIDER])
    def test_get(self) -> None:
        """Test GitLab provider parameter construction."""
        salsa = providers.get("salsa")
        gitlab = providers.get("gitlab")
        self.assertIs(salsa, SALSA_PROVIDER)
        self.assertIs(gitlab, GITLAB_PROVIDER)

        assert isinstance(salsa, providers.GitlabProvider)
        self.assertEqual(salsa.scope, ["openid", "profile", "email"])
        self.assertEqual(salsa.url_issuer, "https://salsa.debian.org")
        self.assertEqual(
            salsa.url_authorize, "https://salsa.debian.org/oauth/authorize"
        )
        self.assertEqual(
            salsa.url_token, "https://salsa.debian.org/oauth/token"
        )
        self.assertEqual(
            salsa.url_userinfo, "https://salsa.debian.org/oauth/userinfo"
        )
        self.assertEqual(
            salsa.url_jwks, "https://salsa.debian.org/oauth/discovery/keys"
        )

        assert isinstance(gitlab, providers.GitlabProvider)
        self.assertEqual(gitlab.scope, ["openid"])
        self.assertEqual(gitlab.url_issuer, "https://gitlab.com")

    def test_google_defaults(self) -> None:
        """Google endpoints are preset."""
        google = providers.GoogleProvider(
            name="google", label="Google", client_id="id", client_secret="s"
        )
        self.assertEqual(google.url_issuer, "https://accounts.google.com")
        self.assertEqual(
            google.url_jwks, "https://www.googleapis.com/oauth2/v3/certs"
        )
        self.assertEqual(google.scope, ["openid", "profile", "email"])
        self.assertFalse(google.fetch_userinfo)

    def test_github_defaults(self) -> None:
        """GitHub endpoints are preset."""
        self.assertEqual(
            GITHUB_PROVIDER.url_authorize,
            "https://github.com/login/oauth/authorize",
        )
        self.assertEqual(
            GITHUB_PROVIDER.url_token,
            "https://github.com/login/oauth/access_token",
        )
        self.assertEqual(
            GITHUB_PROVIDER.url_userinfo, "https://api.github.com/user"
        )
        self.assertEqual(
            GITHUB_PROVIDER.url_emails, "https://api.github.com/user/emails"
        )
        self.assertEqual(GITHUB_PROVIDER.scope, ["read:user", "user:email"])


class OAuth2ProviderTests(TestCase):
    """Test the OAuth2 handshake."""

    def test_bind(self) -> None:
        """Provider.bind binds to the request and proxies correctly."""
        request = make_request()
        bound = SALSA_PROVIDER.bind(request)
        self.assertIsInstance(bound, providers.BoundOIDCProvider)
        self.assertIs(bound.provider, SALSA_PROVIDER)
        self.assertIs(bound.request, request)
        self.assertEqual(bound.name, "salsa")
        self.assertEqual(bound.client_id, "123client_id")
        self.assertIsNone(bound.tokens)

    def test_bind_missing_credentials(self) -> None:
        """Providers without credentials cannot be used."""
        provider = providers.GitHubProvider(
            name="github", label="GitHub", client_id="", client_secret="s"
        )
        with self.assertRaisesRegex(
            ProviderError, "has no client_id or client_secret"
        ) as exc:
            provider.bind(make_request())
        self.assertEqual(
            exc.exception.code, ProviderErrorCode.MISSING_CREDENTIALS
        )

    def test_get_authorization_url(self) -> None:
        """The authorization URL is built and its state saved in session."""
        request = make_request(session_state=None)
        bound = SALSA_PROVIDER.bind(request)

        url = urlparse(bound.get_authorization_url(CALLBACK_URL))

        self.assertEqual(url.scheme, "https")
        self.assertEqual(url.netloc, "salsa.debian.org")
        self.assertEqual(url.path, "/oauth/authorize")
        query = parse_qs(url.query)
        self.assertEqual(query["response_type"], ["code"])
        self.assertEqual(query["client_id"], ["123client_id"])
        self.assertEqual(query["redirect_uri"], [CALLBACK_URL])
        self.assertEqual(query["scope"], ["openid profile email"])
        self.assertEqual(
            request.session["hybridauth_state_salsa"], query["state"][0]
        )
        self.assertEqual(
            request.session["hybridauth_redirect_uri_salsa"], CALLBACK_URL
        )

    def assertAuthenticationFails(
        self,
        request: django.http.HttpRequest,
        message: str,
        code: ProviderErrorCode = ProviderErrorCode.AUTHENTICATION_FAILED,
    ) -> ProviderError:
        """Check that authentication fails."""
        bound = GITHUB_PROVIDER.bind(request)
        with self.assertRaisesRegex(ProviderError, message) as exc:
            bound.authenticate()
        self.assertEqual(exc.exception.code, code)
        return exc.exception

    def test_state_not_in_session(self) -> None:
        """Callback state must have been stored in session."""
        self.assertAuthenticationFails(
            make_request("github", session_state=None),
            "expected state not found in session",
        )

    def test_state_not_in_get(self) -> None:
        """Callback must have a state argument."""
        request = make_request("github", remote_state=None)
        self.assertAuthenticationFails(
            request, "state not found in remote response"
        )
        self.assertNotIn("hybridauth_state_github", request.session)

    def test_wrong_state(self) -> None:
        """Callback state argument must match session."""
        request = make_request("github", session_state="wrong")
        self.assertAuthenticationFails(request, "Request state mismatch")
        self.assertNotIn("hybridauth_state_github", request.session)
        self.assertNotIn("hybridauth_redirect_uri_github", request.session)

    def test_refused(self) -> None:
        """The provider reported an error."""
        self.assertAuthenticationFails(
            make_request(
                "github",
                error="access_denied",
                error_description="The user denied access",
            ),
            "refused by provider: access_denied The user denied access",
        )

    def test_token_error(self) -> None:
        """Errors fetching the token are reported."""
        with mock.patch(
            "requests_oauthlib.OAuth2Session.fetch_token",
            side_effect=InvalidGrantError("bad code"),
        ):
            exc = self.assertAuthenticationFails(
                make_request("github"), "Cannot fetch access token"
            )
        self.assertIsInstance(exc.__cause__, InvalidGrantError)

    @contextlib.contextmanager
    def mock_github(self) -> Generator[responses.RequestsMock, None, None]:
        """Mock the token exchange, and the GitHub API."""
        with (
            mock.patch(
                "requests_oauthlib.OAuth2Session.fetch_token",
                return_value={"access_token": "accesstoken"},
            ),
            responses.RequestsMock() as rsps,
        ):
            yield rsps

    def test_github_authenticate(self) -> None:
        """GitHub users are normalized to an ExternalProfile."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                json={
                    "id": 583231,
                    "login": "octocat",
                    "name": "Mona Lisa Octocat",
                    "email": "octocat@github.com",
                    "avatar_url": "https://example.org/octocat.png",
                    "html_url": "https://github.com/octocat",
                    "blog": "",
                    "bio": None,
                },
            )
            bound = GITHUB_PROVIDER.bind(make_request("github"))
            profile = bound.authenticate()

        self.assertEqual(bound.tokens, {"access_token": "accesstoken"})
        self.assertEqual(profile.identifier, "583231")
        self.assertEqual(
            profile.as_dict(),
            {
                "id": 583231,
                "displayName": "octocat",
                "fullname": "Mona Lisa Octocat",
                "firstname": "Mona Lisa",
                "lastname": "Octocat",
                "email": "octocat@github.com",
                "pictureURL": "https://example.org/octocat.png",
                "profileURL": "https://github.com/octocat",
                "webSiteURL": None,
                "description": None,
            },
        )

    def test_github_private_email(self) -> None:
        """The primary email is looked up if not public."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                json={"id": 1, "login": "octocat"},
            )
            rsps.add(
                responses.GET,
                GITHUB_EMAILS_URL,
                json=[
                    {"email": "old@example.org", "primary": False},
                    {
                        "email": "octocat@example.org",
                        "primary": True,
                        "verified": True,
                    },
                ],
            )
            bound = GITHUB_PROVIDER.bind(make_request("github"))
            profile = bound.authenticate()

        self.assertEqual(profile.email, "octocat@example.org")
        self.assertIs(profile["emailVerified"], True)

    def test_userinfo_unauthorized(self) -> None:
        """A rejected access token means the user is not connected."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                json={},
                status=status.HTTP_401_UNAUTHORIZED,
            )
            exc = self.assertAuthenticationFails(
                make_request("github"),
                "access token was not accepted",
                ProviderErrorCode.USER_NOT_CONNECTED,
            )
        assert exc.response is not None
        self.assertEqual(
            exc.response.status_code, status.HTTP_401_UNAUTHORIZED
        )

    def test_userinfo_error(self) -> None:
        """Server errors from the user API are reported with the response."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                body="upstream failure",
                status=status.HTTP_502_BAD_GATEWAY,
            )
            exc = self.assertAuthenticationFails(
                make_request("github"),
                "cannot fetch user information: 502 \\(Bad Gateway\\)",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )
        assert exc.response is not None
        self.assertEqual(exc.response.text, "upstream failure")

    def test_userinfo_invalid_json(self) -> None:
        """Invalid JSON from the user API is reported."""
        with self.mock_github() as rsps:
            rsps.add(responses.GET, GITHUB_USER_URL, body="<html>")
            self.assertAuthenticationFails(
                make_request("github"),
                "invalid JSON in response",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )

    def test_userinfo_not_an_object(self) -> None:
        """User information must be a JSON object."""
        with self.mock_github() as rsps:
            rsps.add(responses.GET, GITHUB_USER_URL, json=[])
            self.assertAuthenticationFails(
                make_request("github"),
                "user information is not an object",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )

    def test_userinfo_no_id(self) -> None:
        """User information must identify the user."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                json={"login": "x", "email": "x@example.org"},
            )
            self.assertAuthenticationFails(
                make_request("github"),
                "Invalid user information from github",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )

    def test_userinfo_connection_error(self) -> None:
        """Network failures talking to the user API are reported."""
        with self.mock_github() as rsps:
            rsps.add(
                responses.GET,
                GITHUB_USER_URL,
                body=requests.ConnectionError("unreachable"),
            )
            self.assertAuthenticationFails(
                make_request("github"),
                "request failed: unreachable",
                ProviderErrorCode.USER_PROFILE_REQUEST_FAILED,
            )


class OIDCProviderTests(TestCase):
    """Test OpenID Connect ID token validation."""

    remote_key: ClassVar[jwk.JWK]
    remote_keyset: ClassVar[jwk.JWKSet]

    @classmethod
    def setUpClass(cls) -> None:
        """Create a reusable remote keyset only once for all the tests."""
        super().setUpClass()
        # This would normally use an asymmetric key, but we use a symmetric one
        # to avoid slowing down tests.
        cls.remote_key = jwk.JWK.generate(kty="oct", size=256)
        cls.remote_keyset = jwk.JWKSet.from_json(
            json.dumps(
                {
                    "keys": [cls.remote_key.export_symmetric(as_dict=True)],
                }
            )
        )

    @contextlib.contextmanager
    def mock_authentication(
        self, response_token: str | None, time: int = 123450
    ) -> Generator[mock.MagicMock, None, None]:
        """Mock the remote calls made to authenticate."""
        tokens: dict[str, str] = {"access_token": "accesstoken"}
        if response_token is not None:
            tokens["id_token"] = response_token
        keys = make_response(
            SALSA_PROVIDER.url_jwks, body=self.remote_keyset.export().encode()
        )
        with (
            mock.patch("requests.get", return_value=keys) as requests_get,
            mock.patch(
                "requests_oauthlib.OAuth2Session.fetch_token",
                return_value=tokens,
            ),
            mock.patch("time.time", return_value=time),
        ):
            yield requests_get

    def make_response_token(
        self,
        iss: str | None = None,
        aud: str | list[str] | None = None,
        exp: int = 123456,
        key: jwk.JWK | None = None,
        **claims: Any,
    ) -> str:
        """Generate a signed ID token, leaving out claims set to None."""
        payload = {
            "iss": iss or SALSA_PROVIDER.url_issuer,
            "aud": aud or SALSA_PROVIDER.client_id,
            "sub": "1234",
            "exp": exp,
            **claims,
        }
        response_payload = jwt.JWT(
            header={"alg": "HS256"},
            claims={k: v for k, v in payload.items() if v is not None},
        )
        response_payload.make_signed_token(key or self.remote_key)
        response_token = response_payload.serialize()
        assert isinstance(response_token, str)
        return response_token

    def assertAuthenticationFails(
        self, token: str | None, message: str
    ) -> None:
        """Check that authenticating with the given ID token fails."""
        bound = SALSA_PROVIDER.bind(make_request())
        with self.assertRaisesRegex(ProviderError, message) as exc:
            with self.mock_authentication(token):
                bound.authenticate()
        self.assertEqual(
            exc.exception.code, ProviderErrorCode.AUTHENTICATION_FAILED
        )

    def test_authenticate(self) -> None:
        """Claims are validated and normalized."""
        token = self.make_response_token(
            name="Ann Example",
            email="ann@example.org",
            email_verified=True,
            profile="https://salsa.debian.org/ann",
            groups_direct=["debian"],
        )
        request = make_request()
        bound = SALSA_PROVIDER.bind(request)
        with self.mock_authentication(token) as requests_get:
            profile = bound.authenticate()
            # Keys are cached
            bound.keyset

        requests_get.assert_called_once_with(SALSA_PROVIDER.url_jwks)
        self.assertEqual(
            profile.as_dict(),
            {
                "id": "1234",
                "fullname": "Ann Example",
                "firstname": "Ann",
                "lastname": "Example",
                "email": "ann@example.org",
                "emailVerified": True,
                "profileURL": "https://salsa.debian.org/ann",
                "groups_direct": ["debian"],
            },
        )
        self.assertNotIn("hybridauth_state_salsa", request.session)

    def test_audience_list(self) -> None:
        """The audience can be a list containing the client id."""
        token = self.make_response_token(aud=["other", "123client_id"])
        bound = SALSA_PROVIDER.bind(make_request())
        with self.mock_authentication(token):
            self.assertEqual(bound.authenticate().identifier, "1234")

    def test_wrong_issuer(self) -> None:
        """The issuer must match."""
        self.assertAuthenticationFails(
            self.make_response_token(iss="https://evil.example"),
            "Issuer mismatch",
        )

    def test_wrong_audience(self) -> None:
        """The audience must match."""
        self.assertAuthenticationFails(
            self.make_response_token(aud="other"), "Audience mismatch"
        )

    def test_expired(self) -> None:
        """Expired tokens are rejected."""
        token = self.make_response_token(exp=100)
        self.assertAuthenticationFails(token, "Invalid ID token")

    def test_wrong_key(self) -> None:
        """Tokens need to be signed with the right keys."""
        wrong_key = jwk.JWK.generate(kty="oct", size=256)
        self.assertAuthenticationFails(
            self.make_response_token(key=wrong_key), "Invalid ID token"
        )

    def test_no_id_token(self) -> None:
        """An ID token is required."""
        self.assertAuthenticationFails(None, "No ID token")

    def test_no_subject(self) -> None:
        """ID tokens must identify the user."""
        self.assertAuthenticationFails(
            self.make_response_token(sub=None), "ID token has no subject"
        )

    def test_keyset_error(self) -> None:
        """Failures fetching the keys are reported."""
        bound = SALSA_PROVIDER.bind(make_request())
        with (
            mock.patch(
                "requests.get",
                side_effect=requests.ConnectionError("unreachable"),
            ),
            self.assertRaisesRegex(ProviderError, "cannot fetch signing keys"),
        ):
            bound.keyset

    def test_fetch_userinfo(self) -> None:
        """Userinfo claims are merged if requested."""
        provider = providers.GitlabProvider(
            name="salsa",
            label="Salsa",
            client_id="123client_id",
            client_secret="123client_secret",
            url="https://salsa.debian.org",
            fetch_userinfo=True,
        )
        userinfo = make_response(
            provider.url_userinfo,
            body={"sub": "1234", "nickname": "ann", "picture": "https://p"},
        )
        bound = provider.bind(make_request())
        with (
            self.mock_authentication(self.make_response_token()),
            mock.patch(
                "requests_oauthlib.OAuth2Session.get", return_value=userinfo
            ),
        ):
            profile = bound.authenticate()
        self.assertEqual(profile["nickname"], "ann")
        self.assertEqual(profile["pictureURL"], "https://p")

    def test_fetch_userinfo_subject_mismatch(self) -> None:
        """Userinfo must be about the same subject as the ID token."""
        provider = providers.GitlabProvider(
            name="salsa",
            label="Salsa",
            client_id="123client_id",
            client_secret="123client_secret",
            url="https://salsa.debian.org",
            fetch_userinfo=True,
        )
        userinfo = make_response(provider.url_userinfo, body={"sub": "999"})
        bound = provider.bind(make_request())
        with (
            self.mock_authentication(self.make_response_token()),
            mock.patch(
                "requests_oauthlib.OAuth2Session.get", return_value=userinfo
            ),
            self.assertRaisesRegex(ProviderError, "Subject mismatch"),
        ):
            bound.authenticate()

    def test_normalize(self) -> None:
        """Standard claims are renamed, token claims dropped."""
        profile = SALSA_PROVIDER.normalize(
            {
                "iss": "x",
                "aud": "x",
                "exp": 1,
                "iat": 1,
                "nonce": "x",
                "sub": "1",
                "given_name": "Ann",
                "family_name": "Example",
                "name": "Ann Example",
                "preferred_username": "ann",
                "picture": "https://example.org/ann.png",
                "website": "https://ann.example.org",
                "birthdate": "1990-04-23",
                "gender": "female",
                "locale": "it",
            }
        )
        self.assertEqual(
            profile.as_dict(),
            {
                "id": "1",
                "firstname": "Ann",
                "lastname": "Example",
                "fullname": "Ann Example",
                "displayName": "ann",
                "pictureURL": "https://example.org/ann.png",
                "webSiteURL": "https://ann.example.org",
                "birthday": "1990-04-23",
                "sex": "female",
                "language": "it",
            },
        )
