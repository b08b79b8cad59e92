# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""URL configuration used by the test suite."""

from django.http import HttpRequest, HttpResponse
from django.urls import include, path


def placeholder(request: HttpRequest) -> HttpResponse:  # noqa: U100
    """Stand-in for pages of the host project."""
    return HttpResponse()


urlpatterns = [
    path("hybrid-auth/", include("hybridauth.urls")),
    path("users/login", placeholder, name="login"),
    path("", placeholder, name="homepage"),
]
