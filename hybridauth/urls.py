# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
URLs of the hybridauth views.

Include them in the project URL configuration with::

    path("hybrid-auth/", include("hybridauth.urls")),
"""

from django.urls import path

from hybridauth import views

app_name = "hybridauth"

urlpatterns = [
    path("login/<str:provider>/", views.login, name="login"),
    path("callback/<str:provider>/", views.callback, name="callback"),
    path("callback/", views.callback, name="callback"),
]
