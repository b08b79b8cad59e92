# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Django Application Configuration for the hybridauth application."""

from django.apps import AppConfig


class HybridAuthAppConfig(AppConfig):
    """Django's AppConfig for the hybridauth application."""

    name = "hybridauth"
    verbose_name = "Social login"
    default_auto_field = "django.db.models.BigAutoField"
