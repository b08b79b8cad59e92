# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Log in users of a Django project with external identity providers."""

# Code in this module is a standalone Django application. Add it to
# INSTALLED_APPS, add hybridauth.middleware.HybridAuthMiddleware to
# MIDDLEWARE after SessionMiddleware, include hybridauth.urls, and list
# providers in HYBRIDAUTH_PROVIDERS.
