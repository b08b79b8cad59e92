# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Authentication backend to mark hybridauth-managed authentication."""

from django.contrib.auth.backends import ModelBackend


class HybridAuthBackend(ModelBackend):
    """
    Auth backend for social login.

    There is no specific functionality, and it is currently used to mark users
    authenticated via external identity providers. It needs to be listed in
    ``AUTHENTICATION_BACKENDS`` for logins to persist across requests.
    """

    pass
