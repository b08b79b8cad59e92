# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
Signals sent by the hybridauth workflow.

``after_identify`` is sent once a user has been identified, before it is
stored in the session. Receivers get the user data as ``user`` and can
replace it by returning a new value: if more receivers return something,
the last one wins. Returning ``None`` leaves the user data unchanged::

    from django.dispatch import receiver
    from hybridauth.signals import after_identify

    @receiver(after_identify)
    def add_roles(sender, user, request, provider, **kwargs):
        return {**user, "roles": lookup_roles(user["id"])}
"""

from collections.abc import Callable
from typing import Any

import django.http
from django.dispatch import Signal

after_identify = Signal()

#: Signature of an after_identify receiver
AfterIdentifyListener = Callable[..., Any]


def register(listener: AfterIdentifyListener) -> AfterIdentifyListener:
    """
    Connect a receiver to ``after_identify``, keeping a strong reference.

    Can be used as a decorator.
    """
    after_identify.connect(listener, weak=False)
    return listener


def apply_after_identify(
    sender: type,
    user: Any,
    request: django.http.HttpRequest,
    provider: str,
) -> Any:
    """
    Send ``after_identify`` and return the resulting user data.

    :return: the last non-None value returned by a receiver, or ``user``
    """
    responses = after_identify.send(
        sender=sender, user=user, request=request, provider=provider
    )
    for _, result in reversed(responses):
        if result is not None:
            return result
    return user
