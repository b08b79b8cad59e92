# Copyright 2016-2023 Enrico Zini <enrico@debian.org>
# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Helper functions for the hybridauth module."""

from urllib.parse import quote

from django.utils.http import url_has_allowed_host_and_scheme


def split_full_name(name: str) -> tuple[str, str]:
    """
    Arbitrary split a full name into (first_name, last_name).

    This is better than nothing, but not a lot better than that.
    """
    # See http://www.kalzumeus.com/2010/06/17/falsehoods-programmers-believe-about-names/  # noqa
    fn = name.split()
    if len(fn) == 1:
        return fn[0], ""
    elif len(fn) == 2:
        return fn[0], fn[1]
    elif len(fn) == 3:
        return " ".join(fn[0:2]), fn[2]
    else:
        middle = len(fn) // 2
        return " ".join(fn[:middle]), " ".join(fn[middle:])


def is_local_path(url: str | None) -> bool:
    """
    Check if url is a server-relative path.

    Only paths starting with a single ``/`` are accepted: ``//host`` and
    ``/\\host`` are scheme-relative URLs for browsers.
    """
    if not url or not url.startswith("/"):
        return False
    return url_has_allowed_host_and_scheme(url, allowed_hosts=None)


def append_query(url: str, name: str, value: str) -> str:
    """Append ``name=value`` to the query string of url."""
    char = "&" if "?" in url else "?"
    return f"{url}{char}{name}={quote(value, safe='/')}"
