"""Redirect decision for users who must change their password before using the app"""

from typing import Optional
from urllib.parse import urlencode

CHANGE_PASSWORD_ROUTE = "/change-password"


def determine_password_redirect(
    loading: bool,
    must_change_password: bool,
    pathname: Optional[str],
) -> Optional[str]:
    """
    Return the change-password URL (with `next` set to the current path) or None.

    No redirect while the session is still loading, when no change is required,
    or when the user is already on a change-password route.
    """
    if loading or not must_change_password:
        return None

    if not pathname or pathname.startswith(CHANGE_PASSWORD_ROUTE):
        return None

    return f"{CHANGE_PASSWORD_ROUTE}?{urlencode({'next': pathname})}"
