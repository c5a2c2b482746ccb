from dataclasses import dataclass
from enum import Enum
from typing import Optional

from schemas import User, UserRole


class View(str, Enum):
    HOME = "home"
    DEALS = "deals"
    PROFILE = "profile"
    DASHBOARD = "dashboard"
    CATEGORIES = "categories"
    ADMIN_DASHBOARD = "admin-dashboard"
    STOREFRONT = "storefront"


PROTECTED = {View.PROFILE, View.DASHBOARD, View.ADMIN_DASHBOARD}
ROLE_VIEWS = {View.DASHBOARD: UserRole.VENDOR, View.ADMIN_DASHBOARD: UserRole.ADMIN}


@dataclass
class NavigationResult:
    view: View
    auth_required: bool = False
    reset_filters: bool = False


def landing_view(user: Optional[User]) -> View:
    if user is None:
        return View.HOME
    if user.role == UserRole.VENDOR:
        return View.DASHBOARD
    if user.role == UserRole.ADMIN:
        return View.ADMIN_DASHBOARD
    return View.HOME


def navigate(user: Optional[User], requested: View, current: View = View.HOME) -> NavigationResult:
    """Where a navigation request lands.

    Anonymous users asking for a protected view stay where they are and get
    prompted to sign in. Role dashboards only render for their own role.
    """
    if user is None and requested in PROTECTED:
        return NavigationResult(view=current, auth_required=True)
    required = ROLE_VIEWS.get(requested)
    if required is not None and user.role != required:
        return NavigationResult(view=View.HOME, reset_filters=True)
    return NavigationResult(view=requested, reset_filters=requested == View.HOME)
