"""
View guard: decides which view an operator lands on.

Denied views redirect silently to the default view; no error is raised.
"""

import logging
from typing import Optional, Union

from pathy_admin.models.session import AdminSession, Feature

LOGIN_VIEW = "login"
DEFAULT_VIEW = Feature.DASHBOARD

logger = logging.getLogger(__name__)


def can_view(session: Optional[AdminSession], feature: Union[Feature, str]) -> bool:
    if session is None:
        return False
    if Feature(feature) is DEFAULT_VIEW:
        return True
    return session.has_capability(feature)


def can_edit(session: Optional[AdminSession], feature: Union[Feature, str]) -> bool:
    return session is not None and session.has_capability(feature, write=True)


def resolve_view(session: Optional[AdminSession], requested: Union[Feature, str]) -> Union[Feature, str]:
    """Return the view to show for ``requested``: itself, the default view, or login."""
    if session is None:
        return LOGIN_VIEW
    feature = Feature(requested)
    if can_view(session, feature):
        return feature
    logger.debug("%s has no access to %s, redirecting to %s", session.role.value, feature.value, DEFAULT_VIEW.value)
    return DEFAULT_VIEW


def visible_features(session: Optional[AdminSession]) -> list[Feature]:
    """Navigation entries the operator may open, in menu order."""
    return [feature for feature in Feature if can_view(session, feature)]
