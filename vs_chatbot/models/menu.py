"""Contextual menu models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class VisibleWhen(str, Enum):
    """Authentication condition under which a menu item is shown."""

    ALWAYS = "always"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"

    def matches(self, is_authenticated: bool) -> bool:
        if self is VisibleWhen.AUTHENTICATED:
            return is_authenticated
        if self is VisibleWhen.UNAUTHENTICATED:
            return not is_authenticated
        return True


class MenuAction(str, Enum):
    """Actions the orchestrator knows how to run from a menu selection."""

    AUTHENTICATE = "authenticate"
    LOGOUT = "logout"


class MenuItem(BaseModel):
    """Configured menu entry, read-only after startup."""

    model_config = ConfigDict(frozen=True)

    id: str
    label_key: str | None = None
    label: str | None = None
    action: str | None = None
    visible_when: VisibleWhen = VisibleWhen.ALWAYS


class MenuOption(BaseModel):
    """Resolved menu entry as sent to the channel."""

    id: str
    title: str
