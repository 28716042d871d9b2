"""Route guard - decides render / redirect / wait from session state.

Pure decision layer: it holds no state of its own and never triggers
session transitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, TypeVar

from auth.session import SessionStore

T = TypeVar("T")


class GuardOutcome(Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


@dataclass(frozen=True)
class GuardDecision:
    """What the view layer should do for a protected location."""

    outcome: GuardOutcome
    location: str
    redirect_to: str | None = None
    # Originally requested location, carried along with a redirect.
    from_location: str | None = None


class RouteGuard:
    """Gates protected views on the session store."""

    def __init__(
        self,
        store: SessionStore,
        login_path: str = "/login",
        default_destination: str = "/markets",
    ):
        self._store = store
        self.login_path = login_path
        self.default_destination = default_destination

    def decide(self, location: str) -> GuardDecision:
        state = self._store.state
        if state.is_loading:
            return GuardDecision(GuardOutcome.LOADING, location)
        if not state.is_authenticated:
            return GuardDecision(
                GuardOutcome.REDIRECT,
                location,
                redirect_to=self.login_path,
                from_location=location,
            )
        return GuardDecision(GuardOutcome.RENDER, location)

    def guard(
        self,
        location: str,
        render: Callable[[], T],
        placeholder: T | None = None,
    ) -> T | GuardDecision | None:
        """Render protected content, or return the placeholder / redirect decision."""
        decision = self.decide(location)
        if decision.outcome is GuardOutcome.RENDER:
            return render()
        if decision.outcome is GuardOutcome.LOADING:
            return placeholder
        return decision

    def post_login_destination(self, decision: GuardDecision | None = None) -> str:
        """Where to go after a successful login.

        Returns the location captured by a redirect, unless it is missing or
        points back at the login page.
        """
        if decision is not None and decision.from_location:
            if decision.from_location.split("?", 1)[0] != self.login_path:
                return decision.from_location
        return self.default_destination
