"""Routes and their optional capabilities."""

from navstack.routing.deeplink import DeepLink, DeeplinkStrategy
from navstack.routing.guard import Guard, can_exit
from navstack.routing.query import QueryParams
from navstack.routing.redirect import (
    CONTINUE,
    STOP,
    Continue,
    RedirectResult,
    RedirectRule,
    RedirectTo,
    Redirector,
    RuleRedirector,
    Stop,
    resolve,
)
from navstack.routing.route import Completion, Route

__all__ = [
    "CONTINUE",
    "STOP",
    "Completion",
    "Continue",
    "DeepLink",
    "DeeplinkStrategy",
    "Guard",
    "QueryParams",
    "RedirectResult",
    "RedirectRule",
    "RedirectTo",
    "Redirector",
    "Route",
    "RuleRedirector",
    "Stop",
    "can_exit",
    "resolve",
]
