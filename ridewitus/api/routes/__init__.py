# API Routes Module
from ridewitus.api.routes import (
    auth,
    admin,
    pricing,
    activities,
    sync,
    subscriptions,
)

__all__ = [
    "auth",
    "admin",
    "pricing",
    "activities",
    "sync",
    "subscriptions",
]
