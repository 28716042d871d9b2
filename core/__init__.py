"""Application wiring."""

from core.dashboard import Dashboard, create_dashboard
