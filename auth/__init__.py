"""Session, route guard and profile modules."""

from auth.result import Result, Ok, Err, Failure, FailureKind
from auth.types import (
    User,
    SessionState,
    LoginRequest,
    RegisterRequest,
    CredentialLink,
    VerificationResult,
)
from auth.config import AuthConfig
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionStore
from auth.guard import RouteGuard, GuardDecision, GuardOutcome
from auth.profile import ProfileService
