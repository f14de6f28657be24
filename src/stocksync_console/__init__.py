from .config import ClientConfig, ConfigError, load_config
from .context import AppContext
from .exceptions import (
    ApiError,
    AuthorizationError,
    ConflictError,
    DraftValidationError,
    ForbiddenError,
    MalformedResponseError,
    NotAuthenticatedError,
    NotFoundError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .models import Alert, Identity, Item, MovementType, StockMovement, Supplier
from .route_guard import GuardDecision, GuardOutcome, RouteGuard, evaluate
from .session import Session, SessionController, SessionStatus, validate_token
from .synchronizers import (
    AlertsSynchronizer,
    AnalyticsSynchronizer,
    ItemsSynchronizer,
    StockSynchronizer,
    SuppliersSynchronizer,
    filter_alerts,
)
from .token_store import MemoryTokenStore, TokenStore
from .ui_errors import failure_message, to_user_facing_error

__all__ = [
    "Alert",
    "AlertsSynchronizer",
    "AnalyticsSynchronizer",
    "ApiError",
    "AppContext",
    "AuthorizationError",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "DraftValidationError",
    "ForbiddenError",
    "GuardDecision",
    "GuardOutcome",
    "HttpClient",
    "Identity",
    "Item",
    "ItemsSynchronizer",
    "MalformedResponseError",
    "MemoryTokenStore",
    "MovementType",
    "NotAuthenticatedError",
    "NotFoundError",
    "RouteGuard",
    "ServerError",
    "Session",
    "SessionController",
    "SessionStatus",
    "StockMovement",
    "StockSynchronizer",
    "Supplier",
    "SuppliersSynchronizer",
    "TokenStore",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "evaluate",
    "failure_message",
    "filter_alerts",
    "load_config",
    "to_user_facing_error",
    "validate_token",
]
