"""Request controller: environments, interception, retries, and logging."""

from apiflux.controller.classifier import (
    ResponseClass,
    StatusGroup,
    classify,
    status_group,
    status_phrase,
)
from apiflux.controller.config import ControllerConfig
from apiflux.controller.controller import RequestController
from apiflux.controller.exchange_log import (
    ExchangeLogChannel,
    LogHook,
    StructlogExchangeLogger,
)
from apiflux.controller.interceptor import (
    AuthenticationState,
    Interceptor,
    InterceptorHooks,
)
from apiflux.controller.metrics import RequestMetrics
from apiflux.controller.models import (
    AttemptOutcome,
    AttemptRecord,
    Environment,
    ExchangeRecord,
    Failure,
    RequestResult,
    Success,
)
from apiflux.controller.redact import redact_headers, redact_url
from apiflux.controller.state_machine import (
    RequestState,
    RequestStateMachine,
    RequestStateTransitionError,
)


__all__ = [
    # Controller
    "RequestController",
    "ControllerConfig",
    # Models
    "Environment",
    "AttemptOutcome",
    "AttemptRecord",
    "ExchangeRecord",
    "Success",
    "Failure",
    "RequestResult",
    # Interception
    "AuthenticationState",
    "Interceptor",
    "InterceptorHooks",
    # Classification
    "ResponseClass",
    "StatusGroup",
    "classify",
    "status_group",
    "status_phrase",
    # Logging
    "ExchangeLogChannel",
    "LogHook",
    "StructlogExchangeLogger",
    "redact_headers",
    "redact_url",
    # Metrics and state
    "RequestMetrics",
    "RequestState",
    "RequestStateMachine",
    "RequestStateTransitionError",
]
