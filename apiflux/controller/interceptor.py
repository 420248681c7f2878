"""Interception capability consulted throughout the request lifecycle."""

import inspect
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx

from apiflux.errors import ApiError


class AuthenticationState(str, Enum):
    """Whether the caller can currently be authenticated.

    - REACHABLE: Authentication can proceed
    - NOT_REACHABLE: No network connection available
    - NOT_LOGGED_IN: The user needs to sign in
    """

    REACHABLE = "reachable"
    NOT_REACHABLE = "not_reachable"
    NOT_LOGGED_IN = "not_logged_in"


@runtime_checkable
class Interceptor(Protocol):
    """Gate, mutate, and observe requests.

    Every member is optional; ``InterceptorHooks`` supplies the no-op
    default for whatever an interceptor leaves out, so implementations
    only write the hooks they need and need no base class.
    """

    def authentication_state(self) -> AuthenticationState:
        """Report the current authentication state (queried every attempt)."""
        ...

    async def authenticate(self) -> bool:
        """Authenticate once per request call; raising means unreachable."""
        ...

    def intercept_request(self, request: httpx.Request) -> None:
        """Mutate the outgoing request in place (auth headers, ...)."""
        ...

    def intercept_response_bytes(self, data: bytes) -> bytes | None:
        """Return replacement response bytes, or None to keep them."""
        ...

    def intercept_error(self, error: ApiError) -> None:
        """Observe a failure (token refresh triggers, ...)."""
        ...


class InterceptorHooks:
    """Calls into an optional interceptor with defaults for missing hooks.

    Defaults: REACHABLE, authentication succeeds, requests and bytes pass
    through unchanged, errors are not observed.
    """

    def __init__(self, interceptor: Any = None) -> None:
        """Initialize the hooks.

        Args:
            interceptor: Object implementing any subset of ``Interceptor``.
        """
        self._interceptor = interceptor

    @property
    def interceptor(self) -> Any:
        """Get the wrapped interceptor."""
        return self._interceptor

    def _hook(self, name: str) -> Any:
        if self._interceptor is None:
            return None
        hook = getattr(self._interceptor, name, None)
        return hook if callable(hook) else None

    def authentication_state(self) -> AuthenticationState:
        """Query the authentication state.

        The member may be a method or a plain attribute or property holding
        the state; only a missing member defaults to REACHABLE.

        Raises:
            ValueError: If the reported value is not an AuthenticationState.
        """
        if self._interceptor is None:
            return AuthenticationState.REACHABLE
        state = getattr(self._interceptor, "authentication_state", None)
        if state is None:
            return AuthenticationState.REACHABLE
        if callable(state):
            state = state()
        return AuthenticationState(state)

    async def authenticate(self) -> bool:
        """Run authentication; sync and async implementations both work."""
        hook = self._hook("authenticate")
        if hook is None:
            return True
        result = hook()
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    def intercept_request(self, request: httpx.Request) -> None:
        """Let the interceptor mutate the request."""
        hook = self._hook("intercept_request")
        if hook is not None:
            hook(request)

    def intercept_response_bytes(self, data: bytes) -> bytes:
        """Let the interceptor replace the response bytes."""
        hook = self._hook("intercept_response_bytes")
        if hook is None:
            return data
        replaced = hook(data)
        return data if replaced is None else bytes(replaced)

    def intercept_error(self, error: ApiError) -> None:
        """Let the interceptor observe an error; its return value is ignored."""
        hook = self._hook("intercept_error")
        if hook is not None:
            hook(error)
