"""Request-scoped identity for log correlation.

The org ID (tenant), user ID and request ID of the request being served are
kept in context variables, so they follow the call chain across threads and
asyncio tasks without being passed around explicitly. ``log_fields`` turns
whatever is bound into a field set for a log entry.

Usage::

    with bind_identity(org_id="t1", user_id="u42"):
        log_fields()  # {"user_id": "u42", "org_id": "t1"}
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import Context, ContextVar
from typing import Iterator

from .errors import MissingOrgID

org_id_ctx: ContextVar[str | None] = ContextVar("org_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_FIELD_VARS: tuple[tuple[str, ContextVar[str | None]], ...] = (
    ("user_id", user_id_ctx),
    ("org_id", org_id_ctx),
    ("request_id", request_id_ctx),
)


def _lookup(var: ContextVar[str | None], ctx: Context | None) -> str | None:
    if ctx is None:
        return var.get()
    return ctx.get(var)


def log_fields(ctx: Context | None = None) -> dict[str, str]:
    """Return the identification fields bound in ``ctx``.

    Args:
        ctx: Context to read from. Defaults to the current context.

    Returns:
        Only the fields that carry a non-empty value; an empty dict when
        nothing is bound.
    """
    fields: dict[str, str] = {}
    for key, var in _FIELD_VARS:
        value = _lookup(var, ctx)
        if value:
            fields[key] = value
    return fields


def extract_org_id(ctx: Context | None = None) -> str:
    """Return the org ID bound in ``ctx``.

    Raises:
        MissingOrgID: If no org ID is bound.
    """
    org_id = _lookup(org_id_ctx, ctx)
    if not org_id:
        raise MissingOrgID("no org id")
    return org_id


@contextmanager
def bind_identity(
    *,
    org_id: str | None = None,
    user_id: str | None = None,
    request_id: str | None = None,
) -> Iterator[None]:
    """Bind identity values for the duration of the block.

    ``None`` arguments leave the corresponding variable untouched.
    """
    tokens = []
    for var, value in (
        (org_id_ctx, org_id),
        (user_id_ctx, user_id),
        (request_id_ctx, request_id),
    ):
        if value is not None:
            tokens.append((var, var.set(value)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
