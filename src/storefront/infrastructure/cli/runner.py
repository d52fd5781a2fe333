"""Shared plumbing for CLI commands: event loop, wiring, error display."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from storefront.domain.exceptions import (
    DomainException,
    ServerRejectedError,
    UnauthenticatedError,
)
from storefront.infrastructure.bootstrap import Storefront, build_storefront

T = TypeVar("T")


def run(action: Callable[[Storefront], Awaitable[T]]) -> T:
    """Run *action* against a freshly wired storefront on a new event loop."""

    async def _main() -> T:
        storefront = build_storefront()
        try:
            return await action(storefront)
        finally:
            await storefront.close()

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(describe_error(exc))


def describe_error(exc: DomainException) -> str:
    if isinstance(exc, UnauthenticatedError):
        return f"{exc.message}\nLog in with: storefront auth login"
    if isinstance(exc, ServerRejectedError) and exc.field_errors:
        details = "\n".join(
            f"  {name}: {message}" for name, message in exc.field_errors.items()
        )
        return f"{exc.message}\n{details}"
    return exc.message
