"""
MERIT Django Adapter Wiring
===========================
Constructs HttpApiDependencies for local/staging live runs.

This module is adapter-only glue:
- no engine contract changes
- in-memory journal, token registry and projections
- administrator identity and overflow policy come from Django settings
"""

from __future__ import annotations

import logging
import threading

from django.conf import settings

from core.commands.bus import CommandBus
from core.commands.dispatcher import CommandDispatcher
from core.config.limits import LedgerLimits
from core.events.journal import EventFactory, InMemoryEventJournal
from core.events.registry import EventTypeRegistry
from core.http_api.auth import InMemoryAuthProvider
from core.http_api.dependencies import HttpApiDependencies
from core.identity.administrator import AdministratorGuard
from core.primitives.bounded import OverflowPolicy
from core.time.clock import SystemClock, SystemTimeCounter
from core.tokens.registry import InMemoryTokenRegistry
from engines.presence.services import PresenceService

logger = logging.getLogger("merit.http")

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _overflow_policy_from_settings() -> OverflowPolicy:
    raw = str(getattr(settings, "MERIT_OVERFLOW_POLICY", "DROP")).strip().upper()
    try:
        return OverflowPolicy(raw)
    except ValueError as exc:
        raise ValueError(
            f"MERIT_OVERFLOW_POLICY must be one of "
            f"{[p.value for p in OverflowPolicy]}, got {raw!r}."
        ) from exc


def _build_auth_provider() -> InMemoryAuthProvider:
    api_keys = dict(getattr(settings, "MERIT_API_KEYS", {}))
    return InMemoryAuthProvider.from_actor_ids(api_keys)


def _create_dependencies() -> HttpApiDependencies:
    clock = SystemClock()
    limits = LedgerLimits(overflow_policy=_overflow_policy_from_settings())
    administrator = AdministratorGuard(settings.MERIT_ADMINISTRATOR_ID)

    journal = InMemoryEventJournal()
    event_type_registry = EventTypeRegistry()
    dispatcher = CommandDispatcher(context=None, clock=clock)
    command_bus = CommandBus(
        dispatcher=dispatcher,
        persist_event=journal,
        context=None,
        event_type_registry=event_type_registry,
    )
    presence_service = PresenceService(
        command_bus=command_bus,
        event_factory=EventFactory(clock),
        persist_event=journal,
        event_type_registry=event_type_registry,
        administrator=administrator,
        token_registry=InMemoryTokenRegistry(),
        time_counter=SystemTimeCounter(),
        limits=limits,
        clock=clock,
    )

    logger.info(
        f"Presence ledger wired: administrator='{administrator.administrator_id}', "
        f"overflow_policy={limits.overflow_policy.value}"
    )
    return HttpApiDependencies(
        presence_service=presence_service,
        auth_provider=_build_auth_provider(),
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the singleton so the next request wires a fresh ledger."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
