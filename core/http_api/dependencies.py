"""
MERIT HTTP API - Dependencies
=============================
Injected collaborators for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpApiDependencies:
    presence_service: object
    auth_provider: object
