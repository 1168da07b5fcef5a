"""FastAPI dependencies resolving the per-app collaborators from ``app.state``."""

from __future__ import annotations

from fastapi import Request

from mockai.core.delay import DelayInjector
from mockai.core.metrics import MetricsCollector
from mockai.services.content import RandomContent


def get_content(request: Request) -> RandomContent:
    return request.app.state.content


def get_delay_injector(request: Request) -> DelayInjector:
    return request.app.state.delay_injector


def get_metrics(request: Request) -> MetricsCollector:
    return request.app.state.metrics
