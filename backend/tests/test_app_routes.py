"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from study_planner.api.deps import get_current_user
from study_planner.main import app

PUBLIC_PATHS = {"/health", "/health/db", "/auth/login"}


def _routes():
    return [route for route in app.routes if isinstance(route, APIRoute)]


def _depends_on(dependant, target) -> bool:
    return any(dep.call is target or _depends_on(dep, target) for dep in dependant.dependencies)


def test_each_route_registered_once() -> None:
    keys = [(route.path, method) for route in _routes() for method in route.methods]

    assert len(keys) == len(set(keys))


def test_every_non_public_route_is_gated() -> None:
    ungated = [
        route.path
        for route in _routes()
        if route.path not in PUBLIC_PATHS and not _depends_on(route.dependant, get_current_user)
    ]

    assert ungated == []


def test_public_routes_skip_the_gate() -> None:
    for route in _routes():
        if route.path in PUBLIC_PATHS:
            assert not _depends_on(route.dependant, get_current_user), route.path
