"""
Pytest configuration and fixtures for jsonws tests.

This module provides fixtures for:
- A representative Service (enums, structs, nested namespaces, events)
- A recording fake tunnel for proxy tests
- Compiling and loading generated Python proxies
"""

from __future__ import annotations

from typing import Any

import pytest

from jsonws import Service, get_language_proxy
from jsonws import config as config_module
from jsonws.runtime import RpcRequest


class FakeTunnel:
    """Tunnel double that records every call instead of sending it."""

    def __init__(self, url: str, *, ssl: Any = None, on_event: Any = None) -> None:
        self.url = url
        self.ssl = ssl
        self.on_event = on_event
        self.calls: list[tuple[RpcRequest, Any]] = []
        self.close_count = 0

    def call(self, request: RpcRequest, callback: Any = None) -> RpcRequest:
        self.calls.append((request, callback))
        return request

    async def close(self) -> None:
        self.close_count += 1

    @property
    def requests(self) -> list[RpcRequest]:
        return [request for request, _ in self.calls]

    @property
    def methods(self) -> list[str]:
        return [request.method for request, _ in self.calls]


def load_proxy_class(source: str, local_name: str) -> type:
    """Execute generated Python source and return the proxy class."""
    module: dict[str, Any] = {"__name__": f"generated_{local_name.lower()}"}
    exec(compile(source, f"<{local_name}>", "exec"), module)
    return module[local_name]


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore global configuration after each test."""
    saved = dict(config_module._global_config)
    yield
    config_module._global_config.clear()
    config_module._global_config.update(saved)


@pytest.fixture
def tester_service() -> Service:
    """The minimal Mode / vray.start service."""
    service = Service("1.0", "Tester API")
    service.register_enum("Mode", {"A": 0, "B": 1})
    service.register_method(name="vray.start", returns="async")
    return service


@pytest.fixture
def render_service() -> Service:
    """A service using every kind of definition."""
    service = Service("2.1", "Render API")
    service.register_enum("Mode", {"A": 0, "B": 1})
    service.register_enum("Priority", ["LOW", "NORMAL", "HIGH"])
    service.register_type("Job", {
        "fields": {
            "id": {"type_ref": "int"},
            "mode": {"type_ref": "Mode"},
            "tags": {"type_ref": ["string"], "required": False},
            "parent": {"type_ref": "Job", "required": False},
        },
    })
    service.register_method(name="ping")
    service.register_method(name="vray.start", returns="async", description="Start rendering.")
    service.register_method(
        name="jobs.submit",
        params=[
            {"name": "job", "type_ref": "Job"},
            {"name": "priority", "type_ref": "Priority", "default": 1},
        ],
        returns="string",
    )
    service.register_method(name="jobs.archive.purge", params=["before"])
    service.register_method(name="jobs.list", returns=["Job"])
    service.register_event("vray.progress", "int")
    service.register_event("jobs.done", "Job")
    return service


@pytest.fixture
def fake_tunnels() -> list[FakeTunnel]:
    """Every FakeTunnel created through ``tunnel_factory``."""
    return []


@pytest.fixture
def tunnel_factory(fake_tunnels):
    def factory(url: str, *, ssl: Any = None, on_event: Any = None) -> FakeTunnel:
        tunnel = FakeTunnel(url, ssl=ssl, on_event=on_event)
        fake_tunnels.append(tunnel)
        return tunnel

    return factory


@pytest.fixture
def tester_class(tester_service) -> type:
    return load_proxy_class(get_language_proxy(tester_service, "Python", "Tester"), "Tester")


@pytest.fixture
def render_class(render_service) -> type:
    return load_proxy_class(get_language_proxy(render_service, "Python", "RenderApi"), "RenderApi")


@pytest.fixture
def render_proxy(render_class, tunnel_factory):
    return render_class("https://render.example.com/api", tunnel_factory=tunnel_factory)
