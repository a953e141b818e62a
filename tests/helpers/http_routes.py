"""httpx ``MockTransport`` routing for provider adapter tests."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import typing as typ

import httpx

Handler = cabc.Callable[[httpx.Request], httpx.Response]


@dataclasses.dataclass(slots=True)
class RouteTable:
    """Dispatch requests by URL path; unknown paths answer ``404``.

    Every request is recorded so tests can assert on paths, query strings
    and headers.
    """

    routes: dict[str, Handler] = dataclasses.field(default_factory=dict)
    requests: list[httpx.Request] = dataclasses.field(default_factory=list)

    def add(self, path: str, handler: Handler) -> None:
        """Register ``handler`` for requests whose raw path equals ``path``."""
        self.routes[path] = handler

    def json(self, path: str, payload: typ.Any, *, status: int = 200) -> None:
        """Register a static JSON response."""
        self.add(path, lambda _request: httpx.Response(status, json=payload))

    def status(self, path: str, status: int) -> None:
        """Register an empty response with ``status``."""
        self.add(path, lambda _request: httpx.Response(status))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Route ``request`` to its handler."""
        self.requests.append(request)
        path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        """Return an ``AsyncClient`` backed by this table."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def paths(self) -> list[str]:
        """Return the requested paths in order."""
        return [
            request.url.raw_path.decode("ascii").split("?", 1)[0]
            for request in self.requests
        ]
