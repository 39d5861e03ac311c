"""Serve :class:`TransformService` through an ``httpx`` transport.

Lets :class:`~ghostwrite.transform.RemoteTransform` talk to a service running
in the same process, without sockets.
"""

from __future__ import annotations

import json
import logging

import httpx

from ghostwrite.constants import IDEMPOTENCY_HEADER, STATUS_PATH

from .handlers import ServiceResponse, TransformService

log = logging.getLogger(__name__)


class InProcessTransport(httpx.AsyncBaseTransport):
    def __init__(self, service: TransformService, *, base_path: str = "/api"):
        self.service = service
        self.base_path = base_path.rstrip("/")
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.base_path and path.startswith(self.base_path):
            path = path[len(self.base_path) :]

        authorization = request.headers.get("Authorization")
        if path == STATUS_PATH:
            response = await self.service.handle_status(
                method=request.method, authorization=authorization
            )
        else:
            content = await request.aread()
            try:
                body = json.loads(content) if content else None
            except ValueError:
                body = None
            response = await self.service.handle_transform(
                path.lstrip("/"),
                method=request.method,
                authorization=authorization,
                body=body,
                idempotency_key=request.headers.get(IDEMPOTENCY_HEADER),
            )
        return self._to_httpx(response, request)

    @staticmethod
    def _to_httpx(response: ServiceResponse, request: httpx.Request) -> httpx.Response:
        return httpx.Response(response.status, json=response.body, request=request)
