"""In-memory transport for client tests.

Implements the RestTransport collaborator contract (fetch, list_records,
create, update, request) plus Jira's search, backed by dictionaries.
Every call is recorded so tests can assert on call order and payloads.
"""

from __future__ import annotations

import copy
from typing import Any

from backlog_relay.utils.errors import NotFoundError


class FakeTransport:
    """Fake transport returning pre-seeded records.

    Attributes:
        records: (resource, record_id) -> stored record
        listings: resource -> records returned by list_records/search
        create_responses: resource -> queue of responses for create()
        errors: (operation, resource) -> exception raised by that call
        calls: (operation, resource, record_id, payload_or_params) tuples
        update_returns_body: When False, update() answers None (204 style)
    """

    def __init__(self, platform_name: str = "Fake", update_returns_body: bool = True) -> None:
        self.platform_name = platform_name
        self.update_returns_body = update_returns_body
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self.listings: dict[str, list[dict[str, Any]]] = {}
        self.create_responses: dict[str, list[dict[str, Any]]] = {}
        self.errors: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str, str | None, Any]] = []

    # Seeding helpers

    def add_record(self, resource: str, record_id: str, record: dict[str, Any]) -> None:
        self.records[(resource, record_id)] = record

    def queue_create(self, resource: str, response: dict[str, Any]) -> None:
        self.create_responses.setdefault(resource, []).append(response)

    def fail(self, operation: str, resource: str, error: Exception) -> None:
        self.errors[(operation, resource)] = error

    def calls_for(self, operation: str) -> list[tuple[str, str, str | None, Any]]:
        return [call for call in self.calls if call[0] == operation]

    def _raise_if_failing(self, operation: str, resource: str) -> None:
        error = self.errors.get((operation, resource))
        if error is not None:
            raise error

    def _stored(self, resource: str, record_id: str) -> dict[str, Any]:
        record = self.records.get((resource, record_id))
        if record is None:
            raise NotFoundError(platform_name=self.platform_name, ticket_id=record_id)
        return record

    # Transport contract

    def url_for(self, resource: str, record_id: str | None = None) -> str:
        url = f"fake://{resource}"
        return f"{url}/{record_id}" if record_id is not None else url

    async def fetch(
        self, resource: str, record_id: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        self.calls.append(("fetch", resource, record_id, params))
        self._raise_if_failing("fetch", resource)
        return copy.deepcopy(self._stored(resource, record_id))

    async def list_records(
        self, resource: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        self.calls.append(("list", resource, None, params))
        self._raise_if_failing("list", resource)
        return copy.deepcopy(self.listings.get(resource, []))

    async def create(self, resource: str, payload: Any) -> dict[str, Any]:
        self.calls.append(("create", resource, None, payload))
        self._raise_if_failing("create", resource)
        queue = self.create_responses.get(resource)
        if queue:
            return copy.deepcopy(queue.pop(0))
        return {}

    async def update(
        self,
        resource: str,
        record_id: str,
        payload: dict[str, Any],
        method: str = "PATCH",
    ) -> dict[str, Any] | None:
        self.calls.append(("update", resource, record_id, payload))
        self._raise_if_failing("update", resource)
        record = self._stored(resource, record_id)
        record.update(copy.deepcopy(payload))
        if not self.update_returns_body:
            return None
        return copy.deepcopy(record)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        ticket_id: str | None = None,
    ) -> Any:
        self.calls.append(("request", url, ticket_id, json_data))
        self._raise_if_failing("request", url)
        return None

    async def search(self, jql: str, fields: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("search", "search", None, jql))
        self._raise_if_failing("search", "search")
        return copy.deepcopy(self.listings.get("search", []))
