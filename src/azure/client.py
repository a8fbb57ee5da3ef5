"""
src/azure/client.py
Thin Azure DevOps REST client used by the proxy endpoints.
Exports: AzureDevOpsClient, AzureDevOpsError
"""

import base64
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from src.azure.parsing import flatten_area_paths, parse_snapshot, safe_dict, safe_list
from src.shared import build_api_version, build_area_path_depth, build_azure_base_url, build_http_timeout_seconds
from src.workitems.relations import parse_relation_records
from src.workitems.types import (
    WORK_ITEM_TYPES,
    PatchOperation,
    RelationIntent,
    RelationRecord,
    WorkItem,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
PATCH_CONTENT_TYPE = "application/json-patch+json"
MAX_BATCH_IDS = 200


def _wiql_literal(value: str) -> str:
    """Quote a WIQL string literal, doubling embedded single quotes."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


class AzureDevOpsError(RuntimeError):
    """Remote call failed; `status` is the HTTP status when one was received."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AzureDevOpsClient:
    """Per-session client bound to one organization, project and PAT."""

    def __init__(self, organization: str, project: str, pat: str) -> None:
        self.organization = organization
        self.project = project
        self._pat = pat
        self.host = build_azure_base_url()
        self.base_url = f"{self.host}/{organization}/{project}/_apis"
        self.api_version = build_api_version()

    def _auth_header(self) -> str:
        token = base64.b64encode(f":{self._pat}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"

    def _request(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        content_type: str = PATCH_CONTENT_TYPE,
    ) -> Any:
        """
        Send one request and decode the JSON response.

        Raises:
            AzureDevOpsError: Non-2xx status or connection failure.
        """
        data = json.dumps(body).encode("utf-8") if body is not None else None
        request = urllib.request.Request(url, data=data, method=method)
        request.add_header("Authorization", self._auth_header())
        request.add_header("Content-Type", content_type)
        try:
            with urllib.request.urlopen(request, timeout=build_http_timeout_seconds()) as response:  # noqa: S310 - controlled URL format
                raw = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            raise AzureDevOpsError(f"{method} {url} failed: {exc.code} {exc.reason}", status=exc.code) from exc
        except urllib.error.URLError as exc:
            raise AzureDevOpsError(f"Failed to connect to Azure DevOps: {exc.reason}") from exc
        return json.loads(raw) if raw.strip() else {}

    def _url(self, path: str, **params: Any) -> str:
        query = "&".join(f"{key}={value}" for key, value in params.items())
        suffix = f"&{query}" if query else ""
        return f"{self.base_url}/{path}?api-version={self.api_version}{suffix}"

    def validate_credentials(self) -> None:
        """
        Check PAT, organization and project access.

        Raises:
            AzureDevOpsError: With a user-facing message on any failure.
        """
        projects_url = f"{self.host}/{self.organization}/_apis/projects?api-version={self.api_version}"
        try:
            self._request("GET", projects_url)
        except AzureDevOpsError as exc:
            if exc.status == 401:
                raise AzureDevOpsError("Invalid Personal Access Token", status=401) from exc
            if exc.status == 404:
                raise AzureDevOpsError(f"organization '{self.organization}' not found", status=404) from exc
            raise
        project_url = (
            f"{self.host}/{self.organization}/_apis/projects/{self.project}?api-version={self.api_version}"
        )
        try:
            self._request("GET", project_url)
        except AzureDevOpsError as exc:
            if exc.status == 404:
                raise AzureDevOpsError(
                    f"project '{self.project}' not found or access denied", status=404
                ) from exc
            raise

    def fetch_work_items(self) -> list[dict[str, Any]]:
        """Return raw work item payloads (with relations) for the project's board types."""
        type_list = ", ".join(_wiql_literal(name) for name in WORK_ITEM_TYPES)
        query = (
            "SELECT [System.Id] FROM WorkItems "
            f"WHERE [System.TeamProject] = {_wiql_literal(self.project)} "
            f"AND [System.WorkItemType] IN ({type_list}) ORDER BY [System.Id]"
        )
        result = self._request(
            "POST", self._url("wit/wiql"), {"query": query}, content_type=JSON_CONTENT_TYPE
        )
        ids = [str(safe_dict(row).get("id")) for row in safe_list(safe_dict(result).get("workItems"))]
        ids = [item_id for item_id in ids if item_id.isdigit()]
        rows: list[dict[str, Any]] = []
        for start in range(0, len(ids), MAX_BATCH_IDS):
            chunk = ids[start : start + MAX_BATCH_IDS]
            batch = self._request("GET", self._url("wit/workitems", ids=",".join(chunk), **{"$expand": "all"}))
            rows.extend(row for row in safe_list(safe_dict(batch).get("value")) if isinstance(row, dict))
        return rows

    def fetch_snapshot(self) -> tuple[list[WorkItem], dict[int, list[RelationRecord]]]:
        return parse_snapshot(self.fetch_work_items())

    def fetch_area_paths(self) -> list[str]:
        root = self._request(
            "GET", self._url("wit/classificationnodes/Areas", **{"$depth": build_area_path_depth()})
        )
        return flatten_area_paths(root)

    def fetch_work_item_with_relations(self, item_id: int) -> dict[str, Any]:
        return safe_dict(self._request("GET", self._url(f"wit/workitems/{item_id}", **{"$expand": "relations"})))

    def fetch_relations(self, item_id: int) -> list[RelationRecord]:
        """Return a fresh hierarchy record list for one item."""
        return parse_relation_records(self.fetch_work_item_with_relations(item_id).get("relations"))

    def create_work_item(self, work_item_type: str, operations: list[PatchOperation]) -> dict[str, Any]:
        url = self._url(f"wit/workitems/${urllib.parse.quote(work_item_type)}")
        body = [operation.to_dict() for operation in operations]
        return safe_dict(self._request("POST", url, body))

    def update_work_item(self, item_id: int, operations: list[PatchOperation]) -> dict[str, Any]:
        body = [operation.to_dict() for operation in operations]
        return safe_dict(self._request("PATCH", self._url(f"wit/workitems/{item_id}"), body))

    def work_item_url(self, item_id: int) -> str:
        return f"{self.base_url}/wit/workitems/{item_id}"

    def relation_patch(self, intent: RelationIntent) -> list[dict[str, Any]]:
        """Translate one relation intent into the store's patch document."""
        if intent.action == "add":
            return [
                {
                    "op": "add",
                    "path": "/relations/-",
                    "value": {
                        "rel": intent.relation_kind.value,
                        "url": self.work_item_url(intent.target_id),
                    },
                }
            ]
        if intent.action == "remove":
            return [{"op": "remove", "path": f"/relations/{intent.position}"}]
        raise ValueError(f"Unsupported relation action: {intent.action}")

    def apply_relation_intent(self, intent: RelationIntent) -> None:
        logger.info(
            "Applying relation %s on work item %s (%s).",
            intent.action,
            intent.item_id,
            intent.relation_kind.name,
        )
        self._request("PATCH", self._url(f"wit/workitems/{intent.item_id}"), self.relation_patch(intent))
