"""
src/main.py
FastAPI application: proxy endpoints for BoardSync.
Endpoints: GET /health, POST /api/login, POST /api/logout, GET/POST /api/workitems,
PATCH /api/workitems/{id}, GET /api/areapaths, GET /api/workitems/{id}/relations,
PUT /api/workitems/{id}/parent, POST /api/workitems/{id}/children,
DELETE /api/workitems/{id}/children/{child_id}, POST /api/score
"""

from typing import Any
import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from src.api_models import (
    ChildRequest,
    LoginRequest,
    ParentChangeRequest,
    ScorePreviewRequest,
    WorkItemPayload,
)
from src.azure.client import AzureDevOpsClient, AzureDevOpsError
from src.azure.parsing import parse_work_item
from src.azure.relation_sync import apply_add_child, apply_parent_change, apply_remove_child
from src.config import Config
from src.sessions import sessions
from src.workitems.filters import collect_state_options, collect_tag_options
from src.workitems.model import WorkItemModel
from src.workitems.relations import RelationIndex
from src.workitems.scoring import score_selection
from src.workitems.tag_codec import decode_category_tags, encode_category_tags
from src.workitems.types import FilterSpec, RelationEditResult, WorkItem, WorkItemValidationError

logger = logging.getLogger(__name__)
load_dotenv()
logging.basicConfig(level=logging.DEBUG if Config.debug_enabled() else logging.INFO)

app = FastAPI(title="BoardSync")
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.get_cors_origins(),
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Auth-Token"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with a 500 body."""
    logger.exception("Unhandled error on %s %s.", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": f"Request failed: {exc}"})


def require_client(x_auth_token: str = Header(default="")) -> AzureDevOpsClient:
    """
    Resolve the session client from the X-Auth-Token header.

    Raises:
        HTTPException 401: Missing or unknown token.
    """
    token = x_auth_token.strip()
    if not token:
        raise HTTPException(status_code=401, detail="Authentication token required")
    client = sessions.get(token)
    if client is None:
        raise HTTPException(status_code=401, detail="Invalid authentication token")
    return client


def _http_error(exc: AzureDevOpsError) -> HTTPException:
    """Map a remote failure to an HTTP error, passing 401/404 through."""
    status = exc.status if exc.status in {401, 404} else 502
    return HTTPException(status_code=status, detail=str(exc))


def _serialize_item(item: WorkItem) -> dict[str, Any]:
    data = item.to_dict()
    categories = decode_category_tags(item.tags)
    data["categories"] = {
        "gov_type": categories.gov_type,
        "impact": categories.impact,
        "cost_savings": categories.cost_savings,
        "effort_category": categories.effort_category,
        "complexity": categories.complexity,
    }
    return data


def _edit_response(result: RelationEditResult) -> dict[str, Any]:
    """Return applied intents, or raise 409 with the violation message."""
    if not result.ok:
        raise HTTPException(status_code=409, detail=result.violation.message)
    return {"status": "ok", "intents": [intent.to_dict() for intent in result.intents]}


@app.get("/health")
def health_check() -> dict[str, str]:
    """Return service health status."""
    return {"status": "ok"}


@app.post("/api/login")
def login(payload: LoginRequest) -> dict[str, Any]:
    """
    Validate Azure DevOps credentials and open a session.

    Returns:
        Success flag, organization, project and session token.
    Raises:
        HTTPException 401: Credentials rejected.
    """
    client = AzureDevOpsClient(payload.organization, payload.project, payload.pat)
    try:
        client.validate_credentials()
    except AzureDevOpsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    token = sessions.create(client)
    return {
        "success": True,
        "message": "Login successful",
        "organization": payload.organization,
        "project": payload.project,
        "token": token,
    }


@app.post("/api/logout")
def logout(
    x_auth_token: str = Header(default=""),
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, str]:
    sessions.remove(x_auth_token.strip())
    return {"message": "Logged out successfully"}


@app.get("/api/workitems")
def list_work_items(
    area_path: str = "",
    work_item_type: str = "",
    tags: list[str] = Query(default=[]),
    states: list[str] = Query(default=[]),
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, Any]:
    """
    Return the filtered board plus filter options and hierarchy lookups.

    Raises:
        HTTPException 401/404/502: Remote fetch failed.
    """
    try:
        items, relations = client.fetch_snapshot()
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    model = WorkItemModel(items, relations)
    model.set_filter(
        FilterSpec(
            area_path=area_path.strip() or None,
            work_item_type=work_item_type.strip() or None,
            selected_tags=frozenset(tag.strip() for tag in tags if tag.strip()),
            selected_states=frozenset(state.strip() for state in states if state.strip()),
        )
    )
    visible = model.visible_items()
    return {
        "items": [
            {
                **_serialize_item(item),
                "parent_id": model.parent_of(item.id),
                "child_ids": model.children_of(item.id),
            }
            for item in visible
        ],
        "count": len(visible),
        "tag_options": collect_tag_options(items),
        "state_options": collect_state_options(items),
    }


@app.get("/api/areapaths")
def list_area_paths(client: AzureDevOpsClient = Depends(require_client)) -> list[str]:
    try:
        return client.fetch_area_paths()
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc


@app.post("/api/workitems", status_code=201)
def create_work_item(
    payload: WorkItemPayload, client: AzureDevOpsClient = Depends(require_client)
) -> dict[str, Any]:
    """
    Create a work item from form values; tags and business value are derived.

    Raises:
        HTTPException 400: Invalid draft.
        HTTPException 401/404/502: Remote call failed.
    """
    draft = payload.to_draft()
    try:
        area_paths = client.fetch_area_paths() if draft.area_path else []
        intent = WorkItemModel(area_paths=area_paths).create_intent(draft)
        return client.create_work_item(intent.work_item_type, intent.operations)
    except WorkItemValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc


@app.patch("/api/workitems/{item_id}")
def update_work_item(
    item_id: int,
    payload: WorkItemPayload,
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, str]:
    """
    Update a work item from form values against its freshly fetched fields.

    A body without `state` keeps the stored state.

    Raises:
        HTTPException 400: Invalid draft or type change.
        HTTPException 404: Work item not found.
    """
    try:
        item = parse_work_item(client.fetch_work_item_with_relations(item_id))
        if item is None or item.id != item_id:
            raise HTTPException(status_code=404, detail=f"Work item {item_id} not found")
        draft = payload.to_draft(stored_state=item.state)
        model = WorkItemModel([item], area_paths=client.fetch_area_paths())
        operations = model.update_intent(item_id, draft)
        client.update_work_item(item_id, operations)
    except WorkItemValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    return {"message": "Work item updated successfully"}


@app.get("/api/workitems/{item_id}/relations")
def get_relations(item_id: int, client: AzureDevOpsClient = Depends(require_client)) -> dict[str, Any]:
    try:
        records = client.fetch_relations(item_id)
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    index = RelationIndex({item_id: records})
    return {
        "id": item_id,
        "parent_id": index.parent_of(item_id),
        "child_ids": index.children_of(item_id),
        "relations": [
            {"kind": record.kind.value, "target_id": record.target_id, "position": record.source_ordinal}
            for record in index.records_of(item_id)
        ],
    }


@app.put("/api/workitems/{item_id}/parent")
def change_parent(
    item_id: int,
    payload: ParentChangeRequest,
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, Any]:
    """
    Move a work item under a new parent (or detach it).

    Raises:
        HTTPException 409: Self-reference or cycle.
    """
    try:
        result = apply_parent_change(client, item_id, payload.parent_id)
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    return _edit_response(result)


@app.post("/api/workitems/{item_id}/children")
def add_child(
    item_id: int,
    payload: ChildRequest,
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, Any]:
    try:
        result = apply_add_child(client, item_id, payload.child_id)
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    return _edit_response(result)


@app.delete("/api/workitems/{item_id}/children/{child_id}")
def remove_child(
    item_id: int,
    child_id: int,
    client: AzureDevOpsClient = Depends(require_client),
) -> dict[str, Any]:
    try:
        result = apply_remove_child(client, item_id, child_id)
    except AzureDevOpsError as exc:
        raise _http_error(exc) from exc
    return _edit_response(result)


@app.post("/api/score")
def preview_score(payload: ScorePreviewRequest) -> dict[str, Any]:
    """Return the business value and tag string a category selection would produce."""
    selection = payload.categories.to_selection()
    return {
        "business_value": score_selection(selection),
        "tags": encode_category_tags(payload.tags, selection),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Config.get_port())
