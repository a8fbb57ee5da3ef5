"""Pydantic request bodies for the BoardSync proxy API."""

from pydantic import BaseModel, Field

from src.workitems.types import CategorySelection, WorkItemDraft


class LoginRequest(BaseModel):
    organization: str = Field(min_length=1)
    project: str = Field(min_length=1)
    pat: str = Field(min_length=1)


class CategoryPayload(BaseModel):
    gov_type: int | None = Field(default=None, ge=1, le=5)
    impact: int | None = Field(default=None, ge=1, le=3)
    cost_savings: int | None = Field(default=None, ge=1, le=3)
    effort_category: int | None = Field(default=None, ge=1, le=3)
    complexity: int | None = Field(default=None, ge=1, le=3)

    def to_selection(self) -> CategorySelection:
        return CategorySelection(
            gov_type=self.gov_type,
            impact=self.impact,
            cost_savings=self.cost_savings,
            effort_category=self.effort_category,
            complexity=self.complexity,
        )


class WorkItemPayload(BaseModel):
    """Create/update form body; `tags` holds user tags only."""

    work_item_type: str
    title: str
    state: str | None = None
    description: str = ""
    area_path: str = ""
    tags: str = ""
    categories: CategoryPayload = Field(default_factory=CategoryPayload)
    effort: float | None = Field(default=None, ge=0)
    acceptance_criteria: str = ""
    history_comment: str = ""

    def to_draft(self, stored_state: str | None = None) -> WorkItemDraft:
        """Build a draft; without `state` it keeps `stored_state`, else the type's first state."""
        draft = WorkItemDraft(work_item_type=self.work_item_type)
        draft.change_type(self.work_item_type)
        state = self.state or stored_state
        if state:
            draft.state = state
        draft.title = self.title
        draft.description = self.description
        draft.area_path = self.area_path
        draft.tags = self.tags
        draft.categories = self.categories.to_selection()
        draft.effort = self.effort
        draft.acceptance_criteria = self.acceptance_criteria
        draft.history_comment = self.history_comment
        return draft


class ParentChangeRequest(BaseModel):
    parent_id: int | None = Field(default=None, gt=0)


class ChildRequest(BaseModel):
    child_id: int = Field(gt=0)


class ScorePreviewRequest(BaseModel):
    tags: str = ""
    categories: CategoryPayload = Field(default_factory=CategoryPayload)
