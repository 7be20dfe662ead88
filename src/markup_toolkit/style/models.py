import typing as t
from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Dialect(StrEnum):
    american_english = "american_english"
    australian_english = "australian_english"
    british_oxford = "british_oxford"
    canadian_english = "canadian_english"
    indian_english = "indian_english"


class Tone(StrEnum):
    academic = "academic"
    business = "business"
    casual = "casual"
    conversational = "conversational"
    formal = "formal"
    gen_z = "gen-z"
    informal = "informal"
    technical = "technical"


class StyleGuideName(StrEnum):
    ap = "ap"
    chicago = "chicago"
    microsoft = "microsoft"


class StyleAnalysisRequest(BaseModel):
    """One document submitted for check, suggestion or rewrite analysis."""

    content: str | bytes
    style_guide: str
    dialect: str = Dialect.american_english.value
    tone: str = Tone.formal.value
    document_name: str | None = None
    mime_type: str | None = None


class StyleAnalysisSubmitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    workflow_id: str | None = None
    status: str | None = None
    message: str | None = None


class WorkflowInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "workflow_id"))
    type: str | None = None
    status: str
    api_version: str | None = None
    generated_at: str | None = None


class StyleIssue(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    original: str
    category: str
    subcategory: str | None = None
    char_index: int | None = None
    position: dict[str, t.Any] | None = None
    suggestion: str | None = None

    @property
    def start_index(self) -> int | None:
        if self.position is not None and "start_index" in self.position:
            return self.position["start_index"]
        return self.char_index


class StyleCheckResponse(BaseModel):
    """
    Completed check workflow.

    The API answers either with a flat payload (``status``, ``workflow_id``,
    ``issues``, ``scores``) or with a nested one where the workflow metadata
    lives under ``workflow`` and the analysis under ``original``.
    Both are normalized to the same fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    workflow: WorkflowInfo
    analysis_config: dict[str, t.Any] | None = Field(
        default=None, validation_alias=AliasChoices("config", "check_options")
    )
    issues: list[StyleIssue] = []
    scores: dict[str, t.Any] = {}

    @model_validator(mode="before")
    @classmethod
    def unify_nested_fields(cls, data: t.Any):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "workflow" not in data:
            data["workflow"] = {
                "id": data.get("workflow_id"),
                "status": data.get("status", "completed"),
            }
        original = data.get("original")
        if isinstance(original, dict):
            data.setdefault("issues", original.get("issues", []))
            data.setdefault("scores", original.get("scores", {}))
        return data

    @property
    def workflow_id(self) -> str | None:
        return self.workflow.id

    @property
    def status(self) -> str:
        return self.workflow.status

    @property
    def quality_score(self) -> float | None:
        """Overall quality score, whichever score layout the API used."""
        quality = self.scores.get("quality")
        if isinstance(quality, dict) and "score" in quality:
            return quality["score"]
        return self.scores.get("overall_score")


class StyleSuggestionResponse(StyleCheckResponse):
    pass


class StyleRewriteResponse(StyleSuggestionResponse):
    rewrite: str | None = None

    @model_validator(mode="before")
    @classmethod
    def unify_rewrite(cls, data: t.Any):
        if isinstance(data, dict) and isinstance(data.get("rewrite"), dict):
            data = dict(data)
            data["rewrite"] = data["rewrite"].get("text")
        return data
