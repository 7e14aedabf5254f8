"""Model representation of GitHub checks specific dictionary/json structures."""

import json
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CheckRunStatus(Enum):
    """The lifecycle states of a check run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CheckRunConclusion(Enum):
    """The valid conclusion states of a check run."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"


class AnnotationLevel(Enum):
    """The severity levels permitted by GitHub checks for each individual annotation."""

    NOTICE = "notice"
    WARNING = "warning"
    FAILURE = "failure"


class CheckAnnotation(BaseModel):
    """Models the json expected by GitHub checks for each individual annotation."""

    path: str
    start_line: int
    end_line: int
    start_column: int | None = None
    end_column: int | None = None
    annotation_level: AnnotationLevel
    message: str
    title: str | None = None
    raw_details: str | None = None


class CheckRunImage(BaseModel):
    """An image shown in the output of a check run."""

    alt: str
    image_url: str
    caption: str | None = None


class CheckRunAction(BaseModel):
    """A button offered to the user alongside a check run."""

    label: str = Field(max_length=20)
    description: str = Field(max_length=40)
    identifier: str = Field(max_length=20)


class CheckRunOutputInput(BaseModel):
    """The output block as provided by the caller, before it is sent to GitHub."""

    title: str | None = None
    summary: str
    text_description: str | None = None


class CheckRunInputs(BaseModel):
    """Structured inputs used to create or update a check run.

    Accepts both the action input spelling (``detailsURL``) and snake_case names.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: CheckRunStatus
    output: CheckRunOutputInput | None = None
    actions: list[CheckRunAction] | None = None
    annotations: list[CheckAnnotation] | None = None
    images: list[CheckRunImage] | None = None
    conclusion: CheckRunConclusion | None = None
    details_url: str | None = Field(default=None, alias="detailsURL")
    action_url: str | None = Field(default=None, alias="actionURL")


class Ownership(BaseModel):
    """Identifies the repository that check runs are scoped to."""

    owner: str
    repo: str

    @classmethod
    def from_slug(cls, slug: str) -> "Ownership":
        """Parse an ``owner/repo`` string, e.g. the value of ``GITHUB_REPOSITORY``.

        :raises ValueError: if the slug is not of the form ``owner/repo``
        """
        owner, sep, repo = slug.partition("/")
        if not (owner and sep and repo) or "/" in repo:
            msg = f"Expected a repository of the form 'owner/repo', got '{slug}'"
            raise ValueError(msg)
        return cls(owner=owner, repo=repo)


class EventContext(BaseModel):
    """The event that triggered the running workflow."""

    event_name: str
    sha: str
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_environment(cls, environ: Mapping[str, str]) -> "EventContext":
        """Build the context from the variables the Actions runner sets.

        :param environ: environment mapping, usually ``os.environ``
        """
        payload: dict[str, Any] = {}
        if event_path := environ.get("GITHUB_EVENT_PATH"):
            event_file = Path(event_path)
            if event_file.exists():
                with event_file.open("r", encoding="utf-8") as f:
                    payload = json.load(f)
        return cls(
            event_name=environ.get("GITHUB_EVENT_NAME", ""),
            sha=environ.get("GITHUB_SHA", ""),
            payload=payload,
        )


class CheckRunCreation(BaseModel):
    """Outcome of creating a check run. ``check_run_id`` is empty on failure."""

    check_run_id: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether GitHub accepted the new check run."""
        return self.error is None


class CheckRunUpdate(BaseModel):
    """Outcome of updating an existing check run."""

    check_run_id: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether GitHub accepted the update."""
        return self.error is None
