"""Translate check run inputs into the json payload expected by the Checks API."""

import logging
from datetime import UTC, datetime
from typing import Any

from action_helpers.models import CheckRunConclusion, CheckRunInputs, CheckRunStatus

logger = logging.getLogger(__name__)


def gen_github_timestamp() -> str:
    """Generate a timestamp for the current moment in the GitHub-expected format."""
    return datetime.now(UTC).replace(microsecond=0).isoformat()


def _resolve_details_url(inputs: CheckRunInputs) -> str | None:
    action_required = inputs.conclusion == CheckRunConclusion.ACTION_REQUIRED
    has_actions = inputs.actions is not None
    if not (action_required or has_actions):
        return inputs.details_url

    if inputs.details_url:
        reasons: list[str] = []
        if action_required:
            reasons.append("'conclusion' is 'action_required'")
        if has_actions:
            reasons.append("'actions' was provided")
        logger.info(
            "'details_url' was ignored in favor of 'action_url' because %s "
            "(see documentation for details)",
            " and ".join(reasons),
        )
    return inputs.action_url


def build_check_run_payload(title: str, inputs: CheckRunInputs) -> dict[str, Any]:
    """Build the fields shared by check run creation and update requests.

    Fields without a value are left out of the payload rather than sent as null.

    :param title: output title to fall back to, usually the check run's name
    :param inputs: the structured inputs for this check run
    :return: json-serializable payload
    """
    actions = _dump_list(inputs.actions)
    payload: dict[str, Any] = {"status": inputs.status.value}

    if inputs.output is not None:
        if inputs.output.title is not None:
            title = inputs.output.title
        payload["output"] = _without_none(
            {
                "title": title,
                "summary": inputs.output.summary,
                "text": inputs.output.text_description,
                "actions": actions,
                "annotations": _dump_list(inputs.annotations),
                "images": _dump_list(inputs.images),
            },
        )
    if actions is not None:
        payload["actions"] = actions
    if inputs.conclusion is not None:
        payload["conclusion"] = inputs.conclusion.value
    if inputs.status == CheckRunStatus.COMPLETED:
        payload["completed_at"] = gen_github_timestamp()
    if details_url := _resolve_details_url(inputs):
        payload["details_url"] = details_url
    return payload


def _dump_list(items: list[Any] | None) -> list[dict[str, Any]] | None:
    if items is None:
        return None
    return [item.model_dump(mode="json", exclude_none=True) for item in items]


def _without_none(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}
