"""Determine the commit that a check run should be attached to."""

from action_helpers.models import EventContext

PULL_REQUEST_EVENTS = frozenset(
    {
        "pull_request",
        "pull_request_review",
        "pull_request_review_comment",
        "pull_request_target",
    },
)


def resolve_sha(context: EventContext, input_sha: str | None = None) -> str:
    """Resolve the SHA of the commit being checked.

    For pull request events, the runner reports the SHA of the merge ref, so the
    head SHA of the pull request is used instead when the payload carries one.

    :param context: the event that triggered the workflow
    :param input_sha: explicit SHA given by the user, takes precedence if non-empty
    :return: the SHA to attach check runs to
    """
    if input_sha:
        return input_sha
    if context.event_name in PULL_REQUEST_EVENTS:
        pull_request = context.payload.get("pull_request") or {}
        if head_sha := (pull_request.get("head") or {}).get("sha"):
            return str(head_sha)
    return context.sha
