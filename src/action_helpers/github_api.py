"""Utility functions to help interface with the GitHub checks API."""

import logging
from typing import Any

from requests import RequestException, Response, get, patch, post

from action_helpers.models import (
    CheckRunCreation,
    CheckRunInputs,
    CheckRunUpdate,
    Ownership,
)
from action_helpers.payload import build_check_run_payload, gen_github_timestamp

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


def _get_token_headers(token: str, accept_type: str) -> dict[str, str]:
    return {
        "Accept": f"{accept_type}",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": "2022-11-28",
    }


class ChecksApiClient:
    """Thin client for the check run endpoints of the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 10,
    ) -> None:
        """Initialize the headers for usage with the Checks API.

        :param token: token authorized to write checks, e.g. the workflow's GITHUB_TOKEN
        :param api_url: base URL of the GitHub REST API
        :param timeout: request timeout in seconds, optional, defaults to 10
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.headers: dict[str, str] = _get_token_headers(
            token,
            "application/vnd.github+json",
        )

    def _check_runs_url(self, ownership: Ownership) -> str:
        return f"{self.api_url}/repos/{ownership.owner}/{ownership.repo}/check-runs"

    def create_check_run(
        self,
        ownership: Ownership,
        json_payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Create a check run.

        :raises HTTPError: in case the GitHub API could not create the check run
        :return: the check run as returned by GitHub
        """
        response: Response = post(
            self._check_runs_url(ownership),
            json=json_payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return dict(response.json())

    def get_check_run(self, ownership: Ownership, check_run_id: str) -> dict[str, Any]:
        """Fetch an existing check run.

        :raises HTTPError: in case the check run could not be retrieved
        """
        response: Response = get(
            f"{self._check_runs_url(ownership)}/{check_run_id}",
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return dict(response.json())

    def update_check_run(
        self,
        ownership: Ownership,
        check_run_id: str,
        json_payload: dict[str, Any],
    ) -> None:
        """Update an existing check run.

        :raises HTTPError: in case the GitHub API rejected the update
        """
        response: Response = patch(
            f"{self._check_runs_url(ownership)}/{check_run_id}",
            json=json_payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()


def create_run(
    client: ChecksApiClient,
    name: str,
    sha: str,
    ownership: Ownership,
    inputs: CheckRunInputs,
) -> CheckRunCreation:
    """Start a check run for a commit.

    Failing to create the check run must not fail the surrounding workflow, so
    errors are logged and reported through the result instead of raised.

    :param client: API client to create the check run with
    :param name: display name of the check run
    :param sha: the commit the check run is attached to
    :param ownership: repository the commit belongs to
    :param inputs: status, output etc. of the new check run
    :return: the new check run's id, or an empty id and the error on failure
    """
    json_payload: dict[str, Any] = {
        "head_sha": sha,
        "name": name,
        "started_at": gen_github_timestamp(),
        **build_check_run_payload(name, inputs),
    }
    try:
        check_run_id = str(client.create_check_run(ownership, json_payload)["id"])
    except (RequestException, KeyError) as error:
        logger.error("Could not create check run '%s': %s", name, error)  # noqa: TRY400
        return CheckRunCreation(error=str(error))
    return CheckRunCreation(check_run_id=check_run_id)


def update_run(
    client: ChecksApiClient,
    check_run_id: str,
    ownership: Ownership,
    inputs: CheckRunInputs,
) -> CheckRunUpdate:
    """Update an existing check run, keeping its name as the default output title.

    Like :func:`create_run`, errors are logged and returned, never raised.
    """
    try:
        previous = client.get_check_run(ownership, check_run_id)
        client.update_check_run(
            ownership,
            check_run_id,
            build_check_run_payload(str(previous["name"]), inputs),
        )
    except (RequestException, KeyError) as error:
        logger.error("Could not update check run %s: %s", check_run_id, error)  # noqa: TRY400
        return CheckRunUpdate(check_run_id=check_run_id, error=str(error))
    return CheckRunUpdate(check_run_id=check_run_id)
