# type: ignore  # noqa: PGH003
# ruff: noqa: S101, D103, D100, INP001
from unittest.mock import MagicMock, patch

import pytest
import requests

from action_helpers.github_api import ChecksApiClient, create_run, update_run
from action_helpers.models import CheckRunInputs, Ownership

OWNERSHIP = Ownership(owner="octo", repo="widgets")
RUNS_URL = "https://api.github.com/repos/octo/widgets/check-runs"


@pytest.fixture
def client() -> ChecksApiClient:
    return ChecksApiClient(token="t0k3n")  # noqa: S106


def _response(json_data: dict | None = None, error: Exception | None = None):
    response = MagicMock()
    response.json.return_value = json_data or {}
    if error:
        response.raise_for_status.side_effect = error
    return response


def test_client_headers(client) -> None:
    assert client.headers["Authorization"] == "Bearer t0k3n"
    assert client.headers["Accept"] == "application/vnd.github+json"


def test_client_strips_trailing_slash() -> None:
    client = ChecksApiClient(token="t", api_url="https://ghe.example.com/api/v3/")  # noqa: S106
    assert client.api_url == "https://ghe.example.com/api/v3"


@patch("action_helpers.github_api.post")
def test_create_run_returns_id(mock_post, client) -> None:
    mock_post.return_value = _response({"id": 42})
    result = create_run(
        client,
        "lint",
        "abc",
        OWNERSHIP,
        CheckRunInputs(status="in_progress"),
    )
    assert result.ok
    assert result.check_run_id == "42"
    mock_post.assert_called_once()
    assert mock_post.call_args[0][0] == RUNS_URL
    payload = mock_post.call_args[1]["json"]
    assert payload["head_sha"] == "abc"
    assert payload["name"] == "lint"
    assert payload["status"] == "in_progress"
    assert payload["started_at"]
    assert "completed_at" not in payload
    assert mock_post.call_args[1]["timeout"] == 10


@pytest.mark.parametrize(
    "error",
    [
        requests.HTTPError("422 Unprocessable Entity"),
        requests.ConnectionError("connection refused"),
    ],
)
@patch("action_helpers.github_api.post")
def test_create_run_failure_returns_empty_id(mock_post, client, error, caplog) -> None:
    mock_post.return_value = _response(error=error)
    result = create_run(client, "lint", "abc", OWNERSHIP, CheckRunInputs(status="queued"))
    assert not result.ok
    assert result.check_run_id == ""
    assert str(error) in result.error
    assert any(record.levelname == "ERROR" for record in caplog.records)


@patch("action_helpers.github_api.post")
def test_create_run_connection_error_raised_by_post(mock_post, client) -> None:
    mock_post.side_effect = requests.ConnectionError("no route to host")
    result = create_run(client, "lint", "abc", OWNERSHIP, CheckRunInputs(status="queued"))
    assert result.check_run_id == ""


@patch("action_helpers.github_api.patch")
@patch("action_helpers.github_api.get")
def test_update_run_uses_previous_name(mock_get, mock_patch, client) -> None:
    mock_get.return_value = _response({"id": 42, "name": "lint"})
    mock_patch.return_value = _response()
    inputs = CheckRunInputs.model_validate(
        {
            "status": "completed",
            "conclusion": "success",
            "output": {"summary": "All good"},
        },
    )
    result = update_run(client, "42", OWNERSHIP, inputs)
    assert result.ok
    assert mock_get.call_args[0][0] == f"{RUNS_URL}/42"
    assert mock_patch.call_args[0][0] == f"{RUNS_URL}/42"
    payload = mock_patch.call_args[1]["json"]
    assert payload["output"] == {"title": "lint", "summary": "All good"}
    assert payload["conclusion"] == "success"
    assert payload["completed_at"]
    assert "started_at" not in payload


@patch("action_helpers.github_api.patch")
@patch("action_helpers.github_api.get")
def test_update_run_failure_is_swallowed(mock_get, mock_patch, client, caplog) -> None:
    mock_get.return_value = _response(error=requests.HTTPError("404 Not Found"))
    result = update_run(client, "42", OWNERSHIP, CheckRunInputs(status="completed"))
    assert not result.ok
    assert result.check_run_id == "42"
    mock_patch.assert_not_called()
    assert any("42" in record.getMessage() for record in caplog.records)


@patch("action_helpers.github_api.patch")
@patch("action_helpers.github_api.get")
def test_update_run_patch_failure_is_swallowed(mock_get, mock_patch, client) -> None:
    mock_get.return_value = _response({"name": "lint"})
    mock_patch.return_value = _response(error=requests.HTTPError("500 Server Error"))
    result = update_run(client, "42", OWNERSHIP, CheckRunInputs(status="in_progress"))
    assert result.error == "500 Server Error"


@patch("action_helpers.github_api.post")
def test_create_run_response_without_id(mock_post, client) -> None:
    mock_post.return_value = _response({"name": "lint"})
    result = create_run(client, "lint", "abc", OWNERSHIP, CheckRunInputs(status="queued"))
    assert not result.ok
    assert result.check_run_id == ""


@patch("action_helpers.github_api.patch")
@patch("action_helpers.github_api.get")
def test_update_run_response_without_name(mock_get, mock_patch, client) -> None:
    mock_get.return_value = _response({"id": 42})
    result = update_run(client, "42", OWNERSHIP, CheckRunInputs(status="in_progress"))
    assert not result.ok
    mock_patch.assert_not_called()
