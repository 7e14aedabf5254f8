"""Provides an interface to run the helpers directly from a workflow step."""

import logging
import os
import sys
from argparse import Namespace
from collections.abc import Sequence

from configargparse import ArgumentParser
from pydantic import TypeAdapter, ValidationError

from action_helpers.commit import resolve_sha
from action_helpers.errors import CommandExecutionError, InputValidationError
from action_helpers.github_api import (
    DEFAULT_API_URL,
    ChecksApiClient,
    create_run,
    update_run,
)
from action_helpers.inputs import use_sudo_prefix
from action_helpers.log_config import setup_logging
from action_helpers.models import (
    CheckAnnotation,
    CheckRunAction,
    CheckRunImage,
    CheckRunInputs,
    CheckRunOutputInput,
    EventContext,
    Ownership,
)
from action_helpers.platform_info import get_linux_distro
from action_helpers.shell import execute_shell_command

logger = logging.getLogger(__name__)

_output_adapter = TypeAdapter(CheckRunOutputInput)
_annotations_adapter = TypeAdapter(list[CheckAnnotation])
_images_adapter = TypeAdapter(list[CheckRunImage])
_actions_adapter = TypeAdapter(list[CheckRunAction])


def _add_check_run_arguments(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--status",
        choices=["queued", "in_progress", "completed"],
        required=True,
        help="Status of the check run.",
    )
    parser.add_argument(
        "--conclusion",
        choices=[
            "success",
            "failure",
            "neutral",
            "cancelled",
            "skipped",
            "timed_out",
            "action_required",
        ],
        required=False,
        help="Conclusion of the check run, only sensible with --status completed.",
    )
    parser.add_argument(
        "--output",
        type=str,
        required=False,
        help="JSON object with 'summary' and optionally 'title' and "
        "'text_description'. The title defaults to the name of the check run.",
    )
    parser.add_argument(
        "--annotations",
        type=str,
        required=False,
        help="JSON list of annotations to show on the checked code.",
    )
    parser.add_argument(
        "--images",
        type=str,
        required=False,
        help="JSON list of images to show in the check run output.",
    )
    parser.add_argument(
        "--actions",
        type=str,
        required=False,
        help="JSON list of actions (buttons) offered with the check run. If given, "
        "--action-url is used as details URL.",
    )
    parser.add_argument(
        "--details-url",
        type=str,
        required=False,
        help="URL with more details about the check run. Ignored in favor of "
        "--action-url if the conclusion is action_required or actions are given.",
    )
    parser.add_argument(
        "--action-url",
        type=str,
        required=False,
        help="URL the user is sent to for required actions.",
    )


def build_parser() -> ArgumentParser:
    """Build the argument parser for the ``action-helpers`` CLI."""
    argparser = ArgumentParser(
        prog="action-helpers",
        description="CLI for the action-helpers library. Options can be passed as "
        "arguments or through the environment variables set by the Actions runner.",
    )
    argparser.add_argument(
        "--log-level",
        type=str,
        env_var="ACTION_HELPERS_LOG_LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum level of log messages to print.",
    )
    subparsers = argparser.add_subparsers(
        description="Operation to be performed by the CLI.",
        required=True,
        dest="command",
    )

    exec_parser = subparsers.add_parser(
        "exec",
        help="Run a command line in the shell of this platform (MSYS2 bash on "
        "Windows). Exits with the command's exit code if it fails.",
    )
    exec_parser.add_argument("cmd", type=str, help="The command line to run.")
    exec_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Don't echo the command's stdout.",
    )
    exec_parser.add_argument(
        "--sudo",
        action="store_true",
        help="Prefix the command with sudo if the action's `sudo` input asks for it "
        "(`auto` means: unless already running as root).",
    )

    subparsers.add_parser(
        "distro",
        help="Print the id of the Linux distribution, or '(unknown)'.",
    )

    sha_parser = subparsers.add_parser(
        "resolve-sha",
        help="Print the commit SHA check runs should be attached to. For pull "
        "request events, this is the head of the pull request.",
    )
    sha_parser.add_argument(
        "--sha",
        type=str,
        env_var="INPUT_SHA",
        required=False,
        help="Explicit SHA, overrides the one derived from the event.",
    )

    for name, help_text in (
        (
            "create-check-run",
            "Create a check run and print its id. Prints an empty line if the "
            "check run could not be created, without failing.",
        ),
        (
            "update-check-run",
            "Update an existing check run. Failures are logged, never fatal.",
        ),
    ):
        check_parser = subparsers.add_parser(name, help=help_text)
        check_parser.add_argument(
            "--github-token",
            type=str,
            env_var="GITHUB_TOKEN",
            required=True,
            help="Token authorized to create and update check runs.",
        )
        check_parser.add_argument(
            "--repository",
            type=str,
            env_var="GITHUB_REPOSITORY",
            required=True,
            help="Repository to report to, in the form owner/repo.",
        )
        check_parser.add_argument(
            "--api-url",
            type=str,
            env_var="GITHUB_API_URL",
            default=DEFAULT_API_URL,
            help="Base URL of the GitHub REST API.",
        )
        check_parser.add_argument(
            "--timeout",
            type=int,
            env_var="ACTION_HELPERS_TIMEOUT",
            default=10,
            help="Timeout of each request to GitHub, in seconds.",
        )
        if name == "create-check-run":
            check_parser.add_argument(
                "--name",
                type=str,
                env_var="INPUT_NAME",
                required=True,
                help="A name for this check run. Will be shown on any respective "
                "GitHub PRs.",
            )
            check_parser.add_argument(
                "--sha",
                type=str,
                env_var="INPUT_SHA",
                required=False,
                help="Commit to attach the check run to. Derived from the "
                "triggering event if not given.",
            )
        else:
            check_parser.add_argument(
                "--check-id",
                type=str,
                env_var="INPUT_CHECK_ID",
                required=True,
                help="Id of the check run to update.",
            )
        _add_check_run_arguments(check_parser)

    return argparser


def parse_check_run_inputs(args: Namespace) -> CheckRunInputs:
    """Assemble the check run inputs from the parsed (partially JSON) arguments.

    :raises ValidationError: if any of the arguments is malformed
    """
    return CheckRunInputs(
        status=args.status,
        conclusion=args.conclusion,
        output=_output_adapter.validate_json(args.output) if args.output else None,
        annotations=(
            _annotations_adapter.validate_json(args.annotations)
            if args.annotations
            else None
        ),
        images=_images_adapter.validate_json(args.images) if args.images else None,
        actions=_actions_adapter.validate_json(args.actions) if args.actions else None,
        details_url=args.details_url,
        action_url=args.action_url,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit status."""
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.log_level)

    try:
        if args.command == "exec":
            cmd = f"sudo {args.cmd}" if args.sudo and use_sudo_prefix() else args.cmd
            execute_shell_command(cmd, quiet=args.quiet)

        elif args.command == "distro":
            print(get_linux_distro())  # noqa: T201

        elif args.command == "resolve-sha":
            context = EventContext.from_environment(os.environ)
            print(resolve_sha(context, args.sha))  # noqa: T201

        elif args.command in ("create-check-run", "update-check-run"):
            inputs = parse_check_run_inputs(args)
            ownership = Ownership.from_slug(args.repository)
            client = ChecksApiClient(
                token=args.github_token,
                api_url=args.api_url,
                timeout=args.timeout,
            )
            if args.command == "create-check-run":
                sha = resolve_sha(EventContext.from_environment(os.environ), args.sha)
                creation = create_run(client, args.name, sha, ownership, inputs)
                print(creation.check_run_id)  # noqa: T201
            else:
                update_run(client, args.check_id, ownership, inputs)

    except CommandExecutionError as error:
        logger.error("Command failed with exit code %s", error.exit_code)  # noqa: TRY400
        # signal exits are negative, report them as a generic failure
        return error.exit_code if error.exit_code > 0 else 1
    except (InputValidationError, ValidationError, ValueError) as error:
        logger.error("%s", error)  # noqa: TRY400
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
