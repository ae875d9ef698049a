"""Command line entry point for the new-repository watcher.

Usage:
  export GITHUB_TOKEN=...        # optional, includes private repositories
  export SLACK_BOT_TOKEN=xoxb-...
  repo-watch --owner my-org --notify-email lead@example.com \\
      --fallback-channel C0123456 --baseline-path ./state/repos.json
  repo-watch --owner my-org --notify-email lead@example.com --dry-run
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from infrastructure.configuration import ConfigurationError, require, settings
from infrastructure.logging import configure_logging
from infrastructure.notifications import Destination
from infrastructure.persistence import ChangeSetDetector
from infrastructure.resilience import RateLimitPolicy
from integrations.github import github_session, list_repositories
from modules.repo_watch.core import run_repo_watch
from modules.script_support import (
    EXIT_FAILURE,
    EXIT_OK,
    build_dispatcher,
    run_script,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-watch",
        description="Notify someone on Slack about repositories created since the last run.",
    )
    parser.add_argument("--owner", default=settings.repo_watch.owner)
    parser.add_argument("--owner-type", choices=("org", "user"), default="org")
    parser.add_argument("--github-token", default=settings.github.GITHUB_TOKEN)
    parser.add_argument("--slack-token", default=settings.slack.SLACK_TOKEN)
    parser.add_argument("--baseline-path", default=settings.repo_watch.baseline_path)
    parser.add_argument("--notify-email", default=settings.repo_watch.notify_email)
    parser.add_argument("--notify-user-id", default=settings.repo_watch.notify_user_id)
    parser.add_argument(
        "--fallback-channel", default=settings.slack.SLACK_FALLBACK_CHANNEL
    )
    parser.add_argument(
        "--persist-after-notify",
        action="store_true",
        default=not settings.repo_watch.persist_before_notify,
        help="Write the baseline only after notifications were attempted",
    )
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--log-level", default=None)
    return parser


def build_target(args: argparse.Namespace) -> Destination:
    has_person = bool(args.notify_user_id or args.notify_email)
    # With nobody to DM, the fallback channel becomes the destination itself
    channel_id = None if has_person else (args.fallback_channel or None)
    try:
        return Destination(
            user_id=args.notify_user_id or None,
            email=args.notify_email or None,
            channel_id=channel_id,
        )
    except ValidationError as exc:
        raise ConfigurationError(
            "REPO_WATCH_NOTIFY_EMAIL, REPO_WATCH_NOTIFY_USER_ID or SLACK_FALLBACK_CHANNEL",
            exc.errors()[0]["msg"],
        ) from exc


def _run(args: argparse.Namespace) -> int:
    owner = require(args.owner, "REPO_WATCH_OWNER", "pass --owner")
    target = build_target(args)
    dispatcher = None
    if not args.dry_run:
        dispatcher = build_dispatcher(
            args.slack_token,
            fallback_channel=args.fallback_channel,
            conversation_page_limit=settings.repo_watch.conversation_page_limit,
        )

    policy = RateLimitPolicy.from_settings(settings.rate_limit)
    with github_session(args.github_token or None) as session:
        repositories = list_repositories(
            owner,
            session,
            authenticated=bool(args.github_token),
            api_url=settings.github.GITHUB_API_URL,
            per_page=settings.github.GITHUB_PER_PAGE,
            owner_type=args.owner_type,
            policy=policy,
        )

    report = run_repo_watch(
        owner,
        repositories,
        ChangeSetDetector(args.baseline_path),
        dispatcher,
        target,
        dry_run=args.dry_run,
        persist_before_notify=not args.persist_after_notify,
    )
    return EXIT_OK if report.succeeded else EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)
    return run_script("repo_watch", lambda: _run(args))


if __name__ == "__main__":
    sys.exit(main())
