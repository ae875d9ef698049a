"""Unit tests for Send link delivery over Slack."""

import csv
from unittest.mock import MagicMock

import pytest

from infrastructure.configuration import settings
from infrastructure.notifications import (
    DeliveryFailedError,
    DeliveryOutcome,
    NotificationDispatcher,
    StrategyName,
)
from modules.bw_links import cli
from modules.bw_links.core import (
    STATUS_FAILED,
    STATUS_SENT,
    STATUS_SKIPPED,
    deliver_links,
    format_link_message,
)
from modules.script_support import EXIT_CONFIG_ERROR, EXIT_FAILURE, EXIT_OK


@pytest.fixture
def dispatcher():
    mock = MagicMock(spec=NotificationDispatcher)
    mock.deliver.return_value = DeliveryOutcome(
        attempted=[StrategyName.DIRECT, StrategyName.OPEN_OR_FIND],
        succeeded=StrategyName.OPEN_OR_FIND,
    )
    return mock


def _row(email="jdoe@example.com", username="jdoe", sendurl="https://vault/#/send/1", **extra):
    return {"email": email, "username": username, "sendurl": sendurl, **extra}


@pytest.mark.unit
class TestDeliverLinks:
    def test_delivers_link_to_email_destination(self, dispatcher):
        deliveries = deliver_links([_row()], dispatcher)

        assert deliveries[0].status == STATUS_SENT
        assert deliveries[0].strategy == "open_or_find"
        message, target = dispatcher.deliver.call_args.args
        assert "https://vault/#/send/1" in message
        assert target.email == "jdoe@example.com"
        assert target.display_name == "jdoe"

    @pytest.mark.parametrize(
        "row,reason",
        [
            (_row(email=""), "missing email or send link"),
            (_row(sendurl=""), "missing email or send link"),
            (_row(email="not-an-email"), "invalid email address"),
            (_row(status="failed"), "send step status failed"),
        ],
    )
    def test_unusable_rows_are_skipped(self, dispatcher, row, reason):
        deliveries = deliver_links([row], dispatcher)

        assert deliveries[0].status == STATUS_SKIPPED
        assert deliveries[0].error == reason
        dispatcher.deliver.assert_not_called()

    def test_delivery_failure_is_recorded(self, dispatcher):
        dispatcher.deliver.side_effect = [
            DeliveryFailedError("jdoe", DeliveryOutcome(), "no fallback channel configured"),
            dispatcher.deliver.return_value,
        ]

        deliveries = deliver_links([_row(), _row(email="asmith@example.com")], dispatcher)

        assert [d.status for d in deliveries] == [STATUS_FAILED, STATUS_SENT]
        assert "no fallback channel configured" in deliveries[0].error

    def test_dry_run_sends_nothing(self):
        deliveries = deliver_links([_row()], None, dry_run=True)

        assert deliveries[0].status == STATUS_SKIPPED
        assert deliveries[0].error == "dry run"

    def test_message_without_username(self):
        message = format_link_message("", "https://vault/#/send/1")

        assert "Your account has been created" in message
        assert "https://vault/#/send/1" in message


@pytest.fixture
def links_csv(tmp_path):
    path = tmp_path / "bw-send-links.csv"
    path.write_text(
        "Username,Email,SendUrl,Status,Error\n"
        "jdoe,jdoe@example.com,https://vault/#/send/1,created,\n"
        "asmith,asmith@example.com,,failed,boom\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def mock_build_dispatcher(monkeypatch, dispatcher):
    build = MagicMock(return_value=dispatcher)
    monkeypatch.setattr(cli, "build_dispatcher", build)
    return build


@pytest.mark.unit
class TestMain:
    def test_writes_report(self, tmp_path, links_csv, mock_build_dispatcher):
        report = tmp_path / "report.csv"

        code = cli.main(
            [
                "--csv-path",
                str(links_csv),
                "--slack-token",
                "xoxb-1",
                "--fallback-channel",
                "C0FALLBACK",
                "--report-csv",
                str(report),
            ]
        )

        assert code == EXIT_OK
        mock_build_dispatcher.assert_called_once_with("xoxb-1", fallback_channel="C0FALLBACK")
        with open(report, newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))
        assert [(r["Email"], r["Status"], r["Strategy"]) for r in rows] == [
            ("jdoe@example.com", "sent", "open_or_find"),
            ("asmith@example.com", "skipped", ""),
        ]

    def test_failure_exits_nonzero(self, links_csv, mock_build_dispatcher, dispatcher):
        dispatcher.deliver.side_effect = DeliveryFailedError("jdoe", DeliveryOutcome())

        code = cli.main(["--csv-path", str(links_csv), "--slack-token", "xoxb-1"])

        assert code == EXIT_FAILURE

    def test_missing_token_is_configuration_error(self, links_csv, monkeypatch):
        monkeypatch.setattr(settings.slack, "SLACK_TOKEN", "")

        assert cli.main(["--csv-path", str(links_csv)]) == EXIT_CONFIG_ERROR

    def test_dry_run_needs_no_token(self, links_csv, mock_build_dispatcher, monkeypatch):
        monkeypatch.setattr(settings.slack, "SLACK_TOKEN", "")

        assert cli.main(["--csv-path", str(links_csv), "--dry-run"]) == EXIT_OK
        mock_build_dispatcher.assert_not_called()
