"""Unit tests for the new-repository watcher run.

Tests cover:
- First-run bootstrap without notifications
- One notification per added repository
- Baseline written before or after notifying
- Per-repository delivery failures
- Dry runs
"""

import pytest

from infrastructure.notifications import DeliveryFailedError, DeliveryOutcome
from infrastructure.persistence import EntityRecord
from modules.repo_watch.core import format_repository_message, run_repo_watch


@pytest.mark.unit
class TestRunRepoWatch:
    def test_first_run_seeds_baseline_without_notifying(
        self, detector, dispatcher, target, repos, read_baseline
    ):
        report = run_repo_watch("my-org", repos("b", "a"), detector, dispatcher, target)

        assert report.bootstrap
        assert report.succeeded
        dispatcher.deliver.assert_not_called()
        assert read_baseline() == ["a", "b"]

    def test_first_run_seeds_baseline_when_persisting_after_notify(
        self, detector, dispatcher, target, repos, read_baseline
    ):
        report = run_repo_watch(
            "my-org",
            repos("a"),
            detector,
            dispatcher,
            target,
            persist_before_notify=False,
        )

        assert report.bootstrap
        dispatcher.deliver.assert_not_called()
        assert read_baseline() == ["a"]

    def test_notifies_each_added_repository_in_name_order(
        self, detector, dispatcher, target, repos, seed_baseline, read_baseline
    ):
        seed_baseline(["a"])

        report = run_repo_watch(
            "my-org", repos("a", "zeta", "beta"), detector, dispatcher, target
        )

        assert report.added == ["beta", "zeta"]
        assert report.delivered == {"beta": "direct", "zeta": "direct"}
        messages = [c.args[0] for c in dispatcher.deliver.call_args_list]
        assert "<https://github.com/my-org/beta|beta>" in messages[0]
        assert "<https://github.com/my-org/zeta|zeta>" in messages[1]
        assert all(c.args[1] is target for c in dispatcher.deliver.call_args_list)
        assert read_baseline() == ["a", "beta", "zeta"]

    def test_no_additions_sends_nothing(
        self, detector, dispatcher, target, repos, seed_baseline
    ):
        seed_baseline(["a", "b"])

        report = run_repo_watch("my-org", repos("a"), detector, dispatcher, target)

        assert report.added == []
        dispatcher.deliver.assert_not_called()

    def test_baseline_persisted_before_notifying_by_default(
        self, detector, dispatcher, target, repos, seed_baseline, read_baseline
    ):
        seed_baseline(["a"])
        seen = []
        dispatcher.deliver.side_effect = lambda *args: (
            seen.append(read_baseline()) or dispatcher.deliver.return_value
        )

        run_repo_watch("my-org", repos("a", "b"), detector, dispatcher, target)

        assert seen == [["a", "b"]]

    def test_baseline_persisted_after_notifying_when_configured(
        self, detector, dispatcher, target, repos, seed_baseline, read_baseline
    ):
        seed_baseline(["a"])
        seen = []
        dispatcher.deliver.side_effect = lambda *args: (
            seen.append(read_baseline()) or dispatcher.deliver.return_value
        )

        run_repo_watch(
            "my-org",
            repos("a", "b"),
            detector,
            dispatcher,
            target,
            persist_before_notify=False,
        )

        assert seen == [["a"]]
        assert read_baseline() == ["a", "b"]

    def test_crash_during_notification_does_not_renotify_next_run(
        self, detector, dispatcher, target, repos, seed_baseline
    ):
        seed_baseline(["a"])
        dispatcher.deliver.side_effect = RuntimeError("process killed")

        with pytest.raises(RuntimeError):
            run_repo_watch("my-org", repos("a", "b"), detector, dispatcher, target)

        dispatcher.deliver.side_effect = None
        report = run_repo_watch("my-org", repos("a", "b"), detector, dispatcher, target)

        assert report.added == []

    def test_delivery_failure_is_recorded_and_run_continues(
        self, detector, dispatcher, target, repos, seed_baseline, read_baseline
    ):
        seed_baseline(["a"])
        ok = dispatcher.deliver.return_value

        def _deliver(message, destination):
            if "|broken>" in message:
                raise DeliveryFailedError(
                    destination.label, DeliveryOutcome(), "no fallback channel configured"
                )
            return ok

        dispatcher.deliver.side_effect = _deliver

        report = run_repo_watch(
            "my-org", repos("a", "broken", "fine"), detector, dispatcher, target
        )

        assert not report.succeeded
        assert list(report.failed) == ["broken"]
        assert report.delivered == {"fine": "direct"}
        assert read_baseline() == ["a", "broken", "fine"]

    def test_deferred_commit_still_happens_after_failures(
        self, detector, dispatcher, target, repos, seed_baseline, read_baseline
    ):
        seed_baseline(["a"])
        dispatcher.deliver.side_effect = DeliveryFailedError(
            "lead@example.com", DeliveryOutcome()
        )

        report = run_repo_watch(
            "my-org",
            repos("a", "b"),
            detector,
            dispatcher,
            target,
            persist_before_notify=False,
        )

        assert report.failed
        assert read_baseline() == ["a", "b"]

    def test_dispatcher_required_outside_dry_run(self, detector, target, repos):
        with pytest.raises(ValueError):
            run_repo_watch("my-org", repos("a"), detector, None, target)


@pytest.mark.unit
class TestDryRun:
    def test_dry_run_reports_without_persisting(
        self, detector, target, repos, seed_baseline, read_baseline, baseline_path
    ):
        seed_baseline(["a"])

        report = run_repo_watch(
            "my-org", repos("a", "b"), detector, None, target, dry_run=True
        )

        assert report.dry_run
        assert report.added == ["b"]
        assert read_baseline() == ["a"]
        assert list(baseline_path.parent.glob("*-added-*.json")) == []

    def test_dry_run_without_baseline_creates_nothing(
        self, detector, target, repos, baseline_path
    ):
        report = run_repo_watch(
            "my-org", repos("a"), detector, None, target, dry_run=True
        )

        assert report.bootstrap
        assert not baseline_path.exists()


@pytest.mark.unit
class TestFormatRepositoryMessage:
    def test_with_description(self):
        message = format_repository_message(
            "my-org", EntityRecord("svc", "Payments service")
        )

        assert message == (
            ":new: New repository in *my-org*: "
            "<https://github.com/my-org/svc|svc>\n> Payments service"
        )

    def test_custom_web_url(self):
        message = format_repository_message(
            "my-org", EntityRecord("svc"), web_url="https://ghe.example.com/"
        )

        assert "<https://ghe.example.com/my-org/svc|svc>" in message
        assert "\n" not in message
