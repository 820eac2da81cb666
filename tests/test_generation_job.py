from __future__ import annotations

import pytest
from apscheduler.jobstores.base import ConflictingIdError

from wrapped import scheduler as scheduler_module
from wrapped.services import generation_job
from wrapped.services.stats_service import GenerationOutcome


def test_generation_job_id_is_per_username() -> None:
    assert scheduler_module.generation_job_id("octocat") == "generate_stats:octocat"


def test_enqueue_adds_one_off_job(monkeypatch: pytest.MonkeyPatch) -> None:
    added = []
    monkeypatch.setattr(scheduler_module.scheduler, "add_job", lambda **kwargs: added.append(kwargs))

    assert scheduler_module.enqueue_stats_generation("octocat", "testing") is True

    job = added[0]
    assert job["func"] is generation_job.run_stats_generation
    assert job["trigger"] == "date"
    assert job["id"] == "generate_stats:octocat"
    assert job["kwargs"] == {"config_name": "testing", "username": "octocat"}
    assert job["replace_existing"] is False


def test_enqueue_conflict_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    def conflicting(**kwargs):
        raise ConflictingIdError(kwargs["id"])

    monkeypatch.setattr(scheduler_module.scheduler, "add_job", conflicting)

    assert scheduler_module.enqueue_stats_generation("octocat") is False


def test_run_stats_generation_uses_app_service(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []

    class RecordingService:
        def generate_stats(self, username):
            seen.append(username)
            return GenerationOutcome(username, "created")

    monkeypatch.setattr(generation_job, "get_stats_service", lambda: RecordingService())

    outcome = generation_job.run_stats_generation("testing", "octocat")

    assert seen == ["octocat"]
    assert outcome.ok


def test_run_stats_generation_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    class FailingService:
        def generate_stats(self, username):
            return GenerationOutcome(username, "failed", "user_not_found", "missing")

    monkeypatch.setattr(generation_job, "get_stats_service", lambda: FailingService())

    outcome = generation_job.run_stats_generation("testing", "ghost")

    assert not outcome.ok
    assert outcome.error_kind == "user_not_found"
