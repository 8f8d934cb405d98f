"""Tests for the worker pool that fans syncs out across repositories."""

import threading
import time
from collections import Counter
from pathlib import Path

import pytest

from pyrepos import (
    BufferedOutputHandler,
    OperationResult,
    RepositoryTarget,
    SyncConfig,
    SyncOrchestrator,
    SyncStatus,
    sync_all,
)

from fakes import FakeGitRepository, factory_for, make_checkouts


def _targets(paths: list[Path]) -> list[RepositoryTarget]:
    return [RepositoryTarget(p) for p in paths]


def _orchestrator(fakes, parallel: int = 5, output=None) -> SyncOrchestrator:
    return SyncOrchestrator(SyncConfig(parallel=parallel), output or BufferedOutputHandler(),
                            repository_factory=factory_for(fakes))


class TestSyncAll:
    @pytest.mark.parametrize("concurrency", [1, 2, 3, 7, 50])
    def test_one_outcome_per_target(self, tmp_path, concurrency):
        names = [f"repo{i:02d}" for i in range(12)]
        paths = make_checkouts(tmp_path, names)
        fakes = {n: FakeGitRepository() for n in names}

        outcomes = list(_orchestrator(fakes, concurrency).sync_all(_targets(paths)))

        assert len(outcomes) == len(names)
        assert Counter(o.name for o in outcomes) == Counter(names)

    def test_empty_targets(self):
        assert list(_orchestrator({}).sync_all([])) == []

    @pytest.mark.parametrize("parallel", [0, -1])
    def test_rejects_non_positive_concurrency(self, parallel):
        with pytest.raises(ValueError):
            _orchestrator({}, parallel).sync_all([])

    def test_concurrency_does_not_change_outcomes(self, tmp_path):
        names = ["a", "b", "c", "d", "e"]
        paths = make_checkouts(tmp_path, names, without_git={"d"})

        def run(concurrency):
            fakes = {
                "a": FakeGitRepository(before="aaaaaaa", after="bbbbbbb"),
                "b": FakeGitRepository(fail={"merge_fast_forward": "not a fast-forward"}),
                "c": FakeGitRepository(before="1234567"),
                "d": FakeGitRepository(),
                "e": FakeGitRepository(fail={"fetch": "could not resolve host"}),
            }
            return set(_orchestrator(fakes, concurrency).sync_all(_targets(paths)))

        assert run(1) == run(len(names))

    def test_missing_checkout_fails_at_any_concurrency(self, tmp_path):
        paths = make_checkouts(tmp_path, ["x", "y"], without_git={"y"})
        for concurrency in (1, 2, 4):
            fakes = {"x": FakeGitRepository(), "y": FakeGitRepository()}
            outcomes = {o.name: o for o in _orchestrator(fakes, concurrency).sync_all(_targets(paths))}
            assert outcomes["y"].status is SyncStatus.FAILED
            assert outcomes["y"].failure_detail == "no checkout found"
            assert outcomes["x"].ok

    def test_mixed_scenario(self, tmp_path):
        paths = make_checkouts(tmp_path, ["a", "b", "c"], without_git={"b"})
        fakes = {
            "a": FakeGitRepository(before="abc123", after="def456"),
            "b": FakeGitRepository(),
            "c": FakeGitRepository(before="111111", after="111111"),
        }

        outcomes = {o.name: o for o in _orchestrator(fakes, 2).sync_all(_targets(paths))}

        assert len(outcomes) == 3
        assert [n for n, o in outcomes.items() if o.status is SyncStatus.FAILED] == ["b"]
        assert (outcomes["a"].previous_revision, outcomes["a"].new_revision) == ("abc123", "def456")
        assert outcomes["c"].previous_revision == outcomes["c"].new_revision == "111111"

    def test_failure_does_not_affect_siblings(self, tmp_path):
        names = ["a", "b", "c"]
        paths = make_checkouts(tmp_path, names)
        fakes = {
            "a": FakeGitRepository(),
            "b": FakeGitRepository(raises="checkout"),
            "c": FakeGitRepository(),
        }

        outcomes = {o.name: o for o in _orchestrator(fakes, 3).sync_all(_targets(paths))}

        assert outcomes["a"].ok and outcomes["c"].ok
        assert "unexpected error" in outcomes["b"].failure_detail
        assert fakes["a"].step_names[-1] == fakes["c"].step_names[-1] == "read_head"

    def test_outcomes_arrive_in_completion_order(self, tmp_path):
        paths = make_checkouts(tmp_path, ["slow", "fast"])
        release = threading.Event()
        fakes = {
            "slow": FakeGitRepository(gate=release),
            "fast": FakeGitRepository(),
        }

        stream = _orchestrator(fakes, 2).sync_all(_targets(paths))
        first = next(stream)
        release.set()
        second = next(stream)

        assert first.name == "fast"
        assert second.name == "slow"
        assert list(stream) == []

    def test_never_exceeds_worker_count(self, tmp_path):
        names = [f"r{i}" for i in range(8)]
        paths = make_checkouts(tmp_path, names)
        lock = threading.Lock()
        active = 0
        peak = 0

        class CountingRepository(FakeGitRepository):
            def fetch(self, jobs: int = 10) -> OperationResult:
                nonlocal active, peak
                with lock:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.02)
                with lock:
                    active -= 1
                return super().fetch(jobs)

        fakes = {n: CountingRepository() for n in names}
        outcomes = list(_orchestrator(fakes, 3).sync_all(_targets(paths)))

        assert len(outcomes) == 8
        assert 1 <= peak <= 3

    def test_closing_stream_cancels_pending_targets(self, tmp_path):
        names = [f"r{i}" for i in range(6)]
        paths = make_checkouts(tmp_path, names)
        fakes = {n: FakeGitRepository(delay=0.05) for n in names}

        stream = _orchestrator(fakes, 1).sync_all(_targets(paths))
        next(stream)
        stream.close()

        started = [n for n, fake in fakes.items() if fake.calls]
        assert 1 <= len(started) <= 2

    def test_module_level_sync_all(self, tmp_path):
        paths = make_checkouts(tmp_path, ["a", "b"])
        fakes = {"a": FakeGitRepository(), "b": FakeGitRepository()}

        outcomes = list(sync_all(_targets(paths), 2, repository_factory=factory_for(fakes)))

        assert sorted(o.name for o in outcomes) == ["a", "b"]

    def test_module_level_sync_all_rejects_zero(self):
        with pytest.raises(ValueError):
            sync_all([], 0)


class TestRun:
    def test_reports_every_outcome(self, tmp_path):
        make_checkouts(tmp_path, ["a", "b", "c"], without_git={"b"})
        fakes = {
            "a": FakeGitRepository(before="abc123", after="def456"),
            "b": FakeGitRepository(),
            "c": FakeGitRepository(before="111111"),
        }
        output = BufferedOutputHandler()

        outcomes = _orchestrator(fakes, 2, output).run(tmp_path)

        assert len(outcomes) == 3
        assert len(output.messages) == 3
        assert [m[:4] for m in output.messages] == ["   1", "   2", "   3"]
        assert any(m.endswith("a: abc123 -> def456") for m in output.messages)
        assert any(m.endswith("b: no checkout found") for m in output.messages)
        assert any(m.endswith("c: 111111") for m in output.messages)

    def test_exclude_patterns_applied(self, tmp_path):
        make_checkouts(tmp_path, ["keep", "skip-me"])
        fakes = {"keep": FakeGitRepository(), "skip-me": FakeGitRepository()}
        config = SyncConfig(exclude_patterns=["skip"])
        orchestrator = SyncOrchestrator(config, BufferedOutputHandler(), factory_for(fakes))

        outcomes = orchestrator.run(tmp_path)

        assert [o.name for o in outcomes] == ["keep"]
        assert fakes["skip-me"].calls == []

    def test_empty_directory_warns(self, tmp_path):
        output = BufferedOutputHandler()
        assert _orchestrator({}, output=output).run(tmp_path) == []
        assert any("No repositories found" in m for m in output.messages)

    def test_enumeration_error_propagates(self, tmp_path):
        with pytest.raises(OSError):
            _orchestrator({}).run(tmp_path / "does-not-exist")
