"""Tests for ProgressTracker."""

from __future__ import annotations

import time

from helpers import GUAVA

from depsentinel.models import DependencyType, ModuleResult, UnusedDependencyRow
from depsentinel.progress import ProgressTracker


def _result(module: str) -> ModuleResult:
    return ModuleResult(
        module=module,
        rows=[UnusedDependencyRow(module, DependencyType.MAVEN, "org.slf4j", "slf4j-api")],
        used={GUAVA: ["com.google.common.base.Strings"]},
    )


class TestProgressTracker:
    def test_basic_flow(self):
        tracker = ProgressTracker()
        tracker.start("app")
        tracker.complete("app", _result("app"))

        summary = tracker.get_summary()
        assert len(summary["modules"]) == 1
        assert summary["modules"][0]["status"] == "completed"
        assert summary["modules"][0]["unused"] == 1
        assert summary["modules"][0]["detail"] == "1 used, 1 unused"

    def test_fail(self):
        tracker = ProgressTracker()
        tracker.start("lib")
        tracker.fail("lib", "boom")

        summary = tracker.get_summary()
        assert summary["modules"][0]["status"] == "failed"
        assert summary["modules"][0]["error"] == "boom"

    def test_skip(self):
        tracker = ProgressTracker()
        tracker.skip("lib", "scan cancelled")

        p = tracker.get("lib")
        assert p.status == "skipped"
        assert p.detail == "scan cancelled"
        assert p.duration is None

    def test_duration(self):
        tracker = ProgressTracker()
        tracker.start("app")
        time.sleep(0.01)
        tracker.complete("app", ModuleResult(module="app"))

        p = tracker.modules[0]
        assert p.duration is not None
        assert p.duration >= 0.01

    def test_callback(self):
        events = []
        tracker = ProgressTracker()
        tracker.callbacks.append(lambda p: events.append((p.module, p.status)))

        tracker.start("a")
        tracker.complete("a", ModuleResult(module="a"))

        assert events == [("a", "running"), ("a", "completed")]

    def test_callback_error_does_not_break_tracking(self):
        tracker = ProgressTracker()

        def bad(p):
            raise RuntimeError("callback failed")

        tracker.callbacks.append(bad)
        tracker.start("a")
        tracker.complete("a", ModuleResult(module="a"))
        assert tracker.get("a").status == "completed"

    def test_summary_by_status(self):
        tracker = ProgressTracker()
        tracker.start("a")
        tracker.complete("a", ModuleResult(module="a"))
        tracker.start("b")
        tracker.fail("b", "x")
        tracker.skip("c", "scan cancelled")

        summary = tracker.get_summary()
        assert [m["module"] for m in summary["modules"]] == ["a", "b", "c"]
        assert summary["by_status"] == {"completed": 1, "failed": 1, "skipped": 1}
        assert summary["total_duration"] >= 0

    def test_unknown_module(self):
        assert ProgressTracker().get("missing") is None
