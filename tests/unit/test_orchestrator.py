"""
Tests for the hot-update orchestrator.

Covers path matching, the immediate "handled" result, error/reload
notifications, concurrent builds and build coalescing.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import pytest

from tealwright.runtime.orchestrator import (
    PLUGIN_NAME,
    BuildResult,
    HotUpdateOptions,
    HotUpdateOrchestrator,
    HotUpdateState,
    run_command,
)
from tealwright.runtime.session import DevSession, WatchEvent

PATTERN = "_BUILD-HERE/component-iterate.tsx"
MATCHING = f"/work/module/{PATTERN}"


# =============================================================================
# Fixtures
# =============================================================================


class RecordingChannel:
    """Stands in for PushChannel and records every payload."""

    def __init__(self):
        self.sent: list[dict] = []

    async def send(self, notification) -> int:
        self.sent.append(notification.to_dict())
        return 1

    def of_type(self, kind: str) -> list[dict]:
        return [payload for payload in self.sent if payload["type"] == kind]


class FakeRunner:
    """Command runner returning a canned result, optionally held on a gate."""

    def __init__(self, result: BuildResult | None = None, gated: bool = False):
        self.result = result
        self.calls: list[str] = []
        self.gate = asyncio.Event()
        if not gated:
            self.gate.set()

    async def __call__(self, command: str, cwd: Path | None) -> BuildResult:
        self.calls.append(command)
        await self.gate.wait()
        return self.result or BuildResult(command=command, returncode=0)


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def session(channel):
    return DevSession(channel=channel)


def make_orchestrator(runner, coalesce: bool = False) -> HotUpdateOrchestrator:
    return HotUpdateOrchestrator(
        HotUpdateOptions(file_pattern=PATTERN, command="build-it", coalesce=coalesce),
        runner=runner,
    )


# =============================================================================
# Matching
# =============================================================================


class TestMatching:
    @pytest.mark.asyncio
    async def test_non_matching_path_is_not_handled(self, session, channel):
        runner = FakeRunner()
        orchestrator = make_orchestrator(runner)

        result = orchestrator.handle_hot_update(
            WatchEvent(file="/work/module/_COPY-THIS/component-ready.tsx", session=session)
        )
        await orchestrator.wait_idle()

        assert result is None
        assert runner.calls == []
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_matching_path_returns_empty_list(self, session):
        orchestrator = make_orchestrator(FakeRunner())

        result = orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await orchestrator.wait_idle()

        assert result == []

    def test_suffix_match(self):
        orchestrator = make_orchestrator(FakeRunner())

        assert orchestrator.matches(MATCHING)
        assert orchestrator.matches(PATTERN)
        assert not orchestrator.matches(MATCHING + ".bak")


# =============================================================================
# Build Outcomes
# =============================================================================


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_success_sends_one_full_reload(self, session, channel):
        orchestrator = make_orchestrator(FakeRunner())

        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await orchestrator.wait_idle()

        assert channel.sent == [{"type": "full-reload", "path": "*"}]

    @pytest.mark.asyncio
    async def test_failure_sends_one_error(self, session, channel):
        runner = FakeRunner(
            BuildResult(command="build-it", returncode=1, stderr="Draft module not found")
        )
        orchestrator = make_orchestrator(runner)

        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await orchestrator.wait_idle()

        assert channel.of_type("full-reload") == []
        errors = channel.of_type("error")
        assert len(errors) == 1
        err = errors[0]["err"]
        assert err["message"]
        assert "exited with code 1" in err["message"]
        assert err["stack"] == "Draft module not found"
        assert err["plugin"] == PLUGIN_NAME

    @pytest.mark.asyncio
    async def test_spawn_error_sends_error(self, session, channel):
        runner = FakeRunner(
            BuildResult(command="build-it", returncode=None, spawn_error="No such directory")
        )
        orchestrator = make_orchestrator(runner)

        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await orchestrator.wait_idle()

        (error,) = channel.of_type("error")
        assert "could not start" in error["err"]["message"]
        assert "stack" not in error["err"]

    @pytest.mark.asyncio
    async def test_runner_exception_sends_error(self, session, channel):
        async def exploding(command, cwd):
            raise RuntimeError("boom")

        orchestrator = make_orchestrator(exploding)

        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await orchestrator.wait_idle()

        (error,) = channel.of_type("error")
        assert "boom" in error["err"]["message"]
        assert orchestrator.state is HotUpdateState.IDLE

    @pytest.mark.asyncio
    async def test_success_logs_output(self, session, channel, caplog):
        runner = FakeRunner(
            BuildResult(command="build-it", returncode=0, stdout="built ok\n", stderr="a warning\n")
        )
        orchestrator = make_orchestrator(runner)

        with caplog.at_level(logging.INFO, logger="tealwright.runtime.orchestrator"):
            orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
            await orchestrator.wait_idle()

        assert "built ok" in caplog.text
        errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert errors == ["a warning"]
        assert f"[{PLUGIN_NAME}] Executing command: build-it" in caplog.text
        assert channel.of_type("full-reload") == [{"type": "full-reload", "path": "*"}]


# =============================================================================
# Asynchrony
# =============================================================================


class TestAsynchrony:
    @pytest.mark.asyncio
    async def test_returns_before_build_completes(self, session, channel):
        runner = FakeRunner(gated=True)
        orchestrator = make_orchestrator(runner)

        result = orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await asyncio.sleep(0)

        assert result == []
        assert orchestrator.state is HotUpdateState.BUILDING
        assert channel.sent == []

        runner.gate.set()
        await orchestrator.wait_idle()

        assert orchestrator.state is HotUpdateState.IDLE
        assert channel.sent == [{"type": "full-reload", "path": "*"}]

    @pytest.mark.asyncio
    async def test_overlapping_events_run_concurrently(self, session, channel):
        runner = FakeRunner(gated=True)
        orchestrator = make_orchestrator(runner)

        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await asyncio.sleep(0)

        assert len(runner.calls) == 2

        runner.gate.set()
        await orchestrator.wait_idle()

        assert len(channel.of_type("full-reload")) == 2

    @pytest.mark.asyncio
    async def test_coalesced_events_run_one_follow_up(self, session, channel):
        runner = FakeRunner(gated=True)
        orchestrator = make_orchestrator(runner, coalesce=True)

        for _ in range(3):
            assert orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session)) == []
            await asyncio.sleep(0)

        assert len(runner.calls) == 1

        runner.gate.set()
        await orchestrator.wait_idle()

        # The superseded build never reports; the follow-up does
        assert len(runner.calls) == 2
        assert channel.sent == [{"type": "full-reload", "path": "*"}]

    @pytest.mark.asyncio
    async def test_coalesced_sequential_events_each_build(self, session, channel):
        runner = FakeRunner()
        orchestrator = make_orchestrator(runner, coalesce=True)

        for _ in range(2):
            orchestrator.handle_hot_update(WatchEvent(file=MATCHING, session=session))
            await orchestrator.wait_idle()

        assert len(runner.calls) == 2
        assert len(channel.of_type("full-reload")) == 2


# =============================================================================
# Real Subprocesses
# =============================================================================


def python_command(code: str) -> str:
    return f'"{sys.executable}" -c "{code}"'


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_exit_zero(self):
        result = await run_command(python_command("print('hello')"))

        assert result.succeeded
        assert result.returncode == 0
        assert result.stdout.strip() == "hello"

    @pytest.mark.asyncio
    async def test_exit_one(self):
        result = await run_command(python_command("import sys; sys.exit(1)"))

        assert not result.succeeded
        assert result.returncode == 1

    @pytest.mark.asyncio
    async def test_spawn_error(self, tmp_path):
        result = await run_command("echo hi", cwd=tmp_path / "missing")

        assert not result.succeeded
        assert result.spawn_error

    @pytest.mark.asyncio
    async def test_end_to_end_exit_codes(self, session, channel):
        ok = HotUpdateOrchestrator(
            HotUpdateOptions(file_pattern=PATTERN, command=python_command("pass"))
        )
        failing = HotUpdateOrchestrator(
            HotUpdateOptions(file_pattern=PATTERN, command=python_command("import sys; sys.exit(1)"))
        )

        ok.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await ok.wait_idle()
        assert channel.sent == [{"type": "full-reload", "path": "*"}]

        channel.sent.clear()
        failing.handle_hot_update(WatchEvent(file=MATCHING, session=session))
        await failing.wait_idle()
        assert [payload["type"] for payload in channel.sent] == ["error"]
