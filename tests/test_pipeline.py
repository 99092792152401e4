from __future__ import annotations

import json

import pytest
import yaml

from dotfiles_bootstrap.errors import BootstrapError
from dotfiles_bootstrap.main import run
from dotfiles_bootstrap.models import OutcomeStatus, PlatformId, RunOutcome
from dotfiles_bootstrap.pipeline import run_pipeline

from .conftest import FakeLogin, make_tool

GH_STEP = "20_install_hosting_cli"
YADM_STEP = "30_install_dotfiles_manager"
AUTH_STEP = "40_authenticate"
SYNC_STEP = "50_sync_dotfiles"


@pytest.fixture()
def fresh_linux(system_bin, home, runner):
    """Linux box with apt-get and curl but neither gh nor yadm, and no session."""

    make_tool(system_bin, "apt-get")
    make_tool(system_bin, "curl")
    make_tool(system_bin, "sh")

    state = {"session": False, "cloned": False}

    runner.on("sh", effect=lambda argv: make_tool(home / ".local" / "bin", "gh"))
    runner.on("apt-get", "install", effect=lambda argv: make_tool(system_bin, "yadm"))
    runner.on("yadm", "clone", effect=lambda argv: state.update(cloned=True))
    return state


def _run(cfg, resolution, runner, login, state, **kwargs):
    # session / repository state are external; reflect them into the fake per run
    runner.on("gh", "auth", "status", returncode=0 if state["session"] else 1)
    runner.on("yadm", "status", returncode=0 if state["cloned"] else 1)
    kwargs.setdefault("platform", PlatformId.LINUX)
    return run(cfg=cfg, resolution=resolution, runner=runner, login=login, **kwargs)


def test_fresh_linux_machine(cfg, resolution, runner, fresh_linux):
    login = FakeLogin(on_login=lambda: fresh_linux.update(session=True))

    result = _run(cfg, resolution, runner, login, fresh_linux)

    assert result.ok
    assert [result.outcome(s).status for s in (GH_STEP, YADM_STEP)] == [
        OutcomeStatus.INSTALLED,
        OutcomeStatus.INSTALLED,
    ]
    assert login.count == 1
    assert result.outcome(AUTH_STEP).action == "login"
    assert result.outcome(SYNC_STEP).action == "clone"


def test_second_run_is_idempotent(cfg, resolution, runner, fresh_linux):
    login = FakeLogin(on_login=lambda: fresh_linux.update(session=True))
    assert _run(cfg, resolution, runner, login, fresh_linux).ok

    runner.calls.clear()
    second = _run(cfg, resolution, runner, login, fresh_linux)

    assert second.ok
    assert [second.outcome(s).status for s in (GH_STEP, YADM_STEP)] == [
        OutcomeStatus.ALREADY_PRESENT,
        OutcomeStatus.ALREADY_PRESENT,
    ]
    assert login.count == 1
    assert second.outcome(SYNC_STEP).action == "update"
    assert runner.called("apt-get") == 0
    assert runner.called("yadm", "clone") == 0


def test_tools_present_and_session_valid(cfg, resolution, runner, system_bin):
    make_tool(system_bin, "gh")
    make_tool(system_bin, "yadm")
    login = FakeLogin()

    result = _run(cfg, resolution, runner, login, {"session": True, "cloned": True})

    assert result.ok
    assert [result.outcome(s).status for s in (GH_STEP, YADM_STEP)] == [
        OutcomeStatus.ALREADY_PRESENT,
        OutcomeStatus.ALREADY_PRESENT,
    ]
    assert login.count == 0
    assert result.outcome(SYNC_STEP).action == "update"


def test_hosting_cli_failure_short_circuits(cfg, resolution, runner, system_bin):
    # no curl: neither the webi nor any other gh strategy is usable
    make_tool(system_bin, "apt-get")
    login = FakeLogin()

    result = _run(cfg, resolution, runner, login, {"session": False, "cloned": False})

    assert not result.ok
    assert result.failed_step == GH_STEP
    assert result.outcome(AUTH_STEP) is None
    assert result.outcome(SYNC_STEP) is None
    assert login.count == 0
    assert runner.called("gh") == 0
    assert runner.called("yadm") == 0


def test_unknown_platform_aborts_before_authentication(cfg, resolution, runner, system_bin):
    make_tool(system_bin, "curl")
    make_tool(system_bin, "sh")
    login = FakeLogin()

    result = _run(
        cfg, resolution, runner, login, {"session": False, "cloned": False}, platform=PlatformId.UNKNOWN
    )

    assert result.failed_step == GH_STEP
    assert login.count == 0
    assert runner.called("gh", "auth") == 0


def test_skip_auth_bypasses_authentication(cfg, resolution, runner, system_bin):
    make_tool(system_bin, "gh")
    make_tool(system_bin, "yadm")

    result = _run(cfg, resolution, runner, FakeLogin(), {"session": False, "cloned": True}, skip_auth=True)

    assert result.ok
    assert result.outcome(AUTH_STEP).status is OutcomeStatus.SKIPPED
    assert runner.called("gh") == 0


def test_declined_login_stops_before_sync(cfg, resolution, runner, system_bin):
    make_tool(system_bin, "gh")
    make_tool(system_bin, "yadm")

    result = _run(cfg, resolution, runner, FakeLogin(succeed=False), {"session": False, "cloned": False})

    assert result.failed_step == AUTH_STEP
    assert result.outcome(AUTH_STEP).hint
    assert runner.called("yadm") == 0


def test_package_manager_bootstrap_failure_is_not_fatal(cfg, resolution, runner, system_bin, home):
    make_tool(system_bin, "curl")
    make_tool(system_bin, "bash")
    make_tool(system_bin, "gh")
    # Homebrew's installer fails; yadm then falls back to direct download.
    runner.on("bash", returncode=1)

    result = _run(
        cfg,
        resolution,
        runner,
        FakeLogin(),
        {"session": True, "cloned": True},
        platform=PlatformId.MACOS,
        bootstrap_package_manager=True,
    )

    assert result.ok
    assert result.outcome("15_bootstrap_package_manager").status is OutcomeStatus.FAILED
    assert result.outcome(YADM_STEP).action == "download"


def test_package_manager_bootstrap_skipped_by_default(cfg, resolution, runner, system_bin):
    make_tool(system_bin, "gh")
    make_tool(system_bin, "yadm")

    result = _run(cfg, resolution, runner, FakeLogin(), {"session": True, "cloned": True})

    assert result.outcome("15_bootstrap_package_manager").status is OutcomeStatus.SKIPPED


def test_report_is_written(cfg, resolution, runner, system_bin, tmp_path):
    make_tool(system_bin, "gh")
    make_tool(system_bin, "yadm")
    json_path = tmp_path / "out" / "report.json"
    yaml_path = tmp_path / "out" / "report.yaml"

    state = {"session": True, "cloned": True}
    _run(cfg, resolution, runner, FakeLogin(), state, report_path=str(json_path))
    _run(cfg, resolution, runner, FakeLogin(), state, report_path=str(yaml_path))

    report = json.loads(json_path.read_text(encoding="utf-8"))
    assert report["ok"] is True
    assert report["platform"] == "linux"
    assert report["failed_step"] is None
    assert [o["step"] for o in report["outcomes"]][0] == "10_detect_platform"
    assert yaml.safe_load(yaml_path.read_text(encoding="utf-8")) == report


class _Step:
    def __init__(self, step_id, outcome=None, exc=None, fatal=True):
        self.step_id = step_id
        self.fatal = fatal
        self.interactive = False
        self._outcome = outcome
        self._exc = exc
        self.ran = False

    def run(self, ctx):
        self.ran = True
        if self._exc is not None:
            raise self._exc
        return self._outcome or RunOutcome(self.step_id, OutcomeStatus.COMPLETED)


def test_bootstrap_error_becomes_failed_outcome(make_ctx):
    first = _Step("a", exc=BootstrapError("broken", hint="fix it"))
    second = _Step("b")

    result = run_pipeline(ctx=make_ctx(), steps=[first, second])

    assert result.failed_step == "a"
    assert result.outcomes[0].hint == "fix it"
    assert not second.ran


def test_unexpected_errors_propagate(make_ctx):
    with pytest.raises(ZeroDivisionError):
        run_pipeline(ctx=make_ctx(), steps=[_Step("a", exc=ZeroDivisionError())])


def test_non_fatal_failure_continues(make_ctx):
    optional = _Step("a", outcome=RunOutcome("a", OutcomeStatus.FAILED, "meh"), fatal=False)
    after = _Step("b")

    result = run_pipeline(ctx=make_ctx(), steps=[optional, after])

    assert result.ok
    assert after.ran


def test_dry_run_on_fresh_machine_changes_nothing(cfg, resolution, runner, system_bin, home):
    make_tool(system_bin, "apt-get")
    make_tool(system_bin, "curl")
    make_tool(system_bin, "sh")
    login = FakeLogin()

    result = run(cfg=cfg, resolution=resolution, runner=runner, login=login, platform=PlatformId.LINUX, dry_run=True)

    assert result.ok
    assert [result.outcome(s).status for s in (GH_STEP, YADM_STEP)] == [
        OutcomeStatus.INSTALLED,
        OutcomeStatus.INSTALLED,
    ]
    assert result.outcome(AUTH_STEP).status is OutcomeStatus.COMPLETED
    assert result.outcome(SYNC_STEP).status is OutcomeStatus.COMPLETED
    assert not (home / ".local" / "bin").exists()
    assert not (system_bin / "yadm").exists()
    assert login.count == 0


def test_unwritable_local_bin_stops_with_failed_outcome(resolution, runner, system_bin, tmp_path):
    from dotfiles_bootstrap.config import BootstrapConfig

    make_tool(system_bin, "gh")
    make_tool(system_bin, "curl")
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    cfg = BootstrapConfig(raw={"local_bin": str(blocker / "bin")})

    result = run(cfg=cfg, resolution=resolution, runner=runner, login=FakeLogin(), platform=PlatformId.LINUX)

    assert result.failed_step == YADM_STEP
    assert result.outcome(YADM_STEP).hint
    assert runner.called("gh") == 0
