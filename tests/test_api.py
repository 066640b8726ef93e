from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from loudspin.api import LoudspinError, RunReport, apply_loudness


class FakeCapabilities:
    def init(self) -> None:
        pass

    def update(self, caps, flag) -> None:
        pass

    def apply(self) -> None:
        pass

    def raise_ambient(self, cap) -> None:
        pass

    def close(self) -> None:
        pass


class FakeProcess:
    def wait(self) -> int:
        return 0


def test_apply_loudness_runs_configured_devices(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "sda").write_text("", encoding="utf-8")
    config_path = tmp_path / "loudspin.yaml"
    config_path.write_text(f"devices:\n  - {tmp_path}/sd?\nhdparm_path: /usr/bin/hdparm\n", encoding="utf-8")
    calls: list[list[str]] = []
    monkeypatch.setattr(subprocess, "Popen", lambda argv: calls.append(argv) or FakeProcess())

    report = apply_loudness("show", config_path=config_path, capabilities=FakeCapabilities())

    assert isinstance(report, RunReport)
    assert calls == [["/usr/bin/hdparm", "-M", f"{tmp_path}/sda"]]
    assert report.grant.sets == ("effective", "inheritable", "permitted", "ambient")


def test_apply_loudness_errors_share_base_class(tmp_path: Path) -> None:
    with pytest.raises(LoudspinError):
        apply_loudness("quiet", config_path=tmp_path / "absent.conf", capabilities=FakeCapabilities())
