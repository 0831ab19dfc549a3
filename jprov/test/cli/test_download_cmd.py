from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest
import typer

from jprov.cli.context import CLIContext
from jprov.core.config import Config, DiscoConfig
from jprov.core.errors import ErrorCode
from jprov.disco.http import MockHttpClient
from jprov.java import probe
from jprov.java.install import JavaInstall
from jprov.java.probe import ProbeResult
from jprov.output.console import MockConsole
from jprov.platform.detection import OS, Arch, LibC, PlatformInfo

BASE = "https://disco.test/v3"


def _tar_gz() -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        info = tarfile.TarInfo("jdk-17.0.9+9/bin/java")
        info.size = 3
        info.mode = 0o755
        tf.addfile(info, io.BytesIO(b"elf"))
    return buf.getvalue()


def _entry(id_: str, os_: str = "linux", arch: str = "x64", distro: str = "temurin") -> dict[str, object]:
    return {
        "id": id_,
        "filename": f"{id_}.tar.gz",
        "archive_type": "tar.gz",
        "distribution": distro,
        "jdk_version": 17,
        "major_version": 17,
        "java_version": "17.0.9+9",
        "operating_system": os_,
        "architecture": arch,
        "lib_c_type": "glibc",
    }


class Env:
    def __init__(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import jprov.cli.commands.download_cmd as download_cmd

        self.cache = tmp_path / "cache"
        self.http = MockHttpClient()
        self.console = MockConsole()
        self.ctx = CLIContext(
            platform=PlatformInfo(os=OS.LINUX, arch=Arch.X64, libc=LibC.GLIBC),
            config=Config(disco=DiscoConfig(url=BASE, cache=self.cache)),
            console=self.console,
            http=self.http,
        )
        self.probed: list[Path] = []
        monkeypatch.setattr(download_cmd, "build_context", lambda config, verbose=False: self.ctx)
        monkeypatch.setattr(probe, "test_jdk", self._probe)

    def _probe(self, home: Path) -> ProbeResult:
        self.probed.append(home)
        return ProbeResult(0, (), JavaInstall(home=home, version="17.0.9", vendor="Eclipse Adoptium", is_jdk=True))

    def serve(self, *entries: dict[str, object]) -> None:
        self.http.set_json(self.ctx.disco().packages_url, {"result": list(entries)})
        for entry in entries:
            url = f"https://dl.test/{entry['filename']}"
            self.http.set_json(f"{BASE}/ids/{entry['id']}", {"result": [{"direct_download_uri": url}]})
            self.http.set_download(url, _tar_gz())

    def run(self, **overrides: object) -> None:
        import jprov.cli.commands.download_cmd as download_cmd

        args: dict[str, object] = {
            "java_version": 17,
            "arch": None,
            "os_name": None,
            "distro": None,
            "auto": True,
            "cache": None,
            "offline": False,
            "config": None,
            "verbose": False,
        }
        args.update(overrides)
        download_cmd.download(**args)  # type: ignore[arg-type]


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Env:
    return Env(tmp_path, monkeypatch)


def test_auto_downloads_and_tests(env: Env, capsys: pytest.CaptureFixture[str]) -> None:
    env.serve(_entry("zulu", distro="zulu"), _entry("temurin"))

    env.run()

    home = env.cache / "temurin"
    assert capsys.readouterr().out == f"{home.absolute()}\n"
    assert (home / "bin" / "java").exists()
    assert env.probed == [home]
    assert env.console.find("Selected temurin 17.0.9+9 x64 tar.gz: temurin.tar.gz")


def test_other_platform_is_not_tested(env: Env) -> None:
    env.serve(_entry("mac", os_="macos", arch="aarch64"))

    env.run(os_name="mac", arch="aarch64")

    assert env.probed == []
    assert env.console.find("it was built for another platform")


def test_prompt_selects_package(env: Env, monkeypatch: pytest.MonkeyPatch) -> None:
    env.serve(_entry("temurin"), _entry("zulu", distro="zulu"))
    monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: 2)

    env.run(auto=False)

    assert (env.cache / "zulu" / "bin" / "java").exists()
    assert env.console.find("Found 2 packages")


def test_invalid_selection(env: Env, monkeypatch: pytest.MonkeyPatch) -> None:
    env.serve(_entry("temurin"), _entry("zulu", distro="zulu"))
    monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: 9)

    with pytest.raises(typer.Exit) as exc:
        env.run(auto=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_unknown_distro(env: Env) -> None:
    with pytest.raises(typer.Exit) as exc:
        env.run(distro="nope")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert env.console.find("Available: temurin")
    assert env.http.calls == []


def test_unknown_arch_defaults_to_x64(env: Env) -> None:
    env.serve(_entry("temurin"))

    env.run(arch="sparc-weird")

    assert env.console.has_warning()
    assert env.probed == [env.cache / "temurin"]


def test_no_packages(env: Env) -> None:
    env.serve(_entry("temurin"))

    with pytest.raises(typer.Exit) as exc:
        env.run(java_version=8)

    assert exc.value.exit_code == int(ErrorCode.NOT_FOUND)


def test_offline_without_cache(env: Env) -> None:
    with pytest.raises(typer.Exit) as exc:
        env.run(offline=True)

    assert exc.value.exit_code == int(ErrorCode.NETWORK_ERROR)
    assert env.console.find("hint: run without --offline")


def test_failed_probe(env: Env, monkeypatch: pytest.MonkeyPatch) -> None:
    env.serve(_entry("temurin"))
    monkeypatch.setattr(probe, "test_jdk", lambda home: ProbeResult(1, ("Error: boom",)))

    with pytest.raises(typer.Exit) as exc:
        env.run()

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
    assert env.console.find("  Error: boom")
