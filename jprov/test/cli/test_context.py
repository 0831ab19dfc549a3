from __future__ import annotations

from pathlib import Path

import pytest
import typer

from jprov.cli.context import CLIContext, build_context
from jprov.core.config import Config, DiscoConfig
from jprov.core.errors import ErrorCode
from jprov.disco.http import MockHttpClient
from jprov.output.console import MockConsole
from jprov.platform.detection import OS, Arch, LibC, PlatformInfo


def _ctx(tmp_path: Path, properties: dict[str, str] | None = None) -> CLIContext:
    return CLIContext(
        platform=PlatformInfo(os=OS.LINUX, arch=Arch.X64, libc=LibC.GLIBC),
        config=Config(
            disco=DiscoConfig(url="https://disco.test/v3", cache=tmp_path / "cache"),
            properties=properties or {},
        ),
        console=MockConsole(),
        http=MockHttpClient(),
    )


def test_resolver_chain_order(tmp_path: Path) -> None:
    resolver = _ctx(tmp_path).resolver()

    assert [locator.name for locator in resolver.locators] == [
        "JavaHomeLocator",
        "GradleLocator",
        "JavaDirectoryLocator",
        "DiscoLocator",
    ]


def test_disco_uses_config_and_overrides(tmp_path: Path) -> None:
    ctx = _ctx(tmp_path)

    default = ctx.disco()
    assert default.cache == tmp_path / "cache"
    assert default.url == "https://disco.test/v3"
    assert default.offline is False

    other = ctx.disco(cache=tmp_path / "other", offline=True)
    assert other.cache == tmp_path / "other"
    assert other.offline is True


def test_gradle_properties_config_wins(tmp_path: Path) -> None:
    gradle_home = tmp_path / "gradle"
    gradle_home.mkdir()
    (gradle_home / "gradle.properties").write_text(
        "org.gradle.java.installations.paths=/from/file\norg.gradle.jvmargs=-Xmx1g\n",
        encoding="utf-8",
    )
    ctx = _ctx(
        tmp_path,
        {"gradle.user.home": str(gradle_home), "org.gradle.java.installations.paths": "/from/config"},
    )

    props = ctx.gradle_properties()

    assert props["org.gradle.java.installations.paths"] == "/from/config"
    assert props["org.gradle.jvmargs"] == "-Xmx1g"


class TestBuildContext:
    def test_loads_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            f'[disco]\ncache = "{(tmp_path / "c").as_posix()}"\noffline = true\ntimeout = 2.5\n',
            encoding="utf-8",
        )

        ctx = build_context(path)

        assert ctx.config.disco.cache == tmp_path / "c"
        assert ctx.config.disco.offline is True
        assert ctx.disco().offline is True

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path / "nope.toml")
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_invalid_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[disco\n", encoding="utf-8")

        with pytest.raises(typer.Exit) as exc:
            build_context(path)

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert "Invalid TOML syntax" in capsys.readouterr().err

    def test_missing_default_config_is_fine(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import jprov.cli.context as context

        monkeypatch.setattr(context, "default_config_path", lambda: tmp_path / "absent.toml")

        assert build_context().config.properties == {}
