"""Tests for jprov.locators.env module."""

from __future__ import annotations

from pathlib import Path

from jprov.java.install import JavaInstall
from jprov.java.probe import ProbeResult
from jprov.locators import JavaHomeLocator, JavaLocator, Searcher
from jprov.platform.detection import OS


class FakeProber:
    """Reports ``versions[home]`` for known homes and a failed run otherwise."""

    def __init__(self, versions: dict[Path, str]) -> None:
        self.versions = versions
        self.probed: list[Path] = []

    def __call__(self, home: Path) -> ProbeResult:
        self.probed.append(home)
        version = self.versions.get(home)
        if version is None:
            return ProbeResult(1, ("Error: could not create the Java Virtual Machine",))
        install = JavaInstall(home=home, version=version, vendor="Eclipse Adoptium", is_jdk=True)
        return ProbeResult(0, (), install)


def make_home(path: Path) -> Path:
    (path / "bin").mkdir(parents=True)
    (path / "bin" / "java").write_text("", encoding="utf-8")
    return path


def _locator(environ: dict[str, str], versions: dict[Path, str]) -> JavaHomeLocator:
    return JavaHomeLocator(Searcher(prober=FakeProber(versions), environ=environ, os_=OS.LINUX))


def test_satisfies_protocol() -> None:
    assert isinstance(JavaHomeLocator(), JavaLocator)


class TestFind:
    def test_versioned_variable_first(self, tmp_path: Path) -> None:
        jdk17 = make_home(tmp_path / "jdk17")
        other = make_home(tmp_path / "other")
        locator = _locator(
            {"JAVA_HOME_17_X64": str(jdk17), "JAVA_HOME": str(other)},
            {jdk17: "17.0.9", other: "17.0.2"},
        )

        assert locator.find(17) == jdk17

    def test_arm64_variants(self, tmp_path: Path) -> None:
        upper = make_home(tmp_path / "upper")
        lower = make_home(tmp_path / "lower")

        assert _locator({"JAVA_HOME_21_ARM64": str(upper)}, {upper: "21.0.1"}).find(21) == upper
        assert _locator({"JAVA_HOME_21_arm64": str(lower)}, {lower: "21.0.1"}).find(21) == lower

    def test_plain_java_home_is_version_checked(self, tmp_path: Path) -> None:
        jdk = make_home(tmp_path / "jdk")
        locator = _locator({"JAVA_HOME": str(jdk)}, {jdk: "11.0.21"})

        assert locator.find(17) is None
        assert "  Wrong version: Was 11 wanted 17" in locator.log_output()
        assert locator.find(11) == jdk

    def test_trace_explains_misses(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        broken = make_home(tmp_path / "broken")
        locator = _locator({"JAVA_HOME_17": str(empty), "JAVA_HOME": str(broken)}, {})

        assert locator.find(17) is None

        lines = locator.log_output()
        assert 'Environment: "JAVA_HOME_17_X64" Empty' in lines
        assert f'  Value: "{empty}"' in lines
        assert "  Missing Executable" in lines
        assert "  Exit code: 1" in lines
        assert "  Error: could not create the Java Virtual Machine" in lines

    def test_trace_reset_per_call(self) -> None:
        locator = _locator({}, {})
        locator.find(17)
        first = len(locator.log_output())
        locator.find(17)
        assert len(locator.log_output()) == first


def test_find_all_reads_every_java_home(tmp_path: Path) -> None:
    a = make_home(tmp_path / "a")
    b = make_home(tmp_path / "b")
    locator = _locator(
        {"JAVA_HOME": str(a), "JAVA_HOME_21_X64": str(b), "PATH": "/usr/bin"},
        {a: "17.0.1", b: "21.0.2"},
    )

    found = locator.find_all()

    assert [i.home for i in found] == [a, b]
    assert locator.provision(17) is None
