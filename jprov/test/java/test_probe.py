"""Tests for jprov.java.probe and jprov.java.probe_class."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from pathlib import Path

from jprov.java import probe
from jprov.java.probe import MISSING_EXECUTABLE, parse_probe_lines
from jprov.java.probe_class import (
    PROBE_CLASS_NAME,
    PROBE_PROPERTIES,
    build_probe_class,
    ensure_probe_classpath,
)
from jprov.platform.process import CommandResult


def _probe_output(**props: str) -> tuple[str, ...]:
    return tuple(f"JAVA_PROBE: {key.replace('_', '.')} {value}" for key, value in props.items())


class FakeRunner:
    def __init__(self, exit_code: int, lines: tuple[str, ...]) -> None:
        self.exit_code = exit_code
        self.lines = lines
        self.commands: list[tuple[str, ...]] = []

    def run(self, cmd: Sequence[str]) -> CommandResult:
        self.commands.append(tuple(cmd))
        return CommandResult(command=tuple(cmd), exit_code=self.exit_code, lines=self.lines)


def _home(root: Path, *, javac: bool = True) -> Path:
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "java").write_text("", encoding="utf-8")
    if javac:
        (root / "bin" / "javac").write_text("", encoding="utf-8")
    return root


class TestProbeClass:
    def test_header(self) -> None:
        data = build_probe_class()
        magic, minor, major = struct.unpack(">IHH", data[:8])
        assert magic == 0xCAFEBABE
        assert (major, minor) == (45, 3)

    def test_mentions_every_property(self) -> None:
        data = build_probe_class()
        for prop in PROBE_PROPERTIES:
            assert f"JAVA_PROBE: {prop} ".encode() in data
        assert PROBE_CLASS_NAME.encode() in data

    def test_deterministic(self) -> None:
        assert build_probe_class() == build_probe_class()

    def test_ensure_writes_once(self, tmp_path: Path) -> None:
        directory = ensure_probe_classpath(tmp_path / "probe")
        target = directory / "JavaProbe.class"
        assert target.read_bytes() == build_probe_class()

        mtime = target.stat().st_mtime_ns
        ensure_probe_classpath(tmp_path / "probe")
        assert target.stat().st_mtime_ns == mtime

    def test_ensure_repairs_damaged_file(self, tmp_path: Path) -> None:
        target = tmp_path / "JavaProbe.class"
        target.write_bytes(b"junk")
        ensure_probe_classpath(tmp_path)
        assert target.read_bytes() == build_probe_class()


class TestParseProbeLines:
    def test_parses_prefixed_lines_only(self) -> None:
        lines = [
            "Picked up JAVA_TOOL_OPTIONS: -Xmx1g",
            "JAVA_PROBE: java.version 17.0.9",
            "JAVA_PROBE: java.vendor Eclipse Adoptium",
            "JAVA_PROBE: broken",
        ]
        assert parse_probe_lines(lines) == {
            "java.version": "17.0.9",
            "java.vendor": "Eclipse Adoptium",
        }

    def test_value_keeps_inner_spaces(self) -> None:
        props = parse_probe_lines(["JAVA_PROBE: java.vm.name OpenJDK 64-Bit Server VM"])
        assert props["java.vm.name"] == "OpenJDK 64-Bit Server VM"


class TestJdkProbe:
    def test_missing_executable(self, tmp_path: Path) -> None:
        runner = FakeRunner(0, ())
        result = probe.test_jdk(tmp_path, runner=runner, probe_dir=tmp_path / "probe")
        assert result.exit_code != 0
        assert result.lines == (MISSING_EXECUTABLE,)
        assert result.install is None
        assert runner.commands == []

    def test_success(self, tmp_path: Path) -> None:
        home = _home(tmp_path / "jdk")
        runner = FakeRunner(
            0,
            _probe_output(java_version="17.0.9", java_vendor="Eclipse Adoptium", java_home=str(home)),
        )

        result = probe.test_jdk(home, runner=runner, probe_dir=tmp_path / "probe")

        assert result.ok
        assert result.install is not None
        assert result.install.home == home
        assert result.install.version == "17.0.9"
        assert result.install.vendor == "Eclipse Adoptium"
        assert result.install.is_jdk
        cmd = runner.commands[0]
        assert cmd[1:3] == ("-classpath", str((tmp_path / "probe").absolute()))
        assert cmd[3] == "JavaProbe"
        assert (tmp_path / "probe" / "JavaProbe.class").exists()

    def test_falls_back_to_runtime_and_vm_keys(self, tmp_path: Path) -> None:
        home = _home(tmp_path / "jre", javac=False)
        lines = (
            "JAVA_PROBE: java.version unset",
            "JAVA_PROBE: java.runtime.version 11.0.21+9",
            "JAVA_PROBE: java.vm.vendor Azul Systems, Inc.",
        )
        result = probe.test_jdk(home, runner=FakeRunner(0, lines), probe_dir=tmp_path / "probe")

        assert result.install is not None
        assert result.install.version == "11.0.21+9"
        assert result.install.vendor == "Azul Systems, Inc."
        assert not result.install.is_jdk

    def test_unset_everywhere_is_missing(self, tmp_path: Path) -> None:
        home = _home(tmp_path / "jdk")
        lines = _probe_output(java_version="unset", java_vendor="unset")
        result = probe.test_jdk(home, runner=FakeRunner(0, lines), probe_dir=tmp_path / "probe")

        assert result.install is not None
        assert result.install.version is None
        assert result.install.major_version == -1

    def test_nonzero_exit_has_no_install(self, tmp_path: Path) -> None:
        home = _home(tmp_path / "jdk")
        lines = ("Error: Could not find or load main class JavaProbe",)
        result = probe.test_jdk(home, runner=FakeRunner(1, lines), probe_dir=tmp_path / "probe")

        assert not result.ok
        assert result.exit_code == 1
        assert result.lines == lines

    def test_classes_zip_on_classpath(self, tmp_path: Path) -> None:
        home = _home(tmp_path / "jdk1.1")
        (home / "libs").mkdir()
        (home / "libs" / "classes.zip").write_bytes(b"")
        runner = FakeRunner(0, _probe_output(java_version="1.1.8"))

        probe.test_jdk(home, runner=runner, probe_dir=tmp_path / "probe")

        assert runner.commands[0][2].endswith("classes.zip")
