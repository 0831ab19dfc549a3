"""Tests for jprov.locators.gradle module."""

from __future__ import annotations

from pathlib import Path

import pytest

from jprov.java.install import JavaInstall
from jprov.java.probe import ProbeResult
from jprov.locators import GradleLocator, Searcher, gradle_user_home, load_gradle_properties
from jprov.locators.gradle import FROM_ENV_PROPERTY, PATHS_PROPERTY
from jprov.platform.detection import OS


class FakeProber:
    def __init__(self, versions: dict[Path, str]) -> None:
        self.versions = versions

    def __call__(self, home: Path) -> ProbeResult:
        version = self.versions.get(home)
        if version is None:
            return ProbeResult(1, ("boom",))
        return ProbeResult(0, (), JavaInstall(home=home, version=version, vendor="Azul Systems, Inc.", is_jdk=True))


def make_home(path: Path) -> Path:
    (path / "bin").mkdir(parents=True)
    (path / "bin" / "java").write_text("", encoding="utf-8")
    return path


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


def _locator(
    root: Path,
    versions: dict[Path, str],
    *,
    properties: dict[str, str] | None = None,
    environ: dict[str, str] | None = None,
    os_: OS = OS.LINUX,
) -> GradleLocator:
    props = {"gradle.user.home": str(root / "gradle")}
    props.update(properties or {})
    searcher = Searcher(prober=FakeProber(versions), environ=environ or {}, os_=os_)
    return GradleLocator(props, searcher)


class TestGradleProperties:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "gradle.properties"
        path.write_text(
            "# comment\n"
            "! also a comment\n"
            "org.gradle.java.installations.paths = /opt/a,/opt/b\n"
            "org.gradle.jvmargs:-Xmx2g\n"
            "\n"
            "broken line\n",
            encoding="utf-8",
        )

        assert load_gradle_properties(path) == {
            PATHS_PROPERTY: "/opt/a,/opt/b",
            "org.gradle.jvmargs": "-Xmx2g",
        }

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_gradle_properties(tmp_path / "nope.properties") == {}

    def test_user_home_precedence(self, tmp_path: Path) -> None:
        prop = tmp_path / "prop"
        env = tmp_path / "env"
        assert gradle_user_home({"gradle.user.home": str(prop)}, {"GRADLE_USER_HOME": str(env)}) == prop.resolve()
        assert gradle_user_home({}, {"GRADLE_USER_HOME": str(env)}) == env.resolve()


class TestProperties:
    def test_from_env_property(self, root: Path) -> None:
        jdk = make_home(root / "jdk")
        locator = _locator(
            root,
            {jdk: "17.0.9"},
            properties={FROM_ENV_PROPERTY: "MISSING_JDK, MY_JDK"},
            environ={"MY_JDK": str(jdk)},
        )

        assert locator.find(17) == jdk
        lines = locator.log_output()
        assert lines[0] == f"Property: {FROM_ENV_PROPERTY} = MISSING_JDK, MY_JDK"
        assert 'Environment: "MISSING_JDK" Empty' in lines

    def test_paths_property_skips_wrong_version(self, root: Path) -> None:
        old = make_home(root / "old")
        new = make_home(root / "new")
        locator = _locator(root, {old: "11.0.2", new: "17.0.1"}, properties={PATHS_PROPERTY: f"{old},{new}"})

        assert locator.find(17) == new
        assert "  Wrong version: Was 11 wanted 17" in locator.log_output()

    def test_jdk_env_variable(self, root: Path) -> None:
        jdk = make_home(root / "jdk")
        locator = _locator(root, {jdk: "21.0.1"}, environ={"JDK21": str(jdk)})

        assert locator.find(21) == jdk

    def test_unset_properties_are_logged(self, root: Path) -> None:
        locator = _locator(root, {})

        assert locator.find(17) is None
        lines = locator.log_output()
        assert f"Property: {FROM_ENV_PROPERTY} = None" in lines
        assert f"Property: {PATHS_PROPERTY} = None" in lines
        assert f'Gradle home: "{root / "gradle"}" Does not exist' in lines


class TestGradleHome:
    def test_no_jdks_folder(self, root: Path) -> None:
        (root / "gradle").mkdir()
        locator = _locator(root, {})

        assert locator.find(17) is None
        assert f'Gradle Home JDKs: "{root / "gradle" / "jdks"}" Does not exist' in locator.log_output()

    def test_only_marked_installs(self, root: Path) -> None:
        jdks = root / "gradle" / "jdks"
        unmarked = make_home(jdks / "eclipse_adoptium-17-amd64-linux")
        marked = make_home(jdks / "eclipse_adoptium-17-amd64-linux.2")
        (marked / ".ready").write_text("", encoding="utf-8")
        locator = _locator(root, {unmarked: "17.0.8", marked: "17.0.9"})

        assert locator.find(17) == marked
        assert f'Gradle Home JDK: "{marked}"' in locator.log_output()
        assert f'Gradle Home JDK: "{unmarked}"' not in locator.log_output()

    def test_untrimmed_archive_root(self, root: Path) -> None:
        nested = make_home(root / "gradle" / "jdks" / "azul_zulu-21-x86_64-linux" / "zulu21.30.15-ca-jdk21.0.1")
        (nested / "provisioned.ok").write_text("", encoding="utf-8")
        locator = _locator(root, {nested: "21.0.1"})

        assert locator.find(21) == nested

    def test_mac_bundle_home(self, root: Path) -> None:
        install = root / "gradle" / "jdks" / "temurin-17-aarch64-mac"
        home = make_home(install / "jdk-17.0.9+9" / "Contents" / "Home")
        (install / ".ready").write_text("", encoding="utf-8")
        locator = _locator(root, {home: "17.0.9"}, os_=OS.OSX)

        assert locator.find(17) == home


def test_find_all_covers_every_source(root: Path) -> None:
    a = make_home(root / "a")
    b = make_home(root / "b")
    c = make_home(root / "c")
    d = make_home(root / "gradle" / "jdks" / "d")
    (d / ".ready").write_text("", encoding="utf-8")
    locator = _locator(
        root,
        {a: "8.0.392", b: "11.0.21", c: "17.0.9", d: "21.0.1"},
        properties={FROM_ENV_PROPERTY: "A_HOME", PATHS_PROPERTY: str(b)},
        environ={"A_HOME": str(a), "JDK17": str(c), "JDK_HOME": str(a)},
    )

    assert [i.home for i in locator.find_all()] == [a, b, c, d]
    assert locator.provision(17) is None


def test_unreadable_install_is_skipped(root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    jdks = root / "gradle" / "jdks"
    locked = make_home(jdks / "a-locked")
    marked = make_home(jdks / "b-open")
    (marked / ".ready").write_text("", encoding="utf-8")
    real_exists = Path.exists

    def exists(self: Path, **kwargs: bool) -> bool:
        if self.is_relative_to(locked):
            raise PermissionError(13, "Permission denied", str(self))
        return real_exists(self, **kwargs)

    monkeypatch.setattr(Path, "exists", exists)
    locator = _locator(root, {marked: "17.0.9"})

    assert locator.find(17) == marked
    assert f'  Unreadable: "{locked / ".ready"}"' in locator.log_output()
    assert [i.home for i in locator.find_all()] == [marked]
