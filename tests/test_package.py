"""Tests for cabalgen.package."""

from __future__ import annotations

from pathlib import Path

import pytest

from cabalgen.config import ConfigFile, ExecutableSection, LibrarySection
from cabalgen.models import Executable, Library
from cabalgen.package import main_modules, make_package, merge_dependencies
from tests._fixtures.fake_filesystem import FakeFileSystem, UnreadableFileSystem


def _config(**fields) -> ConfigFile:
    return ConfigFile(path=Path("/pkg/package.yaml"), **fields)


def test_merge_dependencies_drops_empty_groups() -> None:
    assert merge_dependencies(["base"], []) == [["base"]]
    assert merge_dependencies(["base"], None) == [["base"]]
    assert merge_dependencies([], ["text"]) == [["text"]]
    assert merge_dependencies([], None) == []
    assert merge_dependencies(["base"], ["text", "base"]) == [["base"], ["text", "base"]]


def test_main_modules_strips_source_directory_prefix() -> None:
    assert main_modules("app/Main.hs", ["src", "app"]) == ["app.Main", "Main"]
    assert main_modules("Main.hs", ["app"]) == ["Main"]
    assert main_modules("main.c", ["app"]) == []


def test_make_package_defaults() -> None:
    package = make_package(_config(), FakeFileSystem(name="checkout"))

    assert package.name == "checkout"
    assert package.version == "0.0.0"
    assert package.copyright == []
    assert package.license_file is None
    assert package.source_repository is None
    assert package.bug_reports is None
    assert package.library is None
    assert package.executables == []
    assert package.tests == []


def test_make_package_license_file_depends_only_on_file_presence() -> None:
    with_file = make_package(_config(), FakeFileSystem(["LICENSE"]))
    declared_only = make_package(_config(license="MIT"), FakeFileSystem(["LICENSE.md"]))

    assert with_file.license_file == "LICENSE"
    assert with_file.license is None
    assert declared_only.license_file is None
    assert declared_only.license == "MIT"


def test_make_package_derives_urls_from_github() -> None:
    package = make_package(_config(github="acme/foo"), FakeFileSystem())

    assert package.source_repository == "https://github.com/acme/foo"
    assert package.bug_reports == "https://github.com/acme/foo/issues"


def test_make_package_explicit_bug_reports_win_over_github() -> None:
    package = make_package(
        _config(github="acme/foo", bug_reports="https://bugs.example.com"), FakeFileSystem()
    )

    assert package.bug_reports == "https://bugs.example.com"


def test_make_package_empty_bug_reports_suppress_github_fallback() -> None:
    package = make_package(_config(github="acme/foo", bug_reports=""), FakeFileSystem())

    assert package.source_repository == "https://github.com/acme/foo"
    assert package.bug_reports is None


def test_make_package_merges_library_settings() -> None:
    filesystem = FakeFileSystem(["src/A.hs", "src/B.hs", "lib/Sub/C.hs"])
    config = _config(
        source_dirs=["src"],
        dependencies=["base"],
        ghc_options=["-Wall"],
        library=LibrarySection(
            source_dirs=["lib"],
            exposed_modules=["A"],
            ghc_options=["-O2"],
        ),
    )

    package = make_package(config, filesystem)

    assert package.library == Library(
        source_dirs=["src", "lib"],
        exposed_modules=["A"],
        other_modules=["B", "Sub.C"],
        dependencies=[["base"]],
        ghc_options=["-Wall", "-O2"],
    )


def test_make_package_library_with_only_missing_directories() -> None:
    config = _config(library=LibrarySection(source_dirs=["nope"]))

    package = make_package(config, FakeFileSystem(["src/A.hs"]))

    assert package.library is not None
    assert package.library.exposed_modules == []
    assert package.library.other_modules == []


def test_make_package_executable_excludes_main_module() -> None:
    filesystem = FakeFileSystem(["app/Main.hs", "app/Options.hs"])
    config = _config(
        dependencies=["base"],
        executables={
            "foo": ExecutableSection(main="app/Main.hs", source_dirs=["app"], dependencies=[])
        },
    )

    package = make_package(config, filesystem)

    assert package.executables == [
        Executable(
            name="foo",
            main="app/Main.hs",
            source_dirs=["app"],
            other_modules=["Options"],
            dependencies=[["base"]],
            ghc_options=[],
        )
    ]


def test_make_package_executable_keeps_modules_when_main_is_not_a_module() -> None:
    filesystem = FakeFileSystem(["app/Main.hs", "app/Options.hs"])
    config = _config(
        executables={"foo": ExecutableSection(main="main.c", source_dirs=["app"])},
    )

    package = make_package(config, filesystem)

    assert package.executables[0].other_modules == ["Main", "Options"]


def test_make_package_explicit_other_modules_skip_discovery() -> None:
    filesystem = FakeFileSystem(["test/Spec.hs", "test/FooSpec.hs"])
    config = _config(
        tests={
            "spec": ExecutableSection(
                main="Spec.hs", source_dirs=["test"], other_modules=["Spec", "Helper"]
            )
        },
    )

    package = make_package(config, filesystem)

    assert package.tests[0].other_modules == ["Spec", "Helper"]
    assert filesystem.listed == []


def test_make_package_keeps_executable_declaration_order() -> None:
    config = _config(
        executables={
            "zeta": ExecutableSection(main="Zeta.hs"),
            "alpha": ExecutableSection(main="Alpha.hs"),
        },
        tests={"spec": ExecutableSection(main="Spec.hs")},
    )

    package = make_package(config, FakeFileSystem())

    assert [executable.name for executable in package.executables] == ["zeta", "alpha"]
    assert [test.name for test in package.tests] == ["spec"]


def test_read_config_end_to_end(package_builder) -> None:
    package_builder.touch(["src/A.hs", "src/B.hs", "src/Sub/C.hs", "src/notes.txt"])
    package_builder.manifest(
        """
        library:
          source-dirs: [src]
        """
    )

    package = package_builder.resolve()

    assert package.name == "my-package"
    assert package.library is not None
    assert set(package.library.exposed_modules) == {"A", "B", "Sub.C"}
    assert package.library.other_modules == []


def test_read_config_other_modules_override(package_builder) -> None:
    package_builder.touch(["src/A.hs", "src/B.hs", "src/Sub/C.hs"])
    package_builder.manifest(
        """
        library:
          source-dirs: [src]
          other-modules: [B]
        """
    )

    package = package_builder.resolve()

    assert package.library is not None
    assert set(package.library.exposed_modules) == {"A", "Sub.C"}
    assert package.library.other_modules == ["B"]


def test_read_config_full_package(package_builder) -> None:
    package_builder.touch(["src/Foo.hs", "app/Main.hs", "app/Cli.hs", "test/Spec.hs"])
    package_builder.write({"LICENSE": "MIT License\n"})
    package_builder.manifest(
        """
        name: foo
        version: 1.2.3
        github: acme/foo
        dependencies: base
        ghc-options: -Wall
        library:
          source-dirs: src
        executables:
          foo:
            main: app/Main.hs
            source-dirs: app
            dependencies: [foo]
        tests:
          spec:
            main: Spec.hs
            source-dirs: test
            dependencies: [foo, hspec]
        """
    )

    package = package_builder.resolve()

    assert package.name == "foo"
    assert package.version == "1.2.3"
    assert package.license_file == "LICENSE"
    assert package.bug_reports == "https://github.com/acme/foo/issues"
    assert package.library == Library(
        source_dirs=["src"],
        exposed_modules=["Foo"],
        other_modules=[],
        dependencies=[["base"]],
        ghc_options=["-Wall"],
    )
    assert package.executables == [
        Executable(
            name="foo",
            main="app/Main.hs",
            source_dirs=["app"],
            other_modules=["Cli"],
            dependencies=[["base"], ["foo"]],
            ghc_options=["-Wall"],
        )
    ]
    assert package.tests[0].other_modules == []
    assert package.tests[0].dependencies == [["base"], ["foo", "hspec"]]


def test_make_package_propagates_traversal_errors() -> None:
    filesystem = UnreadableFileSystem(["src/A.hs"])
    config = _config(library=LibrarySection(source_dirs=["src"]))

    with pytest.raises(PermissionError):
        make_package(config, filesystem)

    assert filesystem.listed == ["src"]
