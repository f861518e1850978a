"""Tests for the license checker component."""

from __future__ import annotations

import pytest

from projkit.errors import ConfigurationError
from projkit.license_checker import (
    LicenseCheckOptions,
    build_license_check_command,
    register_license_check,
    validate_license_check_options,
)
from projkit.project import NodeProject
from projkit.tasks import TaskStep


class RecordingProject:
    """Minimal project double that records every call made on it."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.pre_compile_task = self

    def add_dev_deps(self, *specs: str) -> None:
        self.calls.append(("add_dev_deps", specs))

    def add_task(self, name: str, *, exec: str, receive_args: bool):
        self.calls.append(("add_task", name, exec, receive_args))
        return name

    def spawn(self, task) -> None:
        self.calls.append(("spawn", task))

    def try_find_task(self, name: str):
        return None


class TestValidation:
    def test_no_scope_selected(self):
        opts = LicenseCheckOptions(production=False, development=False, allowed_licenses=["MIT"])
        with pytest.raises(ConfigurationError, match="At least one of `production` or `development`"):
            validate_license_check_options(opts)

    def test_no_lists(self):
        with pytest.raises(ConfigurationError, match="Exactly one must be provided"):
            validate_license_check_options(LicenseCheckOptions())

    def test_both_lists(self):
        opts = LicenseCheckOptions(allowed_licenses=["MIT"], prohibited_licenses=["GPL-3.0"])
        with pytest.raises(ConfigurationError, match="can not be used at the same time"):
            validate_license_check_options(opts)

    def test_scope_check_runs_first(self):
        # Lists are also invalid here, but the scope error is reported.
        opts = LicenseCheckOptions(production=False, development=False)
        with pytest.raises(ConfigurationError, match="`production` or `development`"):
            validate_license_check_options(opts)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_license_check_options(LicenseCheckOptions())


class TestBuildCommand:
    def test_production_only_allow_list(self):
        opts = LicenseCheckOptions(production=True, development=False, allowed_licenses=["MIT", "Apache-2.0"])
        assert build_license_check_command(opts) == (
            'license-checker --summary --production --onlyAllow "MIT;Apache-2.0"'
        )

    def test_both_scopes_deny_list_has_no_scope_flag(self):
        opts = LicenseCheckOptions(production=True, development=True, prohibited_licenses=["GPL-3.0"])
        assert build_license_check_command(opts) == 'license-checker --summary --failOn "GPL-3.0"'

    def test_development_only(self):
        opts = LicenseCheckOptions(production=False, development=True, prohibited_licenses=["GPL-3.0", "AGPL-3.0"])
        assert build_license_check_command(opts) == (
            'license-checker --summary --development --failOn "GPL-3.0;AGPL-3.0"'
        )

    def test_defaults_check_production(self):
        opts = LicenseCheckOptions(allowed_licenses=["ISC"])
        assert build_license_check_command(opts) == 'license-checker --summary --production --onlyAllow "ISC"'

    def test_list_order_is_preserved(self):
        opts = LicenseCheckOptions(allowed_licenses=["MIT", "BSD-3-Clause", "Apache-2.0"])
        assert build_license_check_command(opts).endswith('"MIT;BSD-3-Clause;Apache-2.0"')

    def test_invalid_options_raise(self):
        with pytest.raises(ConfigurationError):
            build_license_check_command(LicenseCheckOptions(allowed_licenses=[], prohibited_licenses=[]))


class TestOptions:
    def test_lists_are_stored_as_tuples(self):
        allowed = ["MIT"]
        opts = LicenseCheckOptions(allowed_licenses=allowed)
        allowed.append("GPL-3.0")
        assert opts.allowed_licenses == ("MIT",)

    def test_bare_string_rejected(self):
        with pytest.raises(ConfigurationError, match="`allowed_licenses` must be a list of strings"):
            LicenseCheckOptions(allowed_licenses="MIT")
        with pytest.raises(ConfigurationError, match="`prohibited_licenses` must be a list of strings"):
            LicenseCheckOptions(prohibited_licenses="GPL-3.0")

    def test_from_dict_accepts_camel_case(self):
        opts = LicenseCheckOptions.from_dict({
            "development": True,
            "allowedLicenses": ["MIT", "ISC"],
        })
        assert opts.production is True
        assert opts.development is True
        assert opts.allowed_licenses == ("MIT", "ISC")
        assert opts.prohibited_licenses == ()

    def test_from_dict_rejects_string_list(self):
        with pytest.raises(ConfigurationError, match="must be a list of strings"):
            LicenseCheckOptions.from_dict({"allowed_licenses": "MIT"})

    def test_from_dict_rejects_non_bool_scope(self):
        with pytest.raises(ConfigurationError, match="must be a boolean"):
            LicenseCheckOptions.from_dict({"production": "yes", "allowed_licenses": ["MIT"]})

    def test_to_dict(self):
        opts = LicenseCheckOptions(prohibited_licenses=["GPL-3.0"])
        assert opts.to_dict() == {
            "production": True,
            "development": False,
            "allowed_licenses": [],
            "prohibited_licenses": ["GPL-3.0"],
        }


class TestRegister:
    def test_calls_project_in_order(self):
        project = RecordingProject()
        result = register_license_check(project, LicenseCheckOptions(allowed_licenses=["MIT"]))

        assert result == "check-licenses"
        assert project.calls == [
            ("add_dev_deps", ("license-checker",)),
            ("add_task", "check-licenses", 'license-checker --summary --production --onlyAllow "MIT"', True),
            ("spawn", "check-licenses"),
        ]

    def test_invalid_options_touch_nothing(self):
        project = RecordingProject()
        with pytest.raises(ConfigurationError, match="Neither"):
            register_license_check(project, LicenseCheckOptions(allowed_licenses=[], prohibited_licenses=[]))
        assert project.calls == []

    def test_registers_on_node_project(self, tmp_path):
        project = NodeProject("demo", tmp_path)
        task = register_license_check(
            project,
            LicenseCheckOptions(production=True, development=False, allowed_licenses=["MIT", "Apache-2.0"]),
        )

        assert project.deps.get("license-checker").type.value == "build"
        assert task.steps == [
            TaskStep(
                exec='license-checker --summary --production --onlyAllow "MIT;Apache-2.0"',
                receive_args=True,
            )
        ]
        assert project.pre_compile_task.steps == [TaskStep(spawn="check-licenses")]

    def test_invalid_options_leave_node_project_unchanged(self, tmp_path):
        project = NodeProject("demo", tmp_path)
        before = project.tasks.to_manifest()
        with pytest.raises(ConfigurationError):
            register_license_check(project, LicenseCheckOptions(production=False, allowed_licenses=["MIT"]))
        assert project.tasks.to_manifest() == before
        assert project.deps.all() == []

    def test_same_options_give_same_command(self, tmp_path):
        opts = LicenseCheckOptions(prohibited_licenses=["GPL-3.0"])
        first = register_license_check(NodeProject("a", tmp_path), opts)
        second = register_license_check(NodeProject("b", tmp_path), opts)
        assert first.steps == second.steps

    def test_second_registration_on_same_project_fails(self, tmp_path):
        project = NodeProject("demo", tmp_path)
        opts = LicenseCheckOptions(allowed_licenses=["MIT"])
        register_license_check(project, opts)
        with pytest.raises(ConfigurationError, match="already has a `check-licenses` task"):
            register_license_check(project, opts)
        assert len(project.deps.all()) == 1
        assert project.pre_compile_task.steps == [TaskStep(spawn="check-licenses")]

    def test_existing_custom_task_leaves_project_unchanged(self, tmp_path):
        project = NodeProject("demo", tmp_path)
        project.add_task("check-licenses", exec="echo custom")

        with pytest.raises(ConfigurationError, match="already has a `check-licenses` task"):
            register_license_check(project, LicenseCheckOptions(allowed_licenses=["MIT"]))

        assert project.deps.all() == []
        assert project.pre_compile_task.steps == []
        assert project.tasks.get("check-licenses").steps == [TaskStep(exec="echo custom")]
