from __future__ import annotations

from unittest.mock import Mock

import pytest

from mesh_commander.core.resolve import (
    istioctl_args,
    precheck_args,
    preprocess_istioctl_args,
    resolve_fetch_target,
    resolve_prune_target,
    resolve_switch_target,
    verify_install_args,
)
from mesh_commander.errors import ResolutionError
from mesh_commander.models.distribution import Distribution


@pytest.fixture
def catalog(make_manifest):
    return make_manifest(
        "1.8.3-tetrate-v0",
        "1.8.3-tetrate-v1",
        "1.8.3-tetratefips-v0",
        "1.8.1-tetrate-v2",
        "1.7.8-tetrate-v0",
        "1.7.10-tetrate-v0",
        "1.9.0-istio-v0",
    )


class TestFetchTarget:
    def test_name_wins(self, catalog) -> None:
        target = resolve_fetch_target(
            catalog, name="1.7.8-tetrate-v0", version="1.8.3", flavor="istio", flavor_version=3
        )
        assert target == Distribution.parse("1.7.8-tetrate-v0")

    def test_bad_name(self, catalog) -> None:
        with pytest.raises(ResolutionError, match="cannot parse given name"):
            resolve_fetch_target(catalog, name="1.7.8-tetrate")

    def test_no_flags_takes_first_tetrate_entry(self, catalog) -> None:
        assert resolve_fetch_target(catalog) == Distribution.parse("1.8.3-tetrate-v0")

    def test_unsupported_flavor_falls_back_to_tetrate(self, catalog) -> None:
        assert resolve_fetch_target(catalog, flavor="custom") == Distribution.parse("1.8.3-tetrate-v0")

    def test_flavor_only(self, catalog) -> None:
        assert resolve_fetch_target(catalog, flavor="istio") == Distribution.parse("1.9.0-istio-v0")

    def test_highest_flavor_version(self, catalog) -> None:
        target = resolve_fetch_target(catalog, version="1.8.3", flavor="tetrate")
        assert target == Distribution.parse("1.8.3-tetrate-v1")

    def test_explicit_flavor_version(self, catalog) -> None:
        target = resolve_fetch_target(catalog, version="1.8.3", flavor="tetrate", flavor_version=0)
        assert target == Distribution.parse("1.8.3-tetrate-v0")

    def test_minor_version_takes_latest_patch(self, catalog) -> None:
        target = resolve_fetch_target(catalog, version="1.7", flavor="tetrate")
        assert target == Distribution.parse("1.7.10-tetrate-v0")

    def test_minor_version_absent(self, catalog) -> None:
        with pytest.raises(ResolutionError):
            resolve_fetch_target(catalog, version="1.6", flavor="tetrate")

    def test_unknown_version(self, catalog) -> None:
        with pytest.raises(ResolutionError, match="unsupported version"):
            resolve_fetch_target(catalog, version="1.8.9", flavor="tetrate")


class TestSwitchTarget:
    def test_name(self, catalog) -> None:
        loader = Mock(return_value=catalog)
        target = resolve_switch_target(None, loader, name="1.8.3-tetrate-v1")
        assert target == Distribution.parse("1.8.3-tetrate-v1")
        loader.assert_not_called()

    def test_fills_from_active(self, catalog) -> None:
        active = Distribution.parse("1.8.3-tetrate-v0")
        loader = Mock(return_value=catalog)
        target = resolve_switch_target(active, loader, flavor="tetratefips")
        assert target == Distribution.parse("1.8.3-tetratefips-v0")
        loader.assert_not_called()

    def test_explicit_flags(self, catalog) -> None:
        target = resolve_switch_target(
            None, Mock(return_value=catalog), version="1.7.8", flavor="tetrate", flavor_version=0
        )
        assert target == Distribution.parse("1.7.8-tetrate-v0")

    def test_no_active_and_missing_flags(self, catalog) -> None:
        with pytest.raises(ResolutionError, match="no active distribution"):
            resolve_switch_target(None, Mock(return_value=catalog), version="1.7.8")

    def test_minor_version_resolves_latest_in_group(self, catalog) -> None:
        active = Distribution.parse("1.7.8-tetrate-v0")
        target = resolve_switch_target(active, Mock(return_value=catalog), version="1.8")
        assert target == Distribution.parse("1.8.3-tetrate-v1")

    def test_minor_version_keeps_explicit_flavor_version(self, catalog) -> None:
        active = Distribution.parse("1.7.8-tetrate-v0")
        target = resolve_switch_target(
            active, Mock(return_value=catalog), version="1.8", flavor_version=0
        )
        assert target == Distribution.parse("1.8.3-tetrate-v0")

    def test_minor_version_absent(self, catalog) -> None:
        active = Distribution.parse("1.7.8-tetrate-v0")
        with pytest.raises(ResolutionError):
            resolve_switch_target(active, Mock(return_value=catalog), version="1.5")

    @pytest.mark.parametrize("version", ["1", "1.2.3.4"])
    def test_invalid_version(self, catalog, version) -> None:
        active = Distribution.parse("1.7.8-tetrate-v0")
        with pytest.raises(ResolutionError, match="is invalid"):
            resolve_switch_target(active, Mock(return_value=catalog), version=version)


class TestPruneTarget:
    def test_no_flags_means_everything(self) -> None:
        assert resolve_prune_target() is None

    def test_all_flags(self) -> None:
        assert resolve_prune_target("1.7.8", "tetrate", 0) == Distribution.parse("1.7.8-tetrate-v0")

    @pytest.mark.parametrize(
        "version, flavor, flavor_version",
        [("1.7.8", "", -1), ("", "tetrate", 0), ("1.7.8", "tetrate", -1)],
    )
    def test_partial_flags(self, version, flavor, flavor_version) -> None:
        with pytest.raises(ResolutionError):
            resolve_prune_target(version, flavor, flavor_version)


class TestIstioctlArgs:
    def test_adds_default_hub_to_install(self) -> None:
        assert istioctl_args(["install", "-y"], "my.registry/istio") == [
            "install", "-y", "--set", "hub=my.registry/istio",
        ]

    def test_keeps_explicit_hub(self) -> None:
        args = ["install", "--set", "hub=other"]
        assert istioctl_args(args, "my.registry/istio") == args

    def test_short_set_flag(self) -> None:
        args = ["install", "-s", "hub=other"]
        assert istioctl_args(args, "my.registry/istio") == args

    def test_other_commands_untouched(self) -> None:
        assert istioctl_args(["proxy-status"], "my.registry/istio") == ["proxy-status"]

    def test_no_default_hub(self) -> None:
        assert istioctl_args(["install"], "") == ["install"]

    def test_input_not_mutated(self) -> None:
        args = ["install"]
        istioctl_args(args, "hub")
        assert args == ["install"]

    @pytest.mark.parametrize("flag", ["--set", "-s"])
    def test_assignment_form_hub_is_kept(self, flag) -> None:
        assert istioctl_args(["install", f"{flag}=hub=my.registry"], "default.hub") == [
            "install", flag, "hub=my.registry",
        ]

    def test_assignment_form_hub_with_path_and_port(self) -> None:
        args = ["install", "--set=hub=registry.local:5000/istio-testing"]
        assert istioctl_args(args, "default.hub") == [
            "install", "--set", "hub=registry.local:5000/istio-testing",
        ]

    def test_assignment_form_other_setting_gets_default_hub(self) -> None:
        assert istioctl_args(["install", "--set=profile=demo"], "default.hub") == [
            "install", "--set", "profile=demo", "--set", "hub=default.hub",
        ]


class TestPreprocessArgs:
    @pytest.mark.parametrize(
        "args, expected",
        [
            (["--set=profile=demo"], ["--set", "profile=demo"]),
            (["-s=profile=demo"], ["-s", "profile=demo"]),
            (["--manifests=testfile"], ["--manifests", "testfile"]),
            (["-f=dir/values.yaml"], ["-f", "dir/values.yaml"]),
            (["--set", "profile=demo"], ["--set", "profile=demo"]),
            (["--set", "-f=a"], ["--set", "-f=a"]),
            (["install", " -y "], ["install", "-y"]),
            (["--dry-run"], ["--dry-run"]),
        ],
    )
    def test_preprocess(self, args, expected) -> None:
        assert preprocess_istioctl_args(args) == expected


class TestInstallCheckArgs:
    def test_precheck_carries_filename_revision_and_namespace(self) -> None:
        args = [
            "install", "-f", "a.yaml", "--revision=canary",
            "--set", "values.global.istioNamespace=mesh", "--manifests", "dir",
        ]
        assert precheck_args(args, "/kube/config") == [
            "x", "precheck", "--kubeconfig", "/kube/config",
            "-f", "a.yaml", "--revision", "canary", "--istioNamespace", "mesh",
        ]

    def test_verify_install_also_carries_manifests(self) -> None:
        args = ["install", "-r", "canary", "--manifests=dir", "--set", "profile=demo"]
        assert verify_install_args(args, "/kube/config") == [
            "verify-install", "--kubeconfig", "/kube/config",
            "-r", "canary", "--manifests", "dir",
        ]

    @pytest.mark.parametrize("args", [["proxy-status"], ["install", "--help"], ["install", "-h"], []])
    def test_nothing_to_check(self, args) -> None:
        assert precheck_args(args, "/kube/config") == []
        assert verify_install_args(args, "/kube/config") == []
