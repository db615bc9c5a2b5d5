"""Tests for overhead defaulting: absent maps, one-sided resources, and idempotence."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from node_admission.defaults import (
    apply_overhead_defaults,
    apply_runtime_class_defaults,
    apply_runtime_class_list_defaults,
)
from node_admission.models.resources import Quantity, ResourceRequirements
from node_admission.models.runtime_class import (
    ObjectMeta,
    Overhead,
    RuntimeClass,
    RuntimeClassList,
)
from node_admission.validation.runtime_class import validate_overhead
from node_admission.validation.field import Path


def _overhead(requests=None, limits=None) -> Overhead:
    def to_list(values):
        if values is None:
            return None
        return {name: Quantity(value) for name, value in values.items()}

    return Overhead(pod_fixed=ResourceRequirements(requests=to_list(requests), limits=to_list(limits)))


def _as_text(resources) -> dict:
    return {name: str(quantity) for name, quantity in resources.items()}


# ---------------------------------------------------------------------------
# apply_overhead_defaults
# ---------------------------------------------------------------------------


class TestApplyOverheadDefaults:
    def test_absent_pod_fixed_gets_empty_maps(self) -> None:
        overhead = Overhead()

        apply_overhead_defaults(overhead)

        assert overhead.pod_fixed is not None
        assert overhead.pod_fixed.requests == {}
        assert overhead.pod_fixed.limits == {}
        assert validate_overhead(overhead, Path("overhead")) == []

    def test_absent_requests_and_limits_become_empty(self) -> None:
        overhead = Overhead(pod_fixed=ResourceRequirements())

        apply_overhead_defaults(overhead)

        assert overhead.pod_fixed.requests == {}
        assert overhead.pod_fixed.limits == {}

    def test_limits_default_to_requests(self) -> None:
        overhead = _overhead(requests={"cpu": "4"})

        apply_overhead_defaults(overhead)

        assert str(overhead.pod_fixed.requests["cpu"]) == "4"
        assert str(overhead.pod_fixed.limits["cpu"]) == "4"

    def test_requests_default_to_limits(self) -> None:
        overhead = _overhead(limits={"cpu": "5"})

        apply_overhead_defaults(overhead)

        assert str(overhead.pod_fixed.requests["cpu"]) == "5"
        assert str(overhead.pod_fixed.limits["cpu"]) == "5"

    def test_distinct_request_and_limit_are_kept(self) -> None:
        overhead = _overhead(requests={"cpu": "6"}, limits={"cpu": "7"})

        apply_overhead_defaults(overhead)

        assert str(overhead.pod_fixed.requests["cpu"]) == "6"
        assert str(overhead.pod_fixed.limits["cpu"]) == "7"
        assert validate_overhead(overhead, Path("overhead")) == []

    def test_conflicting_pair_is_not_overwritten(self) -> None:
        overhead = _overhead(requests={"cpu": "10"}, limits={"cpu": "9"})

        apply_overhead_defaults(overhead)

        assert str(overhead.pod_fixed.requests["cpu"]) == "10"
        assert str(overhead.pod_fixed.limits["cpu"]) == "9"

    def test_mixed_keys_are_unioned(self) -> None:
        overhead = _overhead(
            requests={"cpu": "250m", "memory": "64Mi"},
            limits={"memory": "128Mi", "example.com/gpu": "1"},
        )

        apply_overhead_defaults(overhead)

        assert _as_text(overhead.pod_fixed.requests) == {
            "cpu": "250m",
            "memory": "64Mi",
            "example.com/gpu": "1",
        }
        assert _as_text(overhead.pod_fixed.limits) == {
            "cpu": "250m",
            "memory": "128Mi",
            "example.com/gpu": "1",
        }

    def test_copied_values_are_independent(self) -> None:
        overhead = _overhead(requests={"cpu": "4"})

        apply_overhead_defaults(overhead)

        assert overhead.pod_fixed.limits["cpu"] is not overhead.pod_fixed.requests["cpu"]
        overhead.pod_fixed.limits["cpu"] = Quantity("8")
        assert str(overhead.pod_fixed.requests["cpu"]) == "4"

    @pytest.mark.parametrize(
        ("requests", "limits"),
        [
            (None, None),
            ({"cpu": "1"}, None),
            (None, {"memory": "1Gi"}),
            ({"cpu": "1", "memory": "1Gi"}, {"cpu": "2"}),
            ({}, {}),
        ],
    )
    def test_key_sets_match_and_defaulting_is_idempotent(self, requests, limits) -> None:
        overhead = _overhead(requests=requests, limits=limits)

        apply_overhead_defaults(overhead)
        once = overhead.model_dump(mode="json")
        apply_overhead_defaults(overhead)

        assert overhead.model_dump(mode="json") == once
        assert set(overhead.pod_fixed.requests) == set(overhead.pod_fixed.limits)


# ---------------------------------------------------------------------------
# RuntimeClass and list helpers
# ---------------------------------------------------------------------------


class TestApplyRuntimeClassDefaults:
    def test_absent_overhead_stays_absent(self) -> None:
        rc = RuntimeClass(metadata=ObjectMeta(name="foo"), handler="bar")

        apply_runtime_class_defaults(rc)

        assert rc.overhead is None

    def test_overhead_is_defaulted(self) -> None:
        rc = RuntimeClass(
            metadata=ObjectMeta(name="foo"),
            handler="bar",
            overhead=_overhead(limits={"memory": "120Mi"}),
        )

        apply_runtime_class_defaults(rc)

        assert str(rc.overhead.pod_fixed.requests["memory"]) == "120Mi"

    def test_list_items_are_defaulted(self) -> None:
        runtime_classes = RuntimeClassList(items=[
            RuntimeClass(metadata=ObjectMeta(name="a"), handler="a", overhead=Overhead()),
            RuntimeClass(metadata=ObjectMeta(name="b"), handler="b", overhead=_overhead(requests={"cpu": "1"})),
        ])

        apply_runtime_class_list_defaults(runtime_classes)

        assert runtime_classes.items[0].overhead.pod_fixed.limits == {}
        assert str(runtime_classes.items[1].overhead.pod_fixed.limits["cpu"]) == "1"

    @pytest.mark.parametrize(
        ("requests", "limits"),
        [
            ({"cpu": "1"}, {"cpu": "2", "memory": "1Gi"}),
            ({"cpu": "3"}, {"cpu": "2"}),
            ({"memory": "-1"}, None),
        ],
    )
    def test_valid_after_defaulting_means_bounded(self, requests, limits) -> None:
        rc = RuntimeClass(metadata=ObjectMeta(name="foo"), handler="bar", overhead=_overhead(requests, limits))

        apply_runtime_class_defaults(rc)
        errs = validate_overhead(rc.overhead, Path("overhead"))

        pod_fixed = rc.overhead.pod_fixed
        if not errs:
            for name, request in pod_fixed.requests.items():
                assert not request.is_negative()
                assert request <= pod_fixed.limits[name]
        else:
            assert any(
                request.is_negative() or request > pod_fixed.limits[name]
                for name, request in pod_fixed.requests.items()
            )


# ---------------------------------------------------------------------------
# Properties over generated overheads
# ---------------------------------------------------------------------------

_NAMES = st.sampled_from(["cpu", "memory", "ephemeral-storage", "example.com/gpu", "hugepages-2Mi"])
_QUANTITIES = st.builds(
    lambda amount, suffix: f"{amount}{suffix}",
    st.integers(min_value=-5, max_value=10000),
    st.sampled_from(["", "m", "k", "Mi", "Gi"]),
)
_RESOURCE_MAPS = st.none() | st.dictionaries(_NAMES, _QUANTITIES, max_size=5)


def _generated_overhead(requests, limits, absent: bool) -> Overhead:
    if absent:
        return Overhead()
    return _overhead(requests=requests, limits=limits)


class TestApplyOverheadDefaultsProperties:
    @settings(max_examples=50, derandomize=True, deadline=None)
    @given(requests=_RESOURCE_MAPS, limits=_RESOURCE_MAPS, absent=st.booleans())
    def test_idempotent(self, requests, limits, absent) -> None:
        overhead = _generated_overhead(requests, limits, absent)

        apply_overhead_defaults(overhead)
        once = overhead.model_dump(mode="json")
        apply_overhead_defaults(overhead)

        assert overhead.model_dump(mode="json") == once

    @settings(max_examples=50, derandomize=True, deadline=None)
    @given(requests=_RESOURCE_MAPS, limits=_RESOURCE_MAPS, absent=st.booleans())
    def test_both_maps_cover_every_given_resource(self, requests, limits, absent) -> None:
        overhead = _generated_overhead(requests, limits, absent)

        apply_overhead_defaults(overhead)

        expected = set() if absent else set(requests or {}) | set(limits or {})
        assert overhead.pod_fixed.requests is not None
        assert overhead.pod_fixed.limits is not None
        assert set(overhead.pod_fixed.requests) == expected
        assert set(overhead.pod_fixed.limits) == expected

    @settings(max_examples=50, derandomize=True, deadline=None)
    @given(requests=_RESOURCE_MAPS, limits=_RESOURCE_MAPS)
    def test_given_values_are_kept_and_missing_ones_copied(self, requests, limits) -> None:
        requests = requests or {}
        limits = limits or {}
        overhead = _overhead(requests=requests, limits=limits)

        apply_overhead_defaults(overhead)

        for name in set(requests) | set(limits):
            assert str(overhead.pod_fixed.requests[name]) == requests.get(name, limits.get(name))
            assert str(overhead.pod_fixed.limits[name]) == limits.get(name, requests.get(name))

    @settings(max_examples=50, derandomize=True, deadline=None)
    @given(requests=_RESOURCE_MAPS, limits=_RESOURCE_MAPS)
    def test_valid_after_defaulting_means_bounded(self, requests, limits) -> None:
        overhead = _overhead(requests=requests, limits=limits)

        apply_overhead_defaults(overhead)

        if validate_overhead(overhead, Path("overhead")):
            return
        pod_fixed = overhead.pod_fixed
        for name, request in pod_fixed.requests.items():
            assert not request.is_negative()
            assert not pod_fixed.limits[name].is_negative()
            assert request <= pod_fixed.limits[name]
