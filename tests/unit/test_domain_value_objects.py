"""Tests for domain value objects and results."""

import pytest

from cacheprobe.domain.enums import (
    ClientVariant,
    ErrorCategory,
    ErrorKind,
    PatternStatus,
    ProbeOperation,
    Scheme,
    TopologyMode,
)
from cacheprobe.domain.exceptions import ConfigError
from cacheprobe.domain.results import FailureDetail, PatternResult, SuccessDetail, Tally
from cacheprobe.domain.value_objects import ConnectionSpec, NodeAddress


class TestNodeAddress:
    def test_str(self) -> None:
        assert str(NodeAddress("redis-node-1", 6379)) == "redis-node-1:6379"

    @pytest.mark.parametrize("host, port", [("", 6379), ("h", 0), ("h", 65536)])
    def test_invalid(self, host: str, port: int) -> None:
        with pytest.raises(ConfigError):
            NodeAddress(host, port)


class TestConnectionSpec:
    def test_password_not_in_repr(self) -> None:
        spec = ConnectionSpec(
            TopologyMode.SINGLE,
            ClientVariant.GLIDE,
            (NodeAddress("h", 6379),),
            password="hunter2",
        )
        assert "hunter2" not in repr(spec)
        assert "hunter2" not in str(spec.describe())

    def test_cluster_requires_nodes(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            ConnectionSpec(TopologyMode.CLUSTER, ClientVariant.GLIDE, ())
        assert exc_info.value.field == "nodes"

    def test_non_positive_timeout(self) -> None:
        with pytest.raises(ConfigError):
            ConnectionSpec(
                TopologyMode.SINGLE,
                ClientVariant.REDIS_PY,
                (NodeAddress("h", 6379),),
                connect_timeout=0,
            )

    def test_describe_single_and_cluster(self) -> None:
        single = ConnectionSpec(
            TopologyMode.SINGLE, ClientVariant.REDIS_PY, (NodeAddress("h", 6379),), Scheme.TLS
        )
        assert single.describe() == {
            "client": "redis-py",
            "connection": "single",
            "scheme": "tls",
            "host": "h:6379",
        }
        assert single.use_tls is True
        cluster = ConnectionSpec(
            TopologyMode.CLUSTER,
            ClientVariant.GLIDE,
            (NodeAddress("a", 7000), NodeAddress("b", 7001)),
        )
        assert cluster.describe()["nodes"] == "2"
        assert cluster.host == "a"
        assert cluster.port == 7000

    def test_is_immutable(self) -> None:
        spec = ConnectionSpec(TopologyMode.SINGLE, ClientVariant.REDIS_PY, (NodeAddress("h", 1),))
        with pytest.raises(AttributeError):
            spec.key_prefix = "other:"  # type: ignore[misc]


class TestPatternResult:
    def test_success_requires_detail(self) -> None:
        with pytest.raises(ValueError):
            PatternResult("p", PatternStatus.SUCCESS)

    def test_failure_requires_detail(self) -> None:
        with pytest.raises(ValueError):
            PatternResult("p", PatternStatus.FAILURE)

    def test_failure_to_dict(self) -> None:
        result = PatternResult(
            "Pattern 3",
            PatternStatus.FAILURE,
            failure_detail=FailureDetail(
                ErrorCategory.PROBE, ErrorKind.VALUE_MISMATCH, "bad", ProbeOperation.GET
            ),
        )
        data = result.to_dict()
        assert data["status"] == "failure"
        assert data["error_category"] == "probe"
        assert data["error_kind"] == "value_mismatch"
        assert data["operation"] == "get"
        assert result.succeeded is False

    def test_success_to_dict(self) -> None:
        result = PatternResult(
            "Pattern 1",
            PatternStatus.SUCCESS,
            success_detail=SuccessDetail("Generated value #1", 0.01234, 1),
        )
        data = result.to_dict()
        assert data["result"] == "Generated value #1"
        assert data["time"] == 0.012
        assert data["generator_calls"] == 1


def test_tally() -> None:
    assert Tally(3, 4).failed == 1
    assert Tally(3, 4).all_passed is False
    assert Tally(4, 4).all_passed is True


def test_enum_values() -> None:
    assert ClientVariant.values() == ["glide", "redis-py"]
    assert "protocol_mismatch" in ErrorKind.values()
