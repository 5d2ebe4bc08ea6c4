"""GlideStore adapter over a mocked GLIDE client. Skips when valkey-glide is absent."""

from unittest.mock import AsyncMock

import pytest

pytest.importorskip("glide")

from glide import (  # noqa: E402
    ClosingError,
    ConditionalChange,
    ExpirySet,
    GlideClient,
    GlideClientConfiguration,
    GlideClusterClientConfiguration,
    RequestError,
)
from glide import ConnectionError as GlideConnectionError  # noqa: E402
from glide import TimeoutError as GlideTimeoutError  # noqa: E402

from cacheprobe.domain.enums import ClientVariant, ErrorKind, Scheme, TopologyMode  # noqa: E402
from cacheprobe.domain.exceptions import StoreCommandError  # noqa: E402
from cacheprobe.domain.value_objects import ConnectionSpec, NodeAddress  # noqa: E402
from cacheprobe.infrastructure.cache import glide_store  # noqa: E402
from cacheprobe.infrastructure.cache.glide_store import (  # noqa: E402
    GlideStore,
    _decode,
    classify_connect_error,
)


def _spec(**overrides) -> ConnectionSpec:
    fields = {
        "topology": TopologyMode.SINGLE,
        "client": ClientVariant.GLIDE,
        "nodes": (NodeAddress("cache.local", 6380),),
        "command_timeout": 1.5,
    }
    fields.update(overrides)
    return ConnectionSpec(**fields)


@pytest.fixture
def client() -> AsyncMock:
    mock = AsyncMock()
    mock.set.return_value = "OK"
    return mock


@pytest.fixture
def store(client: AsyncMock) -> GlideStore:
    return GlideStore(client, _spec())


class TestBuildConfiguration:
    def test_single_maps_tls_credentials_database_and_timeout(self) -> None:
        config = GlideStore.build_configuration(
            _spec(scheme=Scheme.TLS, username="app", password="s3cret", database=2)
        )
        assert isinstance(config, GlideClientConfiguration)
        assert [(a.host, a.port) for a in config.addresses] == [("cache.local", 6380)]
        assert config.use_tls is True
        assert config.credentials.username == "app"
        assert config.credentials.password == "s3cret"
        assert config.database_id == 2
        assert config.request_timeout == 1500

    def test_single_without_password_has_no_credentials(self) -> None:
        config = GlideStore.build_configuration(_spec())
        assert config.credentials is None
        assert config.use_tls is False
        assert config.database_id == 0

    def test_cluster_seeds_every_node(self) -> None:
        config = GlideStore.build_configuration(
            _spec(
                topology=TopologyMode.CLUSTER,
                nodes=(NodeAddress("a", 7000), NodeAddress("b", 7001)),
            )
        )
        assert isinstance(config, GlideClusterClientConfiguration)
        assert [(a.host, a.port) for a in config.addresses] == [("a", 7000), ("b", 7001)]
        assert config.request_timeout == 1500


class TestClassifyConnectError:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (GlideTimeoutError("timed out"), ErrorKind.TIMEOUT),
            (TimeoutError(), ErrorKind.TIMEOUT),
            (RequestError("WRONGPASS invalid username-password pair"), ErrorKind.AUTH_REJECTED),
            (GlideConnectionError("Connection refused (os error 111)"), ErrorKind.UNREACHABLE),
            (GlideConnectionError("broken pipe"), ErrorKind.UNREACHABLE),
            (ClosingError("client closed"), ErrorKind.UNREACHABLE),
            (RequestError("invalid peer certificate"), ErrorKind.PROTOCOL_MISMATCH),
            (RequestError("unexpected reply"), ErrorKind.PROTOCOL_MISMATCH),
            (OSError("No route to host"), ErrorKind.UNREACHABLE),
        ],
    )
    def test_classify(self, exc: BaseException, expected: ErrorKind) -> None:
        assert classify_connect_error(exc) is expected


def test_decode() -> None:
    assert _decode(b"Generated value #1") == "Generated value #1"
    assert _decode("already text") == "already text"
    assert _decode(None) is None


async def test_get_decodes_bytes(store: GlideStore, client: AsyncMock) -> None:
    client.get.return_value = b"test-value"
    assert await store.get("k") == "test-value"
    client.get.return_value = None
    assert await store.get("k") is None


async def test_set_with_ttl(store: GlideStore, client: AsyncMock) -> None:
    assert await store.set("k", "v", ttl=60) is True
    _, kwargs = client.set.call_args
    assert isinstance(kwargs["expiry"], ExpirySet)


async def test_set_without_ttl(store: GlideStore, client: AsyncMock) -> None:
    await store.set("k", "v")
    client.set.assert_awaited_once_with("k", "v", expiry=None)


async def test_set_returns_false_on_none_reply(store: GlideStore, client: AsyncMock) -> None:
    client.set.return_value = None
    assert await store.set("k", "v") is False


async def test_add_is_conditional(store: GlideStore, client: AsyncMock) -> None:
    assert await store.add("lock", "owner", 5) is True
    _, kwargs = client.set.call_args
    assert kwargs["conditional_set"] is ConditionalChange.ONLY_IF_DOES_NOT_EXIST


async def test_add_returns_false_when_key_exists(store: GlideStore, client: AsyncMock) -> None:
    client.set.return_value = None
    assert await store.add("lock", "owner", 5) is False


async def test_delete_passes_key_list(store: GlideStore, client: AsyncMock) -> None:
    client.delete.return_value = 2
    assert await store.delete("a", "b") == 2
    client.delete.assert_awaited_once_with(["a", "b"])


async def test_delete_nothing(store: GlideStore, client: AsyncMock) -> None:
    assert await store.delete() == 0
    client.delete.assert_not_called()


async def test_ping(store: GlideStore, client: AsyncMock) -> None:
    client.ping.return_value = b"PONG"
    assert await store.ping() is True


@pytest.mark.parametrize("method, args", [("get", ("k",)), ("set", ("k", "v")), ("delete", ("k",))])
async def test_command_errors_are_wrapped(store, client, method, args) -> None:
    getattr(client, method).side_effect = RequestError("READONLY You can't write against a read only replica")
    with pytest.raises(StoreCommandError) as exc_info:
        await getattr(store, method)(*args)
    assert "READONLY" in exc_info.value.message
    assert exc_info.value.details["command"] == {"get": "GET", "set": "SET", "delete": "DEL"}[method]


def test_describe(store: GlideStore) -> None:
    info = store.describe()
    assert info["topology"] == "single"
    assert info["nodes"] == ["cache.local:6380"]
    assert info["command_timeout"] == 1.5


async def test_close_logs_errors(store: GlideStore, client: AsyncMock) -> None:
    client.close.side_effect = ClosingError("already closed")
    await store.close()
    client.close.assert_awaited_once()


async def test_connect_closes_client_when_ping_fails(monkeypatch, client: AsyncMock) -> None:
    client.ping.side_effect = RequestError("NOAUTH Authentication required.")
    monkeypatch.setattr(GlideClient, "create", AsyncMock(return_value=client))
    with pytest.raises(RequestError):
        await GlideStore.connect(_spec())
    client.close.assert_awaited_once()


async def test_connect_returns_store(monkeypatch, client: AsyncMock) -> None:
    client.ping.return_value = b"PONG"
    create = AsyncMock(return_value=client)
    monkeypatch.setattr(GlideClient, "create", create)
    store = await GlideStore.connect(_spec())
    assert isinstance(store, GlideStore)
    assert isinstance(create.call_args.args[0], GlideClientConfiguration)


def test_adapter_exposes_store_class() -> None:
    assert glide_store.STORE_CLASS is GlideStore
