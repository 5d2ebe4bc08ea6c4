"""Domain value objects for the harness.

Value objects are immutable and validate their own invariants. A
ConnectionSpec is built once per pattern and passed by value into the
connection factory.
"""

from dataclasses import dataclass, field

from cacheprobe.domain.enums import ClientVariant, Scheme, TopologyMode
from cacheprobe.domain.exceptions import ConfigError


@dataclass(frozen=True)
class NodeAddress:
    """One store endpoint (host and port)."""

    host: str
    port: int

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigError("Node host must be a non-empty string", field="host")
        if not 1 <= self.port <= 65535:
            raise ConfigError(
                f"Node port must be between 1 and 65535, got {self.port}", field="port"
            )

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class ConnectionSpec:
    """Normalized connection descriptor.

    Single topology carries exactly one node; cluster topology carries a
    non-empty ordered list of seed nodes. The password is excluded from
    repr so specs can be logged.
    """

    topology: TopologyMode
    client: ClientVariant
    nodes: tuple[NodeAddress, ...]
    scheme: Scheme = Scheme.TCP
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    database: int | None = None
    key_prefix: str = ""
    connect_timeout: float = 3.0
    command_timeout: float = 3.0

    def __post_init__(self) -> None:
        if self.topology is TopologyMode.CLUSTER and not self.nodes:
            raise ConfigError("Cluster topology requires at least one node", field="nodes")
        if self.topology is TopologyMode.SINGLE and len(self.nodes) != 1:
            raise ConfigError(
                f"Single topology requires exactly one endpoint, got {len(self.nodes)}",
                field="nodes",
            )
        if self.topology is TopologyMode.CLUSTER and self.database:
            raise ConfigError(
                "Cluster topology only supports database 0", field="database"
            )
        if self.connect_timeout <= 0:
            raise ConfigError("connect_timeout must be positive", field="connect_timeout")
        if self.command_timeout <= 0:
            raise ConfigError("command_timeout must be positive", field="command_timeout")

    @property
    def host(self) -> str:
        """Host of the first (or only) node."""
        return self.nodes[0].host

    @property
    def port(self) -> int:
        """Port of the first (or only) node."""
        return self.nodes[0].port

    @property
    def use_tls(self) -> bool:
        return self.scheme is Scheme.TLS

    def describe(self) -> dict[str, str]:
        """Return a printable summary (no credentials)."""
        summary = {
            "client": self.client.value,
            "connection": self.topology.value,
            "scheme": self.scheme.value,
        }
        if self.topology is TopologyMode.SINGLE:
            summary["host"] = str(self.nodes[0])
        else:
            summary["nodes"] = str(len(self.nodes))
        return summary
