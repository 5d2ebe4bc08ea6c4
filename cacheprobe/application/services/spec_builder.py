"""Builds a validated ConnectionSpec from a flat mapping of string options.

Options come from the environment adapter (Settings.to_options) or from a
pattern definition merged over it. Option names are case-insensitive and
values are trimmed. An option that is present but empty is an error; an
absent option takes its default.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import unquote, urlsplit

from cacheprobe.core.constants import (
    DEFAULT_CLIENT,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CONNECTION_TYPE,
    DEFAULT_HOST,
    DEFAULT_KEY_PREFIX,
    DEFAULT_PORT,
    DEFAULT_SCHEME,
)
from cacheprobe.domain.enums import ClientVariant, Scheme, TopologyMode
from cacheprobe.domain.exceptions import ConfigError
from cacheprobe.domain.value_objects import ConnectionSpec, NodeAddress

logger = logging.getLogger(__name__)

KNOWN_OPTIONS = frozenset(
    {
        "connection_type",
        "client",
        "url",
        "host",
        "port",
        "scheme",
        "username",
        "password",
        "database",
        "nodes",
        "prefix",
        "connect_timeout",
        "command_timeout",
    }
)

TOPOLOGY_ALIASES: dict[str, TopologyMode] = {
    "single": TopologyMode.SINGLE,
    "default": TopologyMode.SINGLE,
    "cluster": TopologyMode.CLUSTER,
    "clusters": TopologyMode.CLUSTER,
}

CLIENT_ALIASES: dict[str, ClientVariant] = {
    "redis-py": ClientVariant.REDIS_PY,
    "redis": ClientVariant.REDIS_PY,
    "glide": ClientVariant.GLIDE,
    "valkey-glide": ClientVariant.GLIDE,
}

URL_SCHEMES: dict[str, Scheme] = {
    "redis": Scheme.TCP,
    "valkey": Scheme.TCP,
    "rediss": Scheme.TLS,
    "valkeys": Scheme.TLS,
}


def _normalize(options: Mapping[str, str | None]) -> dict[str, str]:
    """Lower-case names, trim values, drop None and unknown names; reject blanks."""
    normalized: dict[str, str] = {}
    for raw_name, raw_value in options.items():
        name = raw_name.strip().lower()
        if raw_value is None:
            continue
        if name not in KNOWN_OPTIONS:
            logger.debug("Ignoring unknown connection option %r", raw_name)
            continue
        value = str(raw_value).strip()
        if not value:
            raise ConfigError(f"Option {name!r} is present but empty", field=name)
        normalized[name] = value
    return normalized


def _parse_choice(value: str, choices: Mapping[str, object], field: str) -> object:
    try:
        return choices[value.lower()]
    except KeyError:
        allowed = ", ".join(sorted(choices))
        raise ConfigError(
            f"Unknown {field} {value!r}; expected one of: {allowed}", field=field
        ) from None


def _parse_int(value: str, field: str, minimum: int = 0, maximum: int | None = None) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"Option {field!r} must be an integer, got {value!r}", field=field) from None
    if number < minimum or (maximum is not None and number > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
        raise ConfigError(f"Option {field!r} must be {bound}, got {number}", field=field)
    return number


def _parse_timeout(value: str, field: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigError(f"Option {field!r} must be a number of seconds, got {value!r}", field=field) from None
    if seconds <= 0:
        raise ConfigError(f"Option {field!r} must be positive, got {seconds}", field=field)
    return seconds


def _apply_url(opts: dict[str, str]) -> None:
    """Merge the components of opts['url'] over the individual options."""
    url = opts["url"]
    parts = urlsplit(url)
    scheme = URL_SCHEMES.get(parts.scheme.lower())
    if scheme is None:
        raise ConfigError(
            f"Unsupported URL scheme {parts.scheme!r}; expected redis:// or rediss://",
            field="url",
        )
    try:
        port = parts.port
    except ValueError:
        raise ConfigError(f"URL has an invalid port: {url!r}", field="url") from None
    if not parts.hostname:
        raise ConfigError("URL must include a host", field="url")
    opts["scheme"] = scheme.value
    opts["host"] = parts.hostname
    if port is not None:
        opts["port"] = str(port)
    if parts.username:
        opts["username"] = unquote(parts.username)
    if parts.password:
        opts["password"] = unquote(parts.password)
    database = parts.path.lstrip("/")
    if database:
        opts["database"] = database


def _parse_node(entry: str, default_port: int) -> NodeAddress:
    """Parse 'host', 'host:port', or '[v6]:port'."""
    if entry.startswith("["):
        host, _, rest = entry[1:].partition("]")
        port_text = rest.lstrip(":")
    elif entry.count(":") == 1:
        host, _, port_text = entry.partition(":")
    else:
        host, port_text = entry, ""
    port = _parse_int(port_text, "nodes", 1, 65535) if port_text else default_port
    return NodeAddress(host.strip(), port)


def _parse_nodes(value: str, default_port: int) -> tuple[NodeAddress, ...]:
    entries = [entry.strip() for entry in value.split(",")]
    return tuple(_parse_node(entry, default_port) for entry in entries if entry)


def build_connection_spec(options: Mapping[str, str | None]) -> ConnectionSpec:
    """Translate flat options into a validated, immutable ConnectionSpec.

    Args:
        options: Option name -> string value (see KNOWN_OPTIONS).

    Returns:
        ConnectionSpec ready for the connection factory.

    Raises:
        ConfigError: Unknown enum value, blank or malformed option, or a
            cluster `nodes` option that names no node.
    """
    opts = _normalize(options)
    if "url" in opts:
        _apply_url(opts)

    topology = _parse_choice(
        opts.get("connection_type", DEFAULT_CONNECTION_TYPE), TOPOLOGY_ALIASES, "connection_type"
    )
    client = _parse_choice(opts.get("client", DEFAULT_CLIENT), CLIENT_ALIASES, "client")
    scheme = _parse_choice(
        opts.get("scheme", DEFAULT_SCHEME), {s.value: s for s in Scheme}, "scheme"
    )
    port = _parse_int(opts.get("port", str(DEFAULT_PORT)), "port", 1, 65535)
    host = opts.get("host", DEFAULT_HOST)

    # Each topology reads only its own options: single ignores the cluster
    # seed list, cluster ignores the database (cluster stores only have db 0).
    if topology is TopologyMode.CLUSTER and "nodes" in opts:
        nodes = _parse_nodes(opts["nodes"], port)
        if not nodes:
            raise ConfigError("Option 'nodes' does not name any node", field="nodes")
    else:
        nodes = (NodeAddress(host, port),)

    database = _parse_int(opts["database"], "database") if "database" in opts else None
    if topology is TopologyMode.CLUSTER and database is not None:
        logger.debug("Ignoring database %s for cluster topology", database)
        database = None

    spec = ConnectionSpec(
        topology=topology,
        client=client,
        nodes=nodes,
        scheme=scheme,
        username=opts.get("username"),
        password=opts.get("password"),
        database=database,
        key_prefix=opts.get("prefix", DEFAULT_KEY_PREFIX),
        connect_timeout=_parse_timeout(
            opts.get("connect_timeout", str(DEFAULT_CONNECT_TIMEOUT)), "connect_timeout"
        ),
        command_timeout=_parse_timeout(
            opts.get("command_timeout", str(DEFAULT_COMMAND_TIMEOUT)), "command_timeout"
        ),
    )
    logger.debug("Built connection spec: %r", spec)
    return spec
