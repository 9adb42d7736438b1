"""Configuration loading from an optional YAML file, env vars, and CLI args."""

import argparse
import logging
import os
from dataclasses import dataclass

import yaml

from statsd_client.client import DEFAULT_MAX_PACKET_SIZE, StatsdClient
from statsd_client.sink import UDPSink

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ClientConfig:
    host: str = "localhost"
    port: int = 8125
    prefix: str = ""
    max_packet_size: int = DEFAULT_MAX_PACKET_SIZE
    flush_interval: float = 0.0
    strict: bool = False


def load_yaml(path: str | None) -> dict:
    """Load the ``statsd`` section of a YAML file. Returns empty dict if there is none."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    logger.info("Loaded YAML config from %s", path)
    return data.get("statsd", data) or {}


def load_config(argv=None, path: str | None = None) -> ClientConfig:
    """Build ClientConfig from YAML, then env vars, then CLI args.

    Pass argv for testability; when None, argparse reads sys.argv.
    """
    parser = argparse.ArgumentParser(description="StatsD client")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--host", type=str, default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--prefix", type=str, default=None)
    parser.add_argument("--max-packet-size", type=int, default=None)
    parser.add_argument("--flush-interval", type=float, default=None)
    parser.add_argument("--strict", action="store_true", default=False)
    args, _ = parser.parse_known_args(argv)

    data = load_yaml(args.config or path or os.environ.get("STATSD_CONFIG"))

    # YAML values, falling back to dataclass defaults
    host = data.get("host", ClientConfig.host)
    port = data.get("port", ClientConfig.port)
    prefix = data.get("prefix", ClientConfig.prefix)
    max_packet_size = data.get("max_packet_size", ClientConfig.max_packet_size)
    flush_interval = data.get("flush_interval", ClientConfig.flush_interval)
    strict = data.get("strict", ClientConfig.strict)

    # Env vars override YAML
    host = os.environ.get("STATSD_HOST", host)
    port = int(os.environ.get("STATSD_PORT", port))
    prefix = os.environ.get("STATSD_PREFIX", prefix)
    max_packet_size = int(os.environ.get("STATSD_MAX_PACKET_SIZE", max_packet_size))
    flush_interval = float(os.environ.get("STATSD_FLUSH_INTERVAL", flush_interval))
    strict = _parse_bool(os.environ.get("STATSD_STRICT", strict))

    # CLI flags override env vars
    return ClientConfig(
        host=args.host if args.host is not None else host,
        port=args.port if args.port is not None else port,
        prefix=args.prefix if args.prefix is not None else prefix,
        max_packet_size=args.max_packet_size if args.max_packet_size is not None else max_packet_size,
        flush_interval=args.flush_interval if args.flush_interval is not None else flush_interval,
        strict=True if args.strict else strict,
    )


def create_client(config: ClientConfig) -> StatsdClient:
    """Open a UDP sink for *config* and wrap it in a client."""
    sink = UDPSink(config.host, config.port)
    client = StatsdClient(
        sink,
        prefix=config.prefix,
        max_packet_size=config.max_packet_size,
        flush_interval=config.flush_interval,
        strict=config.strict,
    )
    logger.info(
        "StatsD client sending to %s:%d (prefix=%r, max_packet_size=%d)",
        config.host, config.port, config.prefix, config.max_packet_size,
    )
    return client
