"""Configuration module: frozen dataclass loaded from YAML, env vars, and CLI args."""

import argparse
import os
from dataclasses import dataclass, field, replace

import yaml

DEFAULT_ENDPOINT = "https://logs-01.loggly.com/"


@dataclass(frozen=True)
class ClientConfig:
    token: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 10.0
    max_workers: int = 4
    tags: dict = field(default_factory=dict)
    metrics_interval: int = 0


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation options for the CLI that are not client settings."""

    messages: tuple = ()
    file: str | None = None
    bulk: bool = False


def parse_tags(value: str) -> dict:
    """Parse ``"a=1,b=2"`` into ``{"a": "1", "b": "2"}``.

    Entries without ``=`` are ignored.
    """
    tags = {}
    for item in value.split(","):
        name, sep, tag_value = item.partition("=")
        if not sep:
            continue
        tags[name.strip()] = tag_value.strip()
    return tags


def load_yaml(path: str) -> dict:
    """Load a YAML config file and return its top-level mapping."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _from_yaml(data: dict) -> dict:
    kwargs: dict = {}
    for key in ("token", "endpoint"):
        if key in data:
            kwargs[key] = str(data[key])
    if "timeout" in data:
        kwargs["timeout"] = float(data["timeout"])
    if "max_workers" in data:
        kwargs["max_workers"] = int(data["max_workers"])
    if "metrics_interval" in data:
        kwargs["metrics_interval"] = int(data["metrics_interval"])
    if "tags" in data:
        tags = data["tags"] or {}
        if not isinstance(tags, dict):
            raise ValueError("'tags' must be a mapping of name: value")
        kwargs["tags"] = {str(k): str(v) for k, v in tags.items()}
    return kwargs


def _from_env() -> dict:
    kwargs: dict = {}
    if "LOGGLY_TOKEN" in os.environ:
        kwargs["token"] = os.environ["LOGGLY_TOKEN"]
    if "LOGGLY_ENDPOINT" in os.environ:
        kwargs["endpoint"] = os.environ["LOGGLY_ENDPOINT"]
    if "LOGGLY_TIMEOUT" in os.environ:
        kwargs["timeout"] = float(os.environ["LOGGLY_TIMEOUT"])
    if "LOGGLY_MAX_WORKERS" in os.environ:
        kwargs["max_workers"] = int(os.environ["LOGGLY_MAX_WORKERS"])
    if "LOGGLY_TAGS" in os.environ:
        kwargs["tags"] = parse_tags(os.environ["LOGGLY_TAGS"])
    if "METRICS_INTERVAL" in os.environ:
        kwargs["metrics_interval"] = int(os.environ["METRICS_INTERVAL"])
    return kwargs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ship log messages to Loggly")
    parser.add_argument("messages", nargs="*", help="messages to send")
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--token", type=str, default=None)
    parser.add_argument("--endpoint", type=str, default=None)
    parser.add_argument("--timeout", type=float, default=None)
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--metrics-interval", type=int, default=None)
    parser.add_argument(
        "--tag", action="append", default=[], metavar="NAME=VALUE",
        help="tag to attach to every event (repeatable)",
    )
    parser.add_argument("--file", type=str, default=None,
                        help="read messages from a file, one per line")
    parser.add_argument("--bulk", action="store_true", default=False,
                        help="send all messages in a single request")
    return parser


def load_config(argv: list[str] | None = None) -> tuple[ClientConfig, RunOptions]:
    """Build ClientConfig from defaults <- YAML <- env vars <- CLI args (highest priority).

    Pass argv for testability; when None, argparse reads sys.argv.
    """
    args = build_parser().parse_args(argv)

    config = ClientConfig()

    config_path = args.config or os.environ.get("LOGGLY_CONFIG")
    if config_path:
        config = replace(config, **_from_yaml(load_yaml(config_path)))

    config = replace(config, **_from_env())

    overrides: dict = {}
    if args.token is not None:
        overrides["token"] = args.token
    if args.endpoint is not None:
        overrides["endpoint"] = args.endpoint
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.max_workers is not None:
        overrides["max_workers"] = args.max_workers
    if args.metrics_interval is not None:
        overrides["metrics_interval"] = args.metrics_interval
    if args.tag:
        # CLI tags merge over configured tags
        tags = dict(config.tags)
        tags.update(parse_tags(",".join(args.tag)))
        overrides["tags"] = tags
    config = replace(config, **overrides)

    options = RunOptions(
        messages=tuple(args.messages),
        file=args.file,
        bulk=args.bulk,
    )
    return config, options
