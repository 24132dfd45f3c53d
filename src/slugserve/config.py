"""Configuration management for slugserve.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "slugserve.toml"

DEFAULT_CALLBACK_PATH = "/oauthRedirect"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 3000
    request_timeout: float = 30.0


@dataclass
class ContentConfig:
    """Static page configuration."""

    root_dir: Path = field(default_factory=lambda: Path("."))
    read_timeout: float = 5.0


@dataclass
class OAuthConfig:
    """OAuth client configuration.

    Credentials are kept for the authorization-code exchange but are never
    sent anywhere by the callback handler.
    """

    client_id: str | None = None
    client_secret: str | None = field(default=None, repr=False)
    callback_path: str = DEFAULT_CALLBACK_PATH


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    oauth: OAuthConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration, falling back to defaults.

        An explicit config_path must exist. Without one, the nearest
        slugserve.toml from the working directory upwards is used, and
        defaults apply when there is none.

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is None:
            config_path = cls._discover_config()
            if config_path is None:
                return cls._default()
        elif not config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls._load_from_file(config_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        cwd = Path.cwd()
        candidates = (d / CONFIG_FILENAME for d in (cwd, *cwd.parents))
        return next((c for c in candidates if c.is_file()), None)

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            oauth=OAuthConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            oauth=cls._parse_oauth(data.get("oauth")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 3000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        request_timeout = _parse_timeout(data, "request_timeout", 30.0, "server")

        return ServerConfig(host=host, port=port, request_timeout=request_timeout)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(root_dir=config_dir)

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        root_dir = data.get("root_dir", ".")
        if not isinstance(root_dir, str):
            raise ValueError("content.root_dir must be a string")

        read_timeout = _parse_timeout(data, "read_timeout", 5.0, "content")

        return ContentConfig(root_dir=config_dir / root_dir, read_timeout=read_timeout)

    @classmethod
    def _parse_oauth(cls, data: object) -> OAuthConfig:
        """Parse oauth configuration section.

        Args:
            data: Raw oauth section data

        Returns:
            OAuthConfig instance
        """
        if data is None:
            return OAuthConfig()

        if not isinstance(data, dict):
            raise ValueError("oauth section must be a dictionary")

        client_id = data.get("client_id")
        if client_id is not None and not isinstance(client_id, str):
            raise ValueError("oauth.client_id must be a string")

        client_secret = data.get("client_secret")
        if client_secret is not None and not isinstance(client_secret, str):
            raise ValueError("oauth.client_secret must be a string")

        callback_path = data.get("callback_path", DEFAULT_CALLBACK_PATH)
        if not isinstance(callback_path, str):
            raise ValueError("oauth.callback_path must be a string")
        _check_callback_path(callback_path)

        return OAuthConfig(
            client_id=client_id,
            client_secret=client_secret,
            callback_path=callback_path,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        root_dir: Path | None = None,
        callback_path: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            root_dir: Override content.root_dir
            callback_path: Override oauth.callback_path

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if root_dir is not None:
            content = replace(self.content, root_dir=root_dir)

        oauth = self.oauth
        if callback_path is not None:
            _check_callback_path(callback_path)
            oauth = replace(self.oauth, callback_path=callback_path)

        return replace(self, server=server, content=content, oauth=oauth)


def _parse_timeout(data: dict, key: str, default: float, section: str) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{section}.{key} must be a number")
    if value <= 0:
        raise ValueError(f"{section}.{key} must be positive")
    return float(value)


def _check_callback_path(callback_path: str) -> None:
    if not callback_path.startswith("/") or callback_path == "/":
        raise ValueError("oauth.callback_path must be an absolute path other than /")
    if callback_path.endswith(".html"):
        raise ValueError("oauth.callback_path must not end with .html")
