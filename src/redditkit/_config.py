"""
Global configuration for the redditkit SDK.

This module provides a simple configuration system following Convention over Configuration (CoC).
Users can optionally call REDDITKIT.configure() at application startup to customize defaults.
If not called, sensible defaults are used.

Hierarchy of precedence (highest to lowest):
1. Arguments and *Options passed to RedditSession
2. Values set via REDDITKIT.configure()
3. Environment variables (REDDITKIT_*) - when allow_env_override=True
4. Hardcoded defaults (in dataclass fields)

Example:
    >>> from redditkit import REDDITKIT
    >>>
    >>> # Pre-loaded with defaults + env vars
    >>> REDDITKIT.config.api.max_retry
    1
    >>>
    >>> # Custom configuration
    >>> REDDITKIT.configure(
    ...     auth={"client_id": "x", "redirect_uri": "myapp://callback", "user_agent": "myapp/1.0"},
    ...     api={"max_retry": 3},
    ... )
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from typing import Any, Self

# =============================================================================
# Exceptions
# =============================================================================


class ConfigEnvVarError(ValueError):
    """Raised when an environment variable has an invalid value."""

    def __init__(
        self,
        env_var: str,
        value: str,
        expected_type: str,
        cause: Exception | None = None,
    ):
        self.env_var = env_var
        self.value = value
        self.expected_type = expected_type
        super().__init__(f"Invalid value for {env_var}: '{value}' (expected {expected_type})")
        self.__cause__ = cause


class ConfigValidationError(ValueError):
    """Raised when a configuration value fails validation."""

    def __init__(
        self,
        field: str,
        value: Any,
        message: str,
        section: str | None = None,
    ):
        self.field = field
        self.value = value
        self.section = section
        prefix = f"[{section}] " if section else ""
        super().__init__(f"{prefix}Invalid value for '{field}': {value!r}. {message}")


# =============================================================================
# Environment Variables
# =============================================================================


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


# Annotation (as a string, since fields are declared under PEP 563) -> converter.
_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": _parse_bool,
}


class EnvVars:
    """
    Reads the REDDITKIT_* environment variables declared in config field metadata.

    Values are stripped; blank values count as unset. The converter is picked
    from the field annotation, ignoring a trailing ``| None``.

    Example:
        >>> EnvVars.get("REDDITKIT_API_MAX_RETRY", type_hint="int")
        3
        >>> EnvVars.get("REDDITKIT_AUTH_USER_AGENT", type_hint="str | None")
        'myapp/1.0 by u/me'
        >>> EnvVars.is_set("REDDITKIT_AUTH_CLIENT_SECRET")
        False
    """

    @staticmethod
    def is_set(var_name: str) -> bool:
        """Return True if the variable holds a non-blank value."""
        return bool(os.environ.get(var_name, "").strip())

    @staticmethod
    def get(var_name: str, type_hint: Any = str) -> Any:
        """
        Return the converted value of an environment variable, or None if unset.

        Raises:
            ConfigEnvVarError: If the value cannot be converted to the annotated type.
        """
        raw_value = os.environ.get(var_name, "").strip()
        if not raw_value:
            return None

        type_name = EnvVars._type_name(type_hint)
        converter = _CONVERTERS.get(type_name, str)
        try:
            return converter(raw_value)
        except (ValueError, TypeError) as e:
            raise ConfigEnvVarError(
                env_var=var_name,
                value=raw_value,
                expected_type=type_name,
                cause=e,
            ) from e

    @staticmethod
    def _type_name(type_hint: Any) -> str:
        name = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
        non_null = [part.strip() for part in name.split("|") if part.strip() != "None"]
        return non_null[0] if len(non_null) == 1 else name


# =============================================================================
# Base Class
# =============================================================================


@dataclass(frozen=True)
class OverridableConfig:
    """
    Base class for immutable configuration dataclasses.

    Provides `.with_overrides()` method for creating new instances
    with partial field updates. Uses strict validation to catch
    typos and invalid field names early.

    Example:
        >>> config = ApiConfig()
        >>> custom = config.with_overrides({"max_retry": 3})
        >>> custom.max_retry
        3
    """

    def with_overrides(self, overrides: dict[str, Any]) -> Self:
        """
        Return a new instance with specified fields overridden.

        None values are ignored, so partial dicts can be passed safely.

        Raises:
            ValueError: If overrides contains unknown field names.
        """
        if not overrides:
            return self

        valid_fields = {f.name for f in fields(self)}
        invalid_fields = set(overrides.keys()) - valid_fields

        if invalid_fields:
            raise ValueError(
                f"Unknown config fields: {invalid_fields}. "
                f"Valid fields are: {valid_fields}"
            )

        filtered = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered) if filtered else self

    def with_env_vars(self) -> Self:
        """
        Return new instance with environment variables applied.

        Reads env vars declared in field metadata and applies them as overrides.

        Raises:
            ConfigEnvVarError: If an env var has an invalid value.
        """
        overrides: dict[str, Any] = {}
        for f in fields(self):
            env_var = f.metadata.get("env")
            if env_var:
                value = EnvVars.get(var_name=env_var, type_hint=f.type)
                if value is not None:
                    overrides[f.name] = value
        return self.with_overrides(overrides)

    def env_sources(self) -> dict[str, str]:
        """Return field name -> "env:VAR" for every field whose env var is currently set."""
        sources: dict[str, str] = {}
        for f in fields(self):
            env_var = f.metadata.get("env")
            if env_var and EnvVars.is_set(env_var):
                sources[f.name] = f"env:{env_var}"
        return sources


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass(frozen=True)
class AuthConfig(OverridableConfig):
    """
    OAuth2 client configuration.

    Attributes:
        client_id: Reddit application client ID.
            Env var: REDDITKIT_AUTH_CLIENT_ID

        client_secret: Reddit application secret. Leave unset for "installed"
            apps; the installed-client grant is used instead of client_credentials.
            Env var: REDDITKIT_AUTH_CLIENT_SECRET

        redirect_uri: Redirect URI registered for the application.
            Env var: REDDITKIT_AUTH_REDIRECT_URI

        user_agent: User-Agent sent with every API call (Reddit requires a
            descriptive, unique one).
            Env var: REDDITKIT_AUTH_USER_AGENT

        token_url: OAuth2 token endpoint.
            Env var: REDDITKIT_AUTH_TOKEN_URL

        authorize_url: OAuth2 authorization (consent) endpoint.
            Env var: REDDITKIT_AUTH_AUTHORIZE_URL

    Example:
        >>> from redditkit import REDDITKIT
        >>> REDDITKIT.config.auth.has_client_secret()
        False
    """

    client_id: str | None = field(default=None, metadata={"env": "REDDITKIT_AUTH_CLIENT_ID"})
    client_secret: str | None = field(default=None, metadata={"env": "REDDITKIT_AUTH_CLIENT_SECRET"})
    redirect_uri: str | None = field(default=None, metadata={"env": "REDDITKIT_AUTH_REDIRECT_URI"})
    user_agent: str | None = field(default=None, metadata={"env": "REDDITKIT_AUTH_USER_AGENT"})
    token_url: str = field(default="https://www.reddit.com/api/v1/access_token", metadata={"env": "REDDITKIT_AUTH_TOKEN_URL"})
    authorize_url: str = field(default="https://www.reddit.com/api/v1/authorize", metadata={"env": "REDDITKIT_AUTH_AUTHORIZE_URL"})

    def has_client_secret(self) -> bool:
        """Check if a client secret is configured."""
        return bool(self.client_secret)

    def validate(self) -> Self:
        """Validate auth configuration fields."""
        for name in ("client_id", "client_secret", "redirect_uri", "user_agent"):
            value = getattr(self, name)
            if value is not None and value == "":
                raise ConfigValidationError(name, value, "Must not be empty string.", section="auth")
        for name in ("token_url", "authorize_url"):
            value = getattr(self, name)
            if not (value.startswith("http://") or value.startswith("https://")):
                raise ConfigValidationError(
                    name, value,
                    "Must start with 'http://' or 'https://'.", section="auth"
                )
        return self


@dataclass(frozen=True)
class ApiConfig(OverridableConfig):
    """
    Configuration for resource API calls.

    Attributes:
        base_url: Base URL of the OAuth resource API.
            Env var: REDDITKIT_API_BASE_URL

        request_timeout: HTTP request timeout in seconds for every call.
            Env var: REDDITKIT_API_REQUEST_TIMEOUT

        max_retry: Maximum backoff-then-resend cycles when the API answers 5xx.
            Use 0 to disable retries. A call makes at most max_retry + 1 attempts.
            Env var: REDDITKIT_API_MAX_RETRY

        backoff_step: Seconds multiplied by the attempt number to get the delay
            before each resend (0s, 1s, 2s... with the default).
            Env var: REDDITKIT_API_BACKOFF_STEP

    Example:
        >>> from redditkit import REDDITKIT
        >>> REDDITKIT.config.api.base_url
        'https://oauth.reddit.com'
    """

    base_url: str = field(default="https://oauth.reddit.com", metadata={"env": "REDDITKIT_API_BASE_URL"})
    request_timeout: int = field(default=30, metadata={"env": "REDDITKIT_API_REQUEST_TIMEOUT"})
    max_retry: int = field(default=1, metadata={"env": "REDDITKIT_API_MAX_RETRY"})
    backoff_step: float = field(default=1.0, metadata={"env": "REDDITKIT_API_BACKOFF_STEP"})

    def validate(self) -> Self:
        """Validate API configuration fields."""
        if not (self.base_url.startswith("http://") or self.base_url.startswith("https://")):
            raise ConfigValidationError(
                "base_url", self.base_url,
                "Must start with 'http://' or 'https://'.", section="api"
            )
        if self.request_timeout <= 0:
            raise ConfigValidationError(
                "request_timeout", self.request_timeout,
                "Must be greater than 0.", section="api"
            )
        if self.max_retry < 0:
            raise ConfigValidationError(
                "max_retry", self.max_retry,
                "Must be greater than or equal to 0.", section="api"
            )
        if self.backoff_step < 0:
            raise ConfigValidationError(
                "backoff_step", self.backoff_step,
                "Must be greater than or equal to 0.", section="api"
            )
        return self


@dataclass(frozen=True)
class RateLimitConfig(OverridableConfig):
    """
    Configuration for the server-quota throttle.

    Reddit reports the remaining quota and the seconds until the window resets
    in response headers. When the remaining quota minus in-flight calls drops
    below the threshold, the next call waits for the whole reset window.

    Attributes:
        min_remaining_threshold: Minimum quota to keep in reserve.
            Env var: REDDITKIT_RATE_LIMIT_MIN_REMAINING_THRESHOLD
    """

    min_remaining_threshold: int = field(default=5, metadata={"env": "REDDITKIT_RATE_LIMIT_MIN_REMAINING_THRESHOLD"})

    def validate(self) -> Self:
        """Validate rate limit configuration fields."""
        if self.min_remaining_threshold < 0:
            raise ConfigValidationError(
                "min_remaining_threshold", self.min_remaining_threshold,
                "Must be greater than or equal to 0.", section="rate_limit"
            )
        return self


@dataclass(frozen=True)
class ConfigEntry:
    """
    A single configuration value with its source, as shown by explain().

    Attributes:
        name: Field name.
        value: Current value.
        source: Where the value came from ("default", "env:VAR", "user").
    """

    name: str
    value: Any
    source: str

    @property
    def formatted_value(self) -> str:
        """Value formatted for display, with secrets masked and long values truncated."""
        if self.value is None:
            return "None"
        text = str(self.value)
        if "secret" in self.name:
            text = "****" + text[-4:] if len(text) > 4 else "****"
        if len(text) > 50:
            text = text[:47] + "..."
        return text


_SECTIONS = ("auth", "api", "rate_limit")


@dataclass(frozen=True)
class RedditKitConfig:
    """
    Global configuration for the redditkit SDK.

    Aggregates all configuration sections: auth, api and rate_limit.
    Access via the global `REDDITKIT.config` property.

    Example:
        >>> from redditkit import REDDITKIT
        >>> REDDITKIT.config.api.request_timeout
        30
        >>> REDDITKIT.config.rate_limit.min_remaining_threshold
        5
    """

    auth: AuthConfig = field(default_factory=AuthConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    sources: dict[str, dict[str, str]] = field(default_factory=dict, repr=False, compare=False)

    def with_env_vars(self) -> RedditKitConfig:
        """Return a new config with REDDITKIT_* environment variables applied on top."""
        sources = {name: dict(flds) for name, flds in self.sources.items()}
        for name in _SECTIONS:
            env = getattr(self, name).env_sources()
            if env:
                sources.setdefault(name, {}).update(env)
        return RedditKitConfig(
            auth=self.auth.with_env_vars(),
            api=self.api.with_env_vars(),
            rate_limit=self.rate_limit.with_env_vars(),
            sources=sources,
        )

    def with_section_overrides(
        self,
        *,
        auth: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        rate_limit: dict[str, Any] | None = None,
    ) -> RedditKitConfig:
        """
        Return a new config with overrides applied to nested sections.

        Each section dict is merged with the existing section config,
        only overriding the specified fields.
        """
        sources = {name: dict(flds) for name, flds in self.sources.items()}
        for name, overrides in (("auth", auth), ("api", api), ("rate_limit", rate_limit)):
            for key, value in (overrides or {}).items():
                if value is not None:
                    sources.setdefault(name, {})[key] = "user"
        return RedditKitConfig(
            auth=self.auth.with_overrides(auth or {}),
            api=self.api.with_overrides(api or {}),
            rate_limit=self.rate_limit.with_overrides(rate_limit or {}),
            sources=sources,
        )

    def explain_data(self) -> dict[str, list[ConfigEntry]]:
        """Return config values and their sources, section by section."""
        result: dict[str, list[ConfigEntry]] = {}
        for section_name in _SECTIONS:
            section_config = getattr(self, section_name)
            section_sources = self.sources.get(section_name, {})
            result[section_name] = [
                ConfigEntry(
                    name=f.name,
                    value=getattr(section_config, f.name),
                    source=section_sources.get(f.name, "default"),
                )
                for f in fields(section_config)
            ]
        return result


# =============================================================================
# Global Configuration Singleton
# =============================================================================


class _RedditKit:
    """
    Singleton for SDK configuration.

    Use `REDDITKIT.configure()` to customize settings and `REDDITKIT.config`
    to access current configuration.

    Example:
        >>> from redditkit import REDDITKIT
        >>> REDDITKIT.configure(api={"max_retry": 3})
        >>> print(REDDITKIT.config.api.max_retry)
        3
    """

    def __init__(self) -> None:
        """Initialize with defaults and environment variables."""
        self._config: RedditKitConfig = RedditKitConfig().with_env_vars()

    def configure(
        self,
        *,
        auth: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        rate_limit: dict[str, Any] | None = None,
        allow_env_override: bool = True,
    ) -> RedditKitConfig:
        """
        Configure SDK settings.

        Call at application startup to customize defaults.

        Args:
            auth: Auth config overrides (client_id, client_secret, redirect_uri, user_agent, ...).
            api: API config overrides (base_url, request_timeout, max_retry, backoff_step).
            rate_limit: Rate limit config overrides (min_remaining_threshold).
            allow_env_override: If True (default), env vars are used as fallback
                for fields NOT provided. If False, ignores env vars entirely.

        Returns:
            The configured RedditKitConfig instance.

        Raises:
            ValueError: If any dict contains unknown field names.
            ConfigValidationError: If any config value fails validation.
        """
        base = RedditKitConfig()
        if allow_env_override:
            base = base.with_env_vars()

        self._config = base.with_section_overrides(
            auth=auth,
            api=api,
            rate_limit=rate_limit,
        )
        return self.validate()

    @property
    def config(self) -> RedditKitConfig:
        """Access current configuration (read-only)."""
        return self._config

    def reset(self) -> RedditKitConfig:
        """
        Reset configuration to defaults + env vars.

        Useful for testing to ensure clean state between tests.
        """
        self._config = RedditKitConfig().with_env_vars()
        return self.validate()

    def validate(self) -> RedditKitConfig:
        """
        Validate current configuration.

        Raises:
            ConfigValidationError: If any config value is invalid.
        """
        self._config.auth.validate()
        self._config.api.validate()
        self._config.rate_limit.validate()
        return self._config

    def explain(self, output: Callable[[str], None] = print) -> None:
        """
        Print current configuration with sources.

        Each value is followed by where it came from: "default",
        "env:VAR_NAME" or "user" (set via REDDITKIT.configure()).

        Args:
            output: Callable to output each line. Defaults to print.
                    Can be used with logging: `REDDITKIT.explain(logger.info)`
        """
        name_width = 25
        value_width = 50
        total_width = 2 + name_width + 2 + (value_width + 2) + 1 + 8

        output("REDDITKIT Configuration:")
        output("=" * total_width)
        for section_name, entries in self._config.explain_data().items():
            output(f"[{section_name}]")
            for entry in entries:
                dots = "." * (name_width - len(entry.name))
                value_padded = entry.formatted_value.ljust(value_width)
                marker = "✎" if entry.source != "default" else " "
                output(f"  {entry.name} {dots} {value_padded} {marker} {entry.source}")
        output("=" * total_width)

    def __repr__(self) -> str:
        return f"REDDITKIT(config={self._config!r})"


# Global singleton instance - always reflects current configuration
REDDITKIT: _RedditKit = _RedditKit()
REDDITKIT.validate()  # Validate defaults + env vars on module load
