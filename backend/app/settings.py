"""Settings for the NodeX portal backend with observability configuration."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
	if env_names:
		alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
		return Field(default=default, validation_alias=alias)
	return Field(default=default)


def _split_csv(value: Any) -> tuple[str, ...]:
	if value in (None, ""):
		return ()
	if isinstance(value, str):
		return tuple(part.strip() for part in value.split(",") if part.strip())
	if isinstance(value, (list, tuple, set)):
		return tuple(str(item).strip() for item in value if str(item).strip())
	return ()


class Settings(BaseSettings):
	# PocketBase store that owns every collection this service touches
	pocketbase_url: str = _env_field("http://127.0.0.1:8090", "POCKETBASE_URL", "POCKETBASE_BACKEND_URL")
	pocketbase_timeout_seconds: float = _env_field(10.0, "POCKETBASE_TIMEOUT_SECONDS")
	redis_url: str = _env_field("redis://localhost:6379/0", "REDIS_URL")

	environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
	obs_enabled: bool = _env_field(True, "OBS_ENABLED")
	obs_metrics_public: bool = _env_field(False, "OBS_METRICS_PUBLIC")
	obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
	obs_admin_token: Optional[str] = _env_field(None, "OBS_ADMIN_TOKEN")
	service_name: str = _env_field("nodex-portal", "SERVICE_NAME")
	git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")

	# Security/cross-origin and auth cookie knobs
	cors_allow_origins: Any = _env_field((), "CORS_ALLOW_ORIGINS")
	cookie_secure: bool = _env_field(False, "COOKIE_SECURE")
	cookie_domain: Optional[str] = _env_field(None, "COOKIE_DOMAIN")
	auth_cookie_max_age_seconds: int = _env_field(60 * 60 * 24 * 7, "AUTH_COOKIE_MAX_AGE_SECONDS")

	# Cloudflare Turnstile; an empty secret disables remote verification
	turnstile_secret_key: Optional[str] = _env_field(None, "TURNSTILE_SECRET_KEY")
	turnstile_verify_url: str = _env_field(
		"https://challenges.cloudflare.com/turnstile/v0/siteverify", "TURNSTILE_VERIFY_URL"
	)

	# Public form budgets (requests per window per client ip)
	rate_limit_window_seconds: int = _env_field(600, "RATE_LIMIT_WINDOW_SECONDS")
	rate_limit_login: int = _env_field(20, "RATE_LIMIT_LOGIN")
	rate_limit_join: int = _env_field(5, "RATE_LIMIT_JOIN")
	rate_limit_collaborate: int = _env_field(5, "RATE_LIMIT_COLLABORATE")
	rate_limit_onboarding: int = _env_field(5, "RATE_LIMIT_ONBOARDING")

	bos_photo_max_bytes: int = _env_field(5 * 1024 * 1024, "BOS_PHOTO_MAX_BYTES")

	# Environment helpers
	def is_prod(self) -> bool:
		return self.environment.lower() in ("prod", "production", "live")

	def is_dev(self) -> bool:
		return self.environment.lower() in ("dev", "development")

	model_config = SettingsConfigDict(
		env_prefix="",
		env_file=".env",
		case_sensitive=False,
		extra="ignore",
	)

	@field_validator("cors_allow_origins", mode="before")
	def _split_cors(cls, value):  # type: ignore[override]
		return _split_csv(value)


def _normalise_level(level: str) -> str:
	return level.upper()


settings = Settings()
settings.obs_log_level = _normalise_level(settings.obs_log_level)
