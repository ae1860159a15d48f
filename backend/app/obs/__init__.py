"""Observability bootstrap: JSON logging plus request metrics middleware."""

from __future__ import annotations

from fastapi import FastAPI

from app.obs import logging as obs_logging
from app.obs import middleware
from app.settings import settings


def init(app: FastAPI) -> None:
	"""Configure logging and, unless ``OBS_ENABLED`` is off, instrument ``app``."""
	if getattr(app.state, "obs_initialised", False):
		return
	obs_logging.configure_logging()
	if settings.obs_enabled:
		middleware.install(app)
	app.state.obs_initialised = True


__all__ = ["init"]
