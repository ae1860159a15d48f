"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import (
	auth,
	content,
	exec_activity,
	members,
	ops,
	public,
	recruitment,
	teams,
)
from app.api.errors import install_error_handlers
from app.api.request_id import RequestIdMiddleware
from app.infra import pocketbase
from app.infra.redis import redis_client
from app.obs import init as obs_init
from app.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
	await pocketbase.init_client()
	try:
		yield
	finally:
		await pocketbase.close_client()
		await redis_client.close()


app = FastAPI(title="NodeX Portal", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(getattr(settings, "cors_allow_origins", []))
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else ["https://nodex.example"]

# Starlette disallows wildcard '*' with allow_credentials=True. Replace '*' with explicit origins.
if "*" in allow_origins:
	if settings.is_dev():
		allow_origins = [
			"http://localhost:3000",
			"http://127.0.0.1:3000",
		]
	else:
		allow_origins = ["https://nodex.example"]

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

obs_init(app)

# Ensure every request carries an X-Request-Id and make it available on request.state
app.add_middleware(RequestIdMiddleware)


app.include_router(auth.router)
app.include_router(recruitment.router)
app.include_router(teams.router)
app.include_router(members.router)
app.include_router(content.router)
app.include_router(exec_activity.router)
app.include_router(public.router)
app.include_router(ops.router)
