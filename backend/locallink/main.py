"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from locallink.api import auth, home, launch, ops
from locallink.api.errors import install_error_handlers
from locallink.domain.nearby import registry
from locallink.infra.redis import redis_client
from locallink.obs import init as obs_init
from locallink.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
	try:
		yield
	finally:
		# Release every fix subscription before the loop goes away
		await registry.shutdown()
		await redis_client.aclose()


app = FastAPI(title="LocalLink API", lifespan=lifespan)

if settings.cors_allow_origins:
	app.add_middleware(
		CORSMiddleware,
		allow_origins=list(settings.cors_allow_origins),
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)

obs_init(app)
install_error_handlers(app)

app.include_router(ops.router)
app.include_router(launch.router)
app.include_router(auth.router)
app.include_router(home.router)
