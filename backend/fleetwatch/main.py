from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import load_config
from .routers import dashboard
from .services.view import DashboardView

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

app = FastAPI(title="Fleetwatch")


@app.on_event("startup")
async def on_startup() -> None:
    view = DashboardView(load_config())
    app.state.view = view
    await view.activate()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    view = getattr(app.state, "view", None)
    if view is not None:
        await view.deactivate()
        app.state.view = None


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

app.include_router(dashboard.router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
