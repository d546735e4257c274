import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Routers
from .routers.prediction import router as prediction_router
from .routers.listings import router as listings_router
from .routers.chat import router as chat_router
from .routers.pages import router as pages_router

# Core modules
from .core.config import settings
from .core.errors import register_error_handlers
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

def create_app() -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    """
    configure_logging()  # Set up JSON logs + correlation-id filter

    app = FastAPI(
        title="EstateMate Gateway",
        version="1.0.0",
        description="Gateway for listings, chat, price prediction and recommendations, plus the static site.",
    )

    # CORS: allow the static site (or another origin) to call the API.
    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    register_error_handlers(app)

    # Meta routes
    @app.get("/api/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        # Standard Prometheus scrape endpoint
        app.add_route("/api/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(listings_router, prefix="/api", tags=["listings"])
    app.include_router(chat_router, prefix="/api", tags=["chat"])
    app.include_router(prediction_router, prefix="/api", tags=["prediction"])

    # Site pages, then any other file under WEB_ROOT
    app.include_router(pages_router)
    if os.path.isdir(settings.WEB_ROOT):
        app.mount("/", StaticFiles(directory=settings.WEB_ROOT), name="static")

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
