from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lotshoppr.api.routes import router
from lotshoppr.api.lead_routes import lead_router
from lotshoppr.database.db import init_db
from lotshoppr.config.settings import get_settings

settings = get_settings()


def create_app() -> FastAPI:
    # Disable Swagger/ReDoc in production
    docs_kwargs = {}
    if settings.is_production:
        docs_kwargs = {"docs_url": None, "redoc_url": None}

    app = FastAPI(
        title="LotShoppr API",
        description="Dealer outreach and offer negotiation for car shoppers",
        version="0.1.0",
        **docs_kwargs,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    app.include_router(router, prefix="/api/v1")
    app.include_router(lead_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok", "version": "0.1.0"}

    @app.on_event("startup")
    def on_startup():
        settings.validate_production()
        if not settings.is_deployed:
            init_db()  # Deployed envs use: alembic upgrade head

    return app


app = create_app()
