import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from config import Settings, get_settings
from api.v1.router import api_router
from services.gemini import MealPlanGenerator

_LOG = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    generator: MealPlanGenerator | None = None,
) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Forza Fuel API", version="1.0.0")

    if generator is None and settings.gemini_api_key:
        generator = MealPlanGenerator(settings)
    if generator is None:
        _LOG.warning("GEMINI_API_KEY not set – /plans will answer 503")
    app.state.settings = settings
    app.state.generator = generator

    # CORS (public site embeds the form)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app(get_settings())
