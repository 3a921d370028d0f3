import logging
import sys
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from questionnaire.cache import SourceCache
from questionnaire.checks import check_sources
from questionnaire.config import Settings, load_settings
from questionnaire.errors import ConfigurationError, PersistenceError
from questionnaire.locale import locale_from_path
from questionnaire.render import render_unavailable_page
from questionnaire.router import router as questionnaire_router
from questionnaire.store import init_store


def _debug(msg: str) -> None:
    print(msg, flush=True)


# ---------------------------------------------------------------------
# Swagger / OpenAPI metadata
# ---------------------------------------------------------------------
tags_metadata = [
    {"name": "questionnaire", "description": "Localized questionnaire form and answer submission."},
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="Questionnaire",
        description=(
            "Serves a localized questionnaire built from a JSON question schema. "
            "The first path segment selects the locale (e.g. /en, /ar)."
        ),
        version="1.0.0",
        openapi_tags=tags_metadata,
    )
    app.state.settings = settings
    app.state.source_cache = SourceCache() if settings.cache_sources else None

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logging.getLogger("questionnaire").error("[Questionnaire] configuration error: %s", exc)
        return HTMLResponse(
            render_unavailable_page(
                locale_from_path(request.url.path, supported=settings.locales, default=settings.default_locale)
            ),
            status_code=500,
        )

    app.include_router(questionnaire_router, tags=["questionnaire"])
    return app


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s:%(name)s:%(message)s")

    try:
        settings = load_settings(sys.argv[1:] if argv is None else argv)
        check_sources(settings)
        init_store(settings.answers_dir)
        host, port = settings.host_port()
    except (ConfigurationError, PersistenceError) as e:
        _debug(f"[Startup] Refusing to start: {e}")
        return 1

    _debug(f"[Startup] Questions: {settings.questions_path}")
    _debug(f"[Startup] Messages: {settings.messages_path}")
    _debug(f"[Startup] Answers directory: {settings.answers_dir}")
    _debug(f"[Startup] Locales: {', '.join(settings.locales)} (default {settings.default_locale})")
    _debug(f"[Startup] Launching FastAPI on {host}:{port} ...")
    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
