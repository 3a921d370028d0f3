# questionnaire/router.py
from __future__ import annotations

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from .cache import SourceCache
from .config import Settings
from .errors import PersistenceError
from .fields import build_fields
from .forms import FormInstance, raw_values_from_form
from .locale import locale_from_path
from .messages import MessageCatalog, load_catalog
from .render import render_error_page, render_form_page, render_thank_you_page
from .schema import QuestionSchema, load_schema
from .store import save_answers

logger = logging.getLogger(__name__)

router = APIRouter()


def load_sources(settings: Settings, cache: Optional[SourceCache]) -> Tuple[QuestionSchema, MessageCatalog]:
    return (
        load_schema(settings.questions_path, cache),
        load_catalog(settings.messages_path, cache),
    )


def build_form(schema: QuestionSchema, catalog: MessageCatalog, locale: str) -> FormInstance:
    return FormInstance(build_fields(schema.questions_for(locale), locale, catalog))


@router.api_route(
    "/{locale_path:path}",
    methods=["GET", "POST"],
    response_class=HTMLResponse,
    summary="Render the questionnaire (GET) or submit answers (POST)",
)
async def questionnaire(request: Request, locale_path: str) -> HTMLResponse:
    settings: Settings = request.app.state.settings
    cache: Optional[SourceCache] = request.app.state.source_cache

    locale = locale_from_path(locale_path, supported=settings.locales, default=settings.default_locale)

    # ConfigurationError propagates to the app-level handler (500 page)
    schema, catalog = await run_in_threadpool(load_sources, settings, cache)
    form = build_form(schema, catalog, locale)

    if request.method == "POST":
        form.bind(raw_values_from_form(await request.form()))

    # invalid submissions are re-rendered with status 200, like a fresh form
    if request.method != "POST" or not form.is_valid():
        return HTMLResponse(render_form_page(form, locale, catalog, settings.web_root))

    # catalog problems must surface before anything is written
    thank_you = render_thank_you_page(locale, catalog, settings.web_root)
    failure = render_error_page(catalog.lookup(locale, "saveFailed"), locale)

    logger.info("[Questionnaire] cleaned answers (locale=%s): %s", locale, form.cleaned_data)
    try:
        await run_in_threadpool(save_answers, form.cleaned_data, settings.answers_dir)
    except PersistenceError as e:
        logger.error("[Questionnaire] failed to save answers: %s", e)
        return HTMLResponse(failure, status_code=503)

    return HTMLResponse(thank_you)
