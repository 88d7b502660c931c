"""
FastAPI веб-интерфейс translate_desk.

Страницы:
  /            — Список ключей: фильтры, пагинация, форма перевода
  /translate   — POST: сохранение переводов, редирект обратно на список
  /api/keys    — Тот же список в JSON
  /health      — Health check (JSON)

Запуск:
  python -m uvicorn translate_desk.web.app:app --host 0.0.0.0 --port 8000
"""

import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .. import __version__
from ..config import Settings, load_settings
from ..errors import (BackendWriteFailure, InvalidFilterKind, InvalidKeyPath,
                      InvalidPageRequest, SnapshotUnavailable)
from ..i18n.paginator import PageResult
from ..i18n.service import BrowseRequest, TranslationService, build_service

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# Параметры фильтров, которые переносятся в редирект после сохранения
FILTER_PARAMS = ("filter", "sort_by", "key_type", "key_pattern",
                 "text_type", "text_pattern")


def _browse_request(from_locale, to_locale, page, key_pattern, key_type,
                    filter, text_pattern, text_type, sort_by) -> BrowseRequest:
    return BrowseRequest(
        from_locale=from_locale or None,
        to_locale=to_locale or None,
        page=page,
        key_pattern=key_pattern or None,
        key_type=key_type or None,
        filter=filter or None,
        text_pattern=text_pattern or None,
        text_type=text_type or None,
        sort_by=sort_by or None,
    )


def _edits_from_form(form) -> dict:
    """Поля формы key[<ключ>] -> {ключ: значение}."""
    edits = {}
    for name, value in form.multi_items():
        if name.startswith("key[") and name.endswith("]"):
            edits[name[4:-1]] = value
    return edits


def create_app(settings: Optional[Settings] = None,
               service: Optional[TranslationService] = None) -> FastAPI:
    """Создаёт приложение. service можно передать готовым (тесты, встраивание)."""
    app = FastAPI(title="translate-desk", version=__version__)
    if service is None:
        service = build_service(settings or load_settings())
    app.state.service = service

    # ══════════════════════════════════════════════════
    #  Ошибки
    # ══════════════════════════════════════════════════

    @app.exception_handler(InvalidFilterKind)
    @app.exception_handler(InvalidPageRequest)
    @app.exception_handler(InvalidKeyPath)
    async def bad_request(request: Request, exc):
        return JSONResponse(exc.to_dict(), status_code=400)

    @app.exception_handler(SnapshotUnavailable)
    async def snapshot_unavailable(request: Request, exc):
        return JSONResponse(exc.to_dict(), status_code=503)

    @app.exception_handler(BackendWriteFailure)
    async def write_failure(request: Request, exc):
        return JSONResponse(exc.to_dict(), status_code=500)

    # ══════════════════════════════════════════════════
    #  Health check
    # ══════════════════════════════════════════════════

    @app.get("/health", response_class=JSONResponse)
    async def health():
        return {"status": "ok", "service": "translate-desk"}

    # ══════════════════════════════════════════════════
    #  Список ключей
    # ══════════════════════════════════════════════════

    @app.get("/", response_class=HTMLResponse)
    async def index(
        request: Request,
        from_locale: str = "",
        to_locale: str = "",
        page: int = 1,
        key_pattern: str = "",
        key_type: str = "",
        filter: str = "",
        text_pattern: str = "",
        text_type: str = "",
        sort_by: str = "",
    ):
        svc: TranslationService = request.app.state.service
        browse = _browse_request(from_locale, to_locale, page, key_pattern,
                                 key_type, filter, text_pattern, text_type, sort_by)
        params = {name: getattr(browse, name) or "" for name in FILTER_PARAMS}
        warning = None
        try:
            result = svc.browse(browse)
        except SnapshotUnavailable as exc:
            # Страница не падает: пустой список и предупреждение
            logger.warning("Фильтр changed недоступен: %s", exc.message)
            warning = exc.message
            browse.filter = None
            result = svc.browse(browse)
            result.keys = set()
            result.page = PageResult((), 0, result.page.page_number,
                                     result.page.page_size)

        params.update(from_locale=result.from_locale, to_locale=result.to_locale)

        return templates.TemplateResponse(request, "translate.html", {
            "result": result,
            "rows": result.rows(),
            "locales": sorted(svc.backend.available_locales()),
            "params": params,
            "query": lambda **kw: urlencode({**params, **kw}),
            "warning": warning,
        })

    @app.get("/api/keys", response_class=JSONResponse)
    async def api_keys(
        request: Request,
        from_locale: str = "",
        to_locale: str = "",
        page: int = 1,
        per_page: Optional[int] = None,
        key_pattern: str = "",
        key_type: str = "",
        filter: str = "",
        text_pattern: str = "",
        text_type: str = "",
        sort_by: str = "",
    ):
        svc: TranslationService = request.app.state.service
        browse = _browse_request(from_locale, to_locale, page, key_pattern,
                                 key_type, filter, text_pattern, text_type, sort_by)
        browse.per_page = per_page
        return svc.browse(browse).to_dict()

    # ══════════════════════════════════════════════════
    #  Сохранение переводов
    # ══════════════════════════════════════════════════

    @app.post("/translate")
    async def translate(request: Request):
        svc: TranslationService = request.app.state.service
        form = await request.form()
        from_locale = form.get("from_locale") or ""
        to_locale = form.get("to_locale") or ""
        resolved_from, resolved_to = svc.resolve_locales(from_locale, to_locale)

        ack = svc.translate(resolved_from, resolved_to, _edits_from_form(form))

        query = {"from_locale": ack.from_locale, "to_locale": ack.to_locale}
        for name in FILTER_PARAMS:
            if form.get(name):
                query[name] = form.get(name)
        return RedirectResponse(f"/?{urlencode(query)}", status_code=303)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("TRANSLATE_DESK_PORT", 8000))
    host = os.getenv("TRANSLATE_DESK_HOST", "127.0.0.1")
    print(f"\n🌐 translate-desk -> http://localhost:{port}/")
    uvicorn.run("translate_desk.web.app:app", host=host, port=port)
