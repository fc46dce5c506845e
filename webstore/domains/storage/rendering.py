import html
import json
import mimetypes
from typing import Any, Protocol

from fastapi.responses import HTMLResponse, Response

# Расширения, которых нет в стандартной таблице mimetypes
MIME_OVERRIDES = {
    "pl": "text/x-prolog",
    "swinb": "text/x-prolog-notebook",
}


def file_mime_type(name: str) -> str:
    """MIME-тип по расширению имени файла"""
    _, _, extension = name.rpartition(".")
    if extension in MIME_OVERRIDES:
        return MIME_OVERRIDES[extension]
    mime, _ = mimetypes.guess_type(name)
    return mime or "text/plain"


class DocumentRenderer(Protocol):
    """Представление документа для браузера"""

    def render(self, identifier: str, data: str, meta: dict[str, Any]) -> Response:
        ...


class HTMLDocumentRenderer:
    """Минимальная HTML-страница с содержимым и метаданными"""

    def render(self, identifier: str, data: str, meta: dict[str, Any]) -> Response:
        title = meta.get("title") or meta.get("name") or identifier
        # "</" внутри JSON закрыл бы тег script
        meta_json = json.dumps(meta, sort_keys=True).replace("</", "<\\/")
        page = (
            "<!DOCTYPE html>\n"
            "<html>\n"
            f"<head><meta charset=\"utf-8\"><title>{html.escape(str(title))}</title></head>\n"
            "<body>\n"
            f"<h1>{html.escape(str(title))}</h1>\n"
            f"<pre class=\"code\" data-file=\"{html.escape(identifier)}\">{html.escape(data)}</pre>\n"
            f"<script type=\"application/json\" id=\"meta\">{meta_json}</script>\n"
            "</body>\n"
            "</html>\n"
        )
        return HTMLResponse(page)
