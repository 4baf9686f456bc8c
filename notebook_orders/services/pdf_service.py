"""
notebook_orders.services.pdf_service
HTML -> PDF bytes.
Order (default): xhtml2pdf -> WeasyPrint -> pdfkit(wkhtmltopdf)
The preferred engine (settings.NOTEBOOK_PDF_ENGINE or engine=...) is tried first,
the rest of the chain after it.
"""
import logging
from io import BytesIO

from django.conf import settings

from notebook_orders.exceptions import GenerationFailed

log = logging.getLogger("refillstore")

ENGINE_CHAIN = ("xhtml2pdf", "weasyprint", "pdfkit")

REPLACEMENTS = {
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2212": "-",  # minus sign
    "\u00A0": " ",  # nbsp
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201C": '"',  # left double quote
    "\u201D": '"',  # right double quote
    "\u2022": "*",  # bullet
}


def _sanitize(html: str) -> str:
    for k, v in REPLACEMENTS.items():
        if k in html:
            html = html.replace(k, v)
    return html


def engine_chain(preferred: str | None = None) -> list[str]:
    preferred = (preferred or getattr(settings, "NOTEBOOK_PDF_ENGINE", "") or "").strip().lower()
    if preferred not in ENGINE_CHAIN:
        return list(ENGINE_CHAIN)
    return [preferred] + [e for e in ENGINE_CHAIN if e != preferred]


def _xhtml2pdf(html: str, base_url: str | None) -> bytes:
    from xhtml2pdf import pisa  # type: ignore
    out = BytesIO()
    # reportlab base fonts have no glyphs for typographic punctuation
    result = pisa.CreatePDF(src=_sanitize(html), dest=out, encoding="utf-8", path=base_url)
    if result.err:
        raise RuntimeError(f"xhtml2pdf reported {result.err} error(s)")
    return out.getvalue()


def _weasyprint(html: str, base_url: str | None) -> bytes:
    from weasyprint import HTML  # type: ignore
    return HTML(string=html, base_url=base_url).write_pdf()


def _pdfkit(html: str, base_url: str | None) -> bytes:
    import pdfkit  # type: ignore
    try:
        config = pdfkit.configuration(wkhtmltopdf=getattr(settings, "WKHTMLTOPDF_PATH", "/usr/bin/wkhtmltopdf"))
    except OSError:
        config = None
    options = {"page-size": "A5", "encoding": "UTF-8", "quiet": ""}
    return pdfkit.from_string(html, False, configuration=config, options=options)


ENGINES = {
    "xhtml2pdf": _xhtml2pdf,
    "weasyprint": _weasyprint,
    "pdfkit": _pdfkit,
}


def render_pdf_from_html(html: str, base_url: str | None = None, engine: str | None = None):
    """
    Returns: (pdf_bytes: bytes, engine_used: str)
    Raises GenerationFailed when no engine in the chain produced a document; the
    message carries each engine's reason.
    """
    errors = {}
    for name in engine_chain(engine):
        try:
            pdf_bytes = ENGINES[name](html, base_url)
        except Exception as e:  # missing library or render error: fall through to the next engine
            errors[name] = str(e) or e.__class__.__name__
            log.warning("[pdf] engine %s unavailable: %s", name, errors[name])
            continue
        if not pdf_bytes:
            errors[name] = "empty document"
            continue
        return pdf_bytes, name

    raise GenerationFailed(f"PDF render failed. errors={errors}")
