"""Jinja2 message catalog for user visible strings built from data."""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from expense_search.exceptions import TemplateRenderError

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "common.hidden": "Hidden",
        "common.distance": "Distance",
        "common.card": "Card",
        "iou.cash": "Cash",
        "iou.payerOwesAmount": "{{ payer }} owes {{ amount }}",
        "iou.payerPaidAmount": "{{ payer }} paid {{ amount }}",
    },
    "es": {
        "common.hidden": "Oculto",
        "common.distance": "Distancia",
        "common.card": "Tarjeta",
        "iou.cash": "Efectivo",
        "iou.payerOwesAmount": "{{ payer }} debe {{ amount }}",
        "iou.payerPaidAmount": "{{ payer }} pagó {{ amount }}",
    },
}

# Set by cli.py from the [display] locale setting
_locale: str = DEFAULT_LOCALE


def _make_env() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )


_env = _make_env()


def set_locale(locale: str) -> None:
    """Select the catalog used by :func:`translate`; unknown locales fall back to English."""
    global _locale
    _locale = locale if locale in MESSAGES else DEFAULT_LOCALE


def get_locale() -> str:
    return _locale


def translate(key: str, **params: object) -> str:
    """Render a catalog message for the active locale.

    Keys missing from the active catalog fall back to English, and keys
    missing from English render as the key itself.

    Raises:
        TemplateRenderError: If the message needs a parameter that was not given.
    """
    template_str = MESSAGES[_locale].get(key) or MESSAGES[DEFAULT_LOCALE].get(key)
    if template_str is None:
        return key
    try:
        return _env.from_string(template_str).render(**params)
    except (TemplateSyntaxError, UndefinedError) as e:
        raise TemplateRenderError(f"Cannot render message '{key}': {e}") from e
