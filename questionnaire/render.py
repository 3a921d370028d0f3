# questionnaire/render.py
from __future__ import annotations

from html import escape
from typing import List

from .fields import BaseField
from .forms import FormInstance
from .locale import text_direction
from .messages import MessageCatalog


_STYLE = """
    body {
      margin: 0;
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
      background: #f5f7fa;
      color: #333;
    }
    .container {
      max-width: 800px;
      margin: 4rem auto;
      background: #ffffff;
      padding: 2.5rem;
      border-radius: 8px;
      box-shadow: 0 4px 12px rgba(0,0,0,0.05);
    }
    .question { margin: 1.5rem 0; }
    .question label.title { display: block; font-weight: 600; margin-bottom: 0.4rem; }
    .required-marker { color: #c0392b; }
    .error { color: #c0392b; font-size: 0.9rem; margin-top: 0.3rem; }
    .button {
      display: inline-block;
      padding: 0.6rem 1.2rem;
      background-color: #007ACC;
      color: #fff;
      border: 0;
      font-weight: 500;
      border-radius: 4px;
    }
"""


def _page(locale: str, title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{escape(locale)}" dir="{text_direction(locale)}">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{escape(title)}</title>\n"
        f"  <style>{_STYLE}  </style>\n"
        "</head>\n"
        "<body>\n"
        '  <div class="container">\n'
        f"{body}"
        "  </div>\n"
        "</body>\n"
        "</html>\n"
    )


def _attrs(field: BaseField) -> str:
    return "".join(f' {escape(k)}="{escape(v)}"' for k, v in sorted(field.attrs.items()))


def _choice_widget(field: BaseField, values: List[str]) -> str:
    chosen = set(values)
    items = []
    for i, opt in enumerate(field.options):
        checked = opt.value in chosen or (not values and opt.selected_by_default)
        input_id = f"{field.name}_{i}"
        items.append(
            f'<label for="{escape(input_id)}">'
            f'<input type="{field.widget}" id="{escape(input_id)}" name="{escape(field.name)}" '
            f'value="{escape(opt.value)}"'
            f'{" checked" if checked else ""}{" disabled" if opt.disabled else ""}> '
            f"{escape(opt.display)}</label>"
        )
    return f"<div{_attrs(field)}>" + "<br>".join(items) + "</div>"


def render_widget(field: BaseField, values: List[str]) -> str:
    if field.options or field.widget in ("radio", "checkbox"):
        return _choice_widget(field, values)
    value = values[0] if values else ""
    return (
        f'<input type="{field.widget}" id="{escape(field.name)}" name="{escape(field.name)}" '
        f'value="{escape(value)}">'
    )


def render_field(form: FormInstance, field: BaseField) -> str:
    marker = ' <span class="required-marker">*</span>' if field.required else ""
    error = form.error_for(field.name)
    error_html = f'<div class="error">{escape(error)}</div>' if error else ""
    return (
        '    <div class="question">\n'
        f'      <label class="title" for="{escape(field.name)}">{escape(field.label)}{marker}</label>\n'
        f"      {render_widget(field, form.values_for(field.name))}\n"
        + (f"      {error_html}\n" if error_html else "")
        + "    </div>\n"
    )


def render_form_page(form: FormInstance, locale: str, catalog: MessageCatalog, root: str) -> str:
    # catalog strings are trusted markup
    explanation = catalog.lookup(locale, "questionnaireExplanation")
    required_fields = catalog.lookup(locale, "requiredFields")
    scale = catalog.lookup(locale, "scaleExplanation")
    action = root.rstrip("/") + "/" + locale

    body = (
        f"    <p>{explanation}</p>\n"
        f"    <p>{required_fields}</p>\n"
        f"    <p>{scale}</p>\n"
        f'    <form method="post" action="{escape(action)}">\n'
        + "".join(render_field(form, f) for f in form.fields)
        + '    <input class="button" type="submit" value="&#10003;">\n'
        "    </form>\n"
    )
    return _page(locale, "Questionnaire", body)


def render_thank_you_page(locale: str, catalog: MessageCatalog, root: str) -> str:
    return _page(locale, "Questionnaire", f"    <p>{catalog.thank_you_message(locale, root)}</p>\n")


# used when the catalog itself cannot be trusted
UNAVAILABLE_MESSAGES = {
    "en": "The questionnaire is not available right now.",
    "ar": "الاستبيان غير متاح حاليًا.",
}


def render_unavailable_page(locale: str) -> str:
    message = UNAVAILABLE_MESSAGES.get(locale)
    if message is None:
        locale, message = "en", UNAVAILABLE_MESSAGES["en"]
    return render_error_page(message, locale)


def render_error_page(message: str, locale: str = "en") -> str:
    return _page(locale, "Questionnaire", f'    <p class="error">{escape(message)}</p>\n')
