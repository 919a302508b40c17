import logging
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError, TemplateSyntaxError, Undefined

from . import nonce
from .errors import AttestIOError, TemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)


def load_template(path, encoding: str = "utf-8") -> str:
    """Read a template exactly as stored; line endings are not translated."""
    p = Path(path)
    try:
        return p.read_bytes().decode(encoding)
    except FileNotFoundError as e:
        raise TemplateNotFoundError(f"Template not found: {p}", path=p) from e
    except (OSError, UnicodeDecodeError) as e:
        raise AttestIOError(f"Cannot read template {p}: {e}", path=p) from e


def newline_of(text: str) -> str:
    if "\r\n" in text:
        return "\r\n"
    if "\r" in text:
        return "\r"
    return "\n"


class _FieldEnvironment(Environment):
    # dotted lookups on the model only see its keys, never dict methods like `keys` or `items`
    def getattr(self, obj, attribute):
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except KeyError:
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


class Renderer:
    """Plain-text Jinja2 rendering.

    escape: HTML-escape substituted values (off: attestations are text, not markup).
    strict: a placeholder that resolves to nothing is an error instead of an empty string.

    Output keeps the template's line ending style (CRLF, CR or LF).
    """

    def __init__(self, escape: bool = False, strict: bool = True):
        self.escape = escape
        self.strict = strict
        self.env = _FieldEnvironment(
            autoescape=escape,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict else Undefined,
        )
        self.env.filters["wrap"] = nonce.wrap

    def render(self, template_text: str, model: Mapping[str, Any]) -> str:
        newline = newline_of(template_text)
        env = self.env if newline == "\n" else self.env.overlay(newline_sequence=newline)
        try:
            return env.from_string(template_text).render(**model)
        except TemplateSyntaxError as e:
            raise TemplateError(f"Template syntax error on line {e.lineno}: {e.message}", lineno=e.lineno) from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}") from e
