"""Stylesheet transforms — structured styles <-> Waybar CSS.

Serialization emits one block per enabled style that has declarations::

    selector {
      property: value !important;
    }

Parsing runs a small tokenizer first (comments dropped; strings and
parenthesised groups kept opaque so ``;`` and braces inside them do not
split anything), then walks the token stream. Anything the structured
model cannot represent — at-rules such as ``@define-color``, nested
blocks, declarations without a colon, unbalanced braces — becomes a
warning and parsing continues.
"""

from __future__ import annotations

from dataclasses import dataclass

from waybarctl.domain.models import CSSProperty, StyleDefinition
from waybarctl.domain.native import TransformResult

IMPORTANT_SUFFIX = "!important"

_LBRACE = "{"
_RBRACE = "}"
_SEMI = ";"
_TEXT = "text"


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _format_property(prop: CSSProperty) -> str:
    important = f" {IMPORTANT_SUFFIX}" if prop.important else ""
    return f"  {prop.property}: {prop.value}{important};"


def styles_to_css(styles: list[StyleDefinition]) -> str:
    """Render enabled, non-empty styles as CSS blocks separated by a blank line."""
    blocks: list[str] = []
    for style in styles:
        if not style.enabled or not style.properties:
            continue
        body = "\n".join(_format_property(p) for p in style.properties)
        blocks.append(f"{style.selector} {{\n{body}\n}}")
    return "\n\n".join(blocks)


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    line: int


def _skip_string(css: str, start: int) -> int:
    """Return the index just past the string literal opening at *start*."""
    quote = css[start]
    i = start + 1
    while i < len(css):
        ch = css[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote or ch == "\n":
            return i + 1
        i += 1
    return len(css)


def _tokenize(css: str, warnings: list[str]) -> list[_Token]:
    tokens: list[_Token] = []
    buf: list[str] = []
    buf_line = 1
    line = 1
    depth = 0  # parenthesis nesting
    i = 0

    def flush() -> None:
        if buf:
            tokens.append(_Token(_TEXT, "".join(buf), buf_line))
            buf.clear()

    while i < len(css):
        ch = css[i]
        if css.startswith("/*", i):
            end = css.find("*/", i + 2)
            if end == -1:
                warnings.append(f"Unterminated comment starting on line {line}")
                break
            line += css.count("\n", i, end)
            i = end + 2
            continue

        if not buf:
            buf_line = line

        if ch in "\"'":
            end = _skip_string(css, i)
            buf.append(css[i:end])
            line += css.count("\n", i, end)
            i = end
            continue
        if ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        elif depth == 0 and ch in (_LBRACE, _RBRACE, _SEMI):
            flush()
            tokens.append(_Token(ch, ch, line))
            i += 1
            continue

        if ch == "\n":
            line += 1
        buf.append(ch)
        i += 1

    flush()
    return tokens


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _parse_declaration(segment: str, warnings: list[str]) -> CSSProperty | None:
    text = segment.strip()
    if not text:
        return None
    prop, sep, value = text.partition(":")
    if not sep:
        warnings.append(f'Invalid CSS property: "{text}"')
        return None
    value = value.strip()
    important = False
    if value.endswith(IMPORTANT_SUFFIX):
        important = True
        value = value[: -len(IMPORTANT_SUFFIX)].strip()
    return CSSProperty(property=prop.strip(), value=value, important=important)


class _Parser:
    def __init__(self, tokens: list[_Token], warnings: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._warnings = warnings

    def _next(self) -> _Token | None:
        if self._pos >= len(self._tokens):
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _skip_block(self) -> bool:
        """Consume tokens up to the ``}`` closing an already-opened block."""
        depth = 1
        while (token := self._next()) is not None:
            if token.kind == _LBRACE:
                depth += 1
            elif token.kind == _RBRACE:
                depth -= 1
                if depth == 0:
                    return True
        return False

    def _declarations(self, selector: str) -> list[CSSProperty]:
        properties: list[CSSProperty] = []
        segment: list[str] = []

        def finish() -> None:
            prop = _parse_declaration("".join(segment), self._warnings)
            if prop is not None:
                properties.append(prop)
            segment.clear()

        while (token := self._next()) is not None:
            if token.kind == _TEXT:
                segment.append(token.value)
            elif token.kind == _SEMI:
                finish()
            elif token.kind == _RBRACE:
                finish()
                return properties
            else:
                nested = "".join(segment).strip()
                self._warnings.append(
                    f'Nested block "{nested}" inside "{selector}" on line {token.line} skipped'
                )
                segment.clear()
                if not self._skip_block():
                    break

        finish()
        self._warnings.append(f'Unterminated block for selector "{selector}"')
        return properties

    def parse(self) -> list[StyleDefinition]:
        styles: list[StyleDefinition] = []
        prelude: list[str] = []

        while (token := self._next()) is not None:
            if token.kind == _TEXT:
                prelude.append(token.value)
                continue

            text = "".join(prelude).strip()
            prelude.clear()
            if token.kind == _SEMI:
                if text:
                    self._warnings.append(f'Statement "{text}" on line {token.line} skipped')
            elif token.kind == _RBRACE:
                self._warnings.append(f"Unexpected '}}' on line {token.line}")
            elif text.startswith("@"):
                self._warnings.append(f'At-rule block "{text}" on line {token.line} skipped')
                self._skip_block()
            elif not text:
                self._warnings.append(f"Block without selector on line {token.line} skipped")
                self._skip_block()
            else:
                properties = self._declarations(text)
                if properties:
                    styles.append(
                        StyleDefinition(
                            name=f"Style for {text}",
                            selector=text,
                            properties=properties,
                        )
                    )
                else:
                    self._warnings.append(f'Rule "{text}" has no properties')

        trailing = "".join(prelude).strip()
        if trailing:
            self._warnings.append(f'Ignored trailing text "{trailing}"')
        return styles


def css_to_styles(css: str) -> TransformResult[list[StyleDefinition]]:
    """Parse CSS into style definitions, collecting diagnostics as warnings."""
    warnings: list[str] = []
    styles = _Parser(_tokenize(css, warnings), warnings).parse()
    if not styles and css.strip():
        warnings.append("No valid CSS rules could be parsed from the input")
    return TransformResult(data=styles, warnings=warnings)
