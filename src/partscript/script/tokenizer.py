"""
Script line tokenizer.

A Cursor walks an immutable line and hands out tokens terminated by a
blank, ``,``, ``;`` or the end of the line. One level of double quotes is
honored; the quotes are not part of the returned token.
"""

from __future__ import annotations

BLANKS = " \t"
TERMINATORS = ",;"


class Cursor:
    """Single pass reader over one script line."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor({self.rest!r})"

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.pos :]

    def peek(self) -> str:
        """Current character, or '' at the end of the line."""
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self, n: int = 1) -> None:
        self.pos = min(self.pos + n, len(self.text))

    def skip_blank(self) -> None:
        self.pos = _skip_blank(self.text, self.pos)

    def startswith_ci(self, prefix: str) -> bool:
        end = self.pos + len(prefix)
        return self.text[self.pos : end].lower() == prefix.lower()

    def consume_ci(self, prefix: str) -> bool:
        """Skip ``prefix`` (case-insensitive) if the cursor is on it."""
        if self.startswith_ci(prefix):
            self.pos += len(prefix)
            return True
        return False

    def next_token(self) -> str | None:
        """
        Return the next token and move past its terminator.

        Returns None if no properly terminated token follows, e.g. for an
        unterminated quote or a closing quote glued to more text. The cursor
        does not move in that case.
        """
        s = self.text
        n = len(s)
        tk_begin: int | None = None
        tk_end: int | None = None
        open_quote = False

        p = self.pos
        while p < n:
            c = s[p]
            if tk_begin is None:
                if c in BLANKS:
                    p += 1
                    continue
                tk_begin = p + 1 if c == '"' else p
            if c == '"':
                open_quote = not open_quote
            if not open_quote:
                if c in BLANKS or c in TERMINATORS or c == '"':
                    tk_end = p
                elif p + 1 == n:
                    tk_end = p + 1
                if tk_end is not None:
                    break
            p += 1

        if tk_begin is None or tk_end is None:
            return None

        end = tk_end
        if end < n and s[end] == '"':
            end += 1

        terminated = 0
        if end < n and s[end] in BLANKS:
            end = _skip_blank(s, end)
            terminated += 1
        if end < n and s[end] in TERMINATORS:
            end += 1
            terminated += 1
        elif end >= n:
            terminated += 1

        if not terminated:
            return None

        self.pos = _skip_blank(s, end)
        return s[tk_begin:tk_end]


def _skip_blank(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos] in BLANKS:
        pos += 1
    return pos


def tokenize(line: str) -> list[str]:
    """Split a whole line into tokens; stops at the first malformed one."""
    cursor = Cursor(line)
    tokens: list[str] = []
    while not cursor.at_end:
        token = cursor.next_token()
        if token is None:
            break
        tokens.append(token)
    return tokens
