import re
from typing import Iterator, List, Tuple

_PARAGRAPH_BREAK = re.compile(r"\n[ \t\r\f\v]*\n\s*")
_SENTENCE = re.compile(r"[^.!?]+(?:[.!?]+|$)")
_NAME_SEPARATORS = re.compile(r"[-_\s]+")
_WHITESPACE = re.compile(r"\s+")

Span = Tuple[int, int]


def paragraph_spans(text: str) -> Iterator[Span]:
    """Yield (start, end) of each blank-line separated paragraph, untrimmed."""
    start = 0
    for match in _PARAGRAPH_BREAK.finditer(text):
        yield start, match.start()
        start = match.end()
    yield start, len(text)


def sentence_spans(text: str, offset: int = 0) -> Iterator[Span]:
    for match in _SENTENCE.finditer(text):
        yield offset + match.start(), offset + match.end()


def strip_span(text: str, start: int, end: int) -> Span:
    """Narrow a span so that it excludes surrounding whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def name_tokens(name: str) -> List[str]:
    return [t for t in _NAME_SEPARATORS.split(name or "") if t]


def slugify(phrase: str) -> str:
    return _WHITESPACE.sub("-", phrase.strip().lower())


def excerpt(text: str, max_chars: int) -> str:
    return text[:max_chars]
