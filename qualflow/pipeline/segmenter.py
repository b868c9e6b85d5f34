from __future__ import annotations
from typing import List
from ..models.schemas import TextSegment
from ..utils import text_utils

def segment_text(text: str, max_chars: int = 500) -> List[TextSegment]:
    """Split text into codeable units.

    Paragraphs are separated by blank lines. A paragraph longer than
    ``max_chars`` (after trimming) is broken into sentences. Each segment keeps
    the character range it occupies in ``text``.
    """
    segs: List[TextSegment] = []
    for p_start, p_end in text_utils.paragraph_spans(text or ""):
        start, end = text_utils.strip_span(text, p_start, p_end)
        if start == end:
            continue
        if end - start > max_chars:
            pieces = text_utils.sentence_spans(text[start:end], offset=start)
        else:
            pieces = [(start, end)]
        for s_start, s_end in pieces:
            s_start, s_end = text_utils.strip_span(text, s_start, s_end)
            if s_start < s_end:
                segs.append(TextSegment(text=text[s_start:s_end], start=s_start, end=s_end))
    return segs
