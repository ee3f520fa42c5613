"""Mark search-term matches inside a title."""
import re


def highlight(text: str, term: str, open_tag: str = "<mark>", close_tag: str = "</mark>") -> str:
    """
    Wrap every case-insensitive occurrence of ``term`` in ``text``.

    The term is matched literally and matched characters keep their
    original casing. An empty term returns ``text`` unchanged.

    >>> highlight("The Great Gatsby", "great")
    'The <mark>Great</mark> Gatsby'
    """
    if not term:
        return text

    pattern = re.compile(re.escape(term), re.IGNORECASE)
    return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)
