import re
import unicodedata

# Letters that NFKD does not decompose into an ASCII base
_SPECIAL_FOLDS = {
    "ł": "l",
    "Ł": "l",
    "ß": "ss",
    "ø": "o",
    "Ø": "o",
    "đ": "d",
    "Đ": "d",
    "æ": "ae",
    "Æ": "ae",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    Lowercase ASCII slug of `text`.

    >>> slugify("Łódź Café & Bar")
    'lodz-cafe-bar'
    """
    if not text:
        return ""
    folded = "".join(_SPECIAL_FOLDS.get(ch, ch) for ch in text)
    ascii_text = (
        unicodedata.normalize("NFKD", folded)
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    return _NON_ALNUM.sub("-", ascii_text).strip("-")
