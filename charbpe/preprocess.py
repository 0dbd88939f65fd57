# preprocess.py
# Word-boundary marking shared by training, encoding and decoding.

from typing import List

BOUNDARY_MARKER = "Ġ"        # prefixes a token that followed a space
BASE_VOCAB_SIZE = 256


def base_alphabet() -> List[str]:
    """The 256 fixed single-character slots (Latin-1) that open every vocabulary."""
    return [chr(i) for i in range(BASE_VOCAB_SIZE)]


def mark_boundaries(text: str) -> str:
    """Replace every space except a leading one with the marker; drop a leading space."""
    out = []
    for i, ch in enumerate(text):
        if ch == " ":
            if i != 0:
                out.append(BOUNDARY_MARKER)
        else:
            out.append(ch)
    return "".join(out)


def split_words(text: str) -> List[str]:
    # split() also treats the padded "\n" as whitespace, so newlines collapse into a
    # plain word boundary and the startswith("\n") branch never fires
    words = text.replace("\n", " \n ").split()
    tokens = []
    for i, w in enumerate(words):
        if i > 0 and not w.startswith("\n"):
            tokens.append(BOUNDARY_MARKER + w)
        else:
            tokens.append(w)
    return tokens


def strip_boundary(token: str) -> str:
    if token.startswith(BOUNDARY_MARKER):
        return " " + token[len(BOUNDARY_MARKER):]
    return token
