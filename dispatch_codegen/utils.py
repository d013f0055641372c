"""
Utility functions for the dispatch code generator.
"""


def _strip_raw_prefix(text: str) -> str:
    """Drop the `r#` prefix of a raw identifier."""
    return text[2:] if text.startswith("r#") else text


def _split_on_separators(text: str) -> list[str]:
    """Split on every character that is not a letter or a digit."""
    chunks: list[str] = []
    current: list[str] = []
    for char in text:
        if char.isalnum():
            current.append(char)
        elif current:
            chunks.append("".join(current))
            current = []
    if current:
        chunks.append("".join(current))
    return chunks


def _split_case_boundaries(chunk: str) -> list[str]:
    """Split one alphanumeric chunk where an uppercase letter follows a lowercase letter or a digit."""
    words: list[str] = []
    start = 0
    for i in range(1, len(chunk)):
        prev, char = chunk[i - 1], chunk[i]
        if char.isupper() and (prev.islower() or prev.isdigit()):
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return words


def _capitalize_and_join(words: list[str]) -> str:
    """Upper-case the first character of each word and join them.

    The rest of each word keeps its case, so acronyms survive ("HTTPServer"
    stays "HTTPServer") and re-running the conversion changes nothing.
    """
    return "".join(word[0].upper() + word[1:] for word in words if word)


def to_pascal_case(text: str) -> str:
    """Convert an identifier of any case convention to PascalCase.

    Algorithm:
        1. Drop a raw identifier prefix (`r#`).
        2. Split on every character that is not a letter or a digit.
        3. Split each chunk where an uppercase letter follows a lowercase
           letter or a digit.
        4. Upper-case the first character of every word, keep the rest.
        5. Join. A result starting with a digit gets a leading underscore.

    Examples:
        "sort" -> "Sort"
        "do_the_thing" -> "DoTheThing"
        "doTheThing" -> "DoTheThing"
        "HTTP_server" -> "HTTPServer"
        "run_2d" -> "Run2d"
        "r#match" -> "Match"
        "__" -> "__"

    The conversion is total: an identifier with no letters or digits is
    returned unchanged. It is also idempotent, applying it twice gives the
    same result as applying it once.

    Args:
        text: The identifier to convert

    Returns:
        PascalCase identifier
    """
    if not text:
        return ""
    words: list[str] = []
    for chunk in _split_on_separators(_strip_raw_prefix(text)):
        words.extend(_split_case_boundaries(chunk))
    if not words:
        return text
    result = _capitalize_and_join(words)
    if result[0].isdigit():
        result = "_" + result
    return result
