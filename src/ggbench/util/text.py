import re

CODE_BLOCK_LANGUAGES = ("javascript", "js", "html", "svg", "xml")

_FENCED_BLOCK = re.compile(r"```[ \t]*([a-zA-Z0-9_+-]*)[ \t]*\n(.*?)```", re.DOTALL)


def try_parse_code_from_fenced_block(text):
    """Return the body of the first fenced block, preferring known languages."""
    blocks = _FENCED_BLOCK.findall(text)
    if not blocks:
        return None

    for language, body in blocks:
        if language.lower() in CODE_BLOCK_LANGUAGES:
            return body.strip()

    return blocks[0][1].strip()


def try_parse_code_from_unterminated_block(text):
    """Handle responses that were cut off before the closing fence."""
    start_index = text.find("```")
    if start_index == -1:
        return None

    newline_index = text.find("\n", start_index)
    if newline_index == -1:
        return None

    if text.find("```", newline_index) != -1:
        return None

    return text[newline_index + 1 :].strip() or None


def extract_code(text):
    """
    Pull code out of an LLM response.

    Fenced blocks are preferred; responses without any fence are assumed to be
    bare code and are returned stripped.
    """
    if not text:
        return ""

    for parse_func in [
        try_parse_code_from_fenced_block,
        try_parse_code_from_unterminated_block,
    ]:
        code = parse_func(text)
        if code:
            return code

    return text.strip()
