import re

# Anywhere in the text that *might* hold wiki syntax we have to clean up
ANYTHING_INTERESTING_RE = re.compile(r"[*#:;|!{\[']")

# Simple wikitext formatting that is skipped without emitting anything:
#
#   '''?                   bold and italic (two or three apostrophes)
#   ^#\s*redirect.*$       redirect declaration
#   ^[ *#:;]+              bullets and indentation at the start of a line
#   ^[|!].*$               table detritus
#
# Table detritus shows up when a table is opened from inside a template and
# closed with a bare |}. The template gets skipped, so the rows and the end of
# the table look like text. Those lines start with a cell separator.
FORMATTING_RE = re.compile(
    r"('''?|^#\s*redirect.*$|^[ *#:;]+|^[|!].*$)",
    re.MULTILINE | re.IGNORECASE,
)

# More than one blank line in a row
BLANK_LINE_RE = re.compile(r"\n\s*\n\s*\n")

# Delimiter pairs handled by skip_nested
NESTED_DELIMITERS = {
    ("{", "}"): re.compile(r"[{}]"),
    ("[", "]"): re.compile(r"[\[\]]"),
}


def skip_nested(text, pos, open_char, close_char):
    """
    Return the position just past the delimiter that closes the one at `pos`.

    Expects text[pos] == open_char. Nested pairs of the same delimiters are
    counted. If the construct is never closed, the end of the text is
    returned. The result is always greater than `pos`.
    """
    delimiter_re = NESTED_DELIMITERS[(open_char, close_char)]
    pos += 1
    depth = 1
    while depth > 0 and pos < len(text):
        match = delimiter_re.search(text, pos)
        if match is None:
            # Unterminated, so skip the rest of the text
            return len(text)
        if match.group() == open_char:
            depth += 1
        else:
            depth -= 1
        pos = match.end()
    return pos


def extract_internal_link(link_text):
    """Displayed text of a [[...]] link, or '' for namespaced links"""
    # Colons mean categories, files, interwiki links and similar. Drop them.
    if ":" in link_text:
        return ""
    contents = filter_wikitext(link_text[2:-2])
    # Piped links show whatever follows the last pipe
    return contents[contents.rfind("|") + 1:]


def extract_external_link(link_text):
    """Label of a [url label] link, or '' for a bare URL"""
    space_pos = link_text.find(" ")
    if space_pos == -1:
        return ""
    return filter_wikitext(link_text[space_pos + 1:-1])


def filter_link(text, pos):
    """
    Skip the link starting at `pos`.

    Returns (displayed_text, new_pos).
    """
    end = skip_nested(text, pos, "[", "]")
    link_text = text[pos:end]
    if text.startswith("[[", pos):
        return extract_internal_link(link_text), end
    return extract_external_link(link_text), end


def filter_wikitext(text):
    """
    Given the wikitext of an article, keep the part that's meant to be read
    as plain text.

    Templates and tables are dropped along with everything inside them,
    links are replaced by the text they display, and formatting markers are
    removed. HTML should already be gone (see html_filter.filter_html).
    """
    result = []
    pos = 0
    length = len(text)
    while pos < length:
        # Copy everything up to the next character that could be wiki syntax
        match = ANYTHING_INTERESTING_RE.search(text, pos)
        found = match.start() if match else length
        if found > pos:
            result.append(text[pos:found])
        pos = found
        if pos >= length:
            break

        next2chars = text[pos:pos + 2]
        if next2chars == "{{" or next2chars == "{|":
            # Templates and tables
            pos = skip_nested(text, pos, "{", "}")
        elif text[pos] == "[":
            link, pos = filter_link(text, pos)
            result.append(link)
        else:
            formatting = FORMATTING_RE.match(text, pos)
            if formatting and formatting.end() > pos:
                pos = formatting.end()
            else:
                # Nothing matched, so this character is just text
                result.append(text[pos])
                pos += 1
    return "".join(result)


def collapse_blank_lines(text):
    """Replace runs of more than one blank line with a single newline"""
    return BLANK_LINE_RE.sub("\n", text)
