import re
from html.parser import HTMLParser

# We skip the contents of these HTML tags entirely. They don't nest inside
# each other.
SKIP_SPANS = frozenset([
    "cite", "ref", "hiero", "gallery", "timeline", "noinclude",
    "caption", "references", "img", "source", "math",
])

# <ref name="foo" /> has attributes but no body
EMPTY_REF_RE = re.compile(r"<ref [^>]+/\s*>", re.IGNORECASE)


class SpanFilter(HTMLParser):
    """
    Collects character data from article HTML, skipping SKIP_SPANS.

    Tags are never checked against each other: a stray </i> or an unclosed
    <br> is just an event to ignore.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.chunks = []
        self.skip_to = None

    def handle_starttag(self, tag, attrs):
        if self.skip_to is None and tag in SKIP_SPANS:
            self.skip_to = tag

    def handle_endtag(self, tag):
        if tag == self.skip_to:
            self.skip_to = None

    def handle_data(self, data):
        if self.skip_to is None:
            self.chunks.append(data)

    def text(self):
        return "".join(self.chunks)


def filter_html(text):
    """
    Remove HTML tags from article text, along with the contents of the tags
    in SKIP_SPANS.

    Bad markup doesn't stop the filter. A skip span that never closes runs to
    the end of the text.
    """
    text = EMPTY_REF_RE.sub("<ref />", text)

    span_filter = SpanFilter()
    span_filter.feed(text)
    span_filter.close()
    return span_filter.text()
