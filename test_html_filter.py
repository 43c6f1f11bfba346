from html_filter import filter_html


def test_ref_contents_dropped():
    assert filter_html("<ref>some citation</ref>Visible text") == "Visible text"


def test_unterminated_skip_span():
    assert filter_html("<ref>dangling") == ""


def test_empty_ref_tag():
    assert filter_html('Before<ref name="paris" />After') == "BeforeAfter"
    assert filter_html('Before<ref name="paris"/>After<ref>cite</ref>.') == "BeforeAfter."


def test_ordinary_tags_keep_their_text():
    assert filter_html("<b>bold</b> and <i>italic</i>") == "bold and italic"


def test_skip_spans():
    assert filter_html("<math>x^2</math> squared") == " squared"
    assert filter_html("<gallery>\nFile:A.jpg|<b>A</b>\n</gallery>done") == "done"
    assert filter_html("a<references/>b") == "ab"


def test_entities_are_decoded():
    assert filter_html("Fish &amp; chips") == "Fish & chips"


def test_whitespace_is_kept():
    assert filter_html("one\n\n  two") == "one\n\n  two"


def test_loose_ampersands_and_brackets_are_text():
    assert filter_html("AT&T and Marks & Spencer") == "AT&T and Marks & Spencer"
    assert filter_html("a < b and 3<4") == "a < b and 3<4"


def test_comments_dropped():
    assert filter_html("one<!-- hidden -->two") == "onetwo"


def test_unquoted_attributes():
    assert filter_html("Intro<ref name=foo>cite</ref> rest of the article.") == "Intro rest of the article."
    assert filter_html("<ref name=foo>cite</ref> tail") == " tail"


def test_void_tag_inside_skip_span():
    assert filter_html("A<ref>x<br>y</ref> rest of the article.") == "A rest of the article."
    assert filter_html("<ref>a<br>b</ref> tail") == " tail"


def test_malformed_markup_keeps_all_text():
    assert filter_html("good text <br> more text") == "good text  more text"
    assert filter_html("<b>unbalanced</i> after") == "unbalanced after"
    assert filter_html('<span class="a" class="b">x</span> rest') == "x rest"
    assert filter_html("<div><p>open tags</div> and more") == "open tags and more"
