from storefront.utils.html import sanitize_html, strip_markup


def test_strip_markup_collapses_whitespace_and_truncates():
    assert strip_markup("<p>Hello\n\n   <i>world</i></p>") == "Hello world"
    assert strip_markup("<p>abcdef</p>", max_length=3) == "abc"
    assert strip_markup(None) == ""


def test_strip_markup_removes_decoded_angle_brackets():
    assert strip_markup("a &lt;b&gt; c") == "a b c"


def test_sanitize_html_keeps_allowed_tags_only():
    html = '<p onclick="x()">Hi <span>there</span><script>bad()</script><a href="javascript:alert(1)">l</a></p>'
    cleaned = sanitize_html(html)
    assert cleaned == "<p>Hi there<a>l</a></p>"


def test_sanitize_html_keeps_only_color_style():
    cleaned = sanitize_html('<strong style="color: #ff0000; font-size: 40px">Promo</strong>')
    assert cleaned == '<strong style="color:#ff0000">Promo</strong>'
