from src.cards.sanitize import kses, sanitize_key, strip_tags


def test_strip_tags_returns_plain_text():
    assert strip_tags("Does <strong>example</strong> things.<script>alert(1)</script>") == "Does example things."


def test_strip_tags_handles_empty_values():
    assert strip_tags("") == ""
    assert strip_tags(None) == ""


def test_kses_keeps_allowed_link():
    out = kses('<a href="https://example.com/" title="Home" onclick="steal()">Jane</a>')
    assert 'href="https://example.com/"' in out
    assert 'title="Home"' in out
    assert "onclick" not in out


def test_kses_unwraps_disallowed_tags():
    out = kses('<div class="x"><em>Jane</em> <img src="x.png"> Dev</div>')
    assert out == "<em>Jane</em>  Dev"


def test_kses_drops_script_bodies():
    assert kses("Jane<script>alert('x')</script>") == "Jane"


def test_kses_drops_javascript_urls():
    out = kses('<a href="javascript:alert(1)">Jane</a>')
    assert "javascript" not in out
    assert ">Jane</a>" in out


def test_kses_strips_attributes_outside_the_allow_list():
    assert kses('<abbr title="Plugin" class="big">PL</abbr>') == '<abbr title="Plugin">PL</abbr>'
    assert kses('<ul type="disc" id="x"><li>a</li></ul>') == '<ul type="disc"><li>a</li></ul>'


def test_kses_escapes_bare_text():
    assert kses("Tom & Jerry <3") == "Tom &amp; Jerry &lt;3"


def test_sanitize_key():
    assert sanitize_key("My Plugin!_v2-x") == "myplugin_v2-x"
