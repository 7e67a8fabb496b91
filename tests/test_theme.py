import os
import re

from taskops import theme


def test_set_theme():
    # Outside a Streamlit run this only exercises page config & CSS loading.
    try:
        theme.set_theme(page_title="Tasks")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"


def test_theme_css_ships_with_the_app():
    with open(theme.THEME_FILE, encoding="utf-8") as f:
        assert ".tod-suggested" in f.read()


APP = os.path.join(os.path.dirname(theme.THEME_FILE), "..", "app.py")


def _css():
    with open(theme.THEME_FILE, encoding="utf-8") as f:
        return f.read()


def _rule_color(css, selector, prop):
    m = re.search(re.escape(selector) + r"\s*\{[^}]*?(?<![-\w])" + prop + r":\s*(#[0-9a-fA-F]{6})", css)
    assert m, f"{selector} has no {prop}"
    return m.group(1)


def _luminance(hex_color):
    r, g, b = (int(hex_color[i:i + 2], 16) / 255 for i in (1, 3, 5))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def test_table_text_is_readable_on_page_background():
    css = _css()
    page = _luminance(_rule_color(css, ".stApp", "background"))
    for selector in (".tod-header", ".tod-cell"):
        ink = _luminance(_rule_color(css, selector, "color"))
        assert page - ink > 0.5, selector


def test_every_class_used_by_the_page_is_styled():
    css = _css()
    with open(APP, encoding="utf-8") as f:
        source = f.read()
    used = set(re.findall(r"class='([\w\- ]+)'", source))
    for cls in {c for group in used for c in group.split()}:
        assert f".{cls}" in css, cls
    for key in re.findall(r"st\.container\([^)]*key=\"([\w-]+)\"", source):
        assert f".st-key-{key}" in css, key
