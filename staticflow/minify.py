"""
Regex minifiers for HTML, CSS and JavaScript.

These are textual transforms with no knowledge of string or regex
literals: a comment-like sequence inside a string is stripped like any
other comment. Each function is pure and safe to apply to its own output.
"""
import re
from typing import Callable

_HTML_COMMENT = re.compile(r'<!--[\s\S]*?-->')
_WHITESPACE = re.compile(r'\s+')
_HTML_BETWEEN_TAGS = re.compile(r'>\s+<')
_HTML_BEFORE_CLOSE = re.compile(r'\s+>')
_HTML_AFTER_CLOSE = re.compile(r'>\s+')
_HTML_AFTER_OPEN = re.compile(r'<\s+')

_BLOCK_COMMENT = re.compile(r'/\*[\s\S]*?\*/')
_CSS_PUNCTUATION = re.compile(r'\s*([{}:;,])\s*')
_CSS_SEMICOLON_BEFORE_BRACE = re.compile(r';+}')
_CSS_IMPORTANT = re.compile(r'\s+!important')

_JS_LINE_COMMENT = re.compile(r'//[^\n]*')
_JS_OPERATORS = re.compile(r'\s*([=+\-*/%&|^!<>?:{}()\[\],;])\s*')
_JS_LINE_BREAK = re.compile(r'\s*\n\s*')
_JS_REPEATED_SEMICOLON = re.compile(r';{2,}')


def _until_stable(minify_pass: Callable[[str], str], text: str) -> str:
    """Repeat a pass until its output stops changing.

    Stripping one comment or one space can join characters into a new
    comment opener (`a / /b/` becomes `a//b/`), so a single pass is not
    always final. No pass makes text longer, which bounds the loop.
    """
    while True:
        result = minify_pass(text)
        if result == text:
            return result
        text = result


def _html_pass(html: str) -> str:
    html = _HTML_COMMENT.sub('', html)
    html = _WHITESPACE.sub(' ', html)
    html = _HTML_BETWEEN_TAGS.sub('><', html)
    html = _HTML_BEFORE_CLOSE.sub('>', html)
    html = _HTML_AFTER_CLOSE.sub('>', html)
    html = _HTML_AFTER_OPEN.sub('<', html)
    return html.strip()


def _css_pass(css: str) -> str:
    css = _BLOCK_COMMENT.sub('', css)
    css = _WHITESPACE.sub(' ', css)
    css = _CSS_PUNCTUATION.sub(r'\1', css)
    css = _CSS_SEMICOLON_BEFORE_BRACE.sub('}', css)
    css = _CSS_IMPORTANT.sub('!important', css)
    return css.strip()


def _js_pass(js: str) -> str:
    js = _JS_LINE_COMMENT.sub('', js)
    js = _BLOCK_COMMENT.sub('', js)
    js = _WHITESPACE.sub(' ', js)
    js = _JS_OPERATORS.sub(r'\1', js)
    js = _JS_LINE_BREAK.sub(';', js)
    js = _JS_REPEATED_SEMICOLON.sub(';', js)
    js = js.replace(';}', '}')
    return js.strip()


def minify_html(html: str) -> str:
    """Strip comments and insignificant whitespace from HTML."""
    return _until_stable(_html_pass, html)


def minify_css(css: str) -> str:
    """Strip comments and insignificant whitespace from a stylesheet."""
    return _until_stable(_css_pass, css)


def minify_js(js: str) -> str:
    """Strip comments and whitespace around operators from a script.

    Line comments go first, so a `//` inside a string literal (a URL, say)
    eats the rest of that line.
    """
    return _until_stable(_js_pass, js)


# Extension -> minifier, used when copying assets
MINIFIERS = {
    '.html': minify_html,
    '.css': minify_css,
    '.js': minify_js,
}
