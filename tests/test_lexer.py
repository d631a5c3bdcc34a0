import pytest

from composcript.core.errors import UnbalancedMarkupError
from composcript.core.models import PartKind, TokenKind
from composcript.transpile.lexer import SourceLexer, is_line_comment_start


def _markup(tokens):
    return [t for t in tokens if t.kind is TokenKind.MARKUP]


def _joined_parts(token):
    return "".join(p.text for p in token.parts)


def test_tokens_reassemble_source():
    """
    LOSSLESS TEST: concatenating every token's text gives back the input,
    markup included.
    """
    source = (
        "const a = 'x'; // note\n"
        "/* block { */\n"
        "const b = <div class=\"c\"><p>{a}</p></div>;\n"
    )
    tokens = SourceLexer().tokenize(source)
    assert "".join(t.text for t in tokens) == source
    assert [t.kind for t in tokens][:4] == [
        TokenKind.CODE, TokenKind.STRING, TokenKind.CODE, TokenKind.LINE_COMMENT
    ]


def test_directive_comment_is_not_markup():
    source = "class A {\n\t// <my-thing attr! flag? />\n}"
    tokens = SourceLexer().tokenize(source)
    assert not _markup(tokens)
    comments = [t for t in tokens if t.kind is TokenKind.LINE_COMMENT]
    assert comments[0].text == "// <my-thing attr! flag? />"
    assert comments[0].line == 2


def test_tags_inside_strings_are_ignored():
    tokens = SourceLexer().tokenize("const s = \"<div>\" + '<p>it\\'s</p>' + `<b>`;")
    assert not _markup(tokens)
    assert len([t for t in tokens if t.kind is TokenKind.STRING]) == 3


def test_tags_inside_block_comments_are_ignored():
    tokens = SourceLexer().tokenize("/* <div> */ x();")
    assert not _markup(tokens)


def test_protocol_slashes_do_not_open_comment():
    assert is_line_comment_start("a // b", 2)
    assert not is_line_comment_start("http://host", 5)


def test_nested_block_closes_at_depth_zero():
    """
    DEPTH TEST: nested tags are one block and depth returns to exactly zero.
    """
    lexer = SourceLexer()
    tokens = lexer.tokenize("x = <div><span>a</span><p>b</p></div>; y = 1;")
    blocks = _markup(tokens)
    assert len(blocks) == 1
    assert blocks[0].text == "<div><span>a</span><p>b</p></div>"
    assert blocks[0].tag_name == "div"
    assert lexer.state.nesting_depth == 0
    assert lexer.state.in_markup_block is False


def test_two_sibling_blocks_are_separate_tokens():
    tokens = SourceLexer().tokenize("a = <p>1</p>;\nb = <p>2</p>;")
    blocks = _markup(tokens)
    assert [b.text for b in blocks] == ["<p>1</p>", "<p>2</p>"]
    assert [b.line for b in blocks] == [1, 2]


@pytest.mark.parametrize("source, expected", [
    ("<div><foo-bar/></div>", "<div><foo-bar></foo-bar></div>"),
    ("<div><foo-bar a=\"1\" /></div>", "<div><foo-bar a=\"1\"></foo-bar></div>"),
    ("<foo-bar/>", "<foo-bar></foo-bar>"),
    ("<ul><li><x-icon name=\"a\"/></li></ul>", "<ul><li><x-icon name=\"a\"></x-icon></li></ul>"),
])
def test_custom_self_closing_tags_are_expanded(source, expected):
    tokens = SourceLexer().tokenize(f"r = {source};")
    blocks = _markup(tokens)
    assert len(blocks) == 1
    assert _joined_parts(blocks[0]) == expected


def test_plain_self_closing_tag_does_not_change_depth():
    blocks = _markup(SourceLexer().tokenize("r = <p>a<br/>b<img src=\"x\" /></p>;"))
    assert len(blocks) == 1
    assert _joined_parts(blocks[0]) == "<p>a<br/>b<img src=\"x\" /></p>"


def test_comparisons_are_not_tags():
    tokens = SourceLexer().tokenize("if (a < b && c > d) { x = a<b; }")
    assert not _markup(tokens)


def test_stray_closing_tag_is_text():
    tokens = SourceLexer().tokenize("x = 1; </div> y = 2;")
    assert not _markup(tokens)


def test_interpolations_become_expression_parts():
    blocks = _markup(SourceLexer().tokenize("r = <p class={cls}>{x ? '<b>' : fn({a: 1})}</p>;"))
    kinds = [(p.kind, p.text) for p in blocks[0].parts]
    assert kinds == [
        (PartKind.TEXT, "<p class="),
        (PartKind.EXPRESSION, "cls"),
        (PartKind.TEXT, ">"),
        (PartKind.EXPRESSION, "x ? '<b>' : fn({a: 1})"),
        (PartKind.TEXT, "</p>"),
    ]


def test_comment_interpolation_becomes_comment_part():
    blocks = _markup(SourceLexer().tokenize("r = <div>{/* <p> hidden */}<p>a</p></div>;"))
    parts = blocks[0].parts
    assert parts[1].kind is PartKind.COMMENT
    assert parts[1].text == " <p> hidden "
    assert blocks[0].text.endswith("</div>")


def test_html_comments_do_not_count_tags():
    blocks = _markup(SourceLexer().tokenize("r = <div><!-- <p> --></div>; after();"))
    assert len(blocks) == 1
    assert blocks[0].text == "<div><!-- <p> --></div>"


def test_apostrophes_in_markup_text_are_literal():
    blocks = _markup(SourceLexer().tokenize("r = <p>don't stop</p>; s = 'ok';"))
    assert blocks[0].text == "<p>don't stop</p>"


def test_multiline_block_keeps_newlines():
    source = "r = (\n\t<ul>\n\t\t<li>a</li>\n\t</ul>\n);"
    blocks = _markup(SourceLexer().tokenize(source))
    assert blocks[0].text == "<ul>\n\t\t<li>a</li>\n\t</ul>"
    assert blocks[0].line == 2


def test_unclosed_block_raises_with_start_line():
    """
    RECOVERY TEST: an unbalanced block is reported, never silently mis-split.
    """
    with pytest.raises(UnbalancedMarkupError) as info:
        SourceLexer().tokenize("a = 1;\nr = <div><p>a</div>;\n")
    assert info.value.line == 2
    assert "<div>" in info.value.message


def test_unclosed_interpolation_raises():
    with pytest.raises(UnbalancedMarkupError):
        SourceLexer().tokenize("r = <p>{value</p>;")


def test_markup_disabled_treats_tags_as_code():
    tokens = SourceLexer().tokenize("a = <p>x</p>;", markup=False)
    assert [t.kind for t in tokens] == [TokenKind.CODE]


@pytest.mark.parametrize("source, block", [
    ("x = <div>/* <p> */</div>;", "<div>/* <p> */</div>"),
    ("x = <div>\n// <span>\n</div>;", "<div>\n// <span>\n</div>"),
    ("x = <ul>\n\t<li>a</li> // </ul>\n</ul>;", "<ul>\n\t<li>a</li> // </ul>\n</ul>"),
])
def test_script_comments_inside_markup_hide_tags(source, block):
    """
    COMMENT TEST: tags inside // and /* */ comments within a block do not
    move the nesting depth; the comment text stays in the block.
    """
    lexer = SourceLexer()
    blocks = _markup(lexer.tokenize(source))
    assert [b.text for b in blocks] == [block]
    assert _joined_parts(blocks[0]) == block
    assert lexer.state.in_line_comment is False
    assert lexer.state.in_block_comment is False


def test_protocol_inside_markup_text_is_not_a_comment():
    blocks = _markup(SourceLexer().tokenize("r = <p>see http://x.io <b>now</b></p>; after();"))
    assert blocks[0].text == "<p>see http://x.io <b>now</b></p>"


def test_unterminated_comment_inside_markup_raises():
    with pytest.raises(UnbalancedMarkupError):
        SourceLexer().tokenize("r = <div>/* </div>;")


def test_inner_parts_exclude_outer_tags():
    blocks = _markup(SourceLexer().tokenize("r = <section id={sid}><p>{a}</p></section>;"))
    inner = blocks[0].inner_parts
    assert "".join(p.text for p in inner) == "<p>a</p>"
    assert inner[1].kind is PartKind.EXPRESSION
