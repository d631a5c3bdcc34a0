import logging

import pytest

from composcript.core.errors import MissingDirectiveError
from composcript.core.models import AttributeDescriptor, AttributeKind
from composcript.transpile.directive import DirectiveParser, classify_token


@pytest.mark.parametrize("token, name, kind, required", [
    (".on", "on", AttributeKind.CLASS_TOGGLE, False),
    (".is-active", "is-active", AttributeKind.CLASS_TOGGLE, False),
    ("flag?", "flag", AttributeKind.BOOLEAN, False),
    ("data-open?", "data-open", AttributeKind.BOOLEAN, False),
    ("attr!", "attr", AttributeKind.PLAIN, True),
    ("max-size!", "max-size", AttributeKind.PLAIN, True),
    ("title", "title", AttributeKind.PLAIN, False),
    ("aria-label", "aria-label", AttributeKind.PLAIN, False),
])
def test_classification_follows_token_shape(token, name, kind, required):
    descriptor = classify_token(token)
    assert descriptor == AttributeDescriptor(name, kind, required)


@pytest.mark.parametrize("name, identifier", [
    ("title", "title"),
    ("max-size", "max_size"),
    ("data-x-y", "data_x_y"),
])
def test_identifier_replaces_every_hyphen(name, identifier):
    assert AttributeDescriptor(name).identifier == identifier


@pytest.mark.parametrize("token", ["", "   ", "?", "!", "."])
def test_tokens_naming_nothing_are_ignored(token):
    assert classify_token(token) is None


@pytest.mark.parametrize("token, name, kind", [
    ("a.b", "a.b", AttributeKind.PLAIN),
    ("x=1", "x=1", AttributeKind.PLAIN),
    ("x!?", "x!", AttributeKind.BOOLEAN),
])
def test_ambiguous_tokens_fall_through_to_shape_rules(token, name, kind, caplog):
    """
    SHAPE TEST: odd tokens are classified by their suffix alone, never
    dropped; an unusable accessor name is reported as a warning.
    """
    with caplog.at_level(logging.WARNING, logger="composcript.directive"):
        descriptor = classify_token(token)
    assert (descriptor.declared_name, descriptor.kind, descriptor.required) == (name, kind, False)
    assert "invalid accessor name" in caplog.text


def test_valid_names_do_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="composcript.directive"):
        classify_token("max-size!")
    assert caplog.text == ""


def test_class_toggle_cannot_be_required():
    with pytest.raises(ValueError):
        AttributeDescriptor("on", AttributeKind.CLASS_TOGGLE, required=True)


def test_parse_builds_descriptor():
    body = "class MyThing {\n\t// <my-thing attr! flag? .on />\n\n\tcreated() {}\n}"
    descriptor = DirectiveParser().parse(body, "my-thing")

    assert descriptor.tag_name == "my-thing"
    assert descriptor.class_name == "MyThing"
    assert [(a.declared_name, a.kind) for a in descriptor.attributes] == [
        ("attr", AttributeKind.PLAIN),
        ("flag", AttributeKind.BOOLEAN),
        ("on", AttributeKind.CLASS_TOGGLE),
    ]
    assert descriptor.required_attributes == ["attr"]
    assert descriptor.directive_text == "// <my-thing attr! flag? .on />"
    assert descriptor.has_constructor is False
    assert descriptor.has_base_class is False


def test_parse_accepts_empty_directive_without_space():
    descriptor = DirectiveParser().parse("class A {\n//<my-a/>\n}", "my-a")
    assert descriptor.attributes == []
    assert descriptor.required_attributes == []


def test_parse_detects_constructor_and_base_class():
    body = (
        "class Fancy extends Base {\n"
        "\t// <fancy-box size />\n"
        "\tconstructor(attr) { super(attr); this.x = 1; }\n"
        "}"
    )
    descriptor = DirectiveParser().parse(body, "fancy-box")
    assert descriptor.has_constructor is True
    assert descriptor.has_base_class is True


def test_duplicate_names_keep_first_declaration():
    descriptor = DirectiveParser().parse("class A {\n// <x-a size! size? other />\n}", "x-a")
    assert [(a.declared_name, a.kind, a.required) for a in descriptor.attributes] == [
        ("size", AttributeKind.PLAIN, True),
        ("other", AttributeKind.PLAIN, False),
    ]


def test_missing_directive_is_fatal():
    with pytest.raises(MissingDirectiveError) as info:
        DirectiveParser().parse("class MyThing {\n\tcreated() {}\n}", "my-thing")
    assert '"// <my-thing />"' in str(info.value)


def test_directive_for_other_tag_does_not_count():
    with pytest.raises(MissingDirectiveError):
        DirectiveParser().parse("class A {\n// <my-thing-two a />\n}", "my-thing")


def test_parse_without_tag_accepts_any_directive():
    descriptor = DirectiveParser().parse("class A {\n// <some-tag a? />\n}")
    assert descriptor.tag_name == "some-tag"
