import pytest

from lxml_scaffold.exceptions import (
    AbsoluteXPathError,
    XPathParsingError,
    XPathUnsupportedStandardFeature,
)
from lxml_scaffold.xpath import (
    AttributePredicate,
    AttributeStep,
    ElementStep,
    parse,
)


def test_parse():
    path = parse("configuration/appSettings/ns:add[@key='name' and @attr]/@value")

    assert len(path) == 4
    assert path.targets_attribute

    configuration, app_settings, add, value = path
    assert configuration == ElementStep("configuration", None, "configuration", ())
    assert app_settings == ElementStep("/appSettings", None, "appSettings", ())
    assert isinstance(add, ElementStep)
    assert add.prefix == "ns"
    assert add.local_name == "add"
    assert add.predicates == (
        AttributePredicate("key", "name"),
        AttributePredicate("attr", None),
    )
    assert value == AttributeStep("/@value", "value")


def test_parse_single_attribute_step():
    path = parse("@href")
    assert path.targets_attribute
    assert path.steps == (AttributeStep("@href", "href"),)


@pytest.mark.parametrize(
    ("expression", "predicates"),
    (
        ('name[@type="surname"]', (AttributePredicate("type", "surname"),)),
        ("name[@type='']", (AttributePredicate("type", ""),)),
        ("""name[@note="it's"]""", (AttributePredicate("note", "it's"),)),
        ("name[@a='@b']", (AttributePredicate("a", "@b"),)),
        (
            "Genre[@href='start' and @type='other' and @index='2']",
            (
                AttributePredicate("href", "start"),
                AttributePredicate("type", "other"),
                AttributePredicate("index", "2"),
            ),
        ),
    ),
)
def test_parse_predicates(expression, predicates):
    (step,) = parse(expression)
    assert step.predicates == predicates


def test_parse_is_cached():
    assert parse("a/b") is parse("a/b")


@pytest.mark.parametrize(
    "expression",
    (
        "A [ @href ='link'\tand @type=  '65' ] /B",
        "A[@href='link' and @type='65']/B",
        "A[ @href = 'link' and @type = '65' ]/ B",
        'A[@href="link" and @type="65"]/B',
    ),
)
def test_whitespace_is_ignored(expression):
    path = parse(expression)
    assert str(path) == "A[@href='link' and @type='65']/B"
    assert path == parse("A[@href='link' and @type='65']/B")
    assert path[0].predicates == (
        AttributePredicate("href", "link"),
        AttributePredicate("type", "65"),
    )


@pytest.mark.parametrize(
    "expression",
    (
        "A [ @href ='link'\tand @type=  '65' ] /B",
        "tva:Element/tva:Genre[@href='startTime' and @type='other']/tva:Definition",
        "Element/Genre/Definition/@language",
    ),
)
def test_cumulative_paths_are_verbatim_prefixes(expression):
    path = parse(expression)
    cumulative_paths = [x for x, _ in path.cumulative_paths()]

    assert cumulative_paths[-1] == expression
    for cumulative_path in cumulative_paths:
        assert expression.startswith(cumulative_path)
    assert "".join(x.source for x in path) == expression


def test_cumulative_paths():
    assert [x for x, _ in parse("a /b[@c]/ @d").cumulative_paths()] == [
        "a",
        "a /b[@c]",
        "a /b[@c]/ @d",
    ]


@pytest.mark.parametrize(
    "expression",
    (
        "/",
        "/A",
        "/tva:Element/tva:Genre[@href='startTime']",
        "//A",
        "/@href",
        " /A",
        "\t/@href",
    ),
)
def test_absolute_paths_are_rejected(expression):
    with pytest.raises(AbsoluteXPathError):
        parse(expression)
    with pytest.raises(ValueError, match="Absolute"):
        parse(expression)


@pytest.mark.parametrize(
    ("expression", "feature"),
    (
        ("child[0]", "Positional predicates"),
        ('child[@locale="en-gb" or @locale="en-us"]', "Disjunctive predicates"),
        ("root/foo|./foo/bar", "Unions"),
        ("root/node/descendant-or-self::node()", "Explicit axes"),
        ("child::A", "Explicit axes"),
        ("root/node/child/../node", "Abbreviated self and parent steps"),
        ("./root", "Abbreviated self and parent steps"),
        ("A//B", "Descendant-or-self shortcuts"),
        ("A/*", "Wildcards"),
        ("A/tei:*", "Wildcards"),
        ("A/text()", "Function calls and node type tests"),
    ),
)
def test_unsupported_features(expression, feature):
    with pytest.raises(XPathUnsupportedStandardFeature, match=feature) as exc_info:
        parse(expression)
    assert exc_info.value.expression == expression


@pytest.mark.parametrize(
    ("expression", "position", "message"),
    (
        ("", 0, "Unexpected end"),
        ("A/", 2, "Unexpected end"),
        ("A / ", 4, "Unexpected end"),
        ("A[@x", 1, "malformed"),
        ("A[@x='1']]", 9, "malformed"),
        ("A[x='1']", 1, "malformed"),
        ("1a", 0, "malformed"),
        ("a/1b", 2, "malformed"),
        ("@1x", 0, "malformed"),
        ("A[@1x='1']", 1, "malformed"),
        ("A/@x/B", 4, "only allowed at the end"),
        ("@x/@y", 2, "only allowed at the end"),
    ),
)
def test_malformed_expressions(expression, position, message):
    with pytest.raises(XPathParsingError, match=message) as exc_info:
        parse(expression)
    exception = exc_info.value
    assert type(exception) is XPathParsingError
    assert exception.position == position
    assert f"at character {position}" in str(exception)


def test_parsing_error_snippet():
    with pytest.raises(XPathParsingError) as exc_info:
        parse("A/@x/B")
    assert "(`/B`)" in str(exc_info.value)


def test_unicode_names():
    (step,) = parse("Grüße[@übersetzung='ja']")
    assert step.local_name == "Grüße"
    assert step.predicates == (AttributePredicate("übersetzung", "ja"),)
