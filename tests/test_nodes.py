import pytest
from lxml import etree

from lxml_scaffold import (
    Attribute,
    clone,
    is_attribute,
    is_element,
    xpath_select_objects,
)
from lxml_scaffold.exceptions import XPathEvaluationError


def test_attribute():
    root = etree.fromstring('<root xmlns:x="urn:x" a="1" x:b="2"/>')

    a = Attribute(root, "a")
    assert a.local_name == "a"
    assert a.namespace is None
    assert a.universal_name == "a"
    assert a.parent is root
    assert a.value == "1"
    assert str(a) == "1"
    assert repr(a).startswith('<Attribute(a="1")')

    b = Attribute(root, "{urn:x}b")
    assert b.local_name == "b"
    assert b.namespace == "urn:x"
    assert b.value == "2"


def test_attribute_value():
    root = etree.fromstring('<root a="1"/>')
    attribute = Attribute(root, "a")

    attribute.value = "2"
    assert root.get("a") == "2"

    root.set("a", "3")
    assert attribute.value == "3"

    with pytest.raises(TypeError):
        attribute.value = 4


def test_attribute_equality():
    root = etree.fromstring('<root a="1" b="1"><child a="1"/></root>')

    assert Attribute(root, "a") == Attribute(root, "a")
    assert Attribute(root, "a") != Attribute(root, "b")
    assert Attribute(root, "a") != Attribute(root[0], "a")
    assert Attribute(root, "a") != "1"
    assert len({Attribute(root, "a"), Attribute(root, "a"), Attribute(root, "b")}) == 2


def test_xpath_select_objects():
    root = etree.fromstring('<root><a x="1"/><a x="2"/>text<!-- c --></root>')

    result = xpath_select_objects(root, "a")
    assert result == (root[0], root[1])

    result = xpath_select_objects(root, "a/@x")
    assert result == (Attribute(root[0], "x"), Attribute(root[1], "x"))
    assert all(is_attribute(x) for x in result)

    assert xpath_select_objects(root, "b") == ()
    assert xpath_select_objects(root, "text()") == ("text",)


def test_xpath_select_objects_with_namespaces():
    root = etree.fromstring('<root xmlns="urn:x"><a/></root>')

    assert xpath_select_objects(root, "a") == ()
    assert xpath_select_objects(root, "x:a", {"x": "urn:x"}) == (root[0],)
    assert xpath_select_objects(root, "x:a", {None: "urn:y", "x": "urn:x"}) == (
        root[0],
    )


@pytest.mark.parametrize("expression", ("count(*)", "'a'", "1 = 1"))
def test_xpath_select_objects_requires_a_node_set(expression):
    root = etree.fromstring("<root/>")
    with pytest.raises(XPathEvaluationError, match="node-set"):
        xpath_select_objects(root, expression)


@pytest.mark.parametrize("expression", ("a[", "x:a", "a/@"))
def test_xpath_select_objects_with_invalid_expressions(expression):
    root = etree.fromstring("<root/>")
    with pytest.raises(XPathEvaluationError):
        xpath_select_objects(root, expression)


def test_clone():
    assert clone(None) is None

    root = etree.fromstring("<root><a x='1'>text<b/></a>tail</root>")
    original = root[0]

    result = clone(original)

    assert result is not original
    assert result.getparent() is None
    assert result.tail is None
    assert original.tail == "tail"
    assert etree.tostring(result) == b'<a x="1">text<b/></a>'

    result.set("x", "2")
    result[0].text = "changed"
    assert etree.tostring(root) == b'<root><a x="1">text<b/></a>tail</root>'


def test_clone_tree():
    tree = etree.ElementTree(etree.fromstring("<root><a/></root>"))

    result = clone(tree)

    assert isinstance(result, etree._ElementTree)
    assert result.getroot() is not tree.getroot()
    assert etree.tostring(result) == etree.tostring(tree)


def test_clone_keeps_namespaces(three_level_tree):
    root = three_level_tree.getroot()
    level = root[0]

    result = clone(level)
    assert [(e.tag, e.text) for e in result.iter()] == [
        (e.tag, e.text) for e in level.iter()
    ]
    assert result.tail is None
    assert etree.tostring(clone(root)) == etree.tostring(root)


def test_filters():
    root = etree.fromstring("<root a='1'><!-- comment --><?pi?></root>")

    assert is_element(root)
    assert not is_element(root[0])
    assert not is_element(root[1])
    assert not is_element(Attribute(root, "a"))
    assert not is_element("root")

    assert is_attribute(Attribute(root, "a"))
    assert not is_attribute(root)
    assert not is_attribute("1")
