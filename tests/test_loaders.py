from io import BytesIO

import pytest
from lxml import etree

from lxml_scaffold.exceptions import FailedDocumentLoading
from lxml_scaffold.loaders import (
    buffer_loader,
    configured_loaders,
    load_element,
    register_loader,
)


SOURCE = "<root><a x='1'/>\n  <b>text</b></root>"


@pytest.mark.parametrize("source", (SOURCE, SOURCE.encode()))
def test_text_loader(source):
    root = load_element(source)
    assert etree.tostring(root) == b'<root><a x="1"/><b>text</b></root>'


def test_path_loader(tmp_path):
    path = tmp_path / "document.xml"
    path.write_text(SOURCE)

    root = load_element(path)

    assert root.tag == "root"
    assert len(root) == 2


def test_buffer_loader():
    root = load_element(BytesIO(SOURCE.encode()))
    assert root[1].text == "text"


def test_etree_loader():
    original = etree.fromstring(SOURCE)

    for source in (original, etree.ElementTree(original)):
        root = load_element(source)
        assert root is not original
        assert etree.tostring(root) == etree.tostring(original)

    load_element(original).set("x", "y")
    assert original.get("x") is None


def test_load_none():
    assert load_element(None) is None


def test_custom_parser():
    root = load_element(SOURCE, etree.XMLParser())
    assert root[0].tail == "\n  "


@pytest.mark.parametrize("source", (42, "<root>", b"<a></b>", BytesIO(b"<root")))
def test_failed_loading(source):
    with pytest.raises(FailedDocumentLoading) as exc_info:
        load_element(source)

    exception = exc_info.value
    assert exception.source is source
    assert len(exception.excuses) == len(configured_loaders)
    assert buffer_loader in exception.excuses


def test_register_loader():
    def dict_loader(data, parser):
        if isinstance(data, dict):
            return etree.Element(data["tag"])
        return "The input value is not a dictionary."

    register_loader(0)(dict_loader)
    try:
        assert load_element({"tag": "root"}).tag == "root"
        assert configured_loaders[0] is dict_loader
    finally:
        configured_loaders.remove(dict_loader)
