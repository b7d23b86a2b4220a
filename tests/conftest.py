import pytest
from lxml import etree


PRIMARY_NAMESPACE = "urn:edwin:bart"
SECONDARY_NAMESPACE = "urn:abc"


@pytest.fixture
def genre_root():
    return etree.fromstring(
        "<Root><Element>"
        "<Genre href='start' type='first'><Definition>yes</Definition></Genre>"
        "</Element></Root>"
    )


@pytest.fixture
def three_level_tree():
    return etree.ElementTree(
        etree.fromstring(
            f"""\
<Root xmlns='{PRIMARY_NAMESPACE}' xmlns:abc='{SECONDARY_NAMESPACE}'>
    <Level>
        <Two>Zwei</Two>
        <Two>Deux</Two>
        <abc:Two>TweeAbc</abc:Two>
    </Level>
    <Two>MinusTwo</Two>
    <abc:Two/>
</Root>"""
        )
    )


@pytest.fixture
def time_root():
    return etree.fromstring(
        """\
<Root>
    <Time>2015-12-03T17:39:52.27Z</Time>
    <Attr start='2015-12-03T11:39:52.27Z' minutes='1440' notMinutes='twelve'/>
    <Level/>
    <Level start='2015-12-03T11:39:52.27Z'>
        <Two>2015-12-03T11:39:52.27Z</Two>
        <Two>NotADate</Two>
    </Level>
</Root>"""
    )