import pytest

from layoutfmt.constants import MAX_NESTING_DEPTH, SymbolTables
from layoutfmt.errors import ParseError
from layoutfmt.node import Comment, Element, Text
from layoutfmt.parser import AttributesExtractor, LayoutParser, parse


####
# Attributes Extractor Tests
####
@pytest.mark.ci
def test_attributes_extractor_basic():
    content = ' top="10-5* 4" id="submit-btn" hidden'
    extractor = AttributesExtractor(text=content)
    attributes = extractor.parse()
    assert attributes == [
        ('top', '10-5* 4'),
        ('id', 'submit-btn'),
        ('hidden', ''),
    ]


@pytest.mark.ci
def test_attributes_extractor_keeps_entities_and_order():
    content = 'b="&quot;x&quot;" a="1 &amp; 2"'
    attributes = AttributesExtractor(text=content).parse()
    assert attributes == [('b', '&quot;x&quot;'), ('a', '1 &amp; 2')]


@pytest.mark.ci
def test_attributes_extractor_spaces_around_equal_sign():
    attributes = AttributesExtractor(text="a = 'x' center.x=\"5\"").parse()
    assert attributes == [('a', 'x'), ('center.x', '5')]


@pytest.mark.ci
@pytest.mark.parametrize("content", [
    'a="1" a="2"',
    'a=1',
    'a=',
    'a="1',
    '"a"',
    'title=\'Example "Site"\'',
])
def test_attributes_extractor_rejects(content):
    with pytest.raises(ParseError):
        AttributesExtractor(text=content).parse()


####
# Layout Parser Tests
####

@pytest.mark.ci
def test_parser_basic_functionality():
    nodes = parse('<Foo left="5"><Bar/>text</Foo>')
    assert len(nodes) == 1
    root = nodes[0]
    assert isinstance(root, Element)
    assert root.name == 'Foo'
    assert root.attributes == [('left', '5')]
    assert root.children == [Element(name='Bar'), Text(raw='text')]


@pytest.mark.ci
def test_parser_is_lossless_for_text_and_comments():
    content = '<!-- lead -->\n<Foo>\n    a &amp; b\n    <!--x-->\n</Foo>\n'
    nodes = parse(content)
    assert nodes == [
        Comment(body=' lead '),
        Text(raw='\n'),
        Element(name='Foo', children=[
            Text(raw='\n    a &amp; b\n    '),
            Comment(body='x'),
            Text(raw='\n'),
        ]),
        Text(raw='\n'),
    ]


@pytest.mark.ci
def test_self_closing_is_derived_from_children():
    root = parse('<Foo>\n  \n</Foo>')[0]
    assert isinstance(root, Element)
    assert root.self_closing

    root = parse('<Foo>bar</Foo>')[0]
    assert isinstance(root, Element)
    assert not root.self_closing


@pytest.mark.ci
def test_explicitly_closed_void_element_owns_content():
    root = parse('<br><Foo/></br>')[0]
    assert isinstance(root, Element)
    assert root.name == 'br'
    assert root.children == [Element(name='Foo')]


@pytest.mark.ci
def test_implicitly_closed_void_element_hands_back_content():
    root = parse('<p>a<br>b</p>')[0]
    assert isinstance(root, Element)
    assert root.children == [Text(raw='a'), Element(name='br'), Text(raw='b')]


@pytest.mark.ci
def test_void_element_open_at_end_of_input():
    nodes = parse('<Foo/><br>tail')
    assert nodes == [Element(name='Foo'), Element(name='br'), Text(raw='tail')]


@pytest.mark.ci
def test_custom_symbol_tables():
    symbols = SymbolTables(void_tags=frozenset(['Spacer']))
    nodes = LayoutParser(body='<Foo><Spacer></Foo>', symbols=symbols).parse()
    assert nodes == [Element(name='Foo', children=[Element(name='Spacer')])]

    with pytest.raises(ParseError):
        parse('<Foo><Spacer></Foo>')


####
# Parse Error Tests
####

@pytest.mark.ci
@pytest.mark.parametrize("content, message", [
    ('<Foo', 'unterminated tag'),
    ('<Foo><!-- bar', 'unterminated comment'),
    ('<Foo bar="baz/>', 'unterminated attribute value'),
    ('<Foo></Bar>', 'closing tag </Bar> does not match <Foo>'),
    ('</Foo>', 'unexpected closing tag </Foo>'),
    ('<Foo><Bar>', 'unexpected end of input, <Bar> is not closed'),
    ('<Foo/><?xml version="1.0"?>', 'unsupported markup declaration'),
    ('<!-- c --><?xml version="1.0"?><Foo/>', 'unsupported markup declaration'),
    ('<?pi', 'unterminated tag'),
    ('<? ?><Foo/>', 'unsupported markup declaration'),
    ('<!ELEMENT foo ANY><Foo/>', 'unsupported markup declaration'),
    ('<1Foo/>', 'invalid tag name'),
    ('< Foo/>', 'invalid tag name'),
])
def test_parse_errors(content, message):
    with pytest.raises(ParseError) as excinfo:
        parse(content)
    assert excinfo.value.message == message


@pytest.mark.ci
def test_parse_error_position():
    content = '<Foo>\n    <Bar>\n</Foo>'
    with pytest.raises(ParseError) as excinfo:
        parse(content)
    error = excinfo.value
    assert error.offset == content.index('</Foo>')
    assert error.line == 3
    assert error.snippet == '/Foo'
    assert 'line 3' in str(error)


@pytest.mark.ci
def test_unclosed_element_reports_where_it_opened():
    with pytest.raises(ParseError) as excinfo:
        parse('<Foo>\n<Bar>')
    assert excinfo.value.line == 2
    assert excinfo.value.offset == 6


@pytest.mark.ci
def test_nesting_depth_is_bounded():
    content = '<Foo>' * 300 + '</Foo>' * 300
    with pytest.raises(ParseError) as excinfo:
        parse(content)
    assert excinfo.value.message == 'elements nested too deeply'
    assert excinfo.value.offset == 5 * MAX_NESTING_DEPTH


@pytest.mark.ci
def test_explicitly_closed_void_elements_count_toward_depth():
    content = '<br>' * 300 + '</br>' * 300
    with pytest.raises(ParseError) as excinfo:
        parse(content)
    assert excinfo.value.message == 'elements nested too deeply'


@pytest.mark.ci
def test_many_open_void_elements_are_not_nesting():
    content = '<Foo><p>' + 'line<br>' * 300 + '</p></Foo>'
    root = parse(content)[0]
    assert isinstance(root, Element)
    paragraph = root.children[0]
    assert isinstance(paragraph, Element)
    assert len(paragraph.children) == 600
    assert all(
        isinstance(child, Text) or child == Element(name='br')
        for child in paragraph.children
    )


####
# Prolog Tests
####

@pytest.mark.ci
def test_xml_declaration_is_kept_apart():
    parser = LayoutParser(body='<?xml version="1.0" encoding="utf-8"?>\n<Foo/>')
    nodes = parser.parse()
    assert parser.prolog == ['?xml version="1.0" encoding="utf-8"?']
    assert nodes == [Text(raw='\n'), Element(name='Foo')]


@pytest.mark.ci
def test_doctype_after_declaration():
    content = (
        '\n<?xml version="1.0"?>\n'
        '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
        '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
        '<plist/>'
    )
    parser = LayoutParser(body=content)
    nodes = parser.parse()
    assert parser.prolog == [
        '?xml version="1.0"?',
        '!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
        '"http://www.apple.com/DTDs/PropertyList-1.0.dtd"',
    ]
    assert nodes[-1] == Element(name='plist')
