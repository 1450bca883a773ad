"""Tests for the per-format codecs and the capability table."""

import pytest
from pydantic import ValidationError

from parsebox.formats import FORMATS, LABELS, ConversionOptions, FormatTag, get_codec, resolve_tag
from parsebox.formats.tabular import EXTRA_FIELDS_KEY
from parsebox.values import Mapping, Primitive, Sequence, from_host


def _parse(tag, text, options=None):
    return get_codec(tag).parse(text, options or ConversionOptions())


def _serialize(tag, value, options=None):
    return get_codec(tag).serialize(value, options or ConversionOptions())


# ---------------------------------------------------------------------------
# Capability table
# ---------------------------------------------------------------------------


class TestCapabilityTable:
    def test_every_tag_has_a_codec(self):
        assert set(FORMATS) == set(FormatTag)

    def test_every_tag_has_a_label(self):
        assert set(LABELS) == set(FormatTag)

    def test_codec_label_matches_table(self):
        assert FORMATS[FormatTag.MSGPACK].label == "MessagePack"
        assert FORMATS[FormatTag.TEXT].label == "Plain Text"

    def test_resolve_tag_is_case_insensitive(self):
        assert resolve_tag(" JSON ") is FormatTag.JSON

    def test_resolve_tag_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            resolve_tag("docx")

    def test_auto_is_not_a_format(self):
        with pytest.raises(ValueError):
            get_codec("auto")


class TestConversionOptions:
    def test_defaults(self):
        opts = ConversionOptions()
        assert opts.indent == 2
        assert opts.xml_attribute_prefix == "@_"
        assert opts.xml_text_key == "#text"
        assert opts.csv_line_terminator == "\n"

    def test_indent_bounds(self):
        with pytest.raises(ValidationError):
            ConversionOptions(indent=0)
        with pytest.raises(ValidationError):
            ConversionOptions(indent=9)

    def test_line_terminator_restricted(self):
        with pytest.raises(ValidationError):
            ConversionOptions(csv_line_terminator="\r")

    def test_frozen(self):
        opts = ConversionOptions()
        with pytest.raises(ValidationError):
            opts.indent = 4


# ── Tree-shaped formats ───────────────────────────────────────────────


class TestJSON:
    def test_parse(self):
        assert _parse("json", '{"a":1,"b":[1,2]}') == from_host({"a": 1, "b": [1, 2]})

    def test_serialize_uses_indent(self):
        value = from_host({"a": 1})
        assert _serialize("json", value) == '{\n  "a": 1\n}'
        assert _serialize("json", value, ConversionOptions(indent=4)) == '{\n    "a": 1\n}'

    def test_non_ascii_kept(self):
        assert _serialize("json", Primitive("héllo")) == '"héllo"'

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            _parse("json", "{invalid")


class TestJSON5:
    def test_parse_comments_and_trailing_commas(self):
        text = "{\n  // comment\n  a: 1,\n  b: 'two',\n}"
        assert _parse("json5", text) == from_host({"a": 1, "b": "two"})

    def test_round_trip(self, sample_value):
        assert _parse("json5", _serialize("json5", sample_value)) == sample_value


class TestYAML:
    def test_parse(self):
        assert _parse("yaml", "a: 1\nb: 2\n") == from_host({"a": 1, "b": 2})

    def test_serialize_block_style_keeps_order(self):
        value = from_host({"b": 1, "a": [1, 2]})
        assert _serialize("yaml", value) == "b: 1\na:\n- 1\n- 2\n"

    def test_ambiguous_strings_survive(self):
        value = from_host({"answer": "yes", "count": "10"})
        assert _parse("yaml", _serialize("yaml", value)) == value


class TestTOML:
    def test_parse_tables(self):
        text = 'title = "x"\n\n[owner]\nname = "bob"\n'
        assert _parse("toml", text) == from_host({"title": "x", "owner": {"name": "bob"}})

    def test_dates_become_strings(self):
        assert _parse("toml", "d = 1979-05-27\n") == from_host({"d": "1979-05-27"})

    def test_nulls_dropped(self):
        assert _serialize("toml", from_host({"a": 1, "b": None})) == "a = 1\n"

    def test_requires_mapping(self):
        with pytest.raises(TypeError, match="table"):
            _serialize("toml", from_host([1, 2]))


class TestTOON:
    def test_round_trip(self):
        value = from_host({"name": "Alice", "age": 30, "tags": ["x", "y"]})
        assert _parse("toon", _serialize("toon", value)) == value

    def test_parse_inline_array(self):
        assert _parse("toon", "items[2]: a,b") == from_host({"items": ["a", "b"]})

    def test_serialize_nested_uses_indent(self):
        value = from_host({"outer": {"inner": 1}})
        text = _serialize("toon", value, ConversionOptions(indent=4))
        assert "\n    inner: 1" in text
        assert _parse("toon", text) == value


class TestXML:
    def test_attributes_and_children(self):
        value = _parse("xml", '<note id="7"><to>Bob</to></note>')
        assert value == from_host({"note": {"@_id": "7", "to": "Bob"}})

    def test_text_key(self):
        value = _parse("xml", '<a x="1">hi</a>')
        assert value == from_host({"a": {"@_x": "1", "#text": "hi"}})

    def test_custom_attribute_prefix(self):
        opts = ConversionOptions(xml_attribute_prefix="-")
        assert _parse("xml", '<a x="1"/>', opts) == from_host({"a": {"-x": "1"}})

    def test_serialize_attributes(self):
        out = _serialize("xml", from_host({"a": {"@_x": "1", "#text": "hi"}}))
        assert out == '<a x="1">hi</a>'

    def test_serialize_scalars_as_text(self):
        out = _serialize("xml", from_host({"root": {"n": 1, "ok": True}}))
        assert "<n>1</n>" in out
        assert "<ok>true</ok>" in out

    def test_serialize_sequence_wrapped(self):
        out = _serialize("xml", from_host([1, 2]))
        assert out.startswith("<root>")
        assert "<item>1</item>" in out
        assert "<item>2</item>" in out

    def test_serialize_primitive_wrapped(self):
        assert _serialize("xml", Primitive("x")) == "<root>x</root>"

    def test_malformed_raises(self):
        with pytest.raises(Exception):
            _parse("xml", "<a><b></a>")


# ── Record-oriented formats ───────────────────────────────────────────


class TestCSV:
    def test_parse_header_mode(self):
        value = _parse("csv", "name,age\nAlice,30\n")
        assert value == from_host([{"name": "Alice", "age": "30"}])

    def test_quoted_cells(self):
        value = _parse("csv", 'a,b\n"x, y","say ""hi"""\n')
        assert value == from_host([{"a": "x, y", "b": 'say "hi"'}])

    def test_extra_cells_collected(self):
        value = _parse("csv", "a,b\n1,2,3\n")
        assert value == from_host([{"a": "1", "b": "2", EXTRA_FIELDS_KEY: ["3"]}])

    def test_missing_cells_empty(self):
        assert _parse("csv", "a,b\n1\n") == from_host([{"a": "1", "b": ""}])

    def test_serialize_records(self):
        value = from_host([{"name": "Alice", "age": 30}])
        assert _serialize("csv", value) == "name,age\nAlice,30\n"

    def test_serialize_union_of_keys(self):
        value = from_host([{"a": 1}, {"b": 2}])
        assert _serialize("csv", value) == "a,b\n1,\n,2\n"

    def test_serialize_nested_cells_as_json(self):
        assert _serialize("csv", from_host({"a": [1, 2]})) == 'a\n"[1,2]"\n'

    def test_serialize_scalars_use_value_column(self):
        assert _serialize("csv", from_host([1, 2])) == "value\n1\n2\n"

    def test_crlf_option(self):
        opts = ConversionOptions(csv_line_terminator="\r\n")
        assert _serialize("csv", from_host([{"a": 1}]), opts) == "a\r\n1\r\n"

    def test_mapping_is_one_record(self):
        assert _parse("csv", _serialize("csv", from_host({"a": 1}))) == from_host([{"a": "1"}])

    def test_extra_cells_written_back_unheaded(self):
        value = _parse("csv", "a,b\n1,2,3,4\n")
        assert _serialize("csv", value) == "a,b\n1,2,3,4\n"
        assert _parse("csv", _serialize("csv", value)) == value


class TestTSV:
    def test_parse(self):
        assert _parse("tsv", "a\tb\n1\t2\n") == from_host([{"a": "1", "b": "2"}])

    def test_serialize(self):
        assert _serialize("tsv", from_host([{"a": "x", "b": "y"}])) == "a\tb\nx\ty\n"


class TestJSONL:
    def test_parse_skips_blank_lines(self):
        value = _parse("jsonl", '{"a":1}\n\n{"a":2}\n')
        assert value == from_host([{"a": 1}, {"a": 2}])

    def test_single_line_is_still_a_sequence(self):
        assert _parse("jsonl", '{"a":1}') == from_host([{"a": 1}])

    def test_serialize(self):
        assert _serialize("jsonl", from_host([{"a": 1}, [2]])) == '{"a":1}\n[2]'

    def test_serialize_mapping_as_one_line(self):
        assert _serialize("jsonl", from_host({"a": 1})) == '{"a":1}'


# ── Key/value formats ─────────────────────────────────────────────────


class TestINI:
    def test_parse_sections(self):
        value = _parse("ini", "[server]\nhost=localhost\nport=8080\n")
        assert value == from_host({"server": {"host": "localhost", "port": "8080"}})

    def test_root_keys_and_literals(self):
        text = 'debug=true\nname="quoted"\nnothing=null\n[s]\nflag\n'
        value = _parse("ini", text)
        assert value == from_host(
            {"debug": True, "name": "quoted", "nothing": None, "s": {"flag": True}}
        )

    def test_dotted_sections_nest(self):
        assert _parse("ini", "[a.b]\nc=1\n") == from_host({"a": {"b": {"c": "1"}}})

    def test_case_preserved(self):
        assert _parse("ini", "[S]\nKey=V\n") == from_host({"S": {"Key": "V"}})

    def test_serialize(self):
        value = from_host({"title": "x", "server": {"host": "h", "port": 8080}})
        assert _serialize("ini", value) == "title=x\n\n[server]\nhost=h\nport=8080\n"

    def test_serialize_nested_sections(self):
        value = from_host({"a": {"b": {"c": "1"}}})
        assert _parse("ini", _serialize("ini", value)) == value

    def test_literal_looking_strings_quoted(self):
        value = from_host({"flag": "true"})
        out = _serialize("ini", value)
        assert out == 'flag="true"\n'
        assert _parse("ini", out) == value

    def test_requires_mapping(self):
        with pytest.raises(TypeError):
            _serialize("ini", from_host([1]))


class TestDotenv:
    def test_parse(self):
        text = "API_KEY=abc\n# comment\nexport DEBUG=1\nEMPTY=\n"
        assert _parse("dotenv", text) == from_host({"API_KEY": "abc", "DEBUG": "1", "EMPTY": ""})

    def test_quoted_values(self):
        assert _parse("dotenv", 'MSG="hello world"\n') == from_host({"MSG": "hello world"})

    def test_no_interpolation(self):
        assert _parse("dotenv", "A=${HOME}\n") == from_host({"A": "${HOME}"})

    def test_serialize(self):
        value = from_host({"A": "x", "B": "hello world", "C": 1})
        assert _serialize("dotenv", value) == 'A=x\nB="hello world"\nC=1'

    def test_serialize_round_trip_escapes(self):
        value = from_host({"A": 'say "hi"\nbye'})
        assert _parse("dotenv", _serialize("dotenv", value)) == value

    def test_serialize_non_mapping_as_text(self):
        assert _serialize("dotenv", Primitive("hi")) == "hi"


class TestQueryString:
    def test_parse_flat(self):
        assert _parse("querystring", "a=1&b=2") == from_host({"a": "1", "b": "2"})

    def test_parse_brackets(self):
        value = _parse("querystring", "tags[]=x&tags[]=y&user[name]=bob")
        assert value == from_host({"tags": ["x", "y"], "user": {"name": "bob"}})

    def test_parse_indexed(self):
        assert _parse("querystring", "a[0]=x&a[1]=y") == from_host({"a": ["x", "y"]})

    def test_repeated_keys_collect(self):
        assert _parse("querystring", "a=1&a=2") == from_host({"a": ["1", "2"]})

    def test_decodes_escapes(self):
        value = _parse("querystring", "q=hello%20world&r=a+b")
        assert value == from_host({"q": "hello world", "r": "a b"})

    def test_serialize(self):
        value = from_host({"q": "a b", "list": ["x", "y"]})
        assert _serialize("querystring", value) == "q=a%20b&list%5B0%5D=x&list%5B1%5D=y"

    def test_serialize_round_trip(self):
        value = from_host({"user": {"name": "bob"}, "tags": ["x", "y"]})
        assert _parse("querystring", _serialize("querystring", value)) == value


# ── Encoding formats ──────────────────────────────────────────────────


class TestMessagePack:
    def test_serialize_is_base64(self):
        assert _serialize("msgpack", from_host({"a": 1})) == "gaFhAQ=="

    def test_parse(self):
        assert _parse("msgpack", "gaFhAQ==") == from_host({"a": 1})

    def test_round_trip(self, sample_value):
        assert _parse("msgpack", _serialize("msgpack", sample_value)) == sample_value


class TestBase64:
    def test_parse_text(self):
        assert _parse("base64", "aGVsbG8=") == Primitive("hello")

    def test_parse_json_payload(self):
        assert _parse("base64", "eyJhIjoxfQ==") == from_host({"a": 1})

    def test_serialize_flattens_structure(self):
        assert _serialize("base64", from_host({"a": 1})) == "eyJhIjoxfQ=="

    def test_ignores_whitespace(self):
        assert _parse("base64", "aGVs\nbG8=") == Primitive("hello")

    def test_invalid_raises(self):
        with pytest.raises(Exception):
            _parse("base64", "not base64!")


class TestHex:
    def test_parse(self):
        assert _parse("hex", "68656c6c6f") == Primitive("hello")

    def test_parse_with_spaces(self):
        assert _parse("hex", "68 69") == Primitive("hi")

    def test_serialize(self):
        assert _serialize("hex", Primitive("hi")) == "6869"

    def test_invalid_utf8_raises(self):
        with pytest.raises(UnicodeDecodeError):
            _parse("hex", "ff")


class TestBinary:
    def test_parse(self):
        assert _parse("binary", "01101000 01101001") == Primitive("hi")

    def test_serialize(self):
        assert _serialize("binary", Primitive("hi")) == "01101000 01101001"

    def test_partial_byte_rejected(self):
        with pytest.raises(ValueError):
            _parse("binary", "0101")


class TestURI:
    def test_parse_json_payload(self):
        assert _parse("uri", "%7B%22a%22%3A1%7D") == from_host({"a": 1})

    def test_plus_is_literal(self):
        assert _parse("uri", "a+b") == Primitive("a+b")

    def test_serialize_like_encode_uri_component(self):
        assert _serialize("uri", Primitive("a b&c!*'()")) == "a%20b%26c!*'()"

    def test_serialize_structure(self):
        assert _serialize("uri", from_host({"a": 1})) == "%7B%22a%22%3A1%7D"


class TestPlainText:
    def test_parse_keeps_text(self):
        assert _parse("text", '{"a":1}') == Primitive('{"a":1}')

    def test_serialize_structure_as_compact_json(self):
        assert _serialize("text", from_host({"a": [1, 2]})) == '{"a":[1,2]}'

    def test_serialize_scalar_spelling(self):
        assert _serialize("text", Primitive(True)) == "true"
        assert _serialize("text", Primitive(None)) == "null"
        assert _serialize("text", Primitive("x")) == "x"


def test_every_codec_returns_intermediate_values(sample_value, options):
    for tag in (FormatTag.JSON, FormatTag.YAML, FormatTag.JSON5, FormatTag.MSGPACK):
        parsed = FORMATS[tag].parse(FORMATS[tag].serialize(sample_value, options), options)
        assert isinstance(parsed, (Primitive, Sequence, Mapping))
