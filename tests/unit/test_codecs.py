"""
Unit tests for the four output codecs.

Covers the flat form (one HarvestRecord per document) and the nested form
(HarvestTree), including the Title/Date sample scenario, defaults, multiple
values, quoting and JSON array folding of repeated elements.
"""

import io

import pytest

from veo_harvester import codecs
from veo_harvester.codecs import CSVCodec, JSONCodec, TSVCodec, XMLCodec, get_codec
from veo_harvester.exceptions import OutputError
from veo_harvester.harvesting import HarvestNode, HarvestTree
from veo_harvester.models import FieldSpec, FieldSpecList, OutputFormat


def sample_record():
    """Title (default 'Untitled') harvested once, Date (no default) absent."""
    specs = FieldSpecList([FieldSpec("doc/Title", default="Untitled"), FieldSpec("doc/Date")])
    record = specs.new_record()
    record.get("Title").values.append("Report A")
    return record


def single_field_record(values, default=None, attributes=()):
    specs = FieldSpecList([FieldSpec("doc/Keyword", default=default)])
    record = specs.new_record()
    record.get("Keyword").values.extend(values)
    record.get("Keyword").attributes.extend(attributes)
    return record


def leaf(path, value, attributes=None):
    node = HarvestNode(path, attributes)
    node.value = value
    return node


def repeated_tree():
    """P holds A, B, A where each A has an X child."""
    top = HarvestNode("r/P", ['id="p1"'])
    first = HarvestNode("r/P/A")
    first.add_child(leaf("r/P/A/X", "1"))
    second = HarvestNode("r/P/A")
    second.add_child(leaf("r/P/A/X", "3"))
    top.add_child(first)
    top.add_child(leaf("r/P/B", "2"))
    top.add_child(second)
    tree = HarvestTree()
    tree.add(top)
    return tree


class BrokenWriter:

    def write(self, text):
        raise OSError("disk full")

    def flush(self):
        pass


class TestSampleScenario:

    def test_csv(self):
        assert CSVCodec().render(sample_record()) == "Report A,"

    def test_tsv(self):
        assert TSVCodec().render(sample_record()) == "Report A\t"

    def test_json(self):
        assert JSONCodec().render(sample_record()) == '{"Title": "Report A", "Date": "null"}'

    def test_xml(self):
        assert XMLCodec().render(sample_record()) == "<Report>\n <Title>Report A</Title>\n <Date/>\n</Report>"


class TestDefaults:

    @pytest.mark.parametrize("codec, expected", [
        (CSVCodec(), "n/a"),
        (TSVCodec(), "n/a"),
        (JSONCodec(), '{"Keyword": "n/a"}'),
        (XMLCodec(), "<Report>\n <Keyword>n/a</Keyword>\n</Report>"),
    ])
    def test_default_rendered_when_nothing_harvested(self, codec, expected):
        assert codec.render(single_field_record([], default="n/a")) == expected

    def test_default_containing_separator_is_quoted(self):
        assert CSVCodec().render(single_field_record([], default="a,b")) == '"a,b"'

    def test_default_is_xml_encoded(self):
        assert XMLCodec().render(single_field_record([], default="R&D")) == \
            "<Report>\n <Keyword>R&amp;D</Keyword>\n</Report>"


class TestMultipleValues:

    def test_csv_joins_values(self):
        assert CSVCodec().render(single_field_record(["a", "b", "c"])) == "a$$b$$c"

    def test_json_values_become_keys(self):
        assert JSONCodec().render(single_field_record(["a", "b", "c"])) == \
            '{"Keyword": [{"a": "null"}, {"b": "null"}, {"c": "null"}]}'

    def test_xml_repeats_element_with_pooled_attributes(self):
        record = single_field_record(["a", "b", "c"], attributes=['lang="en"'])
        assert XMLCodec().render(record) == (
            "<Report>\n"
            ' <Keyword lang="en">a</Keyword>\n'
            ' <Keyword lang="en">b</Keyword>\n'
            ' <Keyword lang="en">c</Keyword>\n'
            "</Report>"
        )

    def test_single_value(self):
        record = single_field_record(["only"])
        assert CSVCodec().render(record) == "only"
        assert JSONCodec().render(record) == '{"Keyword": "only"}'
        assert XMLCodec().render(record) == "<Report>\n <Keyword>only</Keyword>\n</Report>"


class TestDelimitedQuoting:

    def test_csv_quotes_and_backslash_escapes(self):
        assert CSVCodec().render(single_field_record(['a,b"c'])) == '"a,b\\"c"'

    def test_tsv_leaves_commas_alone(self):
        assert TSVCodec().render(single_field_record(['a,b"c'])) == 'a,b"c'

    def test_each_value_escaped_before_joining(self):
        assert CSVCodec().render(single_field_record(["a,b", "c"])) == '"a,b"$$c'


class TestPreambles:

    def test_header_row(self):
        specs = FieldSpecList([FieldSpec("d/Title"), FieldSpec("d/a,b", tag="x,y")])
        assert CSVCodec().render_preamble(specs) == 'Title,"x,y"\n'
        assert TSVCodec().render_preamble(specs) == "Title\tx,y\n"
        assert CSVCodec().render_preamble(None) == ""

    def test_xml_wrapper(self):
        codec = XMLCodec()
        assert codec.render_preamble().startswith('<?xml version="1.0" encoding="UTF-8"')
        assert codec.render_preamble().endswith("<report>\n")
        assert codec.render_postamble() == "\n</report>\n"

    def test_delimited_records_end_with_newline(self):
        codec = CSVCodec()
        assert codec.encode(sample_record()) == "Report A,\n"
        assert codec.record_separator == ""
        assert codec.render_postamble() == ""

    def test_json_wrapper(self):
        codec = JSONCodec()
        assert codec.render_preamble() == '{"report":['
        assert codec.render_postamble() == "]}"
        assert codec.record_separator == ",\n"


class TestNestedForm:

    def test_json_folds_repeated_elements_into_array(self):
        assert JSONCodec().render(repeated_tree()) == \
            '{"P": {"id": "p1", "A": [{"X": "1"}, {"X": "3"}], "B": "2"}}'

    def test_json_repeated_leaves(self):
        top = HarvestNode("r/P")
        for value in ("1", "2"):
            top.add_child(leaf("r/P/A", value))
        tree = HarvestTree()
        tree.add(top)
        assert JSONCodec().render(tree) == '{"P": {"A": ["1", "2"]}}'

    def test_json_repeated_leaves_keep_their_attributes(self):
        top = HarvestNode("r/P")
        top.add_child(leaf("r/P/A", "1", ['id="a1"']))
        top.add_child(leaf("r/P/A", "2"))
        tree = HarvestTree()
        tree.add(top)
        assert JSONCodec().render(tree) == '{"P": {"A": [{"id": "a1", "#text": "1"}, "2"]}}'

    def test_json_leaf_with_attributes(self):
        tree = HarvestTree()
        tree.add(leaf("r/Title", "Minutes", ['lang="en"']))
        assert JSONCodec().render(tree) == '{"Title": {"lang": "en", "#text": "Minutes"}}'

    def test_json_render_is_repeatable(self):
        tree = repeated_tree()
        codec = JSONCodec()
        assert codec.render(tree) == codec.render(tree)

    def test_json_empty_and_attribute_only_nodes(self):
        tree = HarvestTree()
        tree.add(HarvestNode("r/Empty"))
        tree.add(HarvestNode("r/Flag", ['on="yes"']))
        assert JSONCodec().render(tree) == '{"Empty": "null", "Flag": {"on": "yes"}}'

    def test_xml_reproduces_subtree(self):
        assert XMLCodec().render(repeated_tree()) == (
            "<Report>\n"
            ' <P id="p1">\n'
            "  <A>\n"
            "   <X>1</X>\n"
            "  </A>\n"
            "  <B>2</B>\n"
            "  <A>\n"
            "   <X>3</X>\n"
            "  </A>\n"
            " </P>\n"
            "</Report>"
        )

    def test_empty_tree(self):
        assert XMLCodec().render(HarvestTree()) == "<Report/>"
        assert JSONCodec().render(HarvestTree()) == "{}"
        assert CSVCodec().render(HarvestTree()) == ""

    def test_delimited_uses_leaf_values(self):
        assert CSVCodec().render(repeated_tree()) == "1,2,3"
        assert TSVCodec().render(repeated_tree()) == "1\t2\t3"


class TestEntryPoints:

    def test_get_codec(self):
        assert isinstance(get_codec("json"), JSONCodec)
        assert isinstance(get_codec(OutputFormat.TSV), TSVCodec)
        assert get_codec("csv").file_extension == "csv"

    def test_module_functions_write_a_complete_stream(self):
        out = io.StringIO()
        record = sample_record()
        codecs.preamble(out, "csv", record.field_specs)
        codecs.emit(out, record, "csv")
        codecs.postamble(out, "csv")
        assert out.getvalue() == "Title,Date\nReport A,\n"

    def test_write_failure_is_output_error(self):
        with pytest.raises(OutputError):
            codecs.emit(BrokenWriter(), sample_record(), "json")

    def test_unknown_harvest_type(self):
        with pytest.raises(TypeError):
            JSONCodec().render({"Title": "x"})
