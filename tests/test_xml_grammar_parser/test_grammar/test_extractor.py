"""Tests for convention-based extraction."""

import dataclasses

import pytest

from xml_grammar_parser import XmlGrammarParser, parse_string
from xml_grammar_parser.grammar.extractor import (
    ExtractorMode,
    GenericExtractor,
    PojoGrammar,
    ShapeKind,
    ShapeNode,
    field_for,
    lower_first_letter,
    store_in_parent,
)
from xml_grammar_parser.grammar.state import ReaderState
from xml_grammar_parser.grammar.node import GrammarNode


class TestNaming:
    """Test the field-name derivation rule."""

    @pytest.mark.parametrize("name,expected", [
        ("DisplayName", "displayName"),
        ("Machine", "machine"),
        ("machine", "machine"),
        ("URL", "uRL"),
        ("X", "x"),
        ("", ""),
    ])
    def test_lower_first_letter(self, name, expected):
        """Test that only the first character is lowercased."""
        assert lower_first_letter(name) == expected

    def test_field_for_list(self):
        """Test that ListOf wrappers become arrays named after the remainder."""
        assert field_for("ListOfMachines") == ("machines", ShapeKind.ARRAY)

    def test_field_for_object(self):
        """Test that other elements become objects."""
        assert field_for("Machine") == ("machine", ShapeKind.OBJECT)

    def test_prefix_is_case_sensitive(self):
        """Test that only the exact ListOf prefix triggers arrays."""
        assert field_for("ListofMachines") == ("listofMachines", ShapeKind.OBJECT)


class TestShapeNode:
    """Test the tagged object/array node."""

    def test_object_attach(self):
        """Test attaching a child to an object node."""
        parent = ShapeNode.create(ShapeKind.OBJECT)
        child = ShapeNode.create(ShapeKind.ARRAY)

        parent.attach("items", child)

        assert parent.value == {"items": []}
        assert parent.value["items"] is child.value

    def test_array_attach(self):
        """Test that array nodes append and ignore the field name."""
        parent = ShapeNode.create(ShapeKind.ARRAY)

        parent.attach("ignored", ShapeNode.create(ShapeKind.OBJECT))
        parent.attach("ignored", ShapeNode.create(ShapeKind.OBJECT))

        assert parent.value == [{}, {}]

    def test_array_leaf_replaces_placeholder(self):
        """Test that a leaf value replaces the last appended element."""
        parent = ShapeNode.create(ShapeKind.ARRAY)
        parent.attach("value", ShapeNode.create(ShapeKind.OBJECT))

        parent.assign_leaf("value", "42")

        assert parent.value == ["42"]

    def test_kind_is_fixed(self):
        """Test that a node's kind cannot change once created."""
        node = ShapeNode.create(ShapeKind.OBJECT)

        with pytest.raises(dataclasses.FrozenInstanceError):
            node.kind = ShapeKind.ARRAY


class TestDocumentExtraction:
    """Test grammar-less parsing of whole documents."""

    def test_simple_document(self):
        """Test nested objects with a decoded leaf."""
        result = parse_string(
            "<Machine>"
            "<DisplayName>&lt;HelloWorld&gt;</DisplayName>"
            "</Machine>"
        )

        assert result == {"machine": {"displayName": "<HelloWorld>"}}

    def test_array_convention(self):
        """Test that ListOf wrappers produce arrays of their children."""
        result = parse_string("""
<Plant>
<ListOfMachines>
<Machine><DisplayName>Machine1</DisplayName></Machine>
<Machine><DisplayName>Machine2</DisplayName></Machine>
<Machine><DisplayName>Machine3</DisplayName></Machine>
<Machine><DisplayName>Machine4</DisplayName></Machine>
</ListOfMachines>
</Plant>
""")

        assert result == {
            "plant": {
                "machines": [
                    {"displayName": "Machine1"},
                    {"displayName": "Machine2"},
                    {"displayName": "Machine3"},
                    {"displayName": "Machine4"},
                ]
            }
        }

    def test_array_of_leaves(self):
        """Test that leaf items of an array become strings."""
        result = parse_string(
            "<Value><ListOfString><String>a</String><String>b</String></ListOfString></Value>"
        )

        assert result == {"value": {"string": ["a", "b"]}}

    def test_nested_arrays(self):
        """Test that a ListOf inside an array becomes a nested array."""
        result = parse_string(
            "<R><ListOfListOfInt>"
            "<ListOfInt><Int>1</Int><Int>2</Int></ListOfInt>"
            "<ListOfInt><Int>3</Int></ListOfInt>"
            "</ListOfListOfInt></R>"
        )

        assert result == {"r": {"listOfInt": [["1", "2"], ["3"]]}}

    def test_empty_element(self):
        """Test that elements without text or children stay empty objects."""
        assert parse_string("<R><Empty/></R>") == {"r": {"empty": {}}}

    def test_empty_list(self):
        """Test that an empty ListOf wrapper gives an empty array."""
        assert parse_string("<R><ListOfItems/></R>") == {"r": {"items": []}}

    def test_namespace_prefix_ignored(self):
        """Test that prefixes do not leak into field names."""
        result = parse_string("<ua:Node><ua:BrowseName>N</ua:BrowseName></ua:Node>")

        assert result == {"node": {"browseName": "N"}}

    def test_tail_text_does_not_replace_object(self):
        """Test that text after child elements does not overwrite the object."""
        result = parse_string("<R><A><B>1</B>tail</A></R>")

        assert result == {"r": {"a": {"b": "1"}}}

    def test_repeated_fields_keep_last(self):
        """Test that repeated elements outside a ListOf overwrite each other."""
        result = parse_string("<R><Item>1</Item><Item>2</Item></R>")

        assert result == {"r": {"item": "2"}}

    def test_parses_are_independent(self):
        """Test that one parser can extract several documents."""
        parser = XmlGrammarParser()

        first = parser.parse_string("<A><B>1</B></A>")
        second = parser.parse_string("<C><D>2</D></C>")

        assert first == {"a": {"b": "1"}}
        assert second == {"c": {"d": "2"}}


class TestElementExtraction:
    """Test extraction of single elements inside a declared grammar."""

    def test_pojo_grammar_stores_in_parent(self):
        """Test that the default delivery stores under the camelCase name."""
        grammar = {
            "children": {
                "Body": {
                    "children": {"Structure1": PojoGrammar()},
                    "finish": lambda state: state.root.data.update(body=state.data),
                }
            }
        }

        result = parse_string(
            "<Doc><Body><Structure1><Name>Foo</Name><Id>1</Id></Structure1></Body></Doc>",
            grammar,
        )

        assert result == {"body": {"structure1": {"name": "Foo", "id": "1"}}}

    def test_pojo_grammar_leaf(self):
        """Test that a leaf element is delivered as its text."""
        received = []
        grammar = {
            "children": {
                "Title": PojoGrammar(on_done=lambda parent, name, value: received.append((name, value))),
            }
        }

        parse_string("<Doc><Title> Hello </Title></Doc>", grammar)

        assert received == [("Title", "Hello")]

    def test_pojo_grammar_list_root(self):
        """Test that a ListOf element handled generically becomes an array."""
        received = []
        grammar = {
            "children": {
                "ListOfInt32": PojoGrammar(on_done=lambda parent, name, value: received.append(value)),
            }
        }

        parse_string("<V><ListOfInt32><Int32>1</Int32><Int32>2</Int32></ListOfInt32></V>", grammar)

        assert received == [["1", "2"]]

    def test_extractor_state_modes(self):
        """Test that states created by PojoGrammar carry its mode."""
        state = PojoGrammar().create_state()

        assert isinstance(state, GenericExtractor)
        assert state.mode is ExtractorMode.ELEMENT

    def test_store_in_parent_without_data(self):
        """Test that delivery to a parent without data is a no-op."""
        store_in_parent(None, "Name", "value")

        state = ReaderState(GrammarNode())
        store_in_parent(state, "Name", "value")

        assert state.data == {"name": "value"}
