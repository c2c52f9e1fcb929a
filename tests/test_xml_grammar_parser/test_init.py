"""Test module for xml_grammar_parser package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xml_grammar_parser

    # Assert
    assert xml_grammar_parser is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_grammar_parser

    # Assert
    assert isinstance(xml_grammar_parser.__version__, str)
    assert xml_grammar_parser.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import xml_grammar_parser

    # Assert
    assert xml_grammar_parser.__author__ == "XML Grammar Parser Team"


def test_package_all_exports() -> None:
    """Test that __all__ contains expected exports."""
    # Arrange & Act
    import xml_grammar_parser

    # Assert
    expected = {
        "parse_string",
        "parse_file",
        "parse_string_async",
        "parse_file_async",
        "XmlGrammarParser",
        "Engine",
        "GrammarNode",
        "PojoGrammar",
        "ParserConfig",
        "XmlGrammarError",
        "ConfigurationError",
        "MalformedDocumentError",
    }
    assert expected <= set(xml_grammar_parser.__all__)
    for name in xml_grammar_parser.__all__:
        assert hasattr(xml_grammar_parser, name)
