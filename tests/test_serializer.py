"""Tests for CSDL serialization."""

from __future__ import annotations

from lxml import etree

from csdl_render.document import element
from csdl_render.namespaces import AGS, EDM, EDMX
from csdl_render.serializer import (
    XML_DECLARATION,
    build_envelope,
    format_xml,
    serialize,
    to_markup,
    xml_safe,
)


def _schema() -> object:
    return element(
        "Schema",
        {"Namespace": "Zoo"},
        [
            element(
                "EntityType",
                {"Name": "Pet"},
                [
                    element("Key", children=[element("PropertyRef", {"Name": "name"})]),
                    element("Property", {"Name": "name", "Type": "Edm.String", "Nullable": "false"}),
                ],
            )
        ],
    )


class TestFormatXml:
    """Tests for the indenting formatter."""

    def test_one_tag_per_line(self) -> None:
        text = format_xml("<a><b><c/></b><d x=\"1\"/></a>", newline="\n")

        assert text.split("\n") == [
            "<a>",
            "  <b>",
            "    <c/>",
            "  </b>",
            '  <d x="1"/>',
            "</a>",
        ]

    def test_whitespace_between_tags(self) -> None:
        text = format_xml("<a>\n   <b/>\n</a>", newline="\n")

        assert text == "<a>\n  <b/>\n</a>"

    def test_declaration_does_not_indent(self) -> None:
        text = format_xml('<?xml version="1.0"?><a><b/></a>', newline="\n")

        assert text.split("\n") == ['<?xml version="1.0"?>', "<a>", "  <b/>", "</a>"]

    def test_custom_indent_and_newline(self) -> None:
        text = format_xml("<a><b/></a>", indent="\t", newline="\r\n")

        assert text == "<a>\r\n\t<b/>\r\n</a>"

    def test_empty(self) -> None:
        assert format_xml("") == ""


class TestEnvelope:
    """Tests for the edmx envelope."""

    def test_structure(self) -> None:
        root = build_envelope([_schema()])

        assert root.tag == f"{{{EDMX}}}Edmx"
        assert root.get("Version") == "4.0"
        assert root.nsmap == {"ags": AGS, "edmx": EDMX}
        data_services = root[0]
        assert data_services.tag == f"{{{EDMX}}}DataServices"
        schema = data_services[0]
        assert schema.tag == f"{{{EDM}}}Schema"
        assert schema.get("Namespace") == "Zoo"
        assert schema[0].tag == f"{{{EDM}}}EntityType"

    def test_schema_namespaces_in_scope(self) -> None:
        """Test each Schema sees the EDM default namespace and the ags prefix."""
        text = serialize([_schema(), element("Schema", {"Namespace": "Empty"})])
        root = etree.fromstring(text.encode("utf-8"))

        for schema in root.iter(f"{{{EDM}}}Schema"):
            assert schema.nsmap[None] == EDM
            assert schema.nsmap["ags"] == AGS

    def test_attribute_order_preserved(self) -> None:
        markup = to_markup([_schema()])

        assert '<Property Name="name" Type="Edm.String" Nullable="false"/>' in markup

    def test_attribute_values_escaped(self) -> None:
        schema = element(
            "Schema",
            {"Namespace": "Zoo"},
            [element("ComplexType", {"Name": "A<B>&\"C\""})],
        )

        text = serialize([schema])
        parsed = etree.fromstring(text.encode("utf-8"))

        complex_type = parsed.find(f".//{{{EDM}}}ComplexType")
        assert complex_type.get("Name") == 'A<B>&"C"'

    def test_control_characters_replaced(self) -> None:
        """Test values with characters XML cannot carry still serialize."""
        schema = element(
            "Schema",
            {"Namespace": "Zoo"},
            [
                element(
                    "EnumType",
                    {"Name": "E"},
                    [element("EnumMember", {"Name": "A", "Value": "x\x01y"})],
                ),
                element(
                    "ComplexType",
                    {"Name": "M"},
                    [element("Property", {"Name": "p", "Type": "a\x00b"})],
                ),
            ],
        )

        text = serialize([schema])
        parsed = etree.fromstring(text.encode("utf-8"))

        assert parsed.find(f".//{{{EDM}}}EnumMember").get("Value") == "x\ufffdy"
        assert parsed.find(f".//{{{EDM}}}Property").get("Type") == "a\ufffdb"


class TestXmlSafe:
    """Tests for attribute value sanitizing."""

    def test_legal_text_unchanged(self) -> None:
        assert xml_safe("tab\there\nline\ré\U0001f600") == "tab\there\nline\ré\U0001f600"

    def test_illegal_characters(self) -> None:
        assert xml_safe("\x00a\x0bb\x1f\ufffe") == "\ufffda\ufffdb\ufffd\ufffd"


class TestSerialize:
    """Tests for complete document serialization."""

    def test_document_text(self) -> None:
        lines = serialize([_schema()], newline="\n").split("\n")

        assert lines[0] == XML_DECLARATION
        assert lines[1].startswith("<edmx:Edmx ")
        assert 'Version="4.0"' in lines[1]
        assert lines[2] == "  <edmx:DataServices>"
        assert lines[3].startswith("    <Schema ")
        assert 'Namespace="Zoo"' in lines[3]
        assert lines[4:] == [
            '      <EntityType Name="Pet">',
            "        <Key>",
            '          <PropertyRef Name="name"/>',
            "        </Key>",
            '        <Property Name="name" Type="Edm.String" Nullable="false"/>',
            "      </EntityType>",
            "    </Schema>",
            "  </edmx:DataServices>",
            "</edmx:Edmx>",
        ]

    def test_default_newline_is_crlf(self) -> None:
        text = serialize([_schema()])

        assert "\r\n" in text
        assert not text.endswith("\n")

    def test_well_formed(self) -> None:
        text = serialize([_schema(), element("Schema", {"Namespace": "Empty"})])

        root = etree.fromstring(text.encode("utf-8"))

        schemas = root.findall(f"{{{EDMX}}}DataServices/{{{EDM}}}Schema")
        assert [s.get("Namespace") for s in schemas] == ["Zoo", "Empty"]

    def test_no_schemas(self) -> None:
        text = serialize([], newline="\n")

        assert text.split("\n")[-2:] == ["  <edmx:DataServices/>", "</edmx:Edmx>"]

    def test_idempotent(self) -> None:
        assert serialize([_schema()]) == serialize([_schema()])
