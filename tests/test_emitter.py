"""Tests for the renderer entry points."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from csdl_render import (
    CsdlRenderer,
    DeclarationContext,
    DiagnosticCode,
    Program,
    RenderOptions,
    emit_csdl,
    render_csdl,
)
from csdl_render.decorators import apply_id
from csdl_render.loader import route_resolver
from csdl_render.namespaces import EDM
from csdl_render.types import EnumType, IntrinsicType, Model, StringLiteral


class TestCsdlRenderer:
    """Tests for CsdlRenderer."""

    def test_render_scenario(self, pet_program: Program) -> None:
        """Test the rendered text of the Pet/Toy graph."""
        text = render_csdl(pet_program, RenderOptions(newline="\n"))

        assert "    <Schema " in text
        assert 'xmlns="http://docs.oasis-open.org/odata/ns/edm"' in text
        assert '      <EntityType Name="Pet">' in text
        assert '          <PropertyRef Name="name"/>' in text
        assert '        <Property Name="name" Type="Edm.String" Nullable="false"/>' in text
        assert '        <Property Name="age" Type="Edm.Int32" Nullable="false"/>' in text
        assert (
            '        <NavigationProperty Name="toys" Type="Collection(Zoo.Toy)" '
            'ContainsTarget="true"/>'
        ) in text
        assert '      <ComplexType Name="Toy">' in text
        assert '        <Property Name="description" Type="Edm.String"/>' in text
        assert "Cadl" not in text

    def test_render_is_idempotent(self, pet_program: Program) -> None:
        renderer = CsdlRenderer()

        assert renderer.render(pet_program).text == renderer.render(pet_program).text

    def test_render_does_not_touch_store(self, pet_program: Program) -> None:
        before = len(pet_program.store)

        render_csdl(pet_program)

        assert len(pet_program.store) == before

    def test_excluded_namespaces_option(self, pet_program: Program) -> None:
        text = render_csdl(pet_program, RenderOptions(excluded_namespaces=("Cadl", "Zoo")))

        assert "Schema" not in text
        assert "Cadl" not in text

    def test_empty_exclusions_render_intrinsics(self, pet_program: Program) -> None:
        text = render_csdl(pet_program, RenderOptions(excluded_namespaces=()))

        assert 'Namespace="Cadl"' in text

    def test_diagnostics_collected(self, program: Program) -> None:
        """Test declaration and rendering diagnostics reach the result."""
        zoo = program.global_namespace.child("Zoo")
        model = zoo.add(Model(name="Holder"))
        model.add_property("nothing", IntrinsicType(name="void"))
        apply_id(DeclarationContext(program, "Zoo.Holder"), model)

        result = CsdlRenderer().render(program)

        codes = [d.code for d in result.diagnostics]
        assert codes == [DiagnosticCode.INVALID_ANNOTATION_TARGET, DiagnosticCode.UNRENDERABLE_TYPE]
        assert result.error_count == 1
        assert not result.is_clean
        assert '<ComplexType Name="Holder">' in result.text

    def test_control_characters_do_not_fail_render(self, program: Program) -> None:
        zoo = program.global_namespace.child("Zoo")
        zoo.add(EnumType(name="E")).add_member("A", "x\x01y")
        zoo.add(Model(name="M")).add_property("p", StringLiteral(value="a\x00b"))

        text = render_csdl(program)

        root = etree.fromstring(text.encode("utf-8"))
        assert root.find(f".//{{{EDM}}}EnumMember").get("Value") == "x\ufffdy"
        assert root.find(f".//{{{EDM}}}Property").get("Type") == "a\ufffdb"

    def test_rendering_twice_does_not_duplicate_diagnostics(self, program: Program) -> None:
        zoo = program.global_namespace.child("Zoo")
        zoo.add(Model(name="Holder")).add_property("nothing", IntrinsicType(name="void"))
        renderer = CsdlRenderer()

        renderer.render(program)
        result = renderer.render(program)

        assert len(result.diagnostics) == 1
        assert program.diagnostics == []


class TestEmit:
    """Tests for writing the document."""

    def test_emit_writes_file(self, pet_program: Program, tmp_path: Path) -> None:
        output_dir = tmp_path / "out"

        result = emit_csdl(pet_program, output_dir)

        output = output_dir / "csdl.xml"
        assert result.output_path == str(output)
        assert output.read_bytes() == result.text.encode("utf-8")
        root = etree.fromstring(output.read_bytes())
        assert root.find(f".//{{{EDM}}}EntityType").get("Name") == "Pet"

    def test_custom_filename(self, pet_program: Program, tmp_path: Path) -> None:
        emit_csdl(pet_program, tmp_path, RenderOptions(output_filename="schema.csdl"))

        assert (tmp_path / "schema.csdl").exists()
        assert not (tmp_path / "csdl.xml").exists()

    def test_entity_container(self, zoo_program: Program, tmp_path: Path) -> None:
        result = emit_csdl(
            zoo_program,
            tmp_path,
            RenderOptions(entity_container=True),
            route_resolver=route_resolver(zoo_program.store),
        )

        root = etree.fromstring(result.text.encode("utf-8"))
        entity_sets = root.findall(f".//{{{EDM}}}EntityContainer/{{{EDM}}}EntitySet")
        assert [(e.get("Name"), e.get("EntityType")) for e in entity_sets] == [
            ("pets", "Zoo.Pet")
        ]
