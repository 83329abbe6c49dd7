"""pytest configuration and fixtures for csdl_render tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from csdl_render import DeclarationContext, Program, apply_contains, apply_id, load_program
from csdl_render.types import ArrayType, Model, Namespace
from tests.fixture_loader import fixture_path


@dataclass
class Intrinsics:
    """Intrinsic scalar models declared in the Cadl namespace."""

    string: Model
    int32: Model
    int64: Model
    boolean: Model


@pytest.fixture
def program() -> Program:
    """Provide an empty program."""
    return Program()


@pytest.fixture
def intrinsics(program: Program) -> Intrinsics:
    """Declare intrinsic models on the program."""
    cadl = program.global_namespace.child("Cadl")
    return Intrinsics(
        string=cadl.add(Model(name="string")),
        int32=cadl.add(Model(name="int32")),
        int64=cadl.add(Model(name="int64")),
        boolean=cadl.add(Model(name="boolean")),
    )


@pytest.fixture
def context(program: Program) -> DeclarationContext:
    """Provide a declaration context on the program."""
    return DeclarationContext(program, site="test")


@pytest.fixture
def zoo(program: Program) -> Namespace:
    """Provide an empty Zoo namespace."""
    return program.global_namespace.child("Zoo")


@pytest.fixture
def pet_program(
    program: Program, intrinsics: Intrinsics, context: DeclarationContext, zoo: Namespace
) -> Program:
    """Zoo with Pet { @id name: string, age: int32, @contains toys: Toy[] }."""
    toy = zoo.add(Model(name="Toy"))
    toy.add_property("description", intrinsics.string, optional=True)

    pet = zoo.add(Model(name="Pet"))
    name = pet.add_property("name", intrinsics.string)
    pet.add_property("age", intrinsics.int32)
    toys = pet.add_property("toys", ArrayType(element_type=toy))

    apply_id(context.at("Zoo.Pet.name"), name)
    apply_contains(context.at("Zoo.Pet.toys"), toys)
    return program


@pytest.fixture
def zoo_graph_path() -> Path:
    """Path of the zoo JSON type graph."""
    return fixture_path("graphs", "zoo.json")


@pytest.fixture
def zoo_program(zoo_graph_path: Path) -> Program:
    """Program loaded from the zoo JSON type graph."""
    return load_program(zoo_graph_path)
