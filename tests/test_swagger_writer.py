"""
Unit tests for SwaggerWriter

Tests:
- Document preamble and fragment splicing
- Model and field exclusion
- $ref / array / map formatting (checked by parsing the YAML back)
- Atomic writes and failure handling
- Field descriptions
"""

import os
import stat
from pathlib import Path

import pytest
import yaml

from swaggergen.descriptions.lookup import DescriptionLookup
from swaggergen.exporter.swagger_writer import SchemaWriteError, SwaggerWriter, load_fragment
from swaggergen.mapper.type_mapper import INT32, INT64, STRING, STRING_MAP
from swaggergen.schema.models import FieldClassification, FieldKind, Model, SchemaType


@pytest.fixture
def models():
    return {
        "Person": Model("Person", "com.example.Person", {
            "name": FieldClassification.primitive(STRING),
            "age": FieldClassification.primitive(INT32),
            "address": FieldClassification.reference("Address"),
            "pets": FieldClassification.array_of_reference("Pet"),
            "serialVersionUID": FieldClassification.primitive(INT64),
        }),
        "Address": Model("Address", "com.example.Address", {
            "city": FieldClassification.primitive(STRING),
        }),
        "Pet": Model("Pet", "com.example.Pet", {
            "name": FieldClassification.primitive(STRING),
            "photo": FieldClassification.binary(),
            "attributes": FieldClassification.opaque_map(STRING_MAP),
            "nicknames": FieldClassification.array_of_primitive(STRING),
        }),
    }


@pytest.fixture
def writer():
    return SwaggerWriter(excluded_models=["Dates"], excluded_fields=["serialVersionUID"])


FRAGMENT = """\
  ErrorResponse:
    type: object
    properties:
      code:
        type: string
"""


class StaticDescriptions(DescriptionLookup):
    """Descriptions keyed by property key"""

    def __init__(self, descriptions):
        super().__init__()
        self.descriptions = descriptions
        self.calls = []

    def _fetch(self, key):
        self.calls.append(key)
        return self.descriptions.get(key)


# ============================================================================
# TEST: Rendering
# ============================================================================


class TestRender:
    """Tests for document rendering"""

    def test_preamble(self, writer):
        content = writer.render({})

        assert content.startswith("swagger: '2.0'\n")
        document = yaml.safe_load(content)
        assert document["info"] == {
            "description": "API TRON Objects",
            "version": "1.0.0",
            "title": "API TRON Objects",
        }
        assert document["paths"] == {}
        assert document["definitions"] is None

    def test_custom_info(self):
        writer = SwaggerWriter(title="Pet Store", description="It's a store", version="2.1")

        document = yaml.safe_load(writer.render({}))

        assert document["info"] == {"description": "It's a store", "version": "2.1", "title": "Pet Store"}

    def test_round_trip(self, writer, models):
        """Test the written definitions parse back to the expected schemas"""
        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert definitions["Person"] == {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "integer", "format": "int32"},
                "address": {"$ref": "#/definitions/Address"},
                "pets": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
            },
        }
        assert definitions["Pet"]["properties"] == {
            "name": {"type": "string"},
            "photo": {"type": "string", "format": "binary"},
            "attributes": {"type": "object", "additionalProperties": {"type": "string"}},
            "nicknames": {"type": "array", "items": {"type": "string"}},
        }

    def test_ref_formatting(self, writer, models):
        content = writer.render(models)

        assert "      address:\n        $ref: '#/definitions/Address'\n" in content
        assert (
            "      pets:\n"
            "        type: array\n"
            "        items:\n"
            "          $ref: '#/definitions/Pet'\n"
        ) in content

    def test_models_sorted_and_fields_in_order(self, writer, models):
        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert list(definitions) == ["Address", "Person", "Pet"]
        assert list(definitions["Pet"]["properties"]) == ["name", "photo", "attributes", "nicknames"]

    def test_fragment_spliced_verbatim(self, models):
        writer = SwaggerWriter(fragment=FRAGMENT)

        content = writer.render(models)

        assert "definitions:\n" + FRAGMENT in content
        definitions = yaml.safe_load(content)["definitions"]
        assert definitions["ErrorResponse"]["properties"]["code"] == {"type": "string"}
        assert "Person" in definitions

    def test_cycle_stub_field_is_ref(self, writer):
        models = {"Node": Model("Node", "x.Node", {"next": FieldClassification.cycle_stub("Node")})}

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert definitions["Node"]["properties"]["next"] == {"$ref": "#/definitions/Node"}

    def test_yaml_keyword_names_stay_strings(self, writer):
        """Test names YAML would read as booleans or null"""
        models = {
            "Switch": Model("Switch", "x.Switch", {
                "on": FieldClassification.primitive(STRING),
                "no": FieldClassification.primitive(INT32),
                "null": FieldClassification.primitive(STRING),
                "true": FieldClassification.reference("yes"),
            }),
            "yes": Model("yes", "x.yes", {"off": FieldClassification.primitive(STRING)}),
        }

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert list(definitions) == ["Switch", "yes"]
        assert list(definitions["Switch"]["properties"]) == ["on", "no", "null", "true"]
        assert definitions["Switch"]["properties"]["no"] == {"type": "integer", "format": "int32"}
        assert definitions["Switch"]["properties"]["true"] == {"$ref": "#/definitions/yes"}
        assert list(definitions["yes"]["properties"]) == ["off"]

    def test_enum_values(self, writer):
        color = SchemaType("string", enum=("RED", "NO", "GREEN"))
        models = {"Paint": Model("Paint", "x.Paint", {
            "color": FieldClassification.primitive(color),
            "palette": FieldClassification.array_of_primitive(color),
        })}

        properties = yaml.safe_load(writer.render(models))["definitions"]["Paint"]["properties"]

        assert properties["color"] == {"type": "string", "enum": ["RED", "NO", "GREEN"]}
        assert properties["palette"] == {"type": "array", "items": {"type": "string", "enum": ["RED", "NO", "GREEN"]}}


class TestExclusions:
    """Tests for skipped models and fields"""

    def test_excluded_model_absent(self, models):
        models["Dates"] = Model("Dates", "com.example.Dates", {"start": FieldClassification.primitive(INT64)})
        writer = SwaggerWriter(excluded_models=["Dates"])

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert "Dates" not in definitions

    def test_excluded_field_absent(self, writer, models):
        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert "serialVersionUID" not in definitions["Person"]["properties"]

    def test_only_field_excluded(self, writer):
        models = {"Versioned": Model("Versioned", "x.Versioned", {
            "serialVersionUID": FieldClassification.primitive(INT64),
        })}

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert definitions["Versioned"] == {"type": "object", "properties": {}}

    def test_cycle_stub_and_empty_models_skipped(self, writer, models):
        models["Loop"] = Model.stub("Loop", "com.example.Loop")
        models["Marker"] = Model("Marker", "com.example.Marker", {})

        content = writer.render(models)

        assert "com.example.Loop" not in content
        definitions = yaml.safe_load(content)["definitions"]
        assert "Loop" not in definitions
        assert "Marker" not in definitions


class TestDescriptions:
    """Tests for field descriptions"""

    def test_descriptions_added_to_primitives(self, models):
        lookup = StaticDescriptions({"NAME": "full name", "CITY": "city name"})
        writer = SwaggerWriter(description_lookup=lookup)

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert definitions["Person"]["properties"]["name"]["description"] == "Full Name"
        assert definitions["Address"]["properties"]["city"]["description"] == "City Name"
        assert "description" not in definitions["Person"]["properties"]["age"]

    def test_references_are_not_looked_up(self, models):
        lookup = StaticDescriptions({})
        SwaggerWriter(description_lookup=lookup).render(models)

        assert "ADDRESS" not in lookup.calls
        assert "PETS" not in lookup.calls
        assert "CITY" in lookup.calls

    def test_lookup_failure_ignored(self, models):
        class Broken:
            def find_description(self, name):
                raise RuntimeError("database down")

        writer = SwaggerWriter(description_lookup=Broken())

        definitions = yaml.safe_load(writer.render(models))["definitions"]

        assert writer.errors == []
        assert definitions["Address"]["properties"]["city"] == {"type": "string"}

    def test_special_characters_survive(self, models):
        lookup = StaticDescriptions({"CITY": "city: name # local"})

        definitions = yaml.safe_load(SwaggerWriter(description_lookup=lookup).render(models))["definitions"]

        assert definitions["Address"]["properties"]["city"]["description"] == "City: Name # Local"


# ============================================================================
# TEST: Writing
# ============================================================================


class TestWrite:
    """Tests for file output"""

    def test_write_creates_file(self, tmp_path, writer, models):
        output_file = tmp_path / "out" / "swagger.yaml"

        content = writer.write(models, output_file)

        assert output_file.read_text(encoding="utf-8") == content
        assert yaml.safe_load(content)["swagger"] == "2.0"
        assert os.listdir(output_file.parent) == ["swagger.yaml"]

    def test_write_replaces_existing(self, tmp_path, writer, models):
        output_file = tmp_path / "swagger.yaml"
        output_file.write_text("old")

        writer.write(models, output_file)

        assert "Person" in yaml.safe_load(output_file.read_text())["definitions"]

    def test_failed_field_writes_nothing(self, tmp_path, writer, models):
        models["Broken"] = Model("Broken", "x.Broken", {
            "ok": FieldClassification.primitive(STRING),
            "bad": FieldClassification(FieldKind.PRIMITIVE),
        })
        output_file = tmp_path / "swagger.yaml"

        with pytest.raises(SchemaWriteError) as exc_info:
            writer.write(models, output_file)

        assert not output_file.exists()
        assert exc_info.value.errors == ["Broken.bad: no schema type for primitive field"]
        assert os.listdir(tmp_path) == []

    def test_failed_field_keeps_previous_file(self, tmp_path, writer):
        output_file = tmp_path / "swagger.yaml"
        output_file.write_text("previous")
        models = {"Broken": Model("Broken", "x.Broken", {"ref": FieldClassification(FieldKind.REFERENCE)})}

        with pytest.raises(SchemaWriteError):
            writer.write(models, output_file)

        assert output_file.read_text() == "previous"

    def test_unwritable_target(self, tmp_path, writer, models):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(SchemaWriteError, match="Cannot write"):
            writer.write(models, blocker / "swagger.yaml")

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_new_file_follows_umask(self, tmp_path, writer, models):
        output_file = tmp_path / "swagger.yaml"
        previous = os.umask(0o022)
        try:
            writer.write(models, output_file)
        finally:
            os.umask(previous)

        assert stat.S_IMODE(output_file.stat().st_mode) == 0o644

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_replaced_file_keeps_mode(self, tmp_path, writer, models):
        output_file = tmp_path / "swagger.yaml"
        output_file.write_text("old")
        os.chmod(output_file, 0o640)

        writer.write(models, output_file)

        assert stat.S_IMODE(output_file.stat().st_mode) == 0o640


class TestLoadFragment:
    """Tests for load_fragment"""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "source_definitions.txt"
        path.write_text(FRAGMENT)

        assert load_fragment(path) == FRAGMENT

    def test_missing_file_is_empty(self, tmp_path):
        assert load_fragment(tmp_path / "missing.txt") == ""

    def test_no_path(self):
        assert load_fragment(None) == ""
        assert load_fragment(Path("")) == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
