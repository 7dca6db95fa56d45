"""Tests for Extended JSON pretty-printing."""

import json

from bson import ObjectId
from rich.console import Console

from mongoqb.builders import conditions, pipeline
from mongoqb.config.settings import Settings
from mongoqb.formatting import ExtendedJsonFormatter, print_document


def _sample_pipeline():
    return pipeline.pipe(
        pipeline.match(
            conditions.pipe(
                conditions.object_id_match("_id", "5c7836b73a8de34c78fec399"),
                conditions.equal_to("status", 1),
            )
        ),
        pipeline.project({"name": 1}),
    )


class TestExtendedJsonFormatter:
    """Test formatter output."""

    def test_formats_pipeline_in_order(self) -> None:
        text = ExtendedJsonFormatter().format(_sample_pipeline())
        parsed = json.loads(text)

        assert list(parsed[0]) == ["$match"]
        assert list(parsed[1]) == ["$project"]
        assert parsed[0]["$match"]["_id"]["$eq"] == {"$oid": "5c7836b73a8de34c78fec399"}

    def test_deterministic(self) -> None:
        formatter = ExtendedJsonFormatter()
        assert formatter.format(_sample_pipeline()) == formatter.format(_sample_pipeline())

    def test_indent(self) -> None:
        text = ExtendedJsonFormatter(indent=2).format(conditions.equal_to("a", 1))
        assert text == '{\n  "a": {\n    "$eq": 1\n  }\n}'

    def test_zero_indent_is_compact(self) -> None:
        text = ExtendedJsonFormatter(indent=0).format(conditions.equal_to("a", 1))
        assert text == '{"a": {"$eq": 1}}'

    def test_canonical_mode(self) -> None:
        text = ExtendedJsonFormatter(indent=0, mode="canonical").format({"n": 1})
        assert text == '{"n": {"$numberInt": "1"}}'

    def test_plain_documents(self) -> None:
        oid = ObjectId("000000000000000000000000")
        text = ExtendedJsonFormatter(indent=0).format({"_id": oid})
        assert text == '{"_id": {"$oid": "000000000000000000000000"}}'

    def test_from_settings(self) -> None:
        formatter = ExtendedJsonFormatter.from_settings(Settings(pretty_indent=2, json_mode="canonical"))
        assert formatter.indent == 2
        assert formatter.mode == "canonical"


class TestPrintDocument:
    """Test printing through an injected console."""

    def test_writes_to_console(self) -> None:
        console = Console(record=True, width=200)
        text = print_document(
            conditions.equal_to("status", 1),
            ExtendedJsonFormatter(indent=0),
            console,
            highlight=False,
        )

        assert text == '{"status": {"$eq": 1}}'
        assert '{"status": {"$eq": 1}}' in console.export_text()
