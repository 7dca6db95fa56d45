"""
Example 03: Query Templates

Demonstrates:
- Rendering a query file with {{ name }} placeholders
- Decoding into dict (Extended JSON) or bson.SON
- Error reporting for missing variables and malformed output

Prerequisites:
- None
"""

from pathlib import Path

from bson import SON
from rich.console import Console

from mongoqb.exceptions import TemplateRenderError, UndefinedVariable
from mongoqb.formatting import ExtendedJsonFormatter, print_document
from mongoqb.templating import TemplateEngine, extended_json_decoder

TEMPLATE = Path(__file__).parent / "templates" / "example_query_1.json"

console = Console()
formatter = ExtendedJsonFormatter()
engine = TemplateEngine()


def main():
    variables = {
        "id": "000000000000000000000000",
        "name": "john|jane",
        "statuses": [0, 1],
    }

    query = engine.build_file(TEMPLATE, variables)
    print_document(query, formatter, console)

    ordered = engine.build_file(TEMPLATE, variables, decoder=extended_json_decoder(SON))
    print(f"\nDecoded as {type(ordered).__name__} with keys {list(ordered)}")

    try:
        engine.build_file(TEMPLATE, {"id": "000000000000000000000000"})
    except UndefinedVariable as e:
        print(f"\nMissing variable: {e.name}")

    try:
        engine.build('{"name": {{ name }}}', {"name": "john"})
    except TemplateRenderError as e:
        print(f"\nRendered text that failed to decode:\n{e.rendered_text}")


if __name__ == "__main__":
    main()
