"""
Example 01: Condition Builders

Demonstrates:
- Equality, prefix and ObjectId fragments
- Combining fragments with pipe() (AND, last-write-wins per key)
- Opt-in identifier fallback

Prerequisites:
- None (no database connection needed; filters are only built and printed)
"""

from rich.console import Console

from mongoqb import conditions
from mongoqb.exceptions import InvalidIdentifier
from mongoqb.formatting import ExtendedJsonFormatter, print_document

console = Console()
formatter = ExtendedJsonFormatter()


def example_fragments():
    print("=" * 60)
    print("Example 1: Single fragments")
    print("=" * 60)

    print_document(conditions.equal_to("status", 1), formatter, console)
    # Regex metacharacters in the prefix are escaped
    print_document(conditions.string_starts_with("model", "T6.54"), formatter, console)
    print_document(conditions.object_id_match("_id", "5c7836b73a8de34c78fec399"), formatter, console)


def example_pipe():
    print("=" * 60)
    print("Example 2: Composite filter")
    print("=" * 60)

    query = conditions.pipe(
        conditions.object_id_match("_id", "5c7836b73a8de34c78fec399"),
        conditions.equal_to("status", 1),
        conditions.string_starts_with("model", "T654"),
    )
    print_document(query, formatter, console)

    # collection.find(query.to_mongo())
    print("\nSame key twice -> last fragment wins:")
    print_document(
        conditions.pipe(conditions.equal_to("status", 1), conditions.equal_to("status", 2)),
        formatter,
        console,
    )


def example_identifiers():
    print("=" * 60)
    print("Example 3: Invalid identifiers")
    print("=" * 60)

    try:
        conditions.object_id_match("_id", "not-a-valid-hex")
    except InvalidIdentifier as e:
        print(f"Rejected: {e}")

    fragment = conditions.object_id_match("_id", "not-a-valid-hex", allow_fallback=True)
    print(f"With fallback a generated id is used: {fragment.value}")


if __name__ == "__main__":
    example_fragments()
    example_pipe()
    example_identifiers()
