"""
Example 02: Aggregation Pipeline

Demonstrates:
- $match built from condition fragments
- $project, $sort and $limit stages
- Ordered pipeline assembly and concatenation
- Running the pipeline with pymongo (optional)

Prerequisites:
- MONGODB_URI in environment to actually run the aggregation
"""

import os

from rich.console import Console

from mongoqb import conditions, pipeline
from mongoqb.formatting import ExtendedJsonFormatter, print_document

console = Console()


def build_device_pipeline(device_id: str) -> pipeline.Pipeline:
    return pipeline.pipe(
        pipeline.match(
            conditions.pipe(
                conditions.object_id_match("_id", device_id),
                conditions.equal_to("status", 1),
                conditions.string_starts_with("model", "T654"),
            )
        ),
        pipeline.project({"name": 1, "make": 1, "model": 1}),
    )


def main():
    stages = build_device_pipeline("5c7836b73a8de34c78fec399")
    paged = stages + pipeline.pipe(pipeline.sort({"name": 1}), pipeline.limit(20))

    print_document(paged, ExtendedJsonFormatter(), console)

    uri = os.getenv("MONGODB_URI")
    if not uri:
        print("\nMONGODB_URI not set - skipping execution")
        return

    from pymongo import MongoClient

    client = MongoClient(uri)
    try:
        devices = client[os.getenv("MONGODB_DATABASE", "test")]["devices"]
        for doc in devices.aggregate(paged.to_mongo()):
            print(doc)
    finally:
        client.close()


if __name__ == "__main__":
    main()
