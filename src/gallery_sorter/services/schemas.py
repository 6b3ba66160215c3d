"""Structured output schemas shared by the extraction and sorting calls."""

SCHEMA_VERSION = "2"
METADATA_SCHEMA_NAME = f"image_metadata_v{SCHEMA_VERSION}"
SORTING_SCHEMA_NAME = f"image_groups_v{SCHEMA_VERSION}"

_METADATA_PROPERTIES: dict[str, object] = {
    "description": {
        "type": "string",
        "description": "A concise, one-sentence description of the image.",
    },
    "categories": {
        "type": "array",
        "description": "An array of 4-10 relevant keywords.",
        "items": {"type": "string"},
    },
    "dominant_colors": {
        "type": "array",
        "description": "An array of the top 3 dominant color hex codes in the image.",
        "items": {"type": "string"},
    },
    "has_people": {
        "type": "boolean",
        "description": "A boolean value indicating if people are present.",
    },
}


def _object_schema(properties: dict[str, object]) -> dict[str, object]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


METADATA_SCHEMA: dict[str, object] = _object_schema(_METADATA_PROPERTIES)

TAGGED_METADATA_SCHEMA: dict[str, object] = _object_schema(
    {
        "image_id": {
            "type": "string",
            "description": "The image_id of the input record, copied verbatim.",
        },
        **_METADATA_PROPERTIES,
    }
)

SORTING_SCHEMA: dict[str, object] = _object_schema(
    {
        "sorted_groups": {
            "type": "array",
            "description": (
                "An array of groups, where each group contains images "
                "belonging to that category."
            ),
            "items": _object_schema(
                {
                    "group_name": {
                        "type": "string",
                        "description": "The name of the category or group.",
                    },
                    "images": {"type": "array", "items": TAGGED_METADATA_SCHEMA},
                }
            ),
        }
    }
)
