from __future__ import annotations

import copy
from typing import Any, Dict, Set

# Response shape handed to the model service. Must stay in step with
# result.models.TestResult.
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {
            "type": "STRING",
            "description": 'The main title of the test, e.g., "SYNTAX TEST".',
        },
        "timeAllotted": {
            "type": "STRING",
            "description": 'The time allotted for the test, e.g., "60 minutes".',
        },
        "questions": {
            "type": "ARRAY",
            "description": "An array of all questions found in the test.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "questionNumber": {
                        "type": "INTEGER",
                        "description": "The number of the question, e.g., 1, 2, 3.",
                    },
                    "english": {
                        "type": "OBJECT",
                        "properties": {
                            "prompt": {
                                "type": "STRING",
                                "description": "The instruction or prompt for the question in English.",
                            },
                            "content": {
                                "type": "STRING",
                                "description": "The specific content of the question, like the sentence to be analyzed.",
                            },
                        },
                    },
                    "vietnamese": {
                        "type": "OBJECT",
                        "properties": {
                            "prompt": {
                                "type": "STRING",
                                "description": "A precise Vietnamese translation of the question prompt.",
                            },
                            "content": {
                                "type": "STRING",
                                "description": "A precise Vietnamese translation of the question content.",
                            },
                        },
                    },
                    "solution": {
                        "type": "OBJECT",
                        "properties": {
                            "english": {
                                "type": "STRING",
                                "description": "A detailed, step-by-step solution and explanation for the question in English. Use newlines for formatting.",
                            },
                            "vietnamese": {
                                "type": "STRING",
                                "description": "A precise Vietnamese translation of the solution. Use newlines for formatting.",
                            },
                        },
                    },
                },
            },
        },
    },
}


def to_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a Gemini-dialect schema into strict JSON Schema.

    Types are lower-cased, every property becomes required and objects
    forbid extra keys (what OpenAI structured outputs insists on).
    The input is not modified.
    """
    node = copy.deepcopy(schema)
    out: Dict[str, Any] = {"type": str(node["type"]).lower()}
    if "description" in node:
        out["description"] = node["description"]

    if out["type"] == "object":
        props = node.get("properties", {}) or {}
        out["properties"] = {name: to_json_schema(sub) for name, sub in props.items()}
        out["required"] = list(props.keys())
        out["additionalProperties"] = False
    elif out["type"] == "array":
        out["items"] = to_json_schema(node["items"])

    return out


def schema_field_names(schema: Dict[str, Any], prefix: str = "") -> Set[str]:
    """
    Dotted paths of every property in the schema; array items add "[]".

    e.g. {"title", "questions", "questions[].english", "questions[].english.prompt", ...}
    """
    names: Set[str] = set()
    kind = str(schema.get("type", "")).upper()

    if kind == "OBJECT":
        for name, sub in (schema.get("properties") or {}).items():
            path = f"{prefix}.{name}" if prefix else name
            names.add(path)
            names |= schema_field_names(sub, path)
    elif kind == "ARRAY":
        names |= schema_field_names(schema.get("items") or {}, f"{prefix}[]")

    return names
