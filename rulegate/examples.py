"""Worked example schema and data.

``example_schema`` is a schema factory covering every engine feature: plain
leaf fields, ``when`` / ``whenNot`` gates, a nested object behind a
``$beforeAllWhen`` pre-condition, a field-level pre-condition, a bound
computed from the data itself, and a ``$refine`` group reporting under
``idNumber``.

Usage:
    >>> from rulegate.examples import EXAMPLE_DATA, example_schema
    >>> from rulegate.validation import validate
    >>> sorted(validate(example_schema, EXAMPLE_DATA))
    ['age', 'email', 'idNumber']
"""

from datetime import datetime
from typing import Any, Dict

from rulegate.catalog import Validate
from rulegate.rules import resolve_path


adult = Validate.OTHER("age", Validate.NUMBER.min_value(18))

EXAMPLE_DATA: Dict[str, Any] = {
    "name": "John Doe",
    "age": 16,
    "birthDate": datetime(1990, 1, 1),
    "isMale": True,
    "idNumber": "1234567890",
    "email": "@gmail.com",
    "url": "https://google.com",
    "assets": {"cars": ["toyota", "honda"], "carTax": 200, "max": 100, "min": 200},
    "numOfFollowers": 10000,
}


def example_schema(data: Any) -> Dict[str, Any]:
    """Build the example schema; the bound on ``assets.min`` is read from ``data``."""
    return {
        "name": [
            {
                "validate": [
                    Validate.STRING.is_required,
                    Validate.STRING.type,
                    Validate.STRING.min_length(3),
                    Validate.STRING.max_length(20),
                ]
            }
        ],
        "age": [
            {"validate": [Validate.NUMBER.is_required, Validate.NUMBER.type, Validate.NUMBER.min_value(18)]}
        ],
        "birthDate": [{"validate": [Validate.DATE.is_required, Validate.DATE.type, Validate.DATE.is_past]}],
        "isMale": [{"validate": [Validate.BOOLEAN.is_required, Validate.BOOLEAN.type]}],
        "idNumber": [
            {
                "validate": [Validate.STRING.type, Validate.STRING.is_pattern(r"^[0-9]{10}$")],
                "when": [adult],
            },
            {"validate": [Validate.STRING.is_empty], "whenNot": [adult]},
        ],
        "email": [{"validate": [Validate.STRING.is_required, Validate.STRING.type, Validate.STRING.is_email]}],
        "url": [{"validate": [Validate.STRING.type, Validate.STRING.is_url]}],
        "assets": {
            "$beforeAllWhen": [adult],
            "cars": [
                {
                    "validate": [
                        Validate.ARRAY.is_required,
                        Validate.ARRAY.type,
                        Validate.ARRAY.min_length(1),
                        Validate.ENUM.one_of(["toyota", "honda", "ford"]),
                    ]
                }
            ],
            "carTax": [
                {
                    "validate": [
                        Validate.NUMBER.is_required,
                        Validate.NUMBER.type,
                        Validate.NUMBER.min_value(100),
                        Validate.NUMBER.is_integer,
                        Validate.NUMBER.is_positive,
                    ],
                    "when": [Validate.OTHER("assets.cars", Validate.ARRAY.type, Validate.ARRAY.min_length(1))],
                }
            ],
            "max": [
                {
                    "validate": [Validate.NUMBER.is_required, Validate.NUMBER.type, Validate.NUMBER.is_integer],
                    "when": [Validate.OTHER("assets.min", Validate.NUMBER.type)],
                }
            ],
            "min": [
                {
                    "validate": [
                        Validate.NUMBER.is_required,
                        Validate.NUMBER.type,
                        Validate.NUMBER.min_value(0),
                        Validate.NUMBER.max_value(resolve_path(data, "assets.max")).with_message(
                            "Can not be more than max"
                        ),
                    ],
                    "when": [Validate.OTHER("assets.max", Validate.NUMBER.type)],
                }
            ],
        },
        "numOfFollowers": [
            {"$beforeAllWhen": Validate.OTHER("url", Validate.STRING.type, Validate.STRING.is_url)},
            {
                "validate": [Validate.NUMBER.is_required, Validate.NUMBER.between(10000, 500000)],
                "when": [adult],
            },
            {
                "validate": [Validate.NUMBER.is_required, Validate.NUMBER.between(5000, 10000)],
                "when": [Validate.OTHER("age", Validate.NUMBER.max_value(17))],
            },
        ],
        "$refine": [
            {
                "validate": [
                    Validate.AGGREGATE.all([
                        Validate.OTHER("age", Validate.NUMBER.lt(18)),
                        Validate.OTHER("idNumber", Validate.STRING.is_empty),
                    ]).with_message("idNumber cant be specified for under 18")
                ],
                "path": ["idNumber"],
            }
        ],
    }


__all__ = [
    "EXAMPLE_DATA",
    "example_schema",
]
