# dupflow/config/schema.py

DEFAULT_ID_PATTERN = r"\([A-Z]+-[A-Z]+-\d{3}\)"

DEFAULT_VALIDATION_CONFIG = {
    "idPattern": DEFAULT_ID_PATTERN,
    "strict": True,
    "maxDuplicates": 100,
    "logPath": ".jana/logs/validation.log",
}

DEFAULT_CONFIG_PATH = ".jana/config.json"

CONFIG_SCHEMA = {
    "type": "object",
    "required": ["validation"],
    "properties": {
        # Connection settings live in the same file; only their shape is checked here
        "n8n": {
            "type": "object",
            "properties": {
                "apiUrl": {
                    "type": "string",
                    "pattern": "^https?://",
                },
                "apiKey": {"type": "string"},
            },
            "additionalProperties": True,
        },

        "validation": {
            "type": "object",
            "properties": {
                # Regex source; compiled and checked separately by the reader
                "idPattern": {"type": "string"},
                "strict": {"type": "boolean"},
                "maxDuplicates": {
                    "type": "integer",
                    "minimum": 1,
                },
                "logPath": {
                    "type": "string",
                    "minLength": 1,
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}
