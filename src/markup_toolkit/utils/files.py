import json
from pathlib import Path


def read_jsonl_file(file_path: str | Path) -> list[dict]:
    """Read a JSONL file and return its JSON objects, skipping blank lines

    Args:
        file_path (str | Path): The path to the file to read
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def read_document(file_path: str | Path) -> str | bytes:
    """Read a document to analyse, as text when it decodes as UTF-8, as raw bytes otherwise

    Args:
        file_path (str | Path): The path to the document
    """
    data = Path(file_path).read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data
