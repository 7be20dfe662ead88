import json

import pytest

from markup_toolkit.utils.files import read_document, read_jsonl_file


@pytest.fixture
def mock_data():
    return [
        {"content": "First.", "style_guide": "ap"},
        {"content": "Second.", "style_guide": "chicago"},
    ]


def test_read_jsonl_file(tmp_path, mock_data):
    file_path = tmp_path / "test.jsonl"
    file_path.write_text(
        json.dumps(mock_data[0]) + "\n\n" + json.dumps(mock_data[1]) + "\n", encoding="utf-8"
    )

    assert read_jsonl_file(file_path=file_path) == mock_data


def test_read_document_text(tmp_path):
    file_path = tmp_path / "doc.md"
    file_path.write_text("# Title\n\nSome text.", encoding="utf-8")

    assert read_document(file_path) == "# Title\n\nSome text."


def test_read_document_binary(tmp_path):
    file_path = tmp_path / "doc.pdf"
    file_path.write_bytes(b"%PDF\xff\xfe")

    assert read_document(file_path) == b"%PDF\xff\xfe"
