"""
Unit тесты GoogleVisionRecognizer на фейковом ответе Vision.

Сеть не используется: клиент подменяется, ответ собирается
из SimpleNamespace с настоящими значениями BreakType.
"""

import asyncio
from types import SimpleNamespace

import pytest
from google.cloud import vision

from src.parsing.infrastructure.ocr import GoogleVisionRecognizer

BreakType = vision.TextAnnotation.DetectedBreak.BreakType


def _word(text, last_break, x=0, y=0, confidence=0.9):
    symbols = []
    for i, ch in enumerate(text):
        brk = last_break if i == len(text) - 1 else BreakType.UNKNOWN
        symbols.append(SimpleNamespace(
            text=ch,
            property=SimpleNamespace(detected_break=SimpleNamespace(type_=brk))
        ))
    vertices = [
        SimpleNamespace(x=x, y=y), SimpleNamespace(x=x + 10 * len(text), y=y),
        SimpleNamespace(x=x + 10 * len(text), y=y + 20), SimpleNamespace(x=x, y=y + 20),
    ]
    return SimpleNamespace(
        symbols=symbols,
        bounding_box=SimpleNamespace(vertices=vertices),
        confidence=confidence
    )


def _response(paragraph_words, error=""):
    paragraph = SimpleNamespace(words=paragraph_words)
    page = SimpleNamespace(blocks=[SimpleNamespace(paragraphs=[paragraph])])
    return SimpleNamespace(
        error=SimpleNamespace(message=error),
        full_text_annotation=SimpleNamespace(pages=[page])
    )


class FakeClient:
    def __init__(self, response):
        self.response = response
        self.calls = 0

    def document_text_detection(self, image, image_context):
        self.calls += 1
        return self.response


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "cropped.jpg"
    path.write_bytes(b"\xff\xd8\xff")
    return path


def test_one_fragment_per_line(image_path):
    # Две строки в одном абзаце: каждая дата должна остаться со своим ключом
    words = [
        _word("Issuing", BreakType.SPACE),
        _word("Date", BreakType.SPACE),
        _word("01/02/2020", BreakType.EOL_SURE_SPACE),
        _word("Expiry", BreakType.SPACE, y=30),
        _word("Date", BreakType.SPACE, y=30),
        _word("01/02/2030", BreakType.LINE_BREAK, y=30),
    ]
    recognizer = GoogleVisionRecognizer(client=FakeClient(_response(words)))

    fragments = asyncio.run(recognizer.recognize(image_path))

    assert [f.text for f in fragments] == ["Issuing Date 01/02/2020", "Expiry Date 01/02/2030"]
    assert fragments[1].bounding_box.y == 30
    assert fragments[0].confidence == pytest.approx(0.9)


def test_trailing_line_without_break(image_path):
    words = [_word("ID", BreakType.SPACE), _word("784-1990-1234567-1", BreakType.UNKNOWN)]
    recognizer = GoogleVisionRecognizer(client=FakeClient(_response(words)))

    fragments = recognizer.recognize_sync(image_path)
    assert [f.text for f in fragments] == ["ID 784-1990-1234567-1"]


def test_api_error(image_path):
    recognizer = GoogleVisionRecognizer(client=FakeClient(_response([], error="quota exceeded")))
    with pytest.raises(RuntimeError, match="quota exceeded"):
        recognizer.recognize_sync(image_path)


def test_missing_credentials_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GoogleVisionRecognizer(credentials_path=str(tmp_path / "missing.json"))
