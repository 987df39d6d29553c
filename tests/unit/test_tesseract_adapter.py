from unittest.mock import patch

import pytest
import pytesseract

from answerlens.ocr.exceptions import OCRError
from answerlens.ocr.tesseract_adapter import TesseractEngine


def _tesseract_data(rows: list[tuple[str, float, int, int, int]]) -> dict[str, list[object]]:
    """Build an image_to_data DICT from (text, conf, block, par, line) rows."""
    data: dict[str, list[object]] = {
        key: []
        for key in (
            "text", "conf", "left", "top", "width", "height",
            "page_num", "block_num", "par_num", "line_num",
        )
    }
    for i, (text, conf, block, par, line) in enumerate(rows):
        data["text"].append(text)
        data["conf"].append(conf)
        data["left"].append(10 * i)
        data["top"].append(20 * line)
        data["width"].append(8)
        data["height"].append(12)
        data["page_num"].append(1)
        data["block_num"].append(block)
        data["par_num"].append(par)
        data["line_num"].append(line)
    return data


class TestTesseractEngine:
    def test_builds_tokens_and_layout_text(self, png_bytes: bytes) -> None:
        data = _tesseract_data(
            [
                ("", -1, 1, 1, 1),
                ("Newton's", 96.0, 1, 1, 1),
                ("laws", 90.0, 1, 1, 1),
                ("of", 88.0, 1, 1, 2),
                ("motion", 92.0, 1, 1, 2),
                ("Inertia", 80.0, 2, 1, 1),
            ]
        )
        with patch(
            "answerlens.ocr.tesseract_adapter.pytesseract.image_to_data", return_value=data
        ) as mock_data:
            recognition = TesseractEngine(psm=6).recognize(png_bytes, "eng")

        assert recognition.text == "Newton's laws\nof motion\n\nInertia"
        assert [t.text for t in recognition.tokens] == [
            "Newton's", "laws", "of", "motion", "Inertia",
        ]
        assert recognition.tokens[0].confidence == pytest.approx(0.96)
        assert recognition.tokens[0].bbox is not None
        assert mock_data.call_args.kwargs["lang"] == "eng"
        assert "--psm 6" in mock_data.call_args.kwargs["config"]
        assert mock_data.call_args.kwargs["output_type"] == pytesseract.Output.DICT

    def test_negative_confidence_becomes_none(self, png_bytes: bytes) -> None:
        data = _tesseract_data([("word", -1, 1, 1, 1)])
        with patch(
            "answerlens.ocr.tesseract_adapter.pytesseract.image_to_data", return_value=data
        ):
            recognition = TesseractEngine().recognize(png_bytes, "eng")

        assert recognition.tokens[0].confidence is None

    def test_extra_config_appended(self, png_bytes: bytes) -> None:
        with patch(
            "answerlens.ocr.tesseract_adapter.pytesseract.image_to_data",
            return_value=_tesseract_data([]),
        ) as mock_data:
            recognition = TesseractEngine(config="-c preserve_interword_spaces=1").recognize(
                png_bytes, "eng"
            )

        assert recognition.text == ""
        assert mock_data.call_args.kwargs["config"].endswith("-c preserve_interword_spaces=1")

    def test_unreadable_image_raises_ocr_error(self) -> None:
        with pytest.raises(OCRError, match="Unreadable image"):
            TesseractEngine().recognize(b"not an image", "eng")

    def test_tesseract_error_wrapped(self, png_bytes: bytes) -> None:
        with patch(
            "answerlens.ocr.tesseract_adapter.pytesseract.image_to_data",
            side_effect=pytesseract.TesseractError(1, "Failed loading language 'xyz'"),
        ):
            with pytest.raises(OCRError, match="Tesseract failed"):
                TesseractEngine().recognize(png_bytes, "xyz")

    def test_missing_binary_wrapped(self, png_bytes: bytes) -> None:
        with patch(
            "answerlens.ocr.tesseract_adapter.pytesseract.image_to_data",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(OCRError):
                TesseractEngine().recognize(png_bytes, "eng")
