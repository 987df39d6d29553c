"""Tesseract recognition engine adapter.

Produces word-level tokens with bounding boxes and confidences. Tesseract
reports confidence on a 0-100 scale and -1 for non-word entries; both are
normalized here so the engine contract only ever sees [0, 1] or None.
"""

import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from answerlens.ocr.base import BaseRecognitionEngine
from answerlens.ocr.exceptions import OCRError
from answerlens.ocr.models import BoundingBox, Recognition, RecognizedToken


class TesseractEngine(BaseRecognitionEngine):
    """Recognizes printed text with Tesseract via pytesseract."""

    name = "tesseract"

    def __init__(self, psm: int = 3, oem: int = 3, config: str = "") -> None:
        self.psm = psm
        self.oem = oem
        self.config = config

    def _build_config(self) -> str:
        parts = [f"--psm {self.psm}", f"--oem {self.oem}"]
        if self.config:
            parts.append(self.config)
        return " ".join(parts)

    def recognize(self, image_bytes: bytes, language: str) -> Recognition:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                data = pytesseract.image_to_data(
                    image,
                    lang=language,
                    config=self._build_config(),
                    output_type=pytesseract.Output.DICT,
                )
        except UnidentifiedImageError as exc:
            raise OCRError(f"Unreadable image: {exc}") from exc
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as exc:
            raise OCRError(f"Tesseract failed: {exc}") from exc
        return self._to_recognition(data)

    @staticmethod
    def _to_recognition(data: dict[str, list[object]]) -> Recognition:
        tokens: list[RecognizedToken] = []
        paragraphs: list[list[list[str]]] = []
        last_paragraph: tuple[object, ...] | None = None
        last_line: tuple[object, ...] | None = None

        for i, raw_text in enumerate(data["text"]):
            text = str(raw_text).strip()
            if not text:
                continue
            conf = float(data["conf"][i])  # type: ignore[arg-type]
            tokens.append(
                RecognizedToken(
                    text=text,
                    confidence=conf / 100.0 if conf >= 0 else None,
                    bbox=BoundingBox(
                        left=int(data["left"][i]),  # type: ignore[call-overload]
                        top=int(data["top"][i]),  # type: ignore[call-overload]
                        width=int(data["width"][i]),  # type: ignore[call-overload]
                        height=int(data["height"][i]),  # type: ignore[call-overload]
                    ),
                )
            )

            paragraph_key = (data["page_num"][i], data["block_num"][i], data["par_num"][i])
            line_key = (*paragraph_key, data["line_num"][i])
            if paragraph_key != last_paragraph:
                paragraphs.append([])
                last_paragraph = paragraph_key
                last_line = None
            if line_key != last_line:
                paragraphs[-1].append([])
                last_line = line_key
            paragraphs[-1][-1].append(text)

        text = "\n\n".join(
            "\n".join(" ".join(words) for words in lines) for lines in paragraphs
        )
        return Recognition(text=text, tokens=tokens)
