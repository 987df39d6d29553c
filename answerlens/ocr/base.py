from abc import ABC, abstractmethod

from answerlens.ocr.models import Recognition


class BaseRecognitionEngine(ABC):
    """Contract for all text recognition engine adapters."""

    name: str = "unknown"

    @abstractmethod
    def recognize(self, image_bytes: bytes, language: str) -> Recognition:
        """Recognize text in a single image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, TIFF, ...).
            language: Engine language code, e.g. 'eng' or 'eng+deu'.

        Returns:
            Recognition with raw text and per-token confidences in [0, 1]
            (None where the engine marks a token as invalid).

        Raises:
            OCRError: on any engine failure. Callers treat it as transient.
        """
