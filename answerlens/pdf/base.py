from abc import ABC, abstractmethod


class BasePdfRasterizer(ABC):
    """Contract for all PDF page rendering adapters."""

    @abstractmethod
    def render_pages(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        """Render PDF pages to PNG images for OCR.

        Args:
            pdf_bytes: Raw PDF file content.
            dpi: Render resolution.
            max_pages: Pages beyond this count are ignored.

        Returns:
            One PNG-encoded image per rendered page, in page order.

        Raises:
            PdfRenderError: if the document cannot be opened or rendered.
        """
