# pdf text extraction using pymupdf
import fitz  # PyMuPDF
import logging
from typing import Any, Dict

from .errors import DocumentExtractionError

logger = logging.getLogger(__name__)


# class for extracting plain text from uploaded pdf bytes
class PDFTextExtractor:
    """Document text extractor for pdf uploads"""

    # open pdf bytes, raising a validation error for anything pymupdf cannot read
    def _open(self, data: bytes) -> "fitz.Document":
        try:
            return fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"Error opening PDF stream: {str(e)}")
            raise DocumentExtractionError("The uploaded file could not be read as a PDF.") from e

    # extract all page text in page order
    def extract_text(self, data: bytes) -> str:
        """Extract the text of every page, concatenated in order"""
        doc = self._open(data)
        try:
            text = "".join(page.get_text() for page in doc)
            logger.info(f"Extracted {len(text)} characters from {doc.page_count} pages")
            return text
        finally:
            doc.close()

    # extract metadata like author, title and page count from pdf
    def extract_metadata(self, data: bytes) -> Dict[str, Any]:
        """Extract metadata from PDF"""
        doc = self._open(data)
        try:
            metadata = doc.metadata or {}
            return {
                'title': metadata.get('title', ''),
                'author': metadata.get('author', ''),
                'creation_date': metadata.get('creationDate', ''),
                'page_count': doc.page_count
            }
        finally:
            doc.close()
