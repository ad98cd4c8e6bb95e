#!/usr/bin/env python3
"""
Example usage of the file analyzer service without the web api
"""

import os
import sys
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from file_analyzer.analyzer_service import PDF_CONTENT_TYPE, FileAnalyzerService
from file_analyzer.errors import FileAnalyzerError
from file_analyzer.llm_service import get_llm_service
from file_analyzer.pdf_parser import PDFTextExtractor


def main():
    """Example of how to use the analyzer service directly"""

    print("This example calls the chat completions API")
    print("Make sure OPENAI_API_KEY is set in the environment or in .env")
    print()

    # Example PDF path (replace with your actual PDF)
    pdf_path = "example.pdf"

    if not os.path.exists(pdf_path):
        print(f"Please place a PDF file named '{pdf_path}' in the current directory")
        return

    service = FileAnalyzerService(PDFTextExtractor(), get_llm_service())

    try:
        session = service.upload(Path(pdf_path).read_bytes(), PDF_CONTENT_TYPE)
        print(f"✓ Loaded {len(session.document_text)} characters (session {session.session_id})")

        answer = service.search(session.session_id, "introduction")
        print(f"\nFrom the notes:\n{answer}")

        expansion = service.expand(session.session_id, "introduction")
        print(f"\nExpanded:\n{expansion}")

        Path("ChatLogExport.txt").write_bytes(service.export(session.session_id))
        print("\n✓ Chat log saved to: ChatLogExport.txt")

    except FileAnalyzerError as e:
        print(f"✗ Error: {str(e)}")


if __name__ == "__main__":
    main()
