# shared fixtures: stub collaborators so tests never touch a real pdf service or llm
import sys
from pathlib import Path

import pytest

# add src to python path so we can import the package without installing it
sys.path.insert(0, str(Path(__file__).parent / "src"))

from file_analyzer.analyzer_service import FileAnalyzerService  # noqa: E402


class StubExtractor:
    """Returns a fixed text for any upload"""

    def __init__(self, text="Cats are mammals. Dogs are mammals too."):
        self.text = text
        self.calls = 0

    def extract_text(self, data):
        self.calls += 1
        return self.text


class StubProvider:
    """Answers prompts from a queue; an exhausted queue means no text"""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def complete(self, prompt, max_tokens=None):
        self.prompts.append(prompt)
        if not self.answers:
            return None
        return self.answers.pop(0)


@pytest.fixture
def extractor():
    return StubExtractor()


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def service(extractor, provider):
    return FileAnalyzerService(extractor, provider)
