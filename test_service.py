"""
tests for the analyzer service: upload, search, expand and export per session
"""

import threading
import time

import pytest

from conftest import StubExtractor, StubProvider
from file_analyzer.analyzer_service import (
    EXPAND_FALLBACK, SEARCH_FALLBACK, FileAnalyzerService,
)
from file_analyzer.errors import (
    DocumentExtractionError, EmptyInputError, EmptyLogError, NoDocumentError, SessionNotFoundError,
    TopicNotSearchedError, UnsupportedTypeError, ValidationError,
)

PDF = "application/pdf"


def test_upload_rejects_other_content_types(service):
    with pytest.raises(UnsupportedTypeError):
        service.upload(b"data", "text/plain")
    with pytest.raises(UnsupportedTypeError):
        service.upload(b"data", None)


def test_upload_rejects_empty_payload(service, extractor):
    with pytest.raises(EmptyInputError):
        service.upload(b"", PDF)
    assert extractor.calls == 0


def test_validation_errors_share_a_base():
    assert issubclass(UnsupportedTypeError, ValidationError)
    assert issubclass(TopicNotSearchedError, ValidationError)
    assert issubclass(EmptyLogError, ValidationError)


def test_upload_creates_session_with_document(service):
    session = service.upload(b"%PDF", PDF)
    assert session.has_document()
    assert session.document_text == "Cats are mammals. Dogs are mammals too."


def test_upload_to_unknown_session_fails(service):
    with pytest.raises(SessionNotFoundError):
        service.upload(b"%PDF", PDF, "missing")


def test_search_requires_document(service):
    session = service.store.create()
    with pytest.raises(NoDocumentError):
        service.search(session.session_id, "cats")


def test_search_rejects_blank_topic(service):
    session = service.upload(b"%PDF", PDF)
    with pytest.raises(EmptyInputError):
        service.search(session.session_id, "   ")


def test_search_grounds_prompt_in_document(service, provider):
    provider.answers = ["Cats are mammals."]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "cats")

    assert "'cats'" in provider.prompts[0]
    assert provider.prompts[0].endswith("Cats are mammals. Dogs are mammals too.")


def test_search_without_answer_records_fallback(service):
    session = service.upload(b"%PDF", PDF)
    result = service.search(session.session_id, "topicX")

    assert result == SEARCH_FALLBACK == "No relevant information found on this topic."
    assert session.log.find("topicX").grounded_answer == SEARCH_FALLBACK


def test_search_same_topic_twice_updates_in_place(service, provider):
    provider.answers = ["one", "two", "three"]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "cats")
    service.search(session.session_id, "dogs")
    service.search(session.session_id, "cats")

    assert session.log.topics() == ["cats", "dogs"]
    assert session.log.find("cats").grounded_answer == "three"


def test_expand_before_search_fails(service, provider):
    session = service.upload(b"%PDF", PDF)
    with pytest.raises(TopicNotSearchedError):
        service.expand(session.session_id, "dogs")
    assert provider.prompts == []


def test_expand_records_expansion(service, provider):
    provider.answers = ["Dogs are mammals too.", "Dogs are domesticated canines."]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "dogs")
    result = service.expand(session.session_id, "dogs")

    assert result == "Dogs are domesticated canines."
    assert provider.prompts[1] == "Provide an in-depth overview about 'dogs', summarizing key concepts:"
    assert session.log.find("dogs").expansion == "Dogs are domesticated canines."


def test_expand_without_answer_records_fallback(service, provider):
    provider.answers = ["Dogs are mammals too."]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "dogs")

    assert service.expand(session.session_id, "dogs") == EXPAND_FALLBACK
    assert session.log.find("dogs").expansion == EXPAND_FALLBACK


def test_reupload_clears_log(service, provider):
    provider.answers = ["a", "b"]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "cats")
    service.expand(session.session_id, "cats")

    again = service.upload(b"%PDF", PDF, session.session_id)

    assert again is session
    assert session.log.is_empty()
    with pytest.raises(EmptyLogError):
        service.export(session.session_id)
    with pytest.raises(TopicNotSearchedError):
        service.expand(session.session_id, "cats")


def test_export_empty_log_fails(service):
    session = service.upload(b"%PDF", PDF)
    with pytest.raises(EmptyLogError):
        service.export(session.session_id)


def test_export_lists_topics_in_first_searched_order(service, provider):
    provider.answers = ["1", "2", "3", "4"]
    session = service.upload(b"%PDF", PDF)
    for topic in ["zebra", "apple", "mango", "apple"]:
        service.search(session.session_id, topic)

    text = service.export(session.session_id).decode("utf-8")
    positions = [text.index(f"Topic: {topic}\n") for topic in ["zebra", "apple", "mango"]]

    assert positions == sorted(positions)
    assert text.count("Topic: apple\n") == 1


def test_cats_scenario(service, provider):
    provider.answers = ["Cats are mammals."]
    session = service.upload(b"%PDF", PDF)

    assert service.search(session.session_id, "cats") == "Cats are mammals."

    text = service.export(session.session_id).decode("utf-8")
    assert text == (
        "Topic: cats\n\n"
        "Information from notes:\n\n"
        "Cats are mammals.\n\n"
        "AI Expanded Notes:\n\n"
        "N/A\n\n"
        + "-" * 50 + "\n"
    )


def test_dogs_expansion_scenario(service, provider):
    provider.answers = ["Dogs are mammals too.", "Dogs are domesticated canines."]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "dogs")
    service.expand(session.session_id, "dogs")

    text = service.export(session.session_id).decode("utf-8")
    assert "AI Expanded Notes:\n\nDogs are domesticated canines.\n\n" in text
    assert "N/A" not in text


def test_history_returns_snapshot(service, provider):
    provider.answers = ["Cats are mammals."]
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "cats")

    history = service.history(session.session_id)
    assert [entry.topic for entry in history] == ["cats"]
    assert history[0].expansion is None


def test_sessions_are_isolated():
    provider = StubProvider("cats answer", "dogs answer")
    service = FileAnalyzerService(StubExtractor(), provider)
    first = service.upload(b"%PDF", PDF)
    second = service.upload(b"%PDF", PDF)

    service.search(first.session_id, "cats")
    service.search(second.session_id, "dogs")
    service.upload(b"%PDF", PDF, first.session_id)

    assert first.log.is_empty()
    assert second.log.topics() == ["dogs"]


class SlowProvider:
    """Blocks until released, to observe lock behaviour"""

    def __init__(self):
        self.release = threading.Event()
        self.started = threading.Event()

    def complete(self, prompt, max_tokens=None):
        self.started.set()
        self.release.wait(timeout=5)
        return "slow answer"


def test_slow_session_does_not_block_another():
    provider = SlowProvider()
    service = FileAnalyzerService(StubExtractor(), provider)
    slow = service.upload(b"%PDF", PDF)
    other = service.upload(b"%PDF", PDF)

    worker = threading.Thread(target=service.search, args=(slow.session_id, "cats"))
    worker.start()
    assert provider.started.wait(timeout=5)

    # another session can reset while the first is waiting on the provider
    started = time.monotonic()
    service.upload(b"%PDF", PDF, other.session_id)
    assert time.monotonic() - started < 1

    provider.release.set()
    worker.join(timeout=5)
    assert slow.log.find("cats").grounded_answer == "slow answer"


def test_upload_waits_for_in_flight_search_on_same_session():
    provider = SlowProvider()
    service = FileAnalyzerService(StubExtractor(), provider)
    session = service.upload(b"%PDF", PDF)

    worker = threading.Thread(target=service.search, args=(session.session_id, "cats"))
    worker.start()
    assert provider.started.wait(timeout=5)

    uploader = threading.Thread(target=service.upload, args=(b"%PDF", PDF, session.session_id))
    uploader.start()
    provider.release.set()
    worker.join(timeout=5)
    uploader.join(timeout=5)

    # the reset ran after the search committed, so it wins
    assert session.log.is_empty()


class FailingExtractor:
    def extract_text(self, data):
        raise DocumentExtractionError("The uploaded file could not be read as a PDF.")


def test_failed_extraction_leaves_no_session():
    service = FileAnalyzerService(FailingExtractor(), StubProvider())
    for _ in range(3):
        with pytest.raises(DocumentExtractionError):
            service.upload(b"not a pdf", PDF)

    assert len(service.store) == 0


def test_failed_extraction_keeps_existing_session_document():
    service = FileAnalyzerService(StubExtractor(), StubProvider("Cats are mammals."))
    session = service.upload(b"%PDF", PDF)
    service.search(session.session_id, "cats")

    service.extractor = FailingExtractor()
    with pytest.raises(DocumentExtractionError):
        service.upload(b"not a pdf", PDF, session.session_id)

    assert session.log.topics() == ["cats"]


def test_blank_topic_without_document_reports_no_document(service):
    session = service.store.create()
    with pytest.raises(NoDocumentError):
        service.search(session.session_id, "   ")


@pytest.mark.parametrize("session_id", [None, "", "missing"])
def test_use_cases_without_a_session(service, provider, session_id):
    with pytest.raises(NoDocumentError):
        service.search(session_id, "cats")
    with pytest.raises(TopicNotSearchedError):
        service.expand(session_id, "cats")
    with pytest.raises(EmptyLogError):
        service.export(session_id)

    assert service.history(session_id) == []
    assert provider.prompts == []
    assert len(service.store) == 0
