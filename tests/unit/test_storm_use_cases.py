"""
Name: Storm Use Case Unit Tests
"""

from unittest.mock import Mock

import pytest

from rag_tutorial.application.use_cases import (
    StormQueryInput,
    StormQueryUseCase,
    StormUploadInput,
    StormUploadUseCase,
)
from rag_tutorial.domain.entities import StormAnswer, StormChat, StormDocument
from rag_tutorial.domain.services import StormService
from rag_tutorial.exceptions import StormAPIError

pytestmark = pytest.mark.unit


@pytest.fixture
def storm() -> Mock:
    service = Mock(spec=StormService)
    service.upload_document.return_value = StormDocument(id="doc-9", name="a.pdf")
    service.answer.return_value = StormAnswer(
        chat=StormChat(question="q", answer="a"), contexts=[]
    )
    return service


class TestStormUploadUseCase:
    def test_uses_requested_bucket(self, storm):
        use_case = StormUploadUseCase(storm, default_bucket_id="default")

        document = use_case.execute(
            StormUploadInput(file_name="a.pdf", content=b"x", bucket_id="mine")
        )

        assert document.id == "doc-9"
        storm.upload_document.assert_called_once_with("a.pdf", b"x", "mine")

    def test_falls_back_to_default_bucket(self, storm):
        use_case = StormUploadUseCase(storm, default_bucket_id="default")

        use_case.execute(StormUploadInput(file_name="a.pdf", content=b"x"))

        storm.upload_document.assert_called_once_with("a.pdf", b"x", "default")

    def test_no_bucket_at_all_is_rejected(self, storm):
        use_case = StormUploadUseCase(storm)

        with pytest.raises(ValueError, match="bucket"):
            use_case.execute(StormUploadInput(file_name="a.pdf", content=b"x"))
        storm.upload_document.assert_not_called()


class TestStormQueryUseCase:
    def test_passes_cleaned_bucket_ids(self, storm):
        use_case = StormQueryUseCase(storm, default_bucket_id="default")

        use_case.execute(StormQueryInput(question="q", bucket_ids=[" b1 ", "", "b2"]))

        storm.answer.assert_called_once_with("q", ["b1", "b2"])

    def test_empty_bucket_list_uses_default(self, storm):
        use_case = StormQueryUseCase(storm, default_bucket_id="default")

        use_case.execute(StormQueryInput(question="q"))

        storm.answer.assert_called_once_with("q", ["default"])

    def test_blank_question_is_rejected(self, storm):
        use_case = StormQueryUseCase(storm, default_bucket_id="default")

        with pytest.raises(ValueError):
            use_case.execute(StormQueryInput(question="  "))

    def test_storm_errors_propagate(self, storm):
        storm.answer.side_effect = StormAPIError("down", status_code=502)
        use_case = StormQueryUseCase(storm, default_bucket_id="default")

        with pytest.raises(StormAPIError):
            use_case.execute(StormQueryInput(question="q"))
