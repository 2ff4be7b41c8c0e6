"""
Name: Domain Entities

Responsibilities:
  - Define core entities for the retrieval engine (Chunk, SearchResult)
  - Define the answer and chat result types returned by use cases
  - Provide type safety for domain layer

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - No dependencies on infrastructure or frameworks
  - Chunk and SearchResult are frozen; stored chunks never change

Notes:
  - A "document" is only the set of chunks sharing document_id
  - Chunk metadata carries the document id under DOCUMENT_ID_KEY;
    SearchResult.metadata never exposes it
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

# R: Internal metadata key holding the source document id on every stored chunk
DOCUMENT_ID_KEY = "id"

# R: Metadata key holding the uploaded file name (used by the sources footer)
ORIGINAL_FILENAME_KEY = "original_filename"

# R: Metadata key holding upload time in epoch milliseconds
UPLOAD_TIME_KEY = "upload_time"


@dataclass(frozen=True)
class Chunk:
    """
    R: Text fragment of a source document with its embedding.

    Attributes:
        id: Unique chunk identifier
        document_id: Identifier of the document the chunk was cut from
        text: Chunk text
        embedding: Vector from the embedding provider
        metadata: String metadata (includes DOCUMENT_ID_KEY)
    """

    id: str
    document_id: str
    text: str
    embedding: List[float]
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResult:
    """
    R: A stored chunk scored against a query.

    Attributes:
        id: Chunk identifier
        document_id: Source document identifier
        text: Chunk text
        metadata: Chunk metadata without DOCUMENT_ID_KEY
        score: Cosine similarity in [-1, 1]
    """

    id: str
    document_id: str
    text: str
    metadata: Dict[str, str]
    score: float

    @property
    def original_filename(self) -> Optional[str]:
        return self.metadata.get(ORIGINAL_FILENAME_KEY)


@dataclass
class RagAnswer:
    """
    R: Answer produced from retrieved chunks.

    Attributes:
        query: User question
        answer: Final text (completion + sources footer, or a fallback)
        sources: Results the answer was built from, in rank order
        grounded: True only when the completion provider produced the answer
        metadata: Stage timings and counters for observability
    """

    query: str
    answer: str
    sources: List[SearchResult] = field(default_factory=list)
    grounded: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChatSuccess:
    """R: Completion provider answered."""

    answer: str
    model: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ChatFailure:
    """R: Completion provider could not answer; reason is safe to show."""

    reason: str
    error_code: str

    @property
    def ok(self) -> bool:
        return False


ChatResult = Union[ChatSuccess, ChatFailure]


@dataclass(frozen=True)
class StormDocument:
    """R: Document accepted by the Storm API."""

    id: str
    name: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class StormChat:
    question: str
    answer: str


@dataclass(frozen=True)
class StormContext:
    """R: Passage Storm used to answer, with its source document."""

    document_id: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StormAnswer:
    chat: StormChat
    contexts: List[StormContext] = field(default_factory=list)
