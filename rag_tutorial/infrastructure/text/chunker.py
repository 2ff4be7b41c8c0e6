"""
Name: Token Text Chunking Utility

Responsibilities:
  - Split documents into fixed-size token windows
  - Cut each window back to its last sentence boundary when the window is long enough
  - Drop fragments too short to embed and cap the number of chunks per document

Collaborators:
  - tiktoken: BPE tokenizer (cl100k_base by default)

Constraints:
  - Window size is measured in tokens, boundary rules in characters
  - The tokenizer is injectable (encode/decode) so tests run offline

Notes:
  - chunk_size_tokens=512, min_chunk_size_chars=350, min_chunk_length_to_embed=5,
    max_num_chunks=10_000 are the service defaults (config.Settings)

Algorithm:
  - Encode the whole text once
  - Decode the first chunk_size_tokens tokens; skip blank windows
  - If the last of . ? ! or newline sits past min_chunk_size_chars, cut there
  - Keep the trimmed text if longer than min_chunk_length_to_embed
  - Advance by the token count of the text actually kept
  - After max_num_chunks, the remaining tokens become one final chunk

Performance:
  - O(n) tokens, one extra encode per window
"""

from typing import List, Protocol, Sequence

import tiktoken

# R: Characters treated as sentence boundaries when cutting a window
BOUNDARY_CHARS = (".", "?", "!", "\n")


class Tokenizer(Protocol):
    def encode(self, text: str) -> List[int]: ...

    def decode(self, tokens: Sequence[int]) -> str: ...


def _last_boundary(text: str) -> int:
    return max(text.rfind(ch) for ch in BOUNDARY_CHARS)


def chunk_tokens(
    text: str,
    tokenizer: Tokenizer,
    chunk_size_tokens: int = 512,
    min_chunk_size_chars: int = 350,
    min_chunk_length_to_embed: int = 5,
    max_num_chunks: int = 10_000,
    keep_separator: bool = True,
) -> list[str]:
    """
    R: Split text into token windows cut at sentence boundaries.

    Args:
        text: Document to split
        tokenizer: Object with encode/decode (tiktoken Encoding)
        chunk_size_tokens: Tokens per window
        min_chunk_size_chars: A boundary cut only applies past this many chars
        min_chunk_length_to_embed: Fragments at or below this length are dropped
        max_num_chunks: Window cap per document
        keep_separator: Keep newlines inside chunks (otherwise flatten to spaces)

    Returns:
        List of trimmed chunk strings
    """
    if not text or not text.strip():
        return []

    tokens = list(tokenizer.encode(text))
    chunks: list[str] = []
    num_chunks = 0

    while tokens and num_chunks < max_num_chunks:
        window = tokens[:chunk_size_tokens]
        chunk_text = tokenizer.decode(window)

        # R: Blank window: consume it without producing a chunk
        if not chunk_text.strip():
            tokens = tokens[len(window):]
            continue

        boundary = _last_boundary(chunk_text)
        cut = boundary != -1 and boundary > min_chunk_size_chars
        if cut:
            chunk_text = chunk_text[: boundary + 1]

        if keep_separator:
            to_append = chunk_text.strip()
        else:
            to_append = chunk_text.replace("\n", " ").strip()

        if len(to_append) > min_chunk_length_to_embed:
            chunks.append(to_append)

        # R: Re-encode only after a cut; a split multibyte char decodes to
        # U+FFFD, which encodes to more tokens than the window held
        if cut:
            consumed = min(len(window), len(tokenizer.encode(chunk_text)))
        else:
            consumed = len(window)
        tokens = tokens[max(1, consumed):]
        num_chunks += 1

    # R: Cap reached: whatever is left becomes the last chunk
    if tokens:
        remaining = tokenizer.decode(tokens).replace("\n", " ").strip()
        if len(remaining) > min_chunk_length_to_embed:
            chunks.append(remaining)

    return chunks


class TokenTextChunker:
    """
    R: Default chunker implementation using chunk_tokens.

    Validates parameters on initialization to fail fast.
    """

    def __init__(
        self,
        chunk_size_tokens: int = 512,
        min_chunk_size_chars: int = 350,
        min_chunk_length_to_embed: int = 5,
        max_num_chunks: int = 10_000,
        keep_separator: bool = True,
        *,
        encoding_name: str = "cl100k_base",
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize chunker with validated parameters.

        Raises:
            ValueError: If parameters are invalid
        """
        if chunk_size_tokens <= 0:
            raise ValueError(f"chunk_size_tokens must be > 0, got {chunk_size_tokens}")
        if min_chunk_size_chars <= 0:
            raise ValueError(
                f"min_chunk_size_chars must be > 0, got {min_chunk_size_chars}"
            )
        if min_chunk_length_to_embed < 0:
            raise ValueError(
                f"min_chunk_length_to_embed must be >= 0, got {min_chunk_length_to_embed}"
            )
        if max_num_chunks <= 0:
            raise ValueError(f"max_num_chunks must be > 0, got {max_num_chunks}")

        self.chunk_size_tokens = chunk_size_tokens
        self.min_chunk_size_chars = min_chunk_size_chars
        self.min_chunk_length_to_embed = min_chunk_length_to_embed
        self.max_num_chunks = max_num_chunks
        self.keep_separator = keep_separator
        self.encoding_name = encoding_name
        self._tokenizer = tokenizer

    @property
    def tokenizer(self) -> Tokenizer:
        # R: tiktoken fetches BPE ranks on first use; load lazily
        if self._tokenizer is None:
            self._tokenizer = tiktoken.get_encoding(self.encoding_name)
        return self._tokenizer

    def chunk(self, text: str) -> list[str]:
        return chunk_tokens(
            text,
            self.tokenizer,
            chunk_size_tokens=self.chunk_size_tokens,
            min_chunk_size_chars=self.min_chunk_size_chars,
            min_chunk_length_to_embed=self.min_chunk_length_to_embed,
            max_num_chunks=self.max_num_chunks,
            keep_separator=self.keep_separator,
        )
