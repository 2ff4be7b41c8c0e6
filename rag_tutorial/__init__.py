"""RAG tutorial service: Gemini chat, in-memory retrieval and Storm document Q&A."""
