"""Host adapters for embedding editor sessions in UI frameworks."""

__all__ = ["textual"]
