"""Errors raised by the arXiv client."""


class ArxivError(Exception):
    """Base class for arXiv lookup failures."""

    def __init__(self, message: str, arxiv_id: str):
        self.arxiv_id = arxiv_id
        super().__init__(message)


class ArxivNotFoundError(ArxivError):
    """The export API knows no paper with this identifier."""

    def __init__(self, arxiv_id: str):
        super().__init__(f"No arXiv entry for {arxiv_id}", arxiv_id)


class ArxivParseError(ArxivError):
    """Feed could not be decoded or lacks a required field."""
