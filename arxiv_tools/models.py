"""Pydantic data models for arXiv."""

from typing import Optional

from pydantic import BaseModel


class ArxivEntry(BaseModel):
    """One <entry> of an arXiv export API feed."""

    arxiv_id: str  # as requested, without version suffix
    title: str
    abstract: str = ""
    comment: Optional[str] = None  # arxiv:comment, e.g. "12 pages, extends arXiv:2101.00001"
    journal_ref: Optional[str] = None  # arxiv:journal_ref
    published: Optional[str] = None

    def citation_text(self) -> str:
        """Free text scanned for cited identifiers, most specific field first."""
        parts = [self.journal_ref, self.comment, self.title, self.abstract]
        return "\n".join(part for part in parts if part)
