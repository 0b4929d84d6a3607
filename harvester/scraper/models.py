"""Pydantic data models for scraped catalog sections.

This module defines type-safe models for product records, per-section
results with diagnostics, and the aggregate result of a pipeline run.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ProductRecord(BaseModel):
    """A single listed product."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Product name, empty when the card has none")
    price: float = Field(default=0.0, ge=0.0, description="Normalized price")


class PageFailure(BaseModel):
    """Diagnostic entry for a page that contributed no records."""

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(..., ge=0, description="Zero-based page index within the section")
    url: str = Field(..., description="URL that was requested")
    error: str = Field(..., description="Human-readable failure reason")


class SectionResult(BaseModel):
    """All products of one section, in page order, with timing."""

    model_config = ConfigDict(frozen=True)

    section_id: str = Field(..., description="Section identifier, e.g. 'dresses'")
    url: str = Field(..., description="Base URL of the section")
    products: tuple[ProductRecord, ...] = Field(default=(), description="Products in extraction order")
    elapsed_millis: int = Field(..., ge=0, description="Wall-clock time for the whole section")
    total_pages: int = Field(default=0, ge=0, description="Pages discovered by pagination")
    diagnostics: tuple[PageFailure, ...] = Field(default=(), description="Pages that failed")

    @computed_field
    @property
    def product_count(self) -> int:
        return len(self.products)

    @property
    def pages_failed(self) -> int:
        return len(self.diagnostics)


class SectionStats(BaseModel):
    """Summary statistics reported for one section."""

    model_config = ConfigDict(frozen=True)

    section_id: str
    product_count: int = Field(..., ge=0)
    elapsed_millis: int = Field(..., ge=0)
    min_price: float = 0.0
    avg_price: float = 0.0
    max_price: float = 0.0


class PipelineResult(BaseModel):
    """Results of every section scraped in one pipeline run."""

    sections: list[SectionResult] = Field(default_factory=list, description="Results in section order")
    elapsed_millis: int = Field(default=0, ge=0, description="Wall-clock time for the whole run")

    @property
    def products(self) -> list[ProductRecord]:
        """All products of all sections, in section then page order."""
        return [product for section in self.sections for product in section.products]

    @property
    def total_products(self) -> int:
        return sum(section.product_count for section in self.sections)
