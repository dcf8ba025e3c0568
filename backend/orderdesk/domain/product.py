"""
Product Domain Model

Represents a catalog item (tomadas, interruptores, placas, módulos...).
This is the single source of truth for product data structure.

Author: Dicompel
Date: 2026-09-02
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List

from orderdesk.domain.origin import RecordOrigin


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Identifier assigned by whichever store created the record
        code: Human-readable code, natural key for CSV upserts
        description: Commercial description
        reference: Manufacturer reference
        colors: Available colors, in display order
        image_url: Image locator
        category / subcategory / line: Catalog placement
        amperage: Rating such as '10A', '20A', 'Bivolt' (optional)
        details: Free-text technical details (optional)
        origin: Provenance stamped by the repository (None on legacy data)
    """

    id: str = Field(..., description="Product identifier")
    code: str = Field(..., description="Product code (natural key)")
    description: str = Field(..., description="Product description")
    reference: str = Field("", description="Manufacturer reference")
    colors: List[str] = Field(default_factory=list, description="Available colors")
    image_url: str = Field("", description="Image locator")
    category: str = Field("", description="Category")
    subcategory: str = Field("", description="Subcategory")
    line: str = Field("", description="Product line")
    amperage: Optional[str] = Field(None, description="Amperage rating")
    details: Optional[str] = Field(None, description="Technical details")
    origin: Optional[RecordOrigin] = Field(None, description="Record provenance")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("colors", mode="before")
    @classmethod
    def _colors_as_list(cls, value):
        # Remote rows may carry NULL for an empty array
        if value is None:
            return []
        return value

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary"""
        return self.model_dump(mode="json")


class ProductCreate(BaseModel):
    """Schema for creating (or upserting) a product"""
    code: str
    description: str
    reference: str = ""
    colors: List[str] = Field(default_factory=list)
    image_url: str = ""
    category: str = ""
    subcategory: str = ""
    line: str = ""
    amperage: Optional[str] = None
    details: Optional[str] = None
