# =============================================================================
# core/models/business.py - Business Record Schemas
# =============================================================================
# These models define the API contract for business records:
# - BusinessRecord: A business row as stored and returned to clients
# - BusinessCreate: Input for creating a business
# - BusinessUpdate: Partial update input (owner only)
#
# A business owns an ordered list of image paths. Insertion order is
# display order and a path appears at most once.
# =============================================================================

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, field_validator

# Rating bounds (inclusive)
MIN_RATING = 0.0
MAX_RATING = 5.0
# Matches the NUMERIC(3, 2) rating column
RATING_DECIMALS = 2


def _blank_to_none(value: Any) -> Any:
    """Trim optional text and store blanks as null."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


class BusinessRecord(BaseModel):
    """
    Schema for a business record.

    Rows come from the `business` table, where the owner column is
    `user_id`; both `user_id` and `owner_id` are accepted on input.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "owner_id": "660e8400-e29b-41d4-a716-446655440001",
            "name": "Blue Door Cafe",
            "category": "cafe",
            "images": ["business-images/660e.../550e.../20240115T103000Z-ab12.jpg"],
            "rating": 4.5,
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    id: UUID = Field(
        ...,
        description="Unique business identifier"
    )

    owner_id: UUID = Field(
        ...,
        validation_alias=AliasChoices("owner_id", "user_id"),
        description="ID of the account that owns this business"
    )

    name: str = Field(..., min_length=1, description="Business name")
    category: str = Field(..., min_length=1, description="Business type/category")

    address: str | None = Field(default=None, description="Physical address")
    contact: str | None = Field(default=None, description="Phone, email, etc.")
    description: str | None = Field(default=None, description="Detailed description")

    # Ordered storage paths of the business images. Postgres arrays may
    # hold NULL elements; they are kept so the validation report can flag them.
    images: list[str | None] = Field(
        default_factory=list,
        description="Image storage paths in display order"
    )

    rating: float = Field(
        default=0.0,
        ge=MIN_RATING,
        le=MAX_RATING,
        description="Average rating (0.0 to 5.0)"
    )

    created_at: datetime | None = Field(
        default=None,
        description="Timestamp when the business was created"
    )

    @field_validator("images", mode="before")
    @classmethod
    def _null_images(cls, value: Any) -> Any:
        # Postgres arrays come back as null when never written
        return [] if value is None else value

    @property
    def image_count(self) -> int:
        return len(self.images)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BusinessRecord":
        """Build a record from a database row."""
        return cls.model_validate(row)


class BusinessCreate(BaseModel):
    """
    Schema for creating a business.

    Name and category are required; other text fields are optional and
    blank values are stored as null.

    Example:
        {
            "name": "Blue Door Cafe",
            "category": "cafe",
            "address": "12 Harbour St"
        }
    """

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=255, description="Business name")
    category: str = Field(..., min_length=1, max_length=100, description="Business type/category")
    address: OptionalText = Field(default=None, description="Physical address")
    contact: OptionalText = Field(default=None, description="Contact information")
    description: OptionalText = Field(default=None, description="Detailed description")

    def to_row(self, owner_id: UUID | str) -> dict[str, Any]:
        """Build the insert payload for a new business."""
        return {
            "user_id": str(owner_id),
            "name": self.name,
            "category": self.category,
            "address": self.address,
            "contact": self.contact,
            "description": self.description,
            "images": [],
            "rating": 0.0,
        }


class BusinessUpdate(BaseModel):
    """
    Schema for a partial business update.

    Only fields present in the request are written. Images are managed
    through the upload endpoints and can't be set here.

    Example:
        {"rating": 4.5, "description": "Now open on Sundays"}
    """

    model_config = {"str_strip_whitespace": True}

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    address: OptionalText = None
    contact: OptionalText = None
    description: OptionalText = None

    rating: float | None = Field(
        default=None,
        ge=MIN_RATING,
        le=MAX_RATING,
        description="New rating, between 0.0 and 5.0 inclusive, at most 2 decimals"
    )

    @field_validator("rating")
    @classmethod
    def _rating_precision(cls, value: float | None) -> float | None:
        # The column would round extra digits silently
        if value is not None and round(value, RATING_DECIMALS) != value:
            raise ValueError(f"rating can have at most {RATING_DECIMALS} decimal places")
        return value

    def to_fields(self) -> dict[str, Any]:
        """Columns to update: only the fields the client sent."""
        fields = self.model_dump(exclude_unset=True)
        # name/category are NOT NULL columns
        for required in ("name", "category"):
            if required in fields and fields[required] is None:
                del fields[required]
        return fields

