"""
Base classes for Unity Catalog metadata models.

Every record decoded from the metadata service and every configuration object
derives from BaseCatalogModel so they share one Pydantic configuration.
"""

from __future__ import annotations

import logging

from pydantic import (
    BaseModel,
    ConfigDict,
)

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# BASE CONFIGURATION
# =============================================================================

class BaseCatalogModel(BaseModel):
    """
    Base model for all catalog records with common configuration.

    Unknown fields returned by the service are ignored so that API additions
    never break decoding.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=False,  # Disabled for performance
        validate_default=True,  # Validate defaults once
        populate_by_name=True,  # Allow field population by name or alias
        use_enum_values=False,  # Keep enums as enum objects
        str_strip_whitespace=False,  # Principal names compare exactly
        extra="ignore",
    )
