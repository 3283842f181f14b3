# ============================================================================
# CUSTOMER RECORD MODEL
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core model - Customer profile row
# PURPOSE: Pydantic model for rows in the customerprofiles table
# CREATED: 18 OCT 2026
# EXPORTS: CustomerRecord
# DEPENDENCIES: pydantic
# ============================================================================
"""
Customer Record Model

A customer profile stored in table storage. Every row lives in the
"Customer" partition and is addressed by a generated row key.

Entity mapping (table storage property names):
    PartitionKey, RowKey, Name, Email, Phone (+ Timestamp set by the backend)
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

CUSTOMER_PARTITION = "Customer"


class CustomerRecord(BaseModel):
    """
    Customer profile row.

    Created on registration, never updated, deleted by row key.
    """

    partition_key: str = Field(default=CUSTOMER_PARTITION, max_length=64)
    row_key: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        max_length=64,
        description="Unique identifier within the partition",
    )
    name: str = Field(..., description="Customer display name")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Contact phone")
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Last-modified time reported by the backend",
    )

    @classmethod
    def new(cls, name: str, email: str = "", phone: str = "") -> "CustomerRecord":
        """Create a record with a freshly generated row key."""
        return cls(name=name, email=email or "", phone=phone or "")

    def to_entity(self) -> Dict[str, Any]:
        """Convert to a table storage entity."""
        return {
            "PartitionKey": self.partition_key,
            "RowKey": self.row_key,
            "Name": self.name,
            "Email": self.email,
            "Phone": self.phone,
        }

    @classmethod
    def from_entity(cls, entity: Dict[str, Any]) -> "CustomerRecord":
        """Build from a table storage entity (dict or TableEntity)."""
        timestamp = None
        metadata = getattr(entity, "metadata", None)
        if isinstance(metadata, dict):
            timestamp = metadata.get("timestamp")
        return cls(
            partition_key=entity.get("PartitionKey", CUSTOMER_PARTITION),
            row_key=entity["RowKey"],
            name=entity.get("Name") or "",
            email=entity.get("Email") or "",
            phone=entity.get("Phone") or "",
            timestamp=timestamp,
        )


__all__ = ["CUSTOMER_PARTITION", "CustomerRecord"]
