# ============================================================================
# TABLE STORAGE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Infrastructure - Azure Table Storage operations
# PURPOSE: Customer profile rows in the customerprofiles table
# CREATED: 18 OCT 2026
# ============================================================================
"""
Table Storage Infrastructure

CustomerTableRepository wraps a TableServiceClient for the customer
profile table. Every row lives in the "Customer" partition.
"""

import threading
from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableClient, TableServiceClient

from core.config import ResourceNames
from core.errors import NotFound
from core.models import CustomerRecord
from infrastructure.base_repository import BaseRepository


class CustomerTableRepository(BaseRepository):
    """Customer profile rows in table storage."""

    resource_kind = "table"

    def __init__(
        self,
        service_client: TableServiceClient,
        table_name: Optional[str] = None,
        partition_key: Optional[str] = None,
    ):
        names = ResourceNames()
        super().__init__(table_name or names.customer_table)
        self.partition_key = partition_key or names.customer_partition
        self._service = service_client
        self._table: Optional[TableClient] = None
        self._table_lock = threading.Lock()

    def _table_client(self) -> TableClient:
        if self._table is None:
            with self._table_lock:
                if self._table is None:
                    self._table = self._service.get_table_client(self.resource_name)
        return self._table

    def ensure_table(self) -> None:
        """Create the table if it does not exist."""
        with self._error_context("ensure table"):
            self._service.create_table_if_not_exists(self.resource_name)

    def table_exists(self) -> bool:
        """Single table-name query. Raises BackendUnavailable on fault."""
        with self._error_context("check table"):
            matches = self._service.query_tables(f"TableName eq '{self.resource_name}'")
            return any(True for _ in matches)

    def insert(self, record: CustomerRecord) -> CustomerRecord:
        """Insert a new row. Raises BackendUnavailable on conflict or fault."""
        with self._error_context("insert customer", record.row_key):
            self._table_client().create_entity(entity=record.to_entity())
        self._log_done("Inserted customer", record.row_key, name=record.name)
        return record

    def list_all(self) -> List[CustomerRecord]:
        """All rows in backend order."""
        with self._error_context("list customers"):
            entities = list(self._table_client().list_entities())
        return [CustomerRecord.from_entity(entity) for entity in entities]

    def get(self, row_key: str) -> CustomerRecord:
        """Point lookup. Raises NotFound on miss."""
        with self._error_context("get customer", row_key):
            entity = self._table_client().get_entity(
                partition_key=self.partition_key,
                row_key=row_key,
            )
        return CustomerRecord.from_entity(entity)

    def delete(self, row_key: str) -> bool:
        """
        Delete a row. Returns True if deleted, False if not found.

        Table deletes are idempotent on the service side, so the row is
        looked up first to tell the two cases apart.
        """
        try:
            with self._error_context("delete customer", row_key):
                table = self._table_client()
                table.get_entity(
                    partition_key=self.partition_key,
                    row_key=row_key,
                    select=["RowKey"],
                )
                table.delete_entity(
                    partition_key=self.partition_key,
                    row_key=row_key,
                )
        except NotFound:
            return False
        self._log_done("Deleted customer", row_key)
        return True

    def count(self) -> int:
        """Row count; 0 if the table does not exist yet."""
        with self._error_context("count customers"):
            try:
                return sum(1 for _ in self._table_client().list_entities(select=["RowKey"]))
            except ResourceNotFoundError:
                return 0


__all__ = ["CustomerTableRepository"]
