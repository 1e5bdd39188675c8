"""Task board and asset register."""

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from microlend.engine.base import BookService, require_non_negative, require_text
from microlend.exceptions import ReferentialIntegrityError, ValidationError
from microlend.models import (
    Asset,
    AssetStatus,
    AssetType,
    AuditAction,
    Task,
    TaskPriority,
    TaskStatus,
)
from microlend.utils import new_id

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"

E = TypeVar("E", bound=Enum)


class AdminService(BookService):
    """Back-office bookkeeping that never touches the ledger."""

    def add_task(
        self,
        title: str,
        assigned_to: str,
        due_date: date,
        description: str = "",
        priority: TaskPriority | str = TaskPriority.MEDIUM,
    ) -> Task:
        """Create a pending task for a collector.

        Raises
        ------
        ReferentialIntegrityError
            If ``assigned_to`` is not a known collector id.
        """
        title = require_text(title, "Task title")
        if assigned_to not in self.book.collectors:
            raise ReferentialIntegrityError(f"Task assigned to unknown collector {assigned_to!r}")

        task = Task(
            task_id=new_id(),
            title=title,
            description=description or "",
            assigned_to=assigned_to,
            due_date=due_date,
            priority=_enum(TaskPriority, priority, "task priority"),
        )
        self.book.tasks.add(task)
        logger.debug("Task %s assigned to %s", task.task_id, assigned_to)
        return task

    def update_task_status(self, task_id: str, status: TaskStatus | str) -> Task:
        task = self.book.tasks.get(task_id)
        task.status = _enum(TaskStatus, status, "task status")
        return self.book.tasks.save(task)

    def add_asset(
        self,
        name: str,
        asset_type: AssetType | str,
        value: Decimal | int | str,
        purchase_date: date,
        assigned_to: str = UNASSIGNED,
        notes: str = "",
        actor: str = "Admin",
    ) -> Asset:
        name = require_text(name, "Asset name")
        asset = Asset(
            asset_id=new_id(),
            name=name,
            asset_type=_enum(AssetType, asset_type, "asset type"),
            value=require_non_negative(value, "Asset value"),
            purchase_date=purchase_date,
            assigned_to=assigned_to or UNASSIGNED,
            notes=notes or "",
        )
        self.book.assets.add(asset)
        self._audit(AuditAction.CREATE, f"Asset Added: {name}", actor)
        logger.info("Asset %s registered (%s)", name, asset.asset_type.value)
        return asset

    def update_asset(
        self,
        asset_id: str,
        *,
        assigned_to: str | None = None,
        status: AssetStatus | str | None = None,
        value: Decimal | int | str | None = None,
        notes: str | None = None,
    ) -> Asset:
        """Change the given fields of an asset; ``None`` leaves a field as is."""
        asset = self.book.assets.get(asset_id)
        if assigned_to is not None:
            asset.assigned_to = assigned_to or UNASSIGNED
        if status is not None:
            asset.status = _enum(AssetStatus, status, "asset status")
        if value is not None:
            asset.value = require_non_negative(value, "Asset value")
        if notes is not None:
            asset.notes = notes
        return self.book.assets.save(asset)

    def delete_asset(self, asset_id: str, actor: str = "Admin") -> Asset:
        asset = self.book.assets.remove(asset_id)
        self._audit(AuditAction.DELETE, f"Asset Deleted: {asset.name}", actor)
        logger.info("Asset %s deleted", asset.name)
        return asset


def _enum(enum_cls: type[E], value: Any, label: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Unknown {label} {value!r}") from e
