"""
CloudFormation Stack Models

원격 서비스가 소유한 스택 상태의 스냅샷
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StackStatus(str, Enum):
    """스택 상태"""
    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    CREATE_FAILED = "CREATE_FAILED"
    CREATE_COMPLETE = "CREATE_COMPLETE"
    ROLLBACK_IN_PROGRESS = "ROLLBACK_IN_PROGRESS"
    ROLLBACK_FAILED = "ROLLBACK_FAILED"
    ROLLBACK_COMPLETE = "ROLLBACK_COMPLETE"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"
    DELETE_FAILED = "DELETE_FAILED"
    DELETE_COMPLETE = "DELETE_COMPLETE"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_COMPLETE_CLEANUP_IN_PROGRESS = "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UPDATE_FAILED = "UPDATE_FAILED"
    UPDATE_ROLLBACK_IN_PROGRESS = "UPDATE_ROLLBACK_IN_PROGRESS"
    UPDATE_ROLLBACK_FAILED = "UPDATE_ROLLBACK_FAILED"
    UPDATE_ROLLBACK_COMPLETE_CLEANUP_IN_PROGRESS = "UPDATE_ROLLBACK_COMPLETE_CLEANUP_IN_PROGRESS"
    UPDATE_ROLLBACK_COMPLETE = "UPDATE_ROLLBACK_COMPLETE"
    REVIEW_IN_PROGRESS = "REVIEW_IN_PROGRESS"
    IMPORT_IN_PROGRESS = "IMPORT_IN_PROGRESS"
    IMPORT_COMPLETE = "IMPORT_COMPLETE"
    IMPORT_ROLLBACK_IN_PROGRESS = "IMPORT_ROLLBACK_IN_PROGRESS"
    IMPORT_ROLLBACK_FAILED = "IMPORT_ROLLBACK_FAILED"
    IMPORT_ROLLBACK_COMPLETE = "IMPORT_ROLLBACK_COMPLETE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class ResourceStatus(str, Enum):
    """스택 리소스 상태"""
    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    CREATE_FAILED = "CREATE_FAILED"
    CREATE_COMPLETE = "CREATE_COMPLETE"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"
    DELETE_FAILED = "DELETE_FAILED"
    DELETE_COMPLETE = "DELETE_COMPLETE"
    DELETE_SKIPPED = "DELETE_SKIPPED"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_FAILED = "UPDATE_FAILED"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


@dataclass
class StackResource:
    """스택 리소스"""
    logical_id: str
    status: ResourceStatus
    resource_type: Optional[str] = None
    status_reason: Optional[str] = None

    @classmethod
    def from_description(cls, data: Dict[str, Any]) -> "StackResource":
        return cls(
            logical_id=data["LogicalResourceId"],
            status=ResourceStatus(data.get("ResourceStatus", "UNKNOWN")),
            resource_type=data.get("ResourceType"),
            status_reason=data.get("ResourceStatusReason"),
        )


@dataclass
class Stack:
    """스택 스냅샷"""
    name: str
    status: StackStatus
    stack_id: Optional[str] = None
    status_reason: Optional[str] = None
    resources: List[StackResource] = field(default_factory=list)

    @classmethod
    def from_description(cls, data: Dict[str, Any]) -> "Stack":
        return cls(
            name=data["StackName"],
            status=StackStatus(data.get("StackStatus", "UNKNOWN")),
            stack_id=data.get("StackId"),
            status_reason=data.get("StackStatusReason"),
        )

    def failed_resource_ids(self) -> List[str]:
        return [r.logical_id for r in self.resources if r.status == ResourceStatus.DELETE_FAILED]
