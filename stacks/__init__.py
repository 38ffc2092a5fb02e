"""
CloudFormation 스택 관리
"""

from stacks.cloudformation import CloudFormationHandler, StackNotReadyError
from stacks.models import ResourceStatus, Stack, StackResource, StackStatus

__all__ = [
    "CloudFormationHandler",
    "StackNotReadyError",
    "ResourceStatus",
    "Stack",
    "StackResource",
    "StackStatus",
]
