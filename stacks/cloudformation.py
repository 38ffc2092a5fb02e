"""
CloudFormation Stack Teardown

스택 삭제 (최대 2회 시도)
1. 빈 retain 목록으로 삭제 후 삭제 완료 대기
2. 대기 실패(not ready) 시 DELETE_FAILED 리소스를 retain 목록에 넣고 재삭제
3. 최종 상태 검증
"""

from typing import Callable, List, Optional, Sequence

from botocore.exceptions import WaiterError

from config import config
from core.aws import aws_call, create_client
from core.logging_config import setup_logger
from errors import (
    AmbiguousResultError,
    IrrecoverableError,
    NotFoundError,
    TransportError,
)
from stacks.models import ResourceStatus, Stack, StackResource, StackStatus

logger = setup_logger(__name__)

RESOURCE_NOT_READY = "ResourceNotReady"


class StackNotReadyError(TransportError):
    """삭제 대기가 완료 상태에 도달하지 못함 (실패 상태 또는 대기 시간 초과)"""

    def __init__(self, stack_name: str, reason: str):
        super().__init__(
            f"stack {stack_name} did not reach DELETE_COMPLETE",
            code=RESOURCE_NOT_READY,
            backend_message=reason,
            context={"stack_name": stack_name},
        )


class CloudFormationHandler:
    """
    CloudFormation API 핸들러

    클라이언트는 첫 호출 시 생성되며, 테스트에서는 client로 주입합니다.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        client=None,
        timeout: Optional[int] = None,
        wait_delay: Optional[int] = None,
        wait_max_attempts: Optional[int] = None,
    ):
        self.region = region or config.AWS_REGION
        self.timeout = timeout or config.STORAGE_TIMEOUT_SEC
        self.wait_delay = wait_delay or config.STACK_DELETE_WAIT_DELAY_SEC
        self.wait_max_attempts = wait_max_attempts or config.STACK_DELETE_WAIT_MAX_ATTEMPTS
        self._client = client

    @property
    def client(self):
        """boto3 CloudFormation 클라이언트 (최초 사용 시 한 번 생성)"""
        if self._client is None:
            self._client = create_client(
                "cloudformation",
                region=self.region,
                timeout=self.timeout,
                access_key_id=config.AWS_ACCESS_KEY_ID,
                secret_access_key=config.AWS_SECRET_ACCESS_KEY,
            )
        return self._client

    def delete_stack(
        self,
        stack_name: str,
        retain_resources: Optional[Sequence[str]] = None,
    ) -> Stack:
        """
        스택 삭제

        첫 시도가 not ready로 끝나면 DELETE_FAILED 리소스를 보존한 채 한 번 더
        삭제합니다. 그 외 오류는 재시도 없이 바로 전파됩니다.

        Args:
            stack_name: 스택 이름
            retain_resources: 처음부터 보존할 리소스 logical id 목록

        Returns:
            마지막 스택 스냅샷

        Raises:
            IrrecoverableError: 두 번째 시도 후에도 예상한 상태가 아님
        """
        retained = list(retain_resources or [])
        try:
            return self._delete_stack_and_wait(stack_name, retained)
        except StackNotReadyError as e:
            logger.warning(f"Stack {stack_name} was not deleted on the first attempt: {e}")

        failed = self._get_failed_deleted_resources(stack_name)
        retained = sorted(set(retained) | set(failed))
        logger.info(f"Retrying deletion of stack {stack_name} retaining resources {retained}")

        try:
            stack = self._delete_stack_and_wait(stack_name, retained)
        except StackNotReadyError:
            stack = self.describe_stack(stack_name)

        if stack.status != StackStatus.DELETE_FAILED:
            raise IrrecoverableError(
                "unable to delete the stack after two attempts",
                context={"stack_name": stack_name, "status": stack.status.value},
            )

        # DELETE_FAILED는 보존한 리소스 때문일 때만 예상된 결과로 본다
        stack.resources = self.describe_stack_resources(stack_name)
        unexpected = sorted(set(stack.failed_resource_ids()) - set(retained))
        if unexpected:
            raise IrrecoverableError(
                "unable to delete the stack after two attempts",
                context={"stack_name": stack_name, "failed_resources": unexpected},
            )

        logger.info(f"Stack {stack_name} deleted retaining resources {retained}")
        return stack

    def _delete_stack_and_wait(self, stack_name: str, retained: List[str]) -> Stack:
        params = {"StackName": stack_name}
        # RetainResources는 DELETE_FAILED 상태의 스택에만 허용됨
        if retained:
            params["RetainResources"] = retained

        with aws_call("there was a problem deleting the cloudformation stack", stack_name=stack_name):
            self.client.delete_stack(**params)

        waiter = self.client.get_waiter("stack_delete_complete")
        with aws_call("failed waiting for the cloudformation stack deletion", stack_name=stack_name):
            try:
                waiter.wait(
                    StackName=stack_name,
                    WaiterConfig={
                        "Delay": self.wait_delay,
                        "MaxAttempts": self.wait_max_attempts,
                    },
                )
            except WaiterError as e:
                raise StackNotReadyError(stack_name, str(e)) from e

        try:
            return self.describe_stack(stack_name)
        except NotFoundError:
            # 이름으로는 삭제 완료된 스택을 조회할 수 없음
            return Stack(name=stack_name, status=StackStatus.DELETE_COMPLETE)

    def list_stacks(self, predicate: Optional[Callable[[Stack], bool]] = None) -> List[Stack]:
        """
        전체 스택 조회 후 predicate로 필터링

        Args:
            predicate: 선택 함수 (None이면 전체)
        """
        selected = []
        with aws_call("there was a problem listing cloudformation stacks"):
            paginator = self.client.get_paginator("describe_stacks")
            for page in paginator.paginate():
                for description in page.get("Stacks", []):
                    stack = Stack.from_description(description)
                    logger.debug(f"Described stack {stack.name}")
                    if predicate is None or predicate(stack):
                        selected.append(stack)
        return selected

    def describe_stack(self, stack_name: str) -> Stack:
        """
        스택 하나 조회

        Raises:
            NotFoundError: 일치하는 스택 없음
            AmbiguousResultError: 일치하는 스택이 2개 이상
        """
        try:
            with aws_call("there was a problem describing the CloudFormation stack", stack_name=stack_name):
                response = self.client.describe_stacks(StackName=stack_name)
        except TransportError as e:
            if e.code == "ValidationError" and "does not exist" in (e.backend_message or ""):
                raise NotFoundError(f"stack {stack_name} does not exist", context=e.context) from e
            raise

        stacks = response.get("Stacks", [])
        if not stacks:
            raise NotFoundError(f"stack {stack_name} does not exist", context={"stack_name": stack_name})
        if len(stacks) > 1:
            raise AmbiguousResultError(
                "we couldn't find an unique stack to describe",
                context={"stack_name": stack_name, "matches": len(stacks)},
            )
        return Stack.from_description(stacks[0])

    def describe_stack_resources(self, stack_name: str) -> List[StackResource]:
        """스택 리소스 목록"""
        with aws_call("there was a problem describing the stack resources", stack_name=stack_name):
            response = self.client.describe_stack_resources(StackName=stack_name)
        return [StackResource.from_description(r) for r in response.get("StackResources", [])]

    def _get_failed_deleted_resources(self, stack_name: str) -> List[str]:
        return [
            r.logical_id
            for r in self.describe_stack_resources(stack_name)
            if r.status == ResourceStatus.DELETE_FAILED
        ]
