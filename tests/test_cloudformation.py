"""
CloudFormation Stack Teardown Tests

2단계 스택 삭제, 조회, 목록
"""

import pytest
from unittest.mock import MagicMock, call, patch

from botocore.exceptions import ClientError, WaiterError

STACK = "ci-cluster-stack"


def _waiter_error():
    return WaiterError(
        name="StackDeleteComplete",
        reason="Waiter encountered a terminal failure state",
        last_response={},
    )


def _stacks(*statuses):
    return {"Stacks": [{"StackName": STACK, "StackId": f"arn:{i}", "StackStatus": s}
                       for i, s in enumerate(statuses)]}


def _resources(**statuses):
    return {"StackResources": [
        {"LogicalResourceId": logical_id, "ResourceStatus": status}
        for logical_id, status in statuses.items()
    ]}


def _does_not_exist():
    return ClientError(
        {"Error": {"Code": "ValidationError", "Message": f"Stack with id {STACK} does not exist"}},
        "DescribeStacks",
    )


@pytest.fixture
def cfn_client():
    """boto3 CloudFormation 클라이언트 목"""
    return MagicMock()


@pytest.fixture
def handler(cfn_client):
    from stacks.cloudformation import CloudFormationHandler

    return CloudFormationHandler(client=cfn_client, wait_delay=1, wait_max_attempts=2)


class TestStackModels:
    """스택 모델 테스트"""

    def test_stack_from_description(self):
        from stacks.models import Stack, StackStatus

        stack = Stack.from_description({
            "StackName": STACK,
            "StackId": "arn:aws:cloudformation:us-east-1:1:stack/x",
            "StackStatus": "DELETE_FAILED",
            "StackStatusReason": "The following resource(s) failed to delete: [Bucket]",
        })

        assert stack.name == STACK
        assert stack.status == StackStatus.DELETE_FAILED
        assert "Bucket" in stack.status_reason

    def test_unknown_status(self):
        from stacks.models import ResourceStatus, StackStatus

        assert StackStatus("SOMETHING_NEW") == StackStatus.UNKNOWN
        assert ResourceStatus("SOMETHING_NEW") == ResourceStatus.UNKNOWN

    def test_failed_resource_ids(self):
        from stacks.models import ResourceStatus, Stack, StackResource, StackStatus

        stack = Stack(STACK, StackStatus.DELETE_FAILED, resources=[
            StackResource("Bucket", ResourceStatus.DELETE_FAILED),
            StackResource("Role", ResourceStatus.DELETE_COMPLETE),
        ])

        assert stack.failed_resource_ids() == ["Bucket"]


class TestDeleteStack:
    """2단계 스택 삭제"""

    def test_first_attempt_succeeds(self, handler, cfn_client):
        """첫 시도에 삭제 완료"""
        from stacks.models import StackStatus

        cfn_client.describe_stacks.side_effect = _does_not_exist()

        stack = handler.delete_stack(STACK)

        assert stack.name == STACK
        assert stack.status == StackStatus.DELETE_COMPLETE
        cfn_client.delete_stack.assert_called_once_with(StackName=STACK)
        cfn_client.get_waiter.assert_called_once_with("stack_delete_complete")
        cfn_client.get_waiter.return_value.wait.assert_called_once_with(
            StackName=STACK,
            WaiterConfig={"Delay": 1, "MaxAttempts": 2},
        )

    def test_retry_retains_failed_resources(self, handler, cfn_client):
        """두 번째 시도에서 DELETE_FAILED 리소스를 보존하고 DELETE_FAILED로 끝나면 성공"""
        from stacks.models import StackStatus

        cfn_client.get_waiter.return_value.wait.side_effect = [_waiter_error(), _waiter_error()]
        cfn_client.describe_stack_resources.return_value = _resources(
            Bucket="DELETE_FAILED", Role="DELETE_COMPLETE"
        )
        cfn_client.describe_stacks.return_value = _stacks("DELETE_FAILED")

        stack = handler.delete_stack(STACK)

        assert stack.status == StackStatus.DELETE_FAILED
        assert stack.failed_resource_ids() == ["Bucket"]
        assert cfn_client.delete_stack.call_args_list == [
            call(StackName=STACK),
            call(StackName=STACK, RetainResources=["Bucket"]),
        ]

    def test_explicit_retain_list(self, handler, cfn_client):
        """호출자가 준 보존 목록은 두 번째 시도에도 유지"""
        cfn_client.get_waiter.return_value.wait.side_effect = [_waiter_error(), _waiter_error()]
        cfn_client.describe_stack_resources.return_value = _resources(
            Bucket="DELETE_FAILED", Vpc="DELETE_FAILED"
        )
        cfn_client.describe_stacks.return_value = _stacks("DELETE_FAILED")

        handler.delete_stack(STACK, retain_resources=["Vpc"])

        assert cfn_client.delete_stack.call_args_list == [
            call(StackName=STACK, RetainResources=["Vpc"]),
            call(StackName=STACK, RetainResources=["Bucket", "Vpc"]),
        ]

    def test_retry_completes_is_irrecoverable(self, handler, cfn_client):
        """두 번째 시도 후 DELETE_FAILED가 아니면 복구 불가"""
        from errors import IrrecoverableError

        cfn_client.get_waiter.return_value.wait.side_effect = [_waiter_error(), None]
        cfn_client.describe_stack_resources.return_value = _resources(Bucket="DELETE_FAILED")
        cfn_client.describe_stacks.side_effect = _does_not_exist()

        with pytest.raises(IrrecoverableError, match="two attempts") as exc_info:
            handler.delete_stack(STACK)

        assert exc_info.value.context["status"] == "DELETE_COMPLETE"

    def test_retry_in_progress_is_irrecoverable(self, handler, cfn_client):
        from errors import IrrecoverableError

        cfn_client.get_waiter.return_value.wait.side_effect = [_waiter_error(), _waiter_error()]
        cfn_client.describe_stack_resources.return_value = _resources(Bucket="DELETE_IN_PROGRESS")
        cfn_client.describe_stacks.return_value = _stacks("DELETE_IN_PROGRESS")

        with pytest.raises(IrrecoverableError):
            handler.delete_stack(STACK)

    def test_unretained_failure_is_irrecoverable(self, handler, cfn_client):
        """보존하지 않은 리소스가 다시 실패하면 복구 불가"""
        from errors import IrrecoverableError

        cfn_client.get_waiter.return_value.wait.side_effect = [_waiter_error(), _waiter_error()]
        cfn_client.describe_stack_resources.side_effect = [
            _resources(Bucket="DELETE_FAILED", Role="DELETE_IN_PROGRESS"),
            _resources(Bucket="DELETE_FAILED", Role="DELETE_FAILED"),
        ]
        cfn_client.describe_stacks.return_value = _stacks("DELETE_FAILED")

        with pytest.raises(IrrecoverableError) as exc_info:
            handler.delete_stack(STACK)

        assert exc_info.value.context["failed_resources"] == ["Role"]

    def test_other_errors_are_not_retried(self, handler, cfn_client):
        """not ready 이외의 오류는 즉시 전파"""
        from errors import TransportError

        cfn_client.delete_stack.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "not authorized"}}, "DeleteStack"
        )

        with pytest.raises(TransportError) as exc_info:
            handler.delete_stack(STACK)

        assert exc_info.value.code == "AccessDenied"
        cfn_client.delete_stack.assert_called_once()
        cfn_client.describe_stack_resources.assert_not_called()


class TestDescribeStack:
    """스택 조회"""

    def test_describe_stack(self, handler, cfn_client):
        from stacks.models import StackStatus

        cfn_client.describe_stacks.return_value = _stacks("CREATE_COMPLETE")

        stack = handler.describe_stack(STACK)

        assert stack.status == StackStatus.CREATE_COMPLETE
        assert stack.stack_id == "arn:0"
        cfn_client.describe_stacks.assert_called_once_with(StackName=STACK)

    def test_ambiguous(self, handler, cfn_client):
        from errors import AmbiguousResultError

        cfn_client.describe_stacks.return_value = _stacks("CREATE_COMPLETE", "DELETE_COMPLETE")

        with pytest.raises(AmbiguousResultError):
            handler.describe_stack(STACK)

    def test_no_match(self, handler, cfn_client):
        from errors import NotFoundError

        cfn_client.describe_stacks.return_value = {"Stacks": []}

        with pytest.raises(NotFoundError):
            handler.describe_stack(STACK)

    def test_does_not_exist(self, handler, cfn_client):
        from errors import NotFoundError

        cfn_client.describe_stacks.side_effect = _does_not_exist()

        with pytest.raises(NotFoundError):
            handler.describe_stack(STACK)

    def test_other_validation_error(self, handler, cfn_client):
        from errors import NotFoundError, TransportError

        cfn_client.describe_stacks.side_effect = ClientError(
            {"Error": {"Code": "ValidationError", "Message": "1 validation error detected"}},
            "DescribeStacks",
        )

        with pytest.raises(TransportError) as exc_info:
            handler.describe_stack(STACK)

        assert not isinstance(exc_info.value, NotFoundError)

    def test_describe_stack_resources(self, handler, cfn_client):
        from stacks.models import ResourceStatus

        cfn_client.describe_stack_resources.return_value = _resources(Bucket="DELETE_SKIPPED")

        resources = handler.describe_stack_resources(STACK)

        assert len(resources) == 1
        assert resources[0].logical_id == "Bucket"
        assert resources[0].status == ResourceStatus.DELETE_SKIPPED


class TestListStacks:
    """스택 목록"""

    def test_list_all_pages(self, handler, cfn_client):
        paginator = cfn_client.get_paginator.return_value
        paginator.paginate.return_value = [
            {"Stacks": [{"StackName": "a", "StackStatus": "CREATE_COMPLETE"}]},
            {"Stacks": [{"StackName": "b", "StackStatus": "DELETE_FAILED"}]},
        ]

        stacks = handler.list_stacks()

        cfn_client.get_paginator.assert_called_once_with("describe_stacks")
        assert [s.name for s in stacks] == ["a", "b"]

    def test_list_with_predicate(self, handler, cfn_client):
        from stacks.models import StackStatus

        cfn_client.get_paginator.return_value.paginate.return_value = [
            {"Stacks": [
                {"StackName": "a", "StackStatus": "CREATE_COMPLETE"},
                {"StackName": "b", "StackStatus": "DELETE_FAILED"},
            ]},
        ]

        stacks = handler.list_stacks(lambda s: s.status == StackStatus.DELETE_FAILED)

        assert [s.name for s in stacks] == ["b"]


class TestHandlerClient:
    """클라이언트 지연 생성"""

    def test_client_is_lazy(self):
        from stacks.cloudformation import CloudFormationHandler

        with patch("stacks.cloudformation.create_client") as mock_create:
            handler = CloudFormationHandler(region="eu-west-1")
            mock_create.assert_not_called()
            assert handler.client is handler.client

        mock_create.assert_called_once()
        assert mock_create.call_args.args[0] == "cloudformation"
        assert mock_create.call_args.kwargs["region"] == "eu-west-1"
