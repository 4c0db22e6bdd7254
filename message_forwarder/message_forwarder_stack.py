import os

from aws_cdk import (
    CfnOutput,
    Duration,
    RemovalPolicy,
    Stack,
    aws_dynamodb as dynamodb,
    aws_lambda as _lambda,
    aws_lambda_event_sources as lambda_event_sources,
    aws_sqs as sqs,
)
from constructs import Construct

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

FUNCTION_TIMEOUT_SECONDS = 30

ASSET_EXCLUDES = [
    ".git",
    ".venv",
    "cdk.out",
    ".pytest_cache",
    "*.egg-info",
    "tests",
    "message_forwarder",
    "function_app.py",
    "host.json",
    "app.py",
    "*.md",
    "*.txt",
    "**/__pycache__",
]


class MessageForwarderStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        table_name = self.node.try_get_context("tableName") or "SqsMessages"
        queue_name = self.node.try_get_context("queueName")
        log_level = self.node.try_get_context("logLevel") or "INFO"

        dead_letter_queue = sqs.Queue(
            self,
            "MessageForwarderDlq",
            retention_period=Duration.days(14),
        )
        ingress_queue = sqs.Queue(
            self,
            "MessageForwarderQueue",
            queue_name=queue_name,
            visibility_timeout=Duration.seconds(FUNCTION_TIMEOUT_SECONDS * 6),
            dead_letter_queue=sqs.DeadLetterQueue(
                max_receive_count=5,
                queue=dead_letter_queue,
            ),
        )

        messages_table = dynamodb.Table(
            self,
            "MessagesTable",
            table_name=table_name,
            partition_key=dynamodb.Attribute(
                name="MessageId",
                type=dynamodb.AttributeType.STRING,
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.RETAIN,
        )

        forwarder_fn = _lambda.Function(
            self,
            "SqsToDynamoDbFunction",
            runtime=_lambda.Runtime.PYTHON_3_11,
            handler="handlers.sqs_to_dynamodb.sqs_to_dynamodb.handler",
            code=_lambda.Code.from_asset(PROJECT_ROOT, exclude=ASSET_EXCLUDES),
            timeout=Duration.seconds(FUNCTION_TIMEOUT_SECONDS),
            environment={
                "DYNAMODB_TABLE_NAME": messages_table.table_name,
                "LOG_LEVEL": log_level,
            },
        )
        messages_table.grant_write_data(forwarder_fn)
        forwarder_fn.add_event_source(
            lambda_event_sources.SqsEventSource(
                ingress_queue,
                batch_size=10,
                report_batch_item_failures=True,
            )
        )

        CfnOutput(
            self,
            "IngressQueueUrl",
            value=ingress_queue.queue_url,
        )
        CfnOutput(
            self,
            "IngressQueueArn",
            value=ingress_queue.queue_arn,
        )
        CfnOutput(
            self,
            "DeadLetterQueueUrl",
            value=dead_letter_queue.queue_url,
        )
        CfnOutput(
            self,
            "MessagesTableName",
            value=messages_table.table_name,
        )
