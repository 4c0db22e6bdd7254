import boto3
from botocore.config import Config

_DYNAMODB_CLIENT = None


def get_dynamodb_client():
    global _DYNAMODB_CLIENT
    if _DYNAMODB_CLIENT is None:
        config = Config(
            connect_timeout=2,
            read_timeout=5,
            retries={"max_attempts": 3, "mode": "standard"},
        )
        _DYNAMODB_CLIENT = boto3.client("dynamodb", config=config)
    return _DYNAMODB_CLIENT
