import importlib
import os
from unittest.mock import MagicMock, patch

ADMIN = {"user_id": "admin-1", "role": "admin"}
USER = {"user_id": "u1", "role": "user"}


def load_handler(module_name: str):
    """Import a handler module against a mocked DynamoDB resource."""
    env = patch.dict(
        os.environ,
        {"TABLE_NAME": "test-table", "AWS_REGION": "ap-south-1", "IMAGE_BUCKET": ""},
        clear=False,
    )
    env.start()
    res = patch("boto3.resource")
    mock_res = res.start()
    mock_res.return_value.Table.return_value = MagicMock()
    mod = importlib.reload(importlib.import_module(module_name))
    return mod, [res, env]


def event(authorizer=None, body=None, path=None, query=None):
    return {
        "requestContext": {"authorizer": authorizer} if authorizer else {},
        "body": body,
        "pathParameters": path,
        "queryStringParameters": query,
    }
