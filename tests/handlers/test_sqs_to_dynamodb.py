import handlers.sqs_to_dynamodb.sqs_to_dynamodb as sqs_to_dynamodb
from utils import dynamodb_store


def _event(*message_ids):
    return {
        "Records": [
            {"messageId": message_id, "body": '{"id": "%s"}' % message_id}
            for message_id in message_ids
        ]
    }


def test_handler_forwards_every_record(monkeypatch, capsys):
    written = []
    monkeypatch.setattr(sqs_to_dynamodb, "put_message", lambda record: written.append(record["messageId"]))

    result = sqs_to_dynamodb.handler(_event("a", "b"), context={})

    assert result == {"batchItemFailures": []}
    assert written == ["a", "b"]
    assert '"MessagesForwarded": 2' in capsys.readouterr().out


def test_handler_reports_only_failed_records(monkeypatch, capsys):
    written = []

    def fake_put(record):
        if record["messageId"] == "bad":
            raise RuntimeError("throttled")
        written.append(record["messageId"])

    monkeypatch.setattr(sqs_to_dynamodb, "put_message", fake_put)

    result = sqs_to_dynamodb.handler(_event("a", "bad", "c"), context={})

    assert result == {"batchItemFailures": [{"itemIdentifier": "bad"}]}
    assert written == ["a", "c"]
    out = capsys.readouterr().out
    assert '"MessageForwardFailure": 1' in out


def test_handler_without_records_returns_empty_failures(monkeypatch):
    log_calls = []
    monkeypatch.setattr(sqs_to_dynamodb, "log_json", lambda *args, **kwargs: log_calls.append(args))

    def fail_put(record):
        raise AssertionError("no write expected")

    monkeypatch.setattr(sqs_to_dynamodb, "put_message", fail_put)

    assert sqs_to_dynamodb.handler({}, context={}) == {"batchItemFailures": []}
    assert sqs_to_dynamodb.handler({"Records": []}, context={}) == {"batchItemFailures": []}
    assert [call[2] for call in log_calls] == ["sqs_no_records", "sqs_no_records"]


def test_handler_writes_flattened_item(monkeypatch, capsys):
    calls = []

    class FakeClient:
        def put_item(self, TableName, Item):
            calls.append((TableName, Item))

    monkeypatch.setenv("DYNAMODB_TABLE_NAME", "messages")
    monkeypatch.setattr(dynamodb_store, "get_dynamodb_client", lambda: FakeClient())

    event = {
        "Records": [
            {
                "messageId": "m-1",
                "receiptHandle": "rh",
                "md5OfBody": "md5",
                "body": '{"order": {"id": 7, "tags": ["a"]}}',
            }
        ]
    }

    result = sqs_to_dynamodb.handler(event, context={})

    assert result == {"batchItemFailures": []}
    table_name, item = calls[0]
    assert table_name == "messages"
    assert item["BodyJson.order.id"] == {"N": "7"}
    assert item["BodyJson.order.tags"] == {"S": '["a"]'}
