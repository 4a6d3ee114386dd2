from urllib.parse import quote

from fastapi import status
from fastapi.testclient import TestClient

from aws_facade.dependencies import get_sqs_client
from tests.consts import TEST_QUEUE_NAME
from tests.fakes import fake_sqs_client, make_client_error


def test_sqs_health(client: TestClient):
    response = client.get("/queues/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["service"] == "SQS"


def test_create_and_list_queues(client: TestClient):
    assert client.get("/queues").json() == {"queues": [], "message": "No queues found"}

    response = client.post("/queues", json={"queue_name": TEST_QUEUE_NAME})
    assert response.status_code == status.HTTP_201_CREATED
    queue_url = response.json()["queue_url"]
    assert queue_url.endswith(f"/{TEST_QUEUE_NAME}")

    assert client.get("/queues").json()["queues"] == [queue_url]


def test_create_queue__already_exists(app, client: TestClient):
    fake = fake_sqs_client()
    fake.create_queue.side_effect = make_client_error("QueueAlreadyExists", 400, "CreateQueue")
    app.dependency_overrides[get_sqs_client] = lambda: fake

    response = client.post("/queues", json={"queue_name": TEST_QUEUE_NAME})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["outcome"] == "already_exists"


def test_create_queue__requires_name(client: TestClient):
    assert client.post("/queues", json={"queue_name": " "}).status_code == status.HTTP_400_BAD_REQUEST


def test_message_lifecycle(client: TestClient, test_queue):
    response = client.post(f"/queues/{test_queue}/messages", json={"message_body": "hello"})
    assert response.status_code == status.HTTP_200_OK
    message_id = response.json()["message_id"]

    response = client.get(f"/queues/{test_queue}/messages")
    body = response.json()
    assert body["count"] == 1
    assert body["messages"][0]["message_id"] == message_id
    assert body["messages"][0]["body"] == "hello"

    receipt_handle = body["messages"][0]["receipt_handle"]
    response = client.delete(f"/queues/{test_queue}/messages/{quote(receipt_handle, safe='')}")
    assert response.status_code == status.HTTP_200_OK

    response = client.get(f"/queues/{test_queue}/messages")
    assert response.json() == {"count": 0, "messages": [], "message": "No messages available"}


def test_send_message__requires_body(client: TestClient, test_queue):
    response = client.post(f"/queues/{test_queue}/messages", json={"message_body": ""})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_receive__clamps_max_messages(app, client: TestClient):
    fake = fake_sqs_client()
    fake.receive_message.return_value = {"Messages": []}
    app.dependency_overrides[get_sqs_client] = lambda: fake

    response = client.get(f"/queues/{TEST_QUEUE_NAME}/messages", params={"max_messages": 50})

    assert response.status_code == status.HTTP_200_OK
    kwargs = fake.receive_message.call_args.kwargs
    assert kwargs["MaxNumberOfMessages"] == 10
    # the test app is configured with a zero long-poll wait
    assert kwargs["WaitTimeSeconds"] == 0


def test_receive__rejects_non_positive_max_messages(client: TestClient, test_queue):
    response = client.get(f"/queues/{test_queue}/messages", params={"max_messages": 0})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_unknown_queue__404(client: TestClient):
    response = client.post("/queues/ghost/messages", json={"message_body": "hello"})
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Queue 'ghost' does not exist"

    assert client.delete("/queues/ghost").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/queues/ghost/messages").status_code == status.HTTP_404_NOT_FOUND


def test_delete_message__invalid_receipt_handle(app, client: TestClient):
    fake = fake_sqs_client()
    fake.delete_message.side_effect = make_client_error("ReceiptHandleIsInvalid", 400, "DeleteMessage")
    app.dependency_overrides[get_sqs_client] = lambda: fake

    response = client.delete(f"/queues/{TEST_QUEUE_NAME}/messages/not-a-handle")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid receipt handle"


def test_purge_queue(client: TestClient, test_queue):
    client.post(f"/queues/{test_queue}/messages", json={"message_body": "one"})

    response = client.delete(f"/queues/{test_queue}/messages")

    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/queues/{test_queue}/messages").json()["count"] == 0


def test_purge_queue__in_progress(app, client: TestClient):
    fake = fake_sqs_client()
    fake.purge_queue.side_effect = make_client_error("AWS.SimpleQueueService.PurgeQueueInProgress", 403, "PurgeQueue")
    app.dependency_overrides[get_sqs_client] = lambda: fake

    response = client.delete(f"/queues/{TEST_QUEUE_NAME}/messages")

    assert response.status_code == status.HTTP_409_CONFLICT


def test_delete_queue(client: TestClient, test_queue):
    response = client.delete(f"/queues/{test_queue}")

    assert response.status_code == status.HTTP_200_OK
    assert client.get("/queues").json()["queues"] == []
