from fastapi import status
from fastapi.testclient import TestClient

from aws_facade.dependencies import get_s3_client
from tests.consts import (
    TEST_BUCKET_NAME,
    TEST_FILE_CONTENT,
    TEST_FILE_CONTENT_TYPE,
    TEST_FILE_PATH,
)
from tests.fakes import fake_s3_client, make_client_error


def test_s3_health(client: TestClient):
    response = client.get("/buckets/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["service"] == "S3"


def test_list_buckets__empty(client: TestClient):
    response = client.get("/buckets")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["buckets"] == []
    assert response.json()["message"] == "No buckets found"


def test_create_bucket(client: TestClient):
    response = client.post("/buckets", json={"bucket_name": TEST_BUCKET_NAME})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.headers["Location"] == f"/buckets/{TEST_BUCKET_NAME}"
    assert response.json()["outcome"] == "created"

    listed = client.get("/buckets").json()["buckets"]
    assert [bucket["bucket_name"] for bucket in listed] == [TEST_BUCKET_NAME]


def test_create_bucket__already_exists(app, client: TestClient):
    fake = fake_s3_client()
    fake.create_bucket.side_effect = make_client_error("BucketAlreadyOwnedByYou", 409, "CreateBucket")
    app.dependency_overrides[get_s3_client] = lambda: fake

    response = client.post("/buckets", json={"bucket_name": TEST_BUCKET_NAME})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["outcome"] == "already_exists"


def test_create_bucket__validation(client: TestClient):
    assert client.post("/buckets", json={}).status_code == status.HTTP_400_BAD_REQUEST
    assert client.post("/buckets", json={"bucket_name": "   "}).status_code == status.HTTP_400_BAD_REQUEST
    response = client.post("/buckets", json={"bucket_name": "Bad_Name"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Invalid bucket name" in response.json()["detail"]


def test_upload_then_read_back(client: TestClient):
    response = client.post(
        f"/buckets/{TEST_BUCKET_NAME}/files/upload",
        files={"file_content": (TEST_FILE_PATH, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["file_name"] == TEST_FILE_PATH
    assert response.json()["size"] == len(TEST_FILE_CONTENT)

    # upload created the bucket on the fly
    files = client.get(f"/buckets/{TEST_BUCKET_NAME}/files").json()["files"]
    assert [f["key"] for f in files] == [TEST_FILE_PATH]

    response = client.get(f"/buckets/{TEST_BUCKET_NAME}/files/{TEST_FILE_PATH}")
    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT
    assert response.headers["content-type"].startswith(TEST_FILE_CONTENT_TYPE)
    assert f"filename={TEST_FILE_PATH}" in response.headers["content-disposition"]

    response = client.get(f"/buckets/{TEST_BUCKET_NAME}/files/{TEST_FILE_PATH}/metadata")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["content_length"] == len(TEST_FILE_CONTENT)
    assert response.json()["content_type"] == TEST_FILE_CONTENT_TYPE


def test_upload__key_override_and_missing_file(client: TestClient):
    response = client.post(
        f"/buckets/{TEST_BUCKET_NAME}/files/upload",
        params={"key": "docs/renamed.txt"},
        files={"file_content": (TEST_FILE_PATH, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )
    assert response.json()["file_name"] == "docs/renamed.txt"

    response = client.post(f"/buckets/{TEST_BUCKET_NAME}/files/upload")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "No file uploaded"


def test_upload_text_and_prefix_listing(client: TestClient):
    for name in ("reports/a.txt", "reports/b.txt", "other.txt"):
        response = client.post(
            f"/buckets/{TEST_BUCKET_NAME}/files/upload-text",
            json={"file_name": name, "content": "hello"},
        )
        assert response.status_code == status.HTTP_200_OK

    files = client.get(f"/buckets/{TEST_BUCKET_NAME}/files", params={"prefix": "reports/"}).json()["files"]
    assert sorted(f["key"] for f in files) == ["reports/a.txt", "reports/b.txt"]

    response = client.get(f"/buckets/{TEST_BUCKET_NAME}/files/reports/a.txt")
    assert response.text == "hello"
    assert response.headers["content-type"].startswith("text/plain")


def test_upload_text__validation(client: TestClient):
    response = client.post(f"/buckets/{TEST_BUCKET_NAME}/files/upload-text", json={"file_name": "a.txt"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_missing_file__404(client: TestClient, test_bucket):
    response = client.get(f"/buckets/{test_bucket}/files/nope.txt")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == f"File 'nope.txt' not found in bucket '{test_bucket}'"

    response = client.get(f"/buckets/{test_bucket}/files/nope.txt/metadata")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_missing_bucket__404(client: TestClient):
    response = client.get("/buckets/no-such-bucket/files")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Bucket 'no-such-bucket' does not exist"


def test_delete_all_files(client: TestClient, s3_client, test_bucket):
    response = client.delete(f"/buckets/{test_bucket}/files")
    assert response.json() == {
        "message": f"Bucket '{test_bucket}' is already empty",
        "deleted_count": 0,
        "errors": [],
    }

    for i in range(3):
        s3_client.put_object(Bucket=test_bucket, Key=f"file{i}.txt", Body=b"data")
    response = client.delete(f"/buckets/{test_bucket}/files")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["deleted_count"] == 3
    assert response.json()["errors"] == []


def test_delete_file(client: TestClient, s3_client, test_bucket):
    s3_client.put_object(Bucket=test_bucket, Key="docs/a.txt", Body=b"data")

    response = client.delete(f"/buckets/{test_bucket}/files/docs/a.txt")

    assert response.status_code == status.HTTP_200_OK
    assert s3_client.list_objects_v2(Bucket=test_bucket).get("KeyCount") == 0


def test_delete_bucket(client: TestClient, s3_client, test_bucket):
    s3_client.put_object(Bucket=test_bucket, Key="a.txt", Body=b"data")

    response = client.delete(f"/buckets/{test_bucket}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "not empty" in response.json()["detail"]

    response = client.delete(f"/buckets/{test_bucket}", params={"force": True})
    assert response.status_code == status.HTTP_200_OK
    assert client.get("/buckets").json()["buckets"] == []


def test_aws_error__500(app, client: TestClient):
    fake = fake_s3_client()
    fake.list_buckets.side_effect = make_client_error("AccessDenied", 403, "ListBuckets")
    app.dependency_overrides[get_s3_client] = lambda: fake

    response = client.get("/buckets")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"].startswith("Error listing buckets:")


def test_upload__accepts_any_file_field_name(client: TestClient, s3_client):
    response = client.post(
        f"/buckets/{TEST_BUCKET_NAME}/files/upload",
        files={"file": ("a.txt", b"from curl", "text/plain")},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["file_name"] == "a.txt"
    body = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key="a.txt")["Body"].read()
    assert body == b"from curl"


def test_upload_text__reads_json_body_not_query(client: TestClient):
    response = client.post(
        f"/buckets/{TEST_BUCKET_NAME}/files/upload-text",
        params={"file_name": "a.txt", "content": "hello"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
