import pytest

from aws_facade.errors import BucketNotFoundError
from aws_facade.s3.delete_objects import delete_all_s3_objects, delete_s3_object
from aws_facade.s3.read_objects import list_s3_objects, object_exists_in_s3
from tests.consts import TEST_BUCKET_NAME
from tests.fakes import fake_s3_client, make_client_error


def test_delete_all__empty_bucket_skips_delete_call():
    s3_client = fake_s3_client()
    s3_client.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}

    result = delete_all_s3_objects(TEST_BUCKET_NAME, s3_client=s3_client)

    assert result.deleted_count == 0
    assert result.already_empty
    assert result.errors == []
    s3_client.delete_objects.assert_not_called()


def test_delete_all__sums_across_pages(s3_client, test_bucket):
    for i in range(5):
        s3_client.put_object(Bucket=test_bucket, Key=f"file{i}.txt", Body=b"data")

    result = delete_all_s3_objects(test_bucket, s3_client=s3_client, max_keys=2)

    assert result.deleted_count == 5
    assert result.errors == []
    assert not result.already_empty
    assert list_s3_objects(test_bucket, s3_client=s3_client) == []


def test_delete_all__follows_continuation_token_and_keeps_partial_failures():
    s3_client = fake_s3_client()
    s3_client.list_objects_v2.side_effect = [
        {
            "Contents": [{"Key": "a"}, {"Key": "b"}],
            "IsTruncated": True,
            "NextContinuationToken": "token-1",
        },
        {
            "Contents": [{"Key": "c"}, {"Key": "d"}],
            "IsTruncated": False,
        },
    ]
    s3_client.delete_objects.side_effect = [
        {"Deleted": [{"Key": "a"}, {"Key": "b"}]},
        {"Deleted": [{"Key": "d"}], "Errors": [{"Key": "c", "Code": "AccessDenied", "Message": "Access Denied"}]},
    ]

    result = delete_all_s3_objects(TEST_BUCKET_NAME, s3_client=s3_client)

    assert result.deleted_count == 3
    assert result.errors == ["c: Access Denied"]
    second_listing = s3_client.list_objects_v2.call_args_list[1]
    assert second_listing.kwargs["ContinuationToken"] == "token-1"
    assert s3_client.delete_objects.call_count == 2


def test_delete_all__empty_later_page_does_not_reset_count():
    s3_client = fake_s3_client()
    s3_client.list_objects_v2.side_effect = [
        {"Contents": [{"Key": "a"}], "NextContinuationToken": "token-1"},
        {"KeyCount": 0},
    ]
    s3_client.delete_objects.return_value = {"Deleted": [{"Key": "a"}]}

    result = delete_all_s3_objects(TEST_BUCKET_NAME, s3_client=s3_client)

    assert result.deleted_count == 1
    assert not result.already_empty


def test_delete_all__batches_at_most_1000_keys():
    s3_client = fake_s3_client()
    s3_client.list_objects_v2.return_value = {"Contents": [{"Key": f"k{i}"} for i in range(1500)]}
    s3_client.delete_objects.side_effect = lambda Bucket, Delete: {"Deleted": Delete["Objects"]}

    result = delete_all_s3_objects(TEST_BUCKET_NAME, s3_client=s3_client)

    assert result.deleted_count == 1500
    batch_sizes = [len(call.kwargs["Delete"]["Objects"]) for call in s3_client.delete_objects.call_args_list]
    assert batch_sizes == [1000, 500]


def test_delete_all__missing_bucket(s3_client):
    with pytest.raises(BucketNotFoundError):
        delete_all_s3_objects("does-not-exist", s3_client=s3_client)


def test_delete_all__other_errors_propagate():
    s3_client = fake_s3_client()
    s3_client.list_objects_v2.side_effect = make_client_error("AccessDenied", 403, "ListObjectsV2")

    with pytest.raises(Exception) as exc_info:
        delete_all_s3_objects(TEST_BUCKET_NAME, s3_client=s3_client)
    assert not isinstance(exc_info.value, BucketNotFoundError)


def test_delete_s3_object(s3_client, test_bucket):
    s3_client.put_object(Bucket=test_bucket, Key="gone.txt", Body=b"data")

    delete_s3_object(test_bucket, "gone.txt", s3_client=s3_client)

    assert not object_exists_in_s3(test_bucket, "gone.txt", s3_client=s3_client)
