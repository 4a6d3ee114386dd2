from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Query,
    Response,
    status
)
from fastapi.responses import StreamingResponse
from mypy_boto3_s3 import S3Client
from starlette.datastructures import UploadFile

from aws_facade.dependencies import get_s3_client, get_uploaded_file
from aws_facade.s3.buckets import (
    delete_s3_bucket,
    ensure_bucket_exists,
    is_valid_bucket_name,
    list_s3_buckets,
)
from aws_facade.s3.delete_objects import delete_all_s3_objects, delete_s3_object
from aws_facade.s3.read_objects import (
    fetch_s3_object,
    fetch_s3_object_metadata,
    list_s3_objects,
)
from aws_facade.s3.write_objects import upload_s3_object, upload_s3_text
from aws_facade.schemas import (
    CreateBucketRequest,
    CreateBucketResponse,
    CreateOutcome,
    DeleteAllFilesResponse,
    FileMetadataResponse,
    HealthResponse,
    ListBucketsResponse,
    ListFilesResponse,
    MessageResponse,
    UploadFileResponse,
    UploadTextRequest,
)

router = APIRouter()

AWS_ERRORS = (ClientError, BotoCoreError)


@router.get("/buckets/health", response_model=HealthResponse)
def s3_health_check(s3_client: S3Client = Depends(get_s3_client)):
    """Check connectivity to S3/LocalStack."""
    try:
        s3_client.list_buckets()
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"S3 connection failed: {str(e)}"
        )
    return HealthResponse(status="Healthy", service="S3", message="Connected to S3/LocalStack")


@router.get("/buckets", response_model=ListBucketsResponse)
def list_buckets(s3_client: S3Client = Depends(get_s3_client)):
    """List all S3 buckets."""
    try:
        buckets = list_s3_buckets(s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing buckets: {str(e)}"
        )
    if not buckets:
        return ListBucketsResponse(buckets=[], message="No buckets found")
    return ListBucketsResponse(buckets=buckets)


@router.post(
    "/buckets",
    response_model=CreateBucketResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_200_OK: {"model": CreateBucketResponse, "description": "Bucket already exists"},
        status.HTTP_201_CREATED: {"model": CreateBucketResponse},
    },
)
def create_bucket(
    body: CreateBucketRequest,
    response: Response,
    s3_client: S3Client = Depends(get_s3_client),
):
    """
    Create a bucket.

    Creating a bucket that already exists is not an error: the response is a
    200 saying so instead of a 201.
    """
    bucket_name = (body.bucket_name or "").strip()
    if not bucket_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="bucket_name is required"
        )
    if not is_valid_bucket_name(bucket_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid bucket name. Must be 3-63 characters, lowercase letters, numbers, dots, and hyphens only."
        )

    try:
        outcome = ensure_bucket_exists(bucket_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating bucket: {str(e)}"
        )

    if outcome == CreateOutcome.ALREADY_EXISTS:
        response.status_code = status.HTTP_200_OK
        message = f"Bucket '{bucket_name}' already exists"
    else:
        response.headers["Location"] = f"/buckets/{bucket_name}"
        message = f"Bucket '{bucket_name}' created successfully"
    return CreateBucketResponse(message=message, bucket_name=bucket_name, outcome=outcome)


@router.delete("/buckets/{bucket_name}", response_model=MessageResponse)
def delete_bucket(
    bucket_name: str = Path(..., description="The bucket to delete"),
    force: bool = Query(False, description="Delete every object first"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """Delete a bucket. Without `force` the bucket must already be empty."""
    try:
        if force:
            delete_all_s3_objects(bucket_name, s3_client=s3_client)
        delete_s3_bucket(bucket_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting bucket: {str(e)}"
        )
    return MessageResponse(message=f"Bucket '{bucket_name}' deleted successfully")


@router.post(
    "/buckets/{bucket_name}/files/upload",
    response_model=UploadFileResponse,
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {"file_content": {"type": "string", "format": "binary"}},
                    }
                }
            }
        }
    },
)
def upload_file(
    bucket_name: str = Path(..., description="The bucket to upload into"),
    file_content: Optional[UploadFile] = Depends(get_uploaded_file),
    key: Optional[str] = Query(None, description="Object key; defaults to the uploaded file name"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """
    Upload a file, creating the bucket if needed.

    The first file part of the multipart body is stored, whatever its field
    name (`file_content` in the docs, `file` from `curl -F file=@...`).
    """
    if file_content is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    object_key = key or file_content.filename
    if not object_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The uploaded file has no name; pass `key`"
        )

    file_bytes = file_content.file.read()
    try:
        ensure_bucket_exists(bucket_name, s3_client=s3_client)
        put_response = upload_s3_object(
            bucket_name=bucket_name,
            object_key=object_key,
            file_content=file_bytes,
            content_type=file_content.content_type,
            s3_client=s3_client,
        )
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error uploading file: {str(e)}"
        )

    return UploadFileResponse(
        message="File uploaded successfully",
        bucket_name=bucket_name,
        file_name=object_key,
        size=len(file_bytes),
        etag=put_response.get("ETag"),
    )


@router.post("/buckets/{bucket_name}/files/upload-text", response_model=UploadFileResponse)
def upload_text_file(
    body: UploadTextRequest,
    bucket_name: str = Path(..., description="The bucket to upload into"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """
    Store text content as a `text/plain` object, creating the bucket if needed.

    `file_name` and `content` travel in the JSON body rather than the query
    string, so large or multi-line text needs no URL encoding.
    """
    if not (body.file_name or "").strip() or not (body.content or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="file_name and content are required"
        )

    try:
        ensure_bucket_exists(bucket_name, s3_client=s3_client)
        put_response = upload_s3_text(
            bucket_name=bucket_name,
            object_key=body.file_name,
            content=body.content,
            s3_client=s3_client,
        )
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error uploading text file: {str(e)}"
        )

    return UploadFileResponse(
        message="Text file uploaded successfully",
        bucket_name=bucket_name,
        file_name=body.file_name,
        size=len(body.content.encode("utf-8")),
        etag=put_response.get("ETag"),
    )


@router.get("/buckets/{bucket_name}/files", response_model=ListFilesResponse)
def list_files(
    bucket_name: str = Path(..., description="The bucket to list"),
    prefix: str = Query("", description="Only list keys starting with this prefix"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """List all files in a bucket."""
    try:
        files = list_s3_objects(bucket_name, prefix=prefix, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing files: {str(e)}"
        )
    return ListFilesResponse(bucket_name=bucket_name, files=files)


@router.get("/buckets/{bucket_name}/files/{file_name:path}/metadata", response_model=FileMetadataResponse)
def get_file_metadata(
    bucket_name: str = Path(..., description="The bucket holding the file"),
    file_name: str = Path(..., description="The key of the file"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """Get metadata for a file without downloading it."""
    try:
        metadata = fetch_s3_object_metadata(bucket_name, file_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error reading file metadata: {str(e)}"
        )
    return FileMetadataResponse(bucket_name=bucket_name, file_name=file_name, **metadata)


@router.get("/buckets/{bucket_name}/files/{file_name:path}")
def download_file(
    bucket_name: str = Path(..., description="The bucket holding the file"),
    file_name: str = Path(..., description="The key of the file to download"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """Download a file as a stream with its stored content type."""
    try:
        file_obj = fetch_s3_object(bucket_name, file_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error downloading file: {str(e)}"
        )

    return StreamingResponse(
        file_obj["Body"].iter_chunks(),
        media_type=file_obj.get("ContentType", "application/octet-stream"),
        headers={
            "Content-Disposition": f"attachment; filename={file_name.split('/')[-1]}"
        }
    )


@router.delete("/buckets/{bucket_name}/files", response_model=DeleteAllFilesResponse)
def delete_all_files(
    bucket_name: str = Path(..., description="The bucket to empty"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """Delete every file in a bucket, reporting per-key failures alongside the deleted count."""
    try:
        result = delete_all_s3_objects(bucket_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting files: {str(e)}"
        )

    if result.already_empty:
        message = f"Bucket '{bucket_name}' is already empty"
    elif result.errors:
        message = f"Deleted {result.deleted_count} files with {len(result.errors)} errors"
    else:
        message = f"Successfully deleted all files from bucket '{bucket_name}'"
    return DeleteAllFilesResponse(
        message=message,
        deleted_count=result.deleted_count,
        errors=result.errors,
    )


@router.delete("/buckets/{bucket_name}/files/{file_name:path}", response_model=MessageResponse)
def delete_file(
    bucket_name: str = Path(..., description="The bucket holding the file"),
    file_name: str = Path(..., description="The key of the file to delete"),
    s3_client: S3Client = Depends(get_s3_client),
):
    """Delete a single file. S3 treats deleting a missing key as success."""
    try:
        delete_s3_object(bucket_name, file_name, s3_client=s3_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting file: {str(e)}"
        )
    return MessageResponse(message=f"File '{file_name}' deleted successfully from bucket '{bucket_name}'")
