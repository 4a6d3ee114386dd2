"""REST facade over S3, SQS and SNS that runs against LocalStack or real AWS."""
