"""
AWS wiring for the facade.

Client construction (emulator vs. real endpoints) and botocore error
classification shared by the S3, SQS and SNS service modules.
"""
