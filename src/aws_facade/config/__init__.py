"""
Configuration management for the AWS facade API.

Contains Pydantic settings that work across local-dev (LocalStack),
aws-mock (moto server) and aws-prod deployment modes.
"""
