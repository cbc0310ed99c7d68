"""Shared DynamoDB utilities.

This package centralizes:
- boto3 client/resource configuration
- retry/backoff policy for transient failures
- cursor token encoding/decoding for paged queries
- typed errors that the storage gateway maps onto domain errors
"""
