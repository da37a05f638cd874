"""
Serverless task functions.

Independent AWS Lambda functions sharing one three-layer layout:

- handlers: Lambda entry points, routing and response formatting
- logic: business rules per domain (identity, bookings, events, UUIDs, weather)
- dal: narrow capability interfaces and their boto3/httpx implementations
- models: request, response and record models
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
