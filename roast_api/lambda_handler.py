"""AWS Lambda handler for the Roast API."""

from typing import Any

from loguru import logger
from mangum import Mangum

from .api import app, configure_logging

configure_logging()

# Mangum would run startup and shutdown on every invocation, dropping the
# profile cache; services are created by the first request instead.
handler = Mangum(app, lifespan="off")


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point.

    Args:
        event: Lambda event dictionary containing request information.
        context: Lambda context object with runtime information.

    Returns:
        Response dictionary with statusCode, headers, and body.
    """
    logger.debug("Lambda event received: {}", event.get("rawPath") or event.get("path"))
    response = handler(event, context)
    logger.info("Lambda response status: {}", response.get("statusCode"))

    return response  # type: ignore[no-any-return]
