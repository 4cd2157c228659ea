import os
import logging
import json
from mangum import Mangum

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Import FastAPI app (this should be fast)
from forum.main import app

# Optional: Run migrations only if explicitly requested
if os.getenv("RUN_MIGRATIONS_ON_START", "false").lower() == "true":
    from migrate import run_migrations

    # Run migrations on cold start only if requested
    run_migrations()

# Wrap FastAPI app for Lambda
mangum_handler = Mangum(app, lifespan="off")  # Disable lifespan for faster startup


def handler(event, context):
    """
    Main Lambda handler that routes different event types
    """
    logger.debug(f"Received event: {json.dumps(event, default=str)}")

    # Check if this is a CloudWatch scheduled event (warm-up ping)
    if event.get("source") == "aws.events" and event.get("detail-type") == "Scheduled Event":
        logger.info("Handling CloudWatch scheduled event (warm-up)")
        return {
            "statusCode": 200,
            "body": json.dumps({
                "message": "Lambda warmed up successfully",
                "timestamp": context.aws_request_id
            })
        }

    # For all other events (API Gateway, etc.), use Mangum
    try:
        return mangum_handler(event, context)
    except Exception as e:
        logger.exception(f"Error handling event with Mangum: {e}")

        # Return a generic error response
        return {
            "statusCode": 500,
            "headers": {
                "Content-Type": "application/json"
            },
            "body": json.dumps({
                "error": "Internal server error",
            })
        }
