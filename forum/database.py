from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import OperationalError
from typing import Optional
import os
import time
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

_engine: Optional[Engine] = None


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """Build an engine tuned for where the service runs."""
    database_url = database_url or os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    echo = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    if database_url.startswith("sqlite"):
        # SQLite has no server-side pool to tune
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    # Check if running locally vs Lambda
    is_lambda = os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None

    if is_lambda:
        # Optimized for Lambda - smaller pool, shorter timeouts
        return create_engine(
            database_url,
            pool_size=1,
            max_overflow=0,
            pool_timeout=10,
            pool_recycle=300,      # 5 minutes for Lambda
            pool_pre_ping=True,
            connect_args={
                "connect_timeout": 10,
                "application_name": "forum-lambda",
                "sslmode": "require"  # Ensure SSL connection
            },
            echo=echo,
        )

    # Optimized for local development - persistent connections
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # 30 minutes
        pool_pre_ping=True,
        echo=echo,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
        SessionLocal.configure(bind=_engine)
    return _engine


def get_db():
    """Get database session with retry logic for Lambda cold starts."""
    get_engine()
    max_retries = 3
    retry_delay = 1

    for attempt in range(max_retries):
        db = SessionLocal()
        try:
            # Test the connection
            db.execute(text("SELECT 1"))
        except OperationalError as e:
            db.close()
            if attempt < max_retries - 1:
                logger.warning(f"Database connection attempt {attempt + 1} failed: {e}")
                time.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
                continue
            logger.error(f"Database connection failed after {max_retries} attempts: {e}")
            raise

        try:
            yield db
        finally:
            db.close()
        return
