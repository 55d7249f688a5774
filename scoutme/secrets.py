"""
Database credentials from AWS Secrets Manager.

Local development uses ``DATABASE_URL`` directly. Production deployments keep
the RDS credentials in Secrets Manager, where RDS stores them as JSON:

    {"username": "...", "password": "...", "host": "...", "port": 5432, "dbname": "..."}
"""

import json
import logging
from typing import Any, Dict
from urllib.parse import quote

from scoutme.config import Settings
from scoutme.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def build_database_url(secret: Dict[str, Any]) -> str:
    """Build a PostgreSQL URL from an RDS secret, URL-encoding the credentials."""
    username = quote(str(secret["username"]), safe="")
    password = quote(str(secret["password"]), safe="")
    db_name = secret.get("dbname")
    db_part = f"/{db_name}" if db_name else ""
    return f"postgresql://{username}:{password}@{secret['host']}:{secret['port']}{db_part}"


def fetch_secret(secret_name: str, region: str) -> Dict[str, Any]:
    """Fetch and decode the current version of a JSON secret."""
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError

    client = boto3.client("secretsmanager", region_name=region)
    try:
        response = client.get_secret_value(SecretId=secret_name, VersionStage="AWSCURRENT")
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to read secret {secret_name}: {e}")
        raise UpstreamError(f"Could not read database secret: {e}") from e

    secret_string = response.get("SecretString")
    if not secret_string:
        raise UpstreamError("Secret value is empty or not a string")
    return json.loads(secret_string)


def resolve_database_url(settings: Settings) -> str:
    """Pick the connection string for this process."""
    if settings.database_url and not settings.is_production:
        logger.info("Using DATABASE_URL from environment")
        return settings.database_url

    if not settings.aws_secret_name:
        if settings.database_url:
            return settings.database_url
        raise UpstreamError("Database connection string is not available")

    logger.info(f"Fetching database credentials from Secrets Manager: {settings.aws_secret_name}")
    secret = fetch_secret(settings.aws_secret_name, settings.aws_region)
    return build_database_url(secret)
