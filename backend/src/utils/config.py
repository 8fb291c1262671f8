"""
Theme Park Wait Watch - Configuration Management
Handles environment configuration with AWS SSM Parameter Store for production
and python-dotenv for local development.
"""

import os
from typing import List, Optional
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class Config:
    """
    Configuration manager with dual-mode operation:
    - Local: Reads from .env file via python-dotenv
    - Production: Reads from AWS SSM Parameter Store
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from SSM (production) or environment (local).

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        else:
            return os.getenv(key, default)

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration from AWS SSM Parameter Store.

        Raises:
            ConfigurationError: If parameter not found and no default provided,
                               or if AWS credentials/permissions are invalid
        """
        ssm_prefix = os.getenv('AWS_SSM_PREFIX', '/waitwatch')
        parameter_name = f"{ssm_prefix}/{key}"

        try:
            if self._ssm_client is None:
                import boto3
                self._ssm_client = boto3.client(
                    'ssm',
                    region_name=os.getenv('AWS_REGION', 'us-east-1')
                )

            response = self._ssm_client.get_parameter(
                Name=parameter_name,
                WithDecryption=True
            )
            return response['Parameter']['Value']

        except Exception as e:
            error_type = type(e).__name__
            if error_type == 'ParameterNotFound':
                if default is not None:
                    return default
                raise ConfigurationError(
                    f"Required parameter '{key}' not found in SSM at path '{parameter_name}'."
                )

            if default is not None:
                import logging
                logging.warning(
                    f"Failed to fetch SSM parameter '{key}': {error_type}: {e}. "
                    f"Using default value."
                )
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}. "
                f"Check AWS credentials, IAM permissions, and network connectivity."
            )

    def get_int(self, key: str, default: int) -> int:
        """
        Get configuration value as integer.

        Falls back to the default (with a warning) when the value is not a number.
        """
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            import logging
            logging.warning(
                f"Invalid integer for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_int_list(self, key: str, default: List[int]) -> List[int]:
        """
        Get a comma-separated configuration value as a list of integers.

        Example:
            SOURCE_PARK_IDS=1,2,3,4  ->  [1, 2, 3, 4]
        """
        value = self.get(key, '')
        if not value:
            return list(default)
        try:
            return [int(part.strip()) for part in value.split(',') if part.strip()]
        except ValueError as e:
            import logging
            logging.warning(
                f"Invalid integer list for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return list(default)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == 'production'

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == 'local'


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


# Global configuration instance
config = Config()


# Database configuration
# DATABASE_URL wins when set (e.g. sqlite:///data/waitwatch.db for local runs)
DATABASE_URL = config.get('DATABASE_URL', '')
DB_HOST = config.get('DB_HOST', 'localhost')
DB_PORT = config.get_int('DB_PORT', 3306)
DB_NAME = config.get('DB_NAME', 'waitwatch_dev')
DB_USER = config.get('DB_USER', 'root')
DB_PASSWORD = config.get('DB_PASSWORD', '')

# Queue-Times.com API configuration
QUEUE_TIMES_API_BASE_URL = config.get('QUEUE_TIMES_API_BASE_URL', 'https://queue-times.com/parks')
REQUEST_TIMEOUT_SECONDS = config.get_int('REQUEST_TIMEOUT_SECONDS', 30)

# Walt Disney World parks on Queue-Times: MK, EPCOT, DHS, DAK
SOURCE_PARK_IDS = config.get_int_list('SOURCE_PARK_IDS', [1, 2, 3, 4])

# Schedules (fixed for the lifetime of a worker process)
POLL_INTERVAL_SECONDS = config.get_int('POLL_INTERVAL_SECONDS', 60)
NOTIFICATION_INTERVAL_SECONDS = config.get_int('NOTIFICATION_INTERVAL_SECONDS', 300)
POLL_MAX_WORKERS = config.get_int('POLL_MAX_WORKERS', 4)
NOTIFICATION_MAX_WORKERS = config.get_int('NOTIFICATION_MAX_WORKERS', 4)

# Firebase Cloud Messaging (empty path = application default credentials)
FIREBASE_CREDENTIALS_PATH = config.get('FIREBASE_CREDENTIALS_PATH', '')

# Flask configuration
FLASK_ENV = config.get('FLASK_ENV', 'development')
FLASK_DEBUG = config.get_bool('FLASK_DEBUG', True)
SECRET_KEY = config.get('SECRET_KEY', 'dev-secret-key-change-in-production')

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Email (SendGrid)
SENDGRID_API_KEY = config.get('SENDGRID_API_KEY', '')
ALERT_EMAIL_FROM = config.get('ALERT_EMAIL_FROM', 'alerts@waitwatch.app')
ALERT_EMAIL_TO = config.get('ALERT_EMAIL_TO', '')
ALERT_COOLDOWN_MINUTES = config.get_int('ALERT_COOLDOWN_MINUTES', 60)

# Health check: newest cache sample older than this is reported as stale
STALE_CACHE_MINUTES = config.get_int('STALE_CACHE_MINUTES', 10)

# Database connection pool settings
DB_POOL_SIZE = 10
DB_POOL_MAX_OVERFLOW = 20
DB_POOL_RECYCLE = 3600  # Recycle connections after 1 hour
DB_POOL_PRE_PING = True  # Health check connections before use
