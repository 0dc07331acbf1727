"""
Hotel Audit Analytics - Configuration Management
Engine tuning values (top-N sizes, area windows, hotel timezone) read from
AWS SSM Parameter Store in production and from the environment (.env via
python-dotenv) everywhere else.

Every value has a default, so an unconfigured install computes the same
dashboards as the hosted app.
"""

import logging
import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

_log = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a required parameter cannot be loaded."""
    pass


class Config:
    """
    Engine settings source.

    ENVIRONMENT=production reads /<AWS_SSM_PREFIX>/<key> from SSM; any other
    environment reads os.environ.
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch one parameter from SSM.

        A missing parameter or an AWS failure (credentials, permissions,
        network) falls back to default when there is one.

        Raises:
            ConfigurationError: If the fetch fails and no default was given
        """
        parameter_name = f"{os.getenv('AWS_SSM_PREFIX', '/hotelaudit')}/{key}"

        try:
            if self._ssm_client is None:
                import boto3
                self._ssm_client = boto3.client('ssm', region_name=os.getenv('AWS_REGION', 'eu-west-1'))
            response = self._ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
            return response['Parameter']['Value']

        except Exception as e:
            error_type = type(e).__name__
            if default is not None:
                if error_type != 'ParameterNotFound':
                    _log.warning(f"SSM lookup of '{parameter_name}' failed ({error_type}: {e}), using default")
                return default
            if error_type == 'ParameterNotFound':
                raise ConfigurationError(
                    f"Required parameter '{key}' not found in SSM at path '{parameter_name}'"
                ) from e
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}"
            ) from e

    def get_int(self, key: str, default: int, minimum: Optional[int] = None) -> int:
        """
        Integer setting; unparseable values, or values below minimum, warn and
        fall back to default.
        """
        value = self.get(key, str(default))
        try:
            number = int(value)
        except (ValueError, TypeError):
            _log.warning(f"Invalid integer for '{key}': {value!r}, using {default}")
            return default
        if minimum is not None and number < minimum:
            _log.warning(f"'{key}'={number} is below {minimum}, using {default}")
            return default
        return number

    def get_timezone(self, key: str, default: str = 'UTC') -> str:
        """IANA zone name setting; unknown zones warn and fall back to default."""
        name = self.get(key, default) or default
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            _log.warning(f"Unknown timezone for '{key}': {name!r}, using {default}")
            return default
        return name


config = Config()


LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Calendar boundaries (month/quarter/year) are computed in this zone
# whenever the caller hands the engine naive instants
HOTEL_TIMEZONE = config.get_timezone('HOTEL_TIMEZONE', 'UTC')

# People analytics
COMMON_FAILURES_TOP_N = config.get_int('COMMON_FAILURES_TOP_N', 30, minimum=0)
SHARED_TOPICS_TOP_N = config.get_int('SHARED_TOPICS_TOP_N', 25, minimum=0)
MEMBER_TOP_STANDARDS_N = config.get_int('MEMBER_TOP_STANDARDS_N', 20, minimum=0)
PAIRWISE_PEOPLE_WARN_THRESHOLD = config.get_int('PAIRWISE_PEOPLE_WARN_THRESHOLD', 200, minimum=2)

# Area and hotel dashboards
AREA_TOP_STANDARDS_N = config.get_int('AREA_TOP_STANDARDS_N', 10, minimum=0)
AREA_RANKING_SIZE = config.get_int('AREA_RANKING_SIZE', 3, minimum=0)
AREA_DASHBOARD_WINDOW_RUNS = config.get_int('AREA_DASHBOARD_WINDOW_RUNS', 4, minimum=1)
AREA_TREND_RUNS = config.get_int('AREA_TREND_RUNS', 12, minimum=1)
