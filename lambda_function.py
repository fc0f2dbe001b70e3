"""AWS Lambda handler for the wiki event schedule resolver."""
import json
import logging
import os
import time
from typing import Dict, Any

import requests

from event_schedule import build_events
from scraper.wiki_scraper import WikiScraper
from processor.errors import WikiEventsError


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _error_response(message: str, error: Exception, start_time: float) -> Dict[str, Any]:
    duration = time.time() - start_time
    return {
        'statusCode': 500,
        'body': json.dumps({
            'message': message,
            'error': str(error),
            'error_type': type(error).__name__,
            'duration_seconds': round(duration, 2)
        }, ensure_ascii=False)
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Fetch the wiki pages and return the resolved event schedule.

    Args:
        event: Invocation payload (unused)
        context: Lambda context object

    Returns:
        Response dict with statusCode and a JSON body holding the events
    """
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    events_url = os.environ.get('EVENTS_URL', WikiScraper.EVENTS_URL)
    versions_url = os.environ.get('VERSIONS_URL', WikiScraper.VERSIONS_URL)
    skip_malformed = os.environ.get('SKIP_MALFORMED_ROWS', 'false').lower() in ('1', 'true', 'yes')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Lambda execution started",
        extra={
            'events_url': events_url,
            'versions_url': versions_url,
            'timeout_seconds': timeout_seconds
        }
    )

    scraper = WikiScraper(
        timeout=timeout_seconds,
        events_url=events_url,
        versions_url=versions_url
    )

    try:
        events_document, versions_document = scraper.fetch_documents()
    except requests.RequestException as e:
        logger.error(
            f"Failed to fetch wiki pages after retries: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response('Failed to fetch wiki pages', e, start_time)
    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response('Event resolution failed', e, start_time)

    try:
        events = build_events(
            events_document,
            versions_document,
            skip_malformed=skip_malformed
        )
    except WikiEventsError as e:
        logger.error(
            f"Failed to resolve event schedule: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response('Failed to resolve event schedule', e, start_time)
    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response('Event resolution failed', e, start_time)

    duration = time.time() - start_time
    logger.info(
        "Lambda execution completed successfully",
        extra={
            'duration_seconds': round(duration, 2),
            'events_returned': len(events)
        }
    )

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': 'Event schedule resolved successfully',
            'statistics': {
                'events_returned': len(events),
                'duration_seconds': round(duration, 2)
            },
            'events': [event.to_dict() for event in events]
        }, ensure_ascii=False)
    }
