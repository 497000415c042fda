"""
Webhook service for sending notifications to external services.

This module handles sending webhook notifications when a game ends, so an
external scoreboard or chat bot can react to finished runs.
"""

import os
import requests
import logging
from typing import Dict, Any, Optional
from datetime import datetime, timezone


logger = logging.getLogger(__name__)


def send_webhook(url: str, data: Dict[str, Any], timeout: int = 10) -> bool:
    """
    Send a POST request with JSON data to a webhook URL.

    Args:
        url: The webhook URL to send data to
        data: Dictionary of data to send as JSON
        timeout: Request timeout in seconds (default: 10)

    Returns:
        True if webhook was sent successfully, False otherwise
    """
    if not url:
        logger.warning("No webhook URL provided, skipping webhook")
        return False

    try:
        response = requests.post(
            url,
            json=data,
            timeout=timeout,
            headers={'Content-Type': 'application/json'}
        )
        response.raise_for_status()
        logger.info(f"Webhook sent successfully to {url}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send webhook to {url}: {e}")
        return False


def send_game_over_webhook(
    final_score: int,
    high_score: int,
    snake_length: int,
    new_high_score: bool = False,
    webhook_url: Optional[str] = None
) -> bool:
    """
    Send a webhook notification when a game ends.

    Args:
        final_score: Score at the moment of death
        high_score: Best score after this game
        snake_length: Number of body cells at death
        new_high_score: Whether this game beat the best score from before it
        webhook_url: Override webhook URL (defaults to SNAKE_WEBHOOK_URL env var)

    Returns:
        True if webhook was sent successfully, False otherwise
    """
    # Use provided URL or fall back to environment variable
    url = webhook_url or os.getenv('SNAKE_WEBHOOK_URL')

    if not url:
        logger.debug("No webhook URL configured, skipping game over notification")
        return False

    payload = {
        'event': 'game_over',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        'game': {
            'final_score': final_score,
            'high_score': high_score,
            'snake_length': snake_length,
            'new_high_score': new_high_score,
        },
    }

    logger.info(f"Sending game over webhook (score {final_score})")
    return send_webhook(url, payload)
