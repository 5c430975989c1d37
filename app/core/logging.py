import logging
from typing import Any, Dict, Optional
from fastapi import Request

from app.core.request_context import get_request_context

logger = logging.getLogger("app")

def log_request(request: Request, message: str, level: int = logging.INFO):
    """Log an incoming API call with its request id and endpoint"""
    context = get_request_context(request)
    logger.log(
        level,
        f"{message} - request_id={context['request_id'] or '-'} "
        f"session_id={context['session_id'] or '-'} endpoint={context['endpoint']} "
        f"ip={context['ip_address'] or 'unknown'} user_agent={context['user_agent'] or '-'}"
    )

def log_response(request: Request, response: Dict[str, Any], message: str, level: int = logging.INFO):
    """Log the envelope returned for an API call"""
    context = get_request_context(request)
    logger.log(
        level,
        f"{message} - request_id={context['request_id'] or '-'} "
        f"status_code={response.get('status_code')} message={response.get('message')}"
    )

def log_user_action(user_id: Optional[int], action: str, entity: str, entity_id: Any = None):
    """Log user actions for audit trail"""
    logger.info(f"User {user_id} performed {action} on {entity} {entity_id or ''}")
