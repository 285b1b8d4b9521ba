"""
Request inspection helpers used when building access events.
"""
from fastapi import Request


def get_client_ip(request: Request, trust_proxy: bool = True) -> str:
    """
    Get the caller's IP address.
    Uses forwarded IP if behind proxy, otherwise remote address.

    Args:
        request: FastAPI request object
        trust_proxy: Honor the X-Forwarded-For chain

    Returns:
        str: Client IP address, or empty string if unknown
    """
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Get first IP in chain (original client)
            first = forwarded.split(",")[0].strip()
            if first:
                return first

    # Fall back to direct remote address
    if request.client is None:
        return ""
    return request.client.host


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")
