"""
Utility functions for core_backend.
"""


def get_client_ip(group, request):
    """
    Return the caller's IP address.

    Signature matches django-ratelimit's callable ``key`` contract
    (``group`` is unused) so it can be referenced as
    ``key='core_backend.utils.get_client_ip'``.

    Order of preference:
    1. CF-Connecting-IP, set by the CDN in front of the public ordering site
    2. The last entry of X-Forwarded-For, appended by the load balancer
    3. REMOTE_ADDR
    """
    cf_connecting_ip = request.META.get('HTTP_CF_CONNECTING_IP')
    if cf_connecting_ip:
        return cf_connecting_ip

    # Last hop is the one our own load balancer wrote; earlier ones are client supplied
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[-1].strip()

    return request.META.get('REMOTE_ADDR')
