"""
Service context extraction for distributed logging.

Identifies the running instance in log lines, across container and local runs.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'booking-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are the container id; fall back to PID locally
    instance_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id}'
