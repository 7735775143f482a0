"""Graph API transport and configuration."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, RetryConfig
from .response import GraphResponse
from .async_client import AsyncGraphClient

__all__ = [
    # Client
    'AsyncGraphClient',
    'GraphResponse',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
]
