"""
Utility modules for the marketplace products service
"""
from .config_loader import MarketplaceConfig, load_marketplace_config

__all__ = [
    'MarketplaceConfig',
    'load_marketplace_config',
]
