"""Proxies binding resource models to the transport."""
from .drive_item import DriveItemProxy, expect_status
from .drive import DriveProxy

__all__ = ['DriveItemProxy', 'DriveProxy', 'expect_status']
