"""Background workers for monetization service"""
from .side_effect_retrier import SideEffectRetryWorker

__all__ = ["SideEffectRetryWorker"]
