"""Pipeline orchestration"""

from .etl_pipeline import EtlPipeline, EtlResult

__all__ = ['EtlPipeline', 'EtlResult']
