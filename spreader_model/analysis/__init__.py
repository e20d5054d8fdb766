# Analysis Module: risk classification and reporting
from .classifier import (
    RiskBand, ReportLine, classify, classify_probability,
    render_report, write_report, summarize_bands
)

__all__ = [
    'RiskBand', 'ReportLine', 'classify', 'classify_probability',
    'render_report', 'write_report', 'summarize_bands'
]
