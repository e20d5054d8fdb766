# Visualization Module: risk profile figure
from .risk_plots import plot_risk_profile

__all__ = ['plot_risk_profile']
