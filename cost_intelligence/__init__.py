"""
Cost Forecast Intelligence

Cost forecasting and budget-risk analysis for construction projects.
"""

__version__ = "0.1.0"
