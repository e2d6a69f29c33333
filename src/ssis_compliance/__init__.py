"""
SSIS Label Check
=================
Nutrition-facts label compliance checking.

Compresses a label photo to fit the vision-model transport limit,
extracts the nutrition fields with a vision model, and scores them
against the six SSIS threshold rules.
"""

__version__ = "0.1.0"
