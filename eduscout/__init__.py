"""
EduScout - Educational suitability screening for EU projects.

This package provides functionality to:
- Fetch the EU project listing page and parse it into project records
- Look up each project's official website
- Classify educational suitability with an OpenAI model
- Merge the results into updated project records
"""

__version__ = "1.0.0"
__author__ = "EduScout Team"
