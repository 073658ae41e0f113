"""
Reading Log Generator

Collects the articles filed under one reading log issue in Notion and
renders them into a categorized Markdown digest ready for publishing.
"""

__version__ = "0.1.0"
