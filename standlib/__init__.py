"""
GitHub activity collection and standup report generation.
"""
