"""
CheckApp: Batch checking of student task files

Runs every submitted task file against a set of field (task definition) files
through the external patcher and 2D-model programs, in parallel, and renders
an HTML summary report.
"""

__version__ = "0.1.0"
