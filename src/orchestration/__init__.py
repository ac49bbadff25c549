"""
Merge workflow orchestration.

Coordinates discovery, header reconciliation, row mapping and output
promotion for each subdirectory, sequentially and in sorted order.
"""
