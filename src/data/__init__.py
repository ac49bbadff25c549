"""
Directory discovery, header handling, column mapping and CSV I/O.

Finds the CSV files to merge, reconciles their headers against a canonical
header, realigns rows, and streams them into atomically promoted outputs.
"""
