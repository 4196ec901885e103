"""road_fines package initializer.

This package contains the data pipeline behind the road-fine enforcement
Shiny application.  Modules cover CSV parsing, field coercion, filtering,
aggregation, chart datasets and plotting helpers.  See individual module
docstrings for details.
"""
