#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Small helpers shared across tidyopts modules."""
