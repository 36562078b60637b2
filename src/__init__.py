"""
Package marker for source code under `src`.
The vehicle maintenance API lives in `src.api`; shared logging setup lives in `src.common`.
"""
