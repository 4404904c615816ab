# finance_tracker/__init__.py
"""Personal finance tracker: Flask API backend and Streamlit frontend."""

__version__ = "1.0.0"
