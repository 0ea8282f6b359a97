"""Streamlit views for the console."""
