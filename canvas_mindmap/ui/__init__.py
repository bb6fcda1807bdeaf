"""Streamlit components for the canvas mind map demo."""
