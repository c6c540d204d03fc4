"""UI subpackage - Streamlit views."""
