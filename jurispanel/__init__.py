"""
JurisPanel: AI-assisted review of judgment-session case lists.
"""
__version__ = "1.0.0"
