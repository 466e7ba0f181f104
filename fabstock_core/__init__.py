# =============================================================================
# fabstock_core/__init__.py
# FabStock Manager - inventory, machines and maintenance for a FabLab
# =============================================================================
"""
FabStock core package.

    models         domain records, settings and the four collections
    storage        local (SQLite) and Supabase storage adapters
    sync           DataProvider, the synchronization orchestrator
    services       inventory / maintenance / team operations
    auth           passwordless login against the team roster
    ai             OpenAI-backed item extraction and advice
    notifications  EmailJS invitations
"""

__version__ = "1.0.0"
