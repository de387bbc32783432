"""Core domain package for matchdeck.

Core contains the match store, lifecycle classification, grouping and the
refresh loop without any HTTP or UI-specific code, keeping the logic portable.
"""
