"""Core domain package for lookout.

Core contains the classification models, list merging, state store, and the
refresh controller without any HTTP or matcher-specific code, keeping the
reputation logic portable.
"""
