"""
Infrastructure
==============

Cross-module technical concerns. Currently only database engine and
session management live here.
"""
