"""
Infrastructure Layer
=====================

Low-level technical concerns shared by every module:
- Logging setup
- Outbound notifications (webhook client and dispatch queue)
"""
