"""
Features Module - Self-contained feature units.

- auth: backend auth adapter and auth events
- database: entries repository
- analysis: AI reflection on entry text
- journal: entry models and the view controller
- session: startup session resolution and auth-state sync
"""
