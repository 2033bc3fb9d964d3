"""
Coldboard Board Engine.

- backend/: Board services, layout API, configuration and logging
"""
