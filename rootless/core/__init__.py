"""
Rootless Setup Core
Lifecycle orchestration and operation reporting
"""
