"""
Small building blocks shared by the connection, notification and instance modules:
value-object mixins, retry strategies and a background loop.
"""
