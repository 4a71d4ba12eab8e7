"""
A simple configuration helper built on top of ConfigObj that allows configuration files to be
layered - packaged defaults / os-specific / user override, with a schema to validate the types of
the config data.
"""
