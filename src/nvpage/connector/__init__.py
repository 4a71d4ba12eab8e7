"""
Starting the neovim processes that page connects to.
"""
