"""

Page's connection to neovim

- Session: page either attaches to a neovim the user names (--address or $NVIM) or spawns
  a child neovim listening on a socket in the scratch directory and polls until it accepts
  connections. See `nvpage.connection`.
- Process: the child neovim runs with page's own init.vim when one exists, plus any extra
  arguments from the command line. Closing the connection waits for it to exit.
- Notifications: neovim tells page to fetch more lines or that its buffer was closed.
  A listener on a dedicated channel turns these into events on a bounded queue, which
  the main thread drains. See `nvpage.notifications` and `nvpage.control_loop`.
- Instances: buffers are tagged with a page instance name and the sink they read from,
  so a later page invocation can find, focus or close them. See `nvpage.instances`.
- Titles: renaming a buffer falls back to numbered variants when the name is taken.
  See `nvpage.titles`.

Settings come from configobj files validated against `config/page.schema.cfg`,
layered default, platform and user. See `nvpage.config`.
"""
