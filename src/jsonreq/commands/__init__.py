"""Built-in CLI sub-commands for jsonreq.

* :mod:`~jsonreq.commands.request` -- ``get``, ``post``, and ``load``,
  registered directly on the root app.
* :mod:`~jsonreq.commands.config` -- the ``config`` group for viewing and
  changing the stored transport settings.
"""
