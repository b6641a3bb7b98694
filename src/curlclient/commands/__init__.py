"""Sub-commands registered on the ``curlclient`` root app.

* :mod:`~curlclient.commands.request` -- ``request_command``, attached to
  the root app as ``curlclient request URL``.
* :mod:`~curlclient.commands.config` -- ``config_app``, the
  ``curlclient config show|set|reset`` group.
"""
