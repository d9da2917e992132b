"""Built-in commands for bytestashy.

- :mod:`~bytestashy.commands.auth` -- ``login``, ``logout``, ``status``.
- :mod:`~bytestashy.commands.snippets` -- ``create``, ``get``, ``update``,
  ``delete``, ``list``, ``search``.
"""
