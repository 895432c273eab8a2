"""Install PHP extensions inside a container build with a single command.

``f1-ext-install`` replaces the usual multi-line :command:`apk`,
:command:`pecl` and :command:`docker-php-ext-*` incantations of a PHP
:file:`Dockerfile` with one line per extension::

    RUN f1-ext-install builtin:gd pecl:memcached pecl:xdebug@2.5.5

Build dependencies are installed into a virtual package and removed again
after the extensions were built, while the shared libraries that the built
extensions link against are preserved.

It is a hard-coded assumption that the tool runs inside a container during
the build and it is not meant to be used anywhere else.

"""

__version__ = "0.3.0"
