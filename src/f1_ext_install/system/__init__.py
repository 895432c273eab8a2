"""The external programs that actually install the extensions: the Alpine
package manager :command:`apk` and the PHP toolchain of the official PHP
images (:command:`pecl` and the :command:`docker-php-ext-*` scripts).

"""
